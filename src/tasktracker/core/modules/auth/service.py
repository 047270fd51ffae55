from datetime import timedelta
from uuid import UUID

import structlog

from tasktracker.core.core import Service
from tasktracker.core.modules.auth.models import LoginResult
from tasktracker.core.modules.session.models import SessionToken
from tasktracker.core.modules.token.models import TokenPurpose
from tasktracker.core.modules.user.models import User
from tasktracker.core.modules.user.validators import validate_password, validate_password_confirmation
from tasktracker.errors import AuthenticationError, ConflictError, InvalidOrExpiredTokenError, InvalidTokenError

logger = structlog.get_logger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"


class AuthService(Service):
    """Registration, login, logout and the password reset flow."""

    async def register(
        self, first_name: str, last_name: str, age: int, email: str, password: str, confirm_password: str
    ) -> User:
        """Create an account. Does not log the user in."""
        validate_password_confirmation(password, confirm_password)
        validate_password(password)
        if await self.core.services.user.has_email(email):
            raise ConflictError("Email already in use")

        password_hash = await self.core.passwords.hash(password)
        user = await self.core.services.user.create_user(first_name, last_name, age, email, password_hash)
        logger.info("user_registered", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        user = await self.core.services.user.find_user_by_email(email)
        if user is None:
            await self.core.passwords.verify_dummy(password)
            logger.info("login_failed", reason="unknown_email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await self.core.passwords.verify(password, user.password_hash):
            logger.info("login_failed", reason="wrong_password", user_id=str(user.id))
            raise AuthenticationError(INVALID_CREDENTIALS)

        session = self.core.services.session.create_session(user)
        logger.info("login_succeeded", user_id=str(user.id))
        return LoginResult(user=user, session=session)

    async def logout(self, token: SessionToken | None) -> None:
        """End a session. Succeeds whether or not the token is still valid."""
        if token:
            await self.core.services.session.invalidate_session(token)

    async def forgot_password(self, email: str) -> None:
        """Open a reset window and email the link. Unknown emails are silently accepted.

        Raises:
            MailDeliveryError: If the email could not be sent
        """
        user = await self.core.services.user.find_user_by_email(email)
        if user is None:
            logger.info("password_reset_requested", known_email=False)
            return

        ttl = timedelta(seconds=self.core.config.reset_token_ttl_seconds)
        issued = self.core.tokens.issue(user.id, ttl, TokenPurpose.PASSWORD_RESET)
        await self.core.services.user.set_reset_token(user.id, issued.token, issued.claims.expires_at)
        logger.info("password_reset_requested", known_email=True, user_id=str(user.id))

        await self.core.services.mail.send_password_reset(user.email, issued.token, int(ttl.total_seconds()) // 60)

    async def reset_password(self, email: str, token: str, password: str, confirm_password: str) -> None:
        """Set a new password using a reset token, which is consumed.

        Raises:
            InvalidOrExpiredTokenError: If the token was never issued for this email, does not match, or has expired
            ValidationError: If the new password is rejected
        """
        user = await self.core.services.user.find_user_by_reset_token(email, token)
        if user is None or not self._is_reset_token_for(token, user.id):
            raise InvalidOrExpiredTokenError

        validate_password_confirmation(password, confirm_password)
        validate_password(password)

        password_hash = await self.core.passwords.hash(password)
        if await self.core.services.user.consume_reset_token(email, token, password_hash) is None:
            raise InvalidOrExpiredTokenError
        logger.info("password_reset_completed", user_id=str(user.id))

    async def delete_account(self, user: User, token: SessionToken) -> None:
        """Delete a user with all their tasks and end the current session."""
        deleted_tasks = await self.core.services.task.delete_tasks_by_owner(user.id)
        await self.core.services.user.delete_user(user.id)
        await self.core.services.session.invalidate_session(token)
        logger.info("user_deleted", user_id=str(user.id), deleted_tasks=deleted_tasks)

    def _is_reset_token_for(self, token: str, user_id: UUID) -> bool:
        try:
            claims = self.core.tokens.verify(token, TokenPurpose.PASSWORD_RESET)
        except InvalidTokenError:
            return False
        return claims.subject == user_id

from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from tasktracker.core.core import Service
from tasktracker.core.modules.session.models import RevokedToken, SessionToken
from tasktracker.core.modules.token.models import IssuedToken, TokenClaims, TokenPurpose
from tasktracker.core.modules.user.models import User
from tasktracker.errors import AuthenticationError, InvalidTokenError, NotFoundError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Issues, verifies and revokes stateless session tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("revoked_tokens")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("token_id", 1)], unique=True)
        # TTL index: a revoked entry is useless once the token itself has expired
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    def create_session(self, user: User) -> IssuedToken:
        ttl = timedelta(seconds=self.core.config.session_ttl_seconds)
        return self.core.tokens.issue(user.id, ttl, TokenPurpose.SESSION)

    async def get_session_claims(self, token: SessionToken) -> TokenClaims:
        try:
            claims = self.core.tokens.verify(token, TokenPurpose.SESSION)
        except InvalidTokenError as e:
            raise AuthenticationError("Invalid or expired session") from e

        if await self._collection.find_one({"token_id": claims.token_id}) is not None:
            raise AuthenticationError("Invalid or expired session")
        return claims

    async def get_authenticated_user(self, token: SessionToken) -> User:
        claims = await self.get_session_claims(token)
        try:
            return await self.core.services.user.get_user(claims.subject)
        except NotFoundError as e:
            raise AuthenticationError("Invalid or expired session") from e

    async def is_session_valid(self, token: SessionToken) -> bool:
        try:
            await self.get_authenticated_user(token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, token: SessionToken) -> None:
        """Revoke a session token until its expiry. Invalid or already revoked tokens are ignored."""
        try:
            claims = self.core.tokens.verify(token, TokenPurpose.SESSION)
        except InvalidTokenError:
            return

        revoked = RevokedToken(token_id=claims.token_id, user_id=claims.subject, expires_at=claims.expires_at)
        data = revoked.to_mongo()
        await self._collection.update_one({"token_id": claims.token_id}, {"$setOnInsert": data}, upsert=True)
        logger.info("session_revoked", user_id=str(claims.subject))

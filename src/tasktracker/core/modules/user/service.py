from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from tasktracker.core.core import Service
from tasktracker.core.modules.user.models import User
from tasktracker.core.repository import Repository
from tasktracker.errors import ConflictError, NotFoundError
from tasktracker.utils import now

logger = structlog.get_logger(__name__)

EDITABLE_PROFILE_FIELDS = frozenset({"first_name", "last_name", "age", "email"})
RESET_FIELDS = ("reset_password_token", "reset_password_expires_at")


class UserService(Service):
    """Stores user records and their credentials."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._users = Repository(database.get_collection("users"), User)

    async def get_user(self, user_id: UUID) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return await self._users.find_one({"email": email})

    async def has_email(self, email: str) -> bool:
        return await self.find_user_by_email(email) is not None

    async def create_user(self, first_name: str, last_name: str, age: int, email: str, password_hash: str) -> User:
        """Persist a new user. The password must already be hashed."""
        user = User(first_name=first_name, last_name=last_name, age=age, email=email, password_hash=password_hash)
        try:
            await self._users.create(user)
        except DuplicateKeyError as e:
            raise ConflictError("Email already in use") from e
        return user

    async def update_profile(self, user_id: UUID, changes: dict[str, Any]) -> User:
        """Apply a partial profile update restricted to editable fields."""
        changes = {key: value for key, value in changes.items() if key in EDITABLE_PROFILE_FIELDS}
        if "email" in changes:
            other = await self.find_user_by_email(changes["email"])
            if other is not None and other.id != user_id:
                raise ConflictError("Email already in use")

        try:
            user = await self._users.update({"_id": user_id}, changes)
        except DuplicateKeyError as e:
            raise ConflictError("Email already in use") from e
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def set_reset_token(self, user_id: UUID, token: str, expires_at: datetime) -> None:
        """Store a reset token, replacing any earlier unconsumed one."""
        await self._users.update(
            {"_id": user_id}, {"reset_password_token": token, "reset_password_expires_at": expires_at}
        )

    async def find_user_by_reset_token(self, email: str, token: str) -> User | None:
        """Find the user whose open reset window matches email and token."""
        return await self._users.find_one(_reset_query(email, token))

    async def consume_reset_token(self, email: str, token: str, password_hash: str) -> User | None:
        """Set a new password and close the reset window in one atomic write.

        Returns None if the token was already consumed or expired meanwhile.
        """
        return await self._users.update(_reset_query(email, token), {"password_hash": password_hash}, clear=RESET_FIELDS)

    async def delete_user(self, user_id: UUID) -> None:
        if await self._users.delete({"_id": user_id}) is None:
            raise NotFoundError(f"User '{user_id}' not found")

    async def on_start(self) -> None:
        await self._users.collection.create_index([("email", 1)], unique=True)
        logger.debug("user_service_started")


def _reset_query(email: str, token: str) -> dict[str, Any]:
    return {"email": email, "reset_password_token": token, "reset_password_expires_at": {"$gt": now()}}

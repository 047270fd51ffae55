"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from tasktracker.core.db import MongoModel
from tasktracker.utils import now

SessionToken = NewType("SessionToken", str)


class RevokedToken(MongoModel):
    """Session token that was logged out before its natural expiry.

    Indexed on token_id - unique, expires_at (TTL, removed once the token would have expired anyway).
    """

    token_id: str
    user_id: UUID
    expires_at: datetime
    revoked_at: datetime = Field(default_factory=now)

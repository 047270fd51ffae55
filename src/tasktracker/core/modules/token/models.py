"""Signed token models."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel


class TokenPurpose(StrEnum):
    """What a token may be used for, carried in the ``typ`` claim."""

    SESSION = "session"
    PASSWORD_RESET = "reset"


class TokenClaims(BaseModel):
    """Verified content of a signed token."""

    subject: UUID
    token_id: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    """Freshly signed token together with the claims it carries."""

    token: str
    claims: TokenClaims

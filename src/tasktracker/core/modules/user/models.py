from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tasktracker.core.db import TimestampedModel


class User(TimestampedModel):
    """User domain model with credentials.

    Both reset fields are null unless a password reset is in progress.
    """

    first_name: str
    last_name: str
    age: int
    email: str
    password_hash: str  # bcrypt hash
    reset_password_token: str | None = None
    reset_password_expires_at: datetime | None = None


class UserView(BaseModel):
    """User profile (API representation)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(..., description="User ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    age: int = Field(..., description="Age in years")
    email: str = Field(..., description="Email address")
    created_at: datetime = Field(..., description="Registration time")
    updated_at: datetime = Field(..., description="Last profile change")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            age=user.age,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

"""Task models."""

from datetime import UTC, date, datetime, time
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tasktracker.core.db import TimestampedModel

TITLE_MAX_LENGTH = 50
DETAILS_MAX_LENGTH = 500
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TaskStatus(StrEnum):
    """Task progress. Any value may follow any other."""

    PENDING = "Pending"
    IN_PROGRESS = "In-progress"
    COMPLETED = "Completed"


class Task(TimestampedModel):
    """Work item owned by exactly one user."""

    owner_id: UUID
    title: str
    details: str | None = None
    scheduled_date: datetime  # Midnight UTC of the scheduled day
    scheduled_time: str  # HH:MM
    status: TaskStatus = TaskStatus.PENDING


class TaskFields(BaseModel):
    """Whitelisted, validated task fields accepted from clients.

    Unknown keys such as an owner id are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Short task title")
    details: str | None = Field(None, max_length=DETAILS_MAX_LENGTH, description="Optional longer description")
    scheduled_date: date = Field(..., alias="date", description="Day the task is scheduled for")
    scheduled_time: str = Field(..., alias="time", pattern=TIME_PATTERN, description="Time of day, HH:MM")
    status: TaskStatus = Field(..., description="Task status")

    def to_mongo_changes(self) -> dict[str, object]:
        """Return the fields as stored on a Task.

        Omitted details are left untouched, an explicit null clears them.
        """
        changes = self.model_dump(exclude_unset=True)
        changes["scheduled_date"] = datetime.combine(self.scheduled_date, time.min, tzinfo=UTC)
        return changes


class TaskView(BaseModel):
    """Task (API representation)."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(..., description="Task ID")
    title: str = Field(..., description="Short task title")
    details: str | None = Field(None, description="Optional longer description")
    scheduled_date: date = Field(..., alias="date", description="Day the task is scheduled for")
    scheduled_time: str = Field(..., alias="time", description="Time of day, HH:MM")
    status: TaskStatus = Field(..., description="Task status")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_domain(cls, task: Task) -> "TaskView":
        return cls(
            id=task.id,
            title=task.title,
            details=task.details,
            scheduled_date=task.scheduled_date.date(),
            scheduled_time=task.scheduled_time,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

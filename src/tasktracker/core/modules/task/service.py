from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from tasktracker.core.core import Service
from tasktracker.core.modules.task.models import Task, TaskFields, TaskStatus
from tasktracker.core.repository import Repository
from tasktracker.errors import NotFoundError

logger = structlog.get_logger(__name__)

TASK_SORT = [("scheduled_date", 1), ("scheduled_time", 1), ("created_at", 1)]


class TaskService(Service):
    """Manages tasks. Every lookup and mutation is scoped to the owner."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._tasks = Repository(database.get_collection("tasks"), Task)

    async def on_start(self) -> None:
        await self._tasks.collection.create_index([("owner_id", 1), ("scheduled_date", 1)])

    async def create_task(self, owner_id: UUID, fields: TaskFields) -> Task:
        task = Task.model_validate({"owner_id": owner_id, **fields.to_mongo_changes()})
        await self._tasks.create(task)
        logger.info("task_created", task_id=str(task.id), owner_id=str(owner_id))
        return task

    async def list_tasks(self, owner_id: UUID, status: TaskStatus | None = None) -> list[Task]:
        query: dict[str, Any] = {"owner_id": owner_id}
        if status is not None:
            query["status"] = status
        return await self._tasks.find_many(query, sort=TASK_SORT)

    async def get_owned_task(self, task_id: UUID, owner_id: UUID) -> Task:
        """Get a task of the given owner. Someone else's task counts as missing."""
        task = await self._tasks.find_one(_owned(task_id, owner_id))
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def update_task(self, task_id: UUID, owner_id: UUID, fields: TaskFields) -> Task:
        """Overwrite the whitelisted fields of an owned task."""
        task = await self._tasks.update(_owned(task_id, owner_id), fields.to_mongo_changes())
        if task is None:
            raise NotFoundError("Task not found")
        logger.info("task_updated", task_id=str(task_id), status=task.status)
        return task

    async def delete_task(self, task_id: UUID, owner_id: UUID) -> None:
        if await self._tasks.delete(_owned(task_id, owner_id)) is None:
            raise NotFoundError("Task not found")
        logger.info("task_deleted", task_id=str(task_id))

    async def delete_tasks_by_owner(self, owner_id: UUID) -> int:
        """Delete all tasks of a user and return how many were removed."""
        return await self._tasks.delete_many({"owner_id": owner_id})


def _owned(task_id: UUID, owner_id: UUID) -> dict[str, Any]:
    # Owner is part of the filter, so check and write are one atomic operation
    return {"_id": task_id, "owner_id": owner_id}


def parse_task_id(value: str) -> UUID:
    """Parse a task id from a request. A malformed id names no task."""
    try:
        return UUID(value)
    except ValueError as e:
        raise NotFoundError("Task not found") from e

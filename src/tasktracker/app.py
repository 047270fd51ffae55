from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from tasktracker.config import Config
from tasktracker.core.core import Core
from tasktracker.core.modules.auth.models import LoginResult
from tasktracker.core.modules.session.models import SessionToken
from tasktracker.core.modules.task.models import TaskFields, TaskStatus, TaskView
from tasktracker.core.modules.task.service import parse_task_id
from tasktracker.core.modules.user.models import UserView


class App:
    """Facade for all application operations, verifies the session before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_session_valid(self, token: SessionToken) -> bool:
        return await self._core.services.session.is_session_valid(token)

    # === Account ===
    async def register(
        self, first_name: str, last_name: str, age: int, email: str, password: str, confirm_password: str
    ) -> UUID:
        """Create an account and return its id."""
        user = await self._core.services.auth.register(first_name, last_name, age, email, password, confirm_password)
        return user.id

    async def login(self, email: str, password: str) -> LoginResult:
        return await self._core.services.auth.login(email, password)

    async def logout(self, token: SessionToken | None) -> None:
        await self._core.services.auth.logout(token)

    async def forgot_password(self, email: str) -> None:
        await self._core.services.auth.forgot_password(email)

    async def reset_password(self, email: str, token: str, password: str, confirm_password: str) -> None:
        await self._core.services.auth.reset_password(email, token, password, confirm_password)

    async def get_current_user(self, token: SessionToken) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        return UserView.from_domain(current_user)

    async def update_current_user(self, token: SessionToken, changes: dict[str, Any]) -> UserView:
        """Partially update the current user's profile."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        user = await self._core.services.user.update_profile(current_user.id, changes)
        return UserView.from_domain(user)

    async def delete_current_user(self, token: SessionToken) -> None:
        """Delete the current user's account and tasks."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        await self._core.services.auth.delete_account(current_user, token)

    # === Tasks ===
    async def get_tasks(self, token: SessionToken, status: TaskStatus | None = None) -> list[TaskView]:
        """Get the current user's tasks, optionally only those with a given status."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        tasks = await self._core.services.task.list_tasks(current_user.id, status)
        return [TaskView.from_domain(task) for task in tasks]

    async def create_task(self, token: SessionToken, fields: TaskFields) -> UUID:
        current_user = await self._core.services.access.ensure_authenticated(token)
        task = await self._core.services.task.create_task(current_user.id, fields)
        return task.id

    async def get_task(self, token: SessionToken, task_id: str) -> TaskView:
        """Get one task (owner only)."""
        task = await self._core.services.access.ensure_task_owner(token, task_id)
        return TaskView.from_domain(task)

    async def update_task(self, token: SessionToken, task_id: str, fields: TaskFields) -> TaskView:
        """Update one task (owner only)."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        task = await self._core.services.task.update_task(parse_task_id(task_id), current_user.id, fields)
        return TaskView.from_domain(task)

    async def delete_task(self, token: SessionToken, task_id: str) -> None:
        """Delete one task (owner only)."""
        current_user = await self._core.services.access.ensure_authenticated(token)
        await self._core.services.task.delete_task(parse_task_id(task_id), current_user.id)

from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from tasktracker.config import Config
from tasktracker.core.modules.password.hasher import PasswordHasher
from tasktracker.core.modules.token.codec import TokenCodec


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


# Started in this order, stopped in reverse: (module under core.modules, class)
SERVICE_REGISTRY = (
    ("user", "UserService"),
    ("task", "TaskService"),
    ("session", "SessionService"),
    ("access", "AccessService"),
    ("mail", "MailService"),
    ("auth", "AuthService"),
)


class Services:
    """Service registry that automatically discovers and initializes services."""

    from tasktracker.core.modules.access.service import AccessService  # noqa: PLC0415
    from tasktracker.core.modules.auth.service import AuthService  # noqa: PLC0415
    from tasktracker.core.modules.mail.service import MailService  # noqa: PLC0415
    from tasktracker.core.modules.session.service import SessionService  # noqa: PLC0415
    from tasktracker.core.modules.task.service import TaskService  # noqa: PLC0415
    from tasktracker.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    task: TaskService
    session: SessionService
    access: AccessService
    mail: MailService
    auth: AuthService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._services: list[Service] = []
        for name, class_name in SERVICE_REGISTRY:
            module = importlib.import_module(f"tasktracker.core.modules.{name}.service")
            service = cast(type[Service], getattr(module, class_name))(database)
            setattr(self, name, service)
            self._services.append(service)

    def set_core(self, core: Core) -> None:
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, security primitives and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]]
    passwords: PasswordHasher
    tokens: TokenCodec
    services: Services

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        """Initialize core with config and MongoDB, then auto-register services.

        A ready database handle may be passed in; the core then owns no client.
        """
        self.config = config
        if database is None:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        else:
            self.mongo_client = None
            self.database = database
        self.passwords = PasswordHasher(rounds=config.password_hash_rounds)
        self.tokens = TokenCodec(secret=config.jwt_secret, algorithm=config.jwt_algorithm)
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the MongoDB connection if the core opened it."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()

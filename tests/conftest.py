"""Shared pytest fixtures.

Services run against an in-memory stand-in for the pymongo async collection
API that supports the queries and updates the application issues.
"""

import copy
from collections.abc import Iterator
from email.message import EmailMessage
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from tasktracker.app import App
from tasktracker.config import Config
from tasktracker.core.core import Core
from tasktracker.web.server import create_fastapi_app

STRONG_PASSWORD = "Abcdef1!"


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and set(condition) == {"$gt"}:
            if value is None or not value > condition["$gt"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, keys: list[tuple[str, int]]) -> "FakeCursor":
        for key, order in reversed(keys):
            self._documents.sort(key=lambda doc, key=key: doc.get(key), reverse=order < 0)
        return self

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self._documents)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.indexes: list[dict[str, Any]] = []
        self._unique: list[tuple[str, ...]] = [("_id",)]

    async def create_index(self, keys: list[tuple[str, int]], **kwargs: Any) -> str:
        self.indexes.append({"keys": keys, **kwargs})
        if kwargs.get("unique"):
            self._unique.append(tuple(key for key, _ in keys))
        return "_".join(f"{key}_{order}" for key, order in keys)

    def _check_unique(self, document: dict[str, Any], replacing: dict[str, Any] | None = None) -> None:
        for fields in self._unique:
            values = tuple(document.get(field) for field in fields)
            for other in self.documents:
                if other is not replacing and tuple(other.get(field) for field in fields) == values:
                    raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} {fields}", 11000)

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.documents if _matches(doc, query)), None)

    @staticmethod
    def _apply(document: dict[str, Any], update: dict[str, Any], inserting: bool = False) -> dict[str, Any]:
        result = copy.deepcopy(document)
        for op, fields in update.items():
            if op == "$set" or (op == "$setOnInsert" and inserting):
                result.update(copy.deepcopy(fields))
            elif op != "$setOnInsert":
                raise NotImplementedError(op)
        return result

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        document = copy.deepcopy(document)
        document.setdefault("_id", uuid4())
        self._check_unique(document)
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return copy.deepcopy(self._first(query))

    def find(self, query: dict[str, Any]) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents if _matches(doc, query)])

    async def _update(self, query: dict[str, Any], update: dict[str, Any], upsert: bool) -> tuple[Any, Any]:
        current = self._first(query)
        if current is None:
            if not upsert:
                return None, None
            await self.insert_one(self._apply(dict(query), update, inserting=True))
            return None, self.documents[-1]
        updated = self._apply(current, update)
        self._check_unique(updated, replacing=current)
        self.documents[self.documents.index(current)] = updated
        return current, updated

    async def update_one(self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False) -> SimpleNamespace:
        before, after = await self._update(query, update, upsert)
        return SimpleNamespace(
            matched_count=int(before is not None),
            upserted_id=after["_id"] if before is None and after is not None else None,
        )

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], return_document: bool = False
    ) -> dict[str, Any] | None:
        before, after = await self._update(query, update, upsert=False)
        return copy.deepcopy(after if return_document else before)

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        found = self._first(query)
        if found is not None:
            self.documents.remove(found)
        return found

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        before = len(self.documents)
        self.documents = [doc for doc in self.documents if not _matches(doc, query)]
        return SimpleNamespace(deleted_count=before - len(self.documents))


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection(name))

    def __getitem__(self, name: str) -> FakeCollection:
        return self.get_collection(name)


@pytest.fixture
def config():
    """Test configuration: fast bcrypt, plain-HTTP cookies, no .env file."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/tasktracker_test",
        debug=True,
        jwt_secret="test-secret-key",
        frontend_url="http://localhost:5173",
        password_hash_rounds=4,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture(autouse=True)
def mail_outbox(monkeypatch):
    """Capture outgoing emails instead of talking to an SMTP server."""
    outbox: list[EmailMessage] = []

    async def fake_send_email(_config, message):
        outbox.append(message)

    monkeypatch.setattr("tasktracker.core.modules.mail.service.send_email", fake_send_email)
    return outbox


@pytest.fixture
async def core(config, database):
    """Started core wired to the in-memory database."""
    core = Core(config, database)
    await core.on_start()
    yield core
    await core.on_stop()


@pytest.fixture
def client(config, database) -> Iterator[TestClient]:
    fastapi_app = create_fastapi_app(App(config, database), config)
    with TestClient(fastapi_app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user through the API."""

    def _register(email: str = "a@b.com", password: str = STRONG_PASSWORD, **overrides: Any) -> httpx.Response:
        payload = {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "age": 36,
            "email": email,
            "password": password,
            "confirmPassword": password,
            **overrides,
        }
        return client.post("/api/v1/users", json=payload)

    return _register


@pytest.fixture
def login(client):
    """Log in through the API; the session cookie lands in the client's jar."""

    def _login(email: str = "a@b.com", password: str = STRONG_PASSWORD) -> httpx.Response:
        client.cookies.clear()
        return client.post("/api/v1/users/login", json={"email": email, "password": password})

    return _login

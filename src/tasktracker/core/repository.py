"""Generic document repository shared by all services."""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeAlias, TypeVar
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from tasktracker.core.db import MongoModel
from tasktracker.utils import now

Filter: TypeAlias = Mapping[str, Any]
SortSpec: TypeAlias = Sequence[tuple[str, int]]

T = TypeVar("T", bound=MongoModel)


class Repository(Generic[T]):
    """Create, read, update, delete and list documents of one model type.

    All mutations are single-document atomic operations, so a filter can carry
    extra conditions (for example an owner id) that are checked together with
    the write.
    """

    def __init__(self, collection: AsyncCollection[dict[str, Any]], model: type[T]) -> None:
        self.collection = collection
        self._model = model

    async def create(self, document: T) -> T:
        await self.collection.insert_one(document.to_mongo())
        return document

    async def get(self, document_id: UUID) -> T | None:
        return await self.find_one({"_id": document_id})

    async def find_one(self, query: Filter) -> T | None:
        doc = await self.collection.find_one(dict(query))
        return None if doc is None else self._model.model_validate(doc)

    async def find_many(self, query: Filter | None = None, sort: SortSpec | None = None) -> list[T]:
        cursor = self.collection.find(dict(query or {}))
        if sort:
            cursor = cursor.sort(list(sort))
        return await self._model.list_cursor(cursor)

    async def update(self, query: Filter, changes: Mapping[str, Any], clear: Sequence[str] = ()) -> T | None:
        """Apply changes to the first matching document and return it as stored afterwards.

        Fields named in ``clear`` are set to null.
        """
        update: dict[str, Any] = {"$set": {**changes, "updated_at": now()}}
        if clear:
            update["$set"].update(dict.fromkeys(clear))
        doc = await self.collection.find_one_and_update(dict(query), update, return_document=ReturnDocument.AFTER)
        return None if doc is None else self._model.model_validate(doc)

    async def delete(self, query: Filter) -> T | None:
        doc = await self.collection.find_one_and_delete(dict(query))
        return None if doc is None else self._model.model_validate(doc)

    async def delete_many(self, query: Filter) -> int:
        result = await self.collection.delete_many(dict(query))
        return result.deleted_count

"""In-memory stand-in for a Motor collection used by the API tests."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from bson import ObjectId


@dataclass
class InsertOneResult:
    inserted_id: ObjectId


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    deleted_count: int


class _AsyncCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = iter(documents)

    def __aiter__(self) -> "_AsyncCursor":
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._documents)
        except StopIteration:
            raise StopAsyncIteration


@dataclass
class FakeCollection:
    """Implements the subset of AsyncIOMotorCollection the service uses."""

    name: str = "transactions"
    documents: list[dict[str, Any]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    fail_with: Exception | None = None

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def _find_index(self, query: dict[str, Any]) -> int | None:
        for index, doc in enumerate(self.documents):
            if doc["_id"] == query.get("_id"):
                return index
        return None

    def find(self, query: dict[str, Any] | None = None) -> _AsyncCursor:
        self._record("find")
        return _AsyncCursor([copy.deepcopy(doc) for doc in self.documents])

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        self._record("insert_one")
        stored = copy.deepcopy(document)
        stored["_id"] = ObjectId()
        self.documents.append(stored)
        return InsertOneResult(inserted_id=stored["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        self._record("update_one")
        index = self._find_index(query)
        if index is None:
            return UpdateResult(matched_count=0, modified_count=0)
        current = self.documents[index]
        changes = update["$set"]
        modified = any(current.get(key) != value for key, value in changes.items())
        current.update(copy.deepcopy(changes))
        return UpdateResult(matched_count=1, modified_count=1 if modified else 0)

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        self._record("delete_one")
        index = self._find_index(query)
        if index is None:
            return DeleteResult(deleted_count=0)
        del self.documents[index]
        return DeleteResult(deleted_count=1)


class FakeDatabase:
    def __init__(self, collection: FakeCollection) -> None:
        self._collection = collection

    def get_collection(self, name: str) -> FakeCollection:
        self._collection.name = name
        return self._collection


class FakeAdmin:
    def __init__(self, ping_error: Exception | None = None) -> None:
        self.ping_error = ping_error

    async def command(self, name: str) -> dict[str, Any]:
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


class FakeMotorClient:
    """Replaces AsyncIOMotorClient in lifespan tests."""

    instances: list["FakeMotorClient"] = []
    collection: FakeCollection | None = None
    ping_error: Exception | None = None

    def __init__(self, uri: str, **kwargs: Any) -> None:
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.admin = FakeAdmin(type(self).ping_error)
        self.requested_databases: list[str] = []
        FakeMotorClient.instances.append(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        self.requested_databases.append(name)
        return FakeDatabase(type(self).collection or FakeCollection())

    def close(self) -> None:
        self.closed = True

"""
Document store abstraction used by the dataset builder and the strategies.

`DocumentStore` is the narrow contract the benchmark needs from a database:
bulk insert returning ids in insertion order, point lookup, filtered queries,
array append, and a drop that tolerates missing collections. `MongoStore`
implements it on top of pymongo's asyncio client.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure

from schema_bench.infrastructure.errors import MissingDocumentError
from schema_bench.utils.logging import get_logger

log = get_logger(__name__)

# Server error code for "ns not found".
_NAMESPACE_NOT_FOUND = 26


@runtime_checkable
class DocumentStore(Protocol):
    """
    Minimal async store interface. Every call is awaited; no call is retried.
    """

    async def insert_many(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> List[Any]:
        """Insert documents in one batch and return their ids in insertion order."""
        ...

    async def find_by_id(self, collection: str, doc_id: Any) -> Optional[Dict[str, Any]]:
        ...

    async def find(self, collection: str, query: Mapping[str, Any]) -> List[Dict[str, Any]]:
        ...

    async def append_to_array(
        self, collection: str, doc_id: Any, field: str, values: Iterable[Any]
    ) -> None:
        ...

    async def drop(self, collection: str) -> None:
        """Delete a whole collection. Dropping a missing collection is a no-op."""
        ...

    async def ensure_index(self, collection: str, field: str) -> None:
        ...

    async def close(self) -> None:
        ...


class MongoStore:
    """
    `DocumentStore` backed by a pymongo `AsyncDatabase`.

    The store does not own the client lifecycle unless `owns_client` is set,
    in which case `close()` closes the underlying client as well.
    """

    def __init__(self, database: AsyncDatabase, owns_client: bool = False) -> None:
        self._db = database
        self._owns_client = owns_client

    async def insert_many(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> List[Any]:
        if not documents:
            return []
        result = await self._db[collection].insert_many(list(documents), ordered=True)
        return list(result.inserted_ids)

    async def find_by_id(self, collection: str, doc_id: Any) -> Optional[Dict[str, Any]]:
        return await self._db[collection].find_one({"_id": doc_id})

    async def find(self, collection: str, query: Mapping[str, Any]) -> List[Dict[str, Any]]:
        cursor = self._db[collection].find(dict(query))
        return await cursor.to_list(None)

    async def append_to_array(
        self, collection: str, doc_id: Any, field: str, values: Iterable[Any]
    ) -> None:
        result = await self._db[collection].update_one(
            {"_id": doc_id}, {"$push": {field: {"$each": list(values)}}}
        )
        if result.matched_count == 0:
            raise MissingDocumentError(collection, doc_id)

    async def drop(self, collection: str) -> None:
        try:
            await self._db[collection].drop()
        except OperationFailure as exc:
            if exc.code != _NAMESPACE_NOT_FOUND:
                raise
            log.debug("Collection already absent", extra={"collection": collection})

    async def ensure_index(self, collection: str, field: str) -> None:
        await self._db[collection].create_index(field)

    async def close(self) -> None:
        if self._owns_client:
            await self._db.client.close()


__all__ = ["DocumentStore", "MongoStore"]

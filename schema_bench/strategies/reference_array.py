from __future__ import annotations

from typing import Any

from schema_bench.dataset import REFERENCE_ARRAY_FIELD
from schema_bench.infrastructure.errors import MissingDocumentError
from schema_bench.infrastructure.store import DocumentStore
from schema_bench.strategies.abstract import AbstractAccessStrategy


class ReferenceArrayStrategy(AbstractAccessStrategy):
    """
    Fetch the worker, then its availabilities by `_id` membership in the
    worker's reference array. The second query depends on the first, so the
    two always run back to back.
    """

    name: str = "reference_array"
    description: str = "Worker lookup by _id, then availabilities with _id $in worker array."

    async def lookup(self, store: DocumentStore, worker_id: Any) -> int:
        worker = await store.find_by_id(self.collections.workers, worker_id)
        if worker is None:
            raise MissingDocumentError(self.collections.workers, worker_id)
        await store.find(
            self.collections.availabilities,
            {"_id": {"$in": list(worker.get(REFERENCE_ARRAY_FIELD, []))}},
        )
        return 2


__all__ = ["ReferenceArrayStrategy"]

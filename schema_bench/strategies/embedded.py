"""
Embedded (baseline) strategy: a single point lookup of the worker by id.

Availabilities are not physically embedded in this schema, so this measures
only the cost of fetching the worker document itself. It stands in for a
schema where availabilities live inside the worker.
"""

from __future__ import annotations

from typing import Any

from schema_bench.infrastructure.store import DocumentStore
from schema_bench.strategies.abstract import AbstractAccessStrategy


class EmbeddedStrategy(AbstractAccessStrategy):
    name: str = "embedded"
    description: str = "Worker point lookup by _id (embedded-document baseline)."

    async def lookup(self, store: DocumentStore, worker_id: Any) -> int:
        await store.find_by_id(self.collections.workers, worker_id)
        return 1


__all__ = ["EmbeddedStrategy"]

"""
Back-reference strategy: query availabilities directly by their indexed
`worker` field, without touching the worker document.
"""

from __future__ import annotations

from typing import Any

from schema_bench.dataset import BACK_REFERENCE_FIELD
from schema_bench.infrastructure.store import DocumentStore
from schema_bench.strategies.abstract import AbstractAccessStrategy


class BackReferenceStrategy(AbstractAccessStrategy):
    name: str = "back_reference"
    description: str = "Availabilities filtered on worker == id."

    async def lookup(self, store: DocumentStore, worker_id: Any) -> int:
        await store.find(self.collections.availabilities, {BACK_REFERENCE_FIELD: worker_id})
        return 1


__all__ = ["BackReferenceStrategy"]

"""
Abstract strategy interfaces and result contracts for the schema benchmark.

A strategy is one way of resolving "a worker and its availabilities" against
the store. Concrete strategies implement `lookup` for a single worker id; the
shared `measure` loop times those lookups one at a time and reports the mean.
"""

from __future__ import annotations

import abc
import math
import time
from typing import Any, Protocol, Sequence, TypedDict, runtime_checkable

from schema_bench.dataset import Collections
from schema_bench.infrastructure.store import DocumentStore
from schema_bench.utils.logging import get_logger

log = get_logger(__name__)


class StrategyResult(TypedDict):
    """
    Metrics returned by `measure`.

    `mean_ms` is floored to two decimals. `queries` counts every store call
    issued while resolving the sampled ids.
    """

    strategy: str
    samples: int
    queries: int
    total_ms: float
    mean_ms: float


@runtime_checkable
class AccessStrategy(Protocol):
    """
    Common interface all access strategies must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the access path.
    """

    name: str
    description: str

    async def lookup(self, store: DocumentStore, worker_id: Any) -> int:
        """Resolve one worker and return how many store queries it took."""
        ...

    async def measure(self, store: DocumentStore, worker_ids: Sequence[Any]) -> StrategyResult:
        ...


def floor_ms(value: float) -> float:
    return math.floor(value * 100) / 100


class AbstractAccessStrategy(abc.ABC):
    """
    Base class providing the timing loop.

    Subclasses set `name` and `description` and implement `lookup`.
    """

    name: str
    description: str

    def __init__(self, collections: Collections = Collections()) -> None:
        self.collections = collections

    @abc.abstractmethod
    async def lookup(self, store: DocumentStore, worker_id: Any) -> int:  # pragma: no cover
        raise NotImplementedError

    async def measure(self, store: DocumentStore, worker_ids: Sequence[Any]) -> StrategyResult:
        """
        Time `lookup` for each id in order, strictly one at a time, and
        return the mean elapsed milliseconds per id.
        """
        total_seconds = 0.0
        queries = 0
        for worker_id in worker_ids:
            start = time.perf_counter()
            queries += await self.lookup(store, worker_id)
            total_seconds += time.perf_counter() - start

        samples = len(worker_ids)
        total_ms = total_seconds * 1000
        if samples == 0:
            log.warning("No worker ids to measure", extra={"strategy": self.name})
            mean_ms = 0.0
        else:
            mean_ms = floor_ms(total_ms / samples)

        return StrategyResult(
            strategy=self.name,
            samples=samples,
            queries=queries,
            total_ms=total_ms,
            mean_ms=mean_ms,
        )


__all__ = [
    "AbstractAccessStrategy",
    "AccessStrategy",
    "StrategyResult",
    "floor_ms",
]

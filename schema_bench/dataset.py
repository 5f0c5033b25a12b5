"""
Dataset construction for a single sweep step.

Workers are inserted in one batch. Each worker is then independently selected
with probability `availability_chance` to receive between `avail_low` and
`avail_high` availabilities. Selected workers are linked both ways: every
availability carries the worker id, and the worker's `availabilities` array is
extended with the new availability ids once they exist.

The two writes per worker are not atomic. Between the availability insert and
the worker update, the back-reference exists without the matching array
entry. Every step starts from a full clear, so a failed build never leaks into
the next one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from schema_bench.domain.generator import (
    generate_random_availability,
    generate_random_worker,
    random_int,
    random_source,
)
from schema_bench.infrastructure.errors import MissingDocumentError
from schema_bench.infrastructure.store import DocumentStore
from schema_bench.utils.logging import get_logger

log = get_logger(__name__)

BACK_REFERENCE_FIELD = "worker"
REFERENCE_ARRAY_FIELD = "availabilities"


@dataclass(frozen=True)
class Collections:
    """Names of the two collections a benchmark run writes to."""

    workers: str = "workers"
    availabilities: str = "availabilities"


@dataclass(frozen=True)
class AttachmentOutcome:
    worker_id: Any
    availability_ids: Tuple[Any, ...]


@dataclass(frozen=True)
class DatasetStats:
    """
    Summary of a built dataset.

    `sampled_worker_ids` lists the workers that received at least one
    availability, in worker insertion order.
    """

    workers: int = 0
    availabilities: int = 0
    workers_with_availabilities: int = 0
    sampled_worker_ids: List[Any] = field(default_factory=list)

    @property
    def workers_without_availabilities(self) -> int:
        return self.workers - self.workers_with_availabilities

    @classmethod
    def from_outcomes(cls, workers: int, outcomes: Sequence[AttachmentOutcome]) -> "DatasetStats":
        return cls(
            workers=workers,
            availabilities=sum(len(o.availability_ids) for o in outcomes),
            workers_with_availabilities=len(outcomes),
            sampled_worker_ids=[o.worker_id for o in outcomes],
        )


async def clear_all_data(store: DocumentStore, collections: Collections = Collections()) -> None:
    """Drop both collections. Safe to call when they do not exist."""
    await store.drop(collections.workers)
    await store.drop(collections.availabilities)


async def attach_availabilities(
    store: DocumentStore,
    worker_id: Any,
    availability_docs: List[Dict[str, Any]],
    collections: Collections = Collections(),
) -> AttachmentOutcome:
    """
    Insert a worker's availabilities, then append their ids to the worker.
    """
    availability_ids = await store.insert_many(collections.availabilities, availability_docs)
    worker = await store.find_by_id(collections.workers, worker_id)
    if worker is None:
        raise MissingDocumentError(collections.workers, worker_id)
    await store.append_to_array(
        collections.workers, worker_id, REFERENCE_ARRAY_FIELD, availability_ids
    )
    return AttachmentOutcome(worker_id=worker_id, availability_ids=tuple(availability_ids))


def _plan_attachments(
    worker_ids: Sequence[Any], availability_chance: float, avail_low: int, avail_high: int
) -> List[Tuple[Any, List[Dict[str, Any]]]]:
    # All random draws happen here, before any attachment I/O is scheduled.
    rng = random_source()
    plan: List[Tuple[Any, List[Dict[str, Any]]]] = []
    for worker_id in worker_ids:
        if rng.random() < availability_chance:
            count = random_int(avail_low, avail_high, inclusive=True)
            docs = [generate_random_availability(worker_id).to_document() for _ in range(count)]
            plan.append((worker_id, docs))
    return plan


async def build_dataset(
    store: DocumentStore,
    num_workers: int,
    availability_chance: float,
    avail_low: int = 1,
    avail_high: int = 3,
    concurrency: int = 64,
    collections: Collections = Collections(),
) -> DatasetStats:
    """
    Populate the store with `num_workers` workers and their availabilities.

    Parameters
    ----------
    store : DocumentStore
        Target store; expected to be empty.
    num_workers : int
        Number of worker documents to insert.
    availability_chance : float
        Probability in [0, 1] that a given worker receives availabilities.
    avail_low, avail_high : int
        Inclusive bounds on the number of availabilities per selected worker.
    concurrency : int
        Maximum number of attachments in flight at once.

    Returns
    -------
    DatasetStats
        Counts plus the ids of workers that own availabilities.
    """
    if num_workers <= 0:
        raise ValueError(f"num_workers must be positive, got {num_workers}")
    if not 0.0 <= availability_chance <= 1.0:
        raise ValueError(f"availability_chance must be within [0, 1], got {availability_chance}")
    if avail_low < 1:
        raise ValueError(f"avail_low must be at least 1, got {avail_low}")
    if avail_low > avail_high:
        raise ValueError(f"avail_low ({avail_low}) exceeds avail_high ({avail_high})")
    if concurrency <= 0:
        raise ValueError(f"concurrency must be positive, got {concurrency}")

    worker_docs = [generate_random_worker().to_document() for _ in range(num_workers)]
    worker_ids = await store.insert_many(collections.workers, worker_docs)
    log.debug("Inserted workers", extra={"workers": len(worker_ids)})

    await store.ensure_index(collections.availabilities, BACK_REFERENCE_FIELD)

    plan = _plan_attachments(worker_ids, availability_chance, avail_low, avail_high)
    semaphore = asyncio.Semaphore(concurrency)

    async def _bounded(worker_id: Any, docs: List[Dict[str, Any]]) -> AttachmentOutcome:
        async with semaphore:
            return await attach_availabilities(store, worker_id, docs, collections)

    outcomes = await asyncio.gather(*(_bounded(worker_id, docs) for worker_id, docs in plan))

    stats = DatasetStats.from_outcomes(len(worker_ids), outcomes)
    log.debug(
        "Attached availabilities",
        extra={
            "availabilities": stats.availabilities,
            "workers_with_availabilities": stats.workers_with_availabilities,
        },
    )
    return stats


__all__ = [
    "AttachmentOutcome",
    "BACK_REFERENCE_FIELD",
    "Collections",
    "DatasetStats",
    "REFERENCE_ARRAY_FIELD",
    "attach_availabilities",
    "build_dataset",
    "clear_all_data",
]

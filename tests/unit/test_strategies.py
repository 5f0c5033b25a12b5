from __future__ import annotations

from types import SimpleNamespace

import pytest

from schema_bench.dataset import build_dataset
from schema_bench.infrastructure.errors import MissingDocumentError
from schema_bench.strategies import (
    AbstractAccessStrategy,
    AccessStrategy,
    BackReferenceStrategy,
    EmbeddedStrategy,
    ReferenceArrayStrategy,
)
from schema_bench.strategies import abstract as abstract_module
from schema_bench.strategies.abstract import floor_ms
from tests.fakes import FakeDocumentStore

WORKERS = 100


async def _seeded_store(avail_low: int = 2, avail_high: int = 2) -> tuple[FakeDocumentStore, list]:
    store = FakeDocumentStore()
    stats = await build_dataset(
        store,
        num_workers=WORKERS,
        availability_chance=1.0,
        avail_low=avail_low,
        avail_high=avail_high,
    )
    store.calls.clear()
    return store, stats.sampled_worker_ids


def test_strategies_satisfy_protocol():
    for strategy in (EmbeddedStrategy(), ReferenceArrayStrategy(), BackReferenceStrategy()):
        assert isinstance(strategy, AccessStrategy)
        assert isinstance(strategy, AbstractAccessStrategy)


@pytest.mark.asyncio
async def test_embedded_issues_one_point_lookup_per_id():
    store, ids = await _seeded_store()

    result = await EmbeddedStrategy().measure(store, ids)

    assert result["strategy"] == "embedded"
    assert result["samples"] == WORKERS
    assert result["queries"] == WORKERS
    assert store.calls == [("find_by_id", "workers")] * WORKERS


@pytest.mark.asyncio
async def test_reference_array_issues_two_queries_per_id():
    store, ids = await _seeded_store()

    result = await ReferenceArrayStrategy().measure(store, ids)

    assert result["queries"] == 2 * WORKERS
    assert store.count() == 2 * WORKERS
    assert store.calls[:2] == [("find_by_id", "workers"), ("find", "availabilities")]


@pytest.mark.asyncio
async def test_reference_array_resolves_the_worker_array():
    store, ids = await _seeded_store()
    strategy = ReferenceArrayStrategy()
    seen: list[list] = []
    original_find = store.find

    async def recording_find(collection, query):
        docs = await original_find(collection, query)
        seen.append(docs)
        return docs

    store.find = recording_find  # type: ignore[method-assign]
    await strategy.lookup(store, ids[0])

    assert len(seen) == 1
    assert len(seen[0]) == 2
    assert {doc["worker"] for doc in seen[0]} == {ids[0]}


@pytest.mark.asyncio
async def test_reference_array_raises_for_unknown_worker(fake_store: FakeDocumentStore):
    with pytest.raises(MissingDocumentError):
        await ReferenceArrayStrategy().measure(fake_store, [12345])


@pytest.mark.asyncio
async def test_back_reference_filters_on_worker_field():
    store, ids = await _seeded_store()

    result = await BackReferenceStrategy().measure(store, ids)

    assert result["queries"] == WORKERS
    assert store.calls == [("find", "availabilities")] * WORKERS


@pytest.mark.asyncio
async def test_mean_is_floored_to_two_decimals(monkeypatch, fake_store: FakeDocumentStore):
    ticks = iter([0.0, 0.0012345, 1.0, 1.0021])
    monkeypatch.setattr(abstract_module, "time", SimpleNamespace(perf_counter=lambda: next(ticks)))

    result = await BackReferenceStrategy().measure(fake_store, ["a", "b"])

    # (1.2345ms + 2.1ms) / 2 = 1.66725ms
    assert result["mean_ms"] == 1.66
    assert result["total_ms"] == pytest.approx(3.3345)


@pytest.mark.asyncio
async def test_empty_id_list_reports_zero(fake_store: FakeDocumentStore):
    result = await EmbeddedStrategy().measure(fake_store, [])

    assert result == {
        "strategy": "embedded",
        "samples": 0,
        "queries": 0,
        "total_ms": 0.0,
        "mean_ms": 0.0,
    }
    assert fake_store.calls == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.999, 1.99), (0.005, 0.0), (12.0, 12.0), (3.14159, 3.14)],
)
def test_floor_ms(value: float, expected: float):
    assert floor_ms(value) == expected

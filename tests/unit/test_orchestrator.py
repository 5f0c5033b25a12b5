from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from schema_bench import orchestrator
from schema_bench.config import Settings
from schema_bench.orchestrator import (
    SweepConfig,
    _resolve_strategies,
    available_strategies,
    run_step,
    run_sweep,
    sweep_chances,
)
from tests.fakes import FakeDocumentStore

EXPECTED_DEFAULT_SETS = 12


def _quiet_console() -> Console:
    return Console(quiet=True)


def test_default_sweep_runs_exactly_twelve_sets():
    chances = sweep_chances(0.05, 0.60, 0.05)

    assert len(chances) == EXPECTED_DEFAULT_SETS
    assert chances[0] == 0.05
    assert chances[-1] == 0.6
    assert chances[4] == 0.25


def test_sweep_stops_before_overshooting_end():
    assert sweep_chances(0.0, 0.5, 0.3) == [0.0, 0.3]


def test_single_point_sweep():
    assert sweep_chances(0.4, 0.4, 0.1) == [0.4]


def test_reversed_bounds_give_no_sets():
    assert sweep_chances(0.6, 0.05, 0.05) == []


@pytest.mark.parametrize("increment", [0.0, -0.05])
def test_non_positive_increment_is_rejected(increment: float):
    with pytest.raises(ValueError):
        sweep_chances(0.05, 0.6, increment)


def test_available_strategies_in_measurement_order():
    assert available_strategies() == ["embedded", "reference_array", "back_reference"]


def test_resolve_strategies_keeps_fixed_order():
    resolved = _resolve_strategies(["back_reference", "embedded"])
    assert [s.name for s in resolved] == ["embedded", "back_reference"]


def test_resolve_strategies_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown strategy 'bogus'"):
        _resolve_strategies(["bogus"])


def test_sweep_config_from_settings_applies_overrides():
    settings = Settings(NUM_WORKERS=10, AVAIL_CHANCE_START=0.1, WORKERS_COLLECTION="w")

    config = SweepConfig.from_settings(settings, num_workers=3, seed=None, end=0.3)

    assert config.num_workers == 3
    assert config.start == 0.1
    assert config.end == 0.3
    assert config.seed is None
    assert config.collections.workers == "w"


@pytest.mark.asyncio
async def test_run_step_produces_a_complete_record(fake_store: FakeDocumentStore):
    config = SweepConfig(num_workers=100, avail_low=2, avail_high=2)
    strategies = _resolve_strategies(["all"])

    record = await run_step(fake_store, config, step=1, chance=1.0, strategies=strategies)

    assert record["step"] == 1
    assert record["availability_chance"] == 1.0
    assert record["workers"] == 100
    assert record["availabilities"] == 200
    assert record["workers_with_availabilities"] == 100
    assert record["workers_without_availabilities"] == 0
    for key in ("embedded_avg_ms", "reference_array_avg_ms", "back_reference_avg_ms"):
        assert record[key] >= 0.0
    assert record["generation_ms"] >= 0.0
    assert fake_store.calls[:2] == [("drop", "workers"), ("drop", "availabilities")]


@pytest.mark.asyncio
async def test_run_step_clears_previous_data(fake_store: FakeDocumentStore):
    config = SweepConfig(num_workers=20)
    strategies = _resolve_strategies(["embedded"])

    await run_step(fake_store, config, step=1, chance=0.5, strategies=strategies)
    await run_step(fake_store, config, step=2, chance=0.5, strategies=strategies)

    assert len(fake_store.documents("workers")) == 20


@pytest.mark.asyncio
async def test_run_sweep_appends_one_json_line_per_set(tmp_path: Path, fake_store: FakeDocumentStore):
    results_log = tmp_path / "data.log"
    results_log.write_text('{"previous": true}\n', encoding="utf-8")
    config = SweepConfig(
        num_workers=30,
        start=0.1,
        end=0.3,
        increment=0.1,
        seed=5,
        results_log=str(results_log),
    )

    records = await run_sweep(config, store=fake_store, console=_quiet_console())

    lines = results_log.read_text(encoding="utf-8").splitlines()
    assert len(records) == 3
    assert len(lines) == 4
    assert json.loads(lines[0]) == {"previous": True}
    logged = [json.loads(line) for line in lines[1:]]
    assert [entry["availability_chance"] for entry in logged] == [0.1, 0.2, 0.3]
    for entry, record in zip(logged, records):
        assert entry["workers"] == 30
        assert entry["availabilities"] == record["availabilities"]
        assert entry["back_reference_avg_ms"] == record["back_reference_avg_ms"]
        assert "workers with availabilities" in entry["message"]


@pytest.mark.asyncio
async def test_run_sweep_only_records_selected_strategies(tmp_path: Path, fake_store: FakeDocumentStore):
    config = SweepConfig(
        num_workers=10,
        start=0.5,
        end=0.5,
        strategies=("reference_array",),
        results_log=str(tmp_path / "data.log"),
    )

    (record,) = await run_sweep(config, store=fake_store, console=_quiet_console())

    assert "reference_array_avg_ms" in record
    assert "embedded_avg_ms" not in record
    assert "back_reference_avg_ms" not in record


@pytest.mark.asyncio
async def test_run_sweep_aborts_on_store_failure(tmp_path: Path, monkeypatch):
    store = FakeDocumentStore()
    results_log = tmp_path / "data.log"
    config = SweepConfig(
        num_workers=10, start=0.1, end=0.3, increment=0.1, results_log=str(results_log)
    )
    original_run_step = orchestrator.run_step
    steps_seen: list[int] = []

    async def failing_second_step(store_, config_, step, chance, strategies):
        steps_seen.append(step)
        if step == 2:
            raise RuntimeError("store went away")
        return await original_run_step(store_, config_, step, chance, strategies)

    monkeypatch.setattr(orchestrator, "run_step", failing_second_step)

    with pytest.raises(RuntimeError, match="store went away"):
        await run_sweep(config, store=store, console=_quiet_console())

    assert steps_seen == [1, 2]
    assert len(results_log.read_text(encoding="utf-8").splitlines()) == 1


@pytest.mark.asyncio
async def test_same_seed_reproduces_dataset_shapes(tmp_path: Path):
    config = SweepConfig(
        num_workers=40, start=0.2, end=0.4, increment=0.2, seed=11, results_log=str(tmp_path / "a.log")
    )

    first = await run_sweep(config, store=FakeDocumentStore(), console=_quiet_console())
    second = await run_sweep(config, store=FakeDocumentStore(), console=_quiet_console())

    shape = lambda rs: [(r["availabilities"], r["workers_with_availabilities"]) for r in rs]  # noqa: E731
    assert shape(first) == shape(second)


@pytest.mark.parametrize(
    "overrides",
    [
        {"increment": 0},
        {"start": 1.5},
        {"concurrency": 0},
        {"num_workers": 0},
        {"avail_low": 0, "avail_high": 0},
        {"avail_low": 3, "avail_high": 1},
        {"strategies": ("bogus",)},
    ],
)
def test_sweep_config_rejects_invalid_overrides(overrides):
    settings = Settings(_env_file=None)

    with pytest.raises(ValueError):
        SweepConfig.from_settings(settings, **overrides)

"""
Orchestrator for the availability-chance sweep.

Each sweep step clears the store, builds a fresh dataset at one availability
chance, shuffles the ids of workers that own availabilities, measures every
selected access strategy against them, and appends one record to the results
log.

Usage (example from CLI):
    from schema_bench.orchestrator import SweepConfig, run_sweep_sync

    records = run_sweep_sync(SweepConfig.from_settings(num_workers=1_000))

Results are appended to `data.log` (JSON lines) by default.
"""

from __future__ import annotations

import asyncio
import math
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from rich.console import Console

from schema_bench.config import Settings, get_settings
from schema_bench.dataset import Collections, build_dataset, clear_all_data
from schema_bench.domain.generator import scramble_array, seed_random_source
from schema_bench.infrastructure.mongo_factory import open_store
from schema_bench.infrastructure.store import DocumentStore
from schema_bench.reporter import (
    MEAN_FIELDS,
    log_step_record,
    print_banner,
    print_results,
    print_step_header,
    print_step_result,
)
from schema_bench.strategies.abstract import AccessStrategy, StrategyResult, floor_ms
from schema_bench.strategies.back_reference import BackReferenceStrategy
from schema_bench.strategies.embedded import EmbeddedStrategy
from schema_bench.strategies.reference_array import ReferenceArrayStrategy
from schema_bench.utils.logging import get_logger, get_results_logger
from schema_bench.utils.profiler import profile_block

log = get_logger(__name__)

# Tolerance when counting how many increments fit between start and end.
_STEP_EPSILON = 1e-9


def _strategy_factories(
    collections: Collections = Collections(),
) -> Dict[str, Callable[[], AccessStrategy]]:
    """Registry of available strategies, in the order they are measured."""
    return {
        "embedded": lambda: EmbeddedStrategy(collections),
        "reference_array": lambda: ReferenceArrayStrategy(collections),
        "back_reference": lambda: BackReferenceStrategy(collections),
    }


def available_strategies() -> List[str]:
    """List available strategy names in measurement order."""
    return list(_strategy_factories().keys())


def _resolve_strategies(
    names: Iterable[str], collections: Collections = Collections()
) -> List[AccessStrategy]:
    factories = _strategy_factories(collections)
    requested = list(names)
    if "all" in requested:
        requested = list(factories)
    unknown = [name for name in requested if name not in factories]
    if unknown:
        raise ValueError(
            f"Unknown strategy '{unknown[0]}'. Available: {', '.join(factories)}"
        )
    # Measurement order is fixed regardless of how the names were given.
    return [factory() for name, factory in factories.items() if name in requested]


def sweep_chances(start: float, end: float, increment: float) -> List[float]:
    """
    Availability chances visited by a sweep, from `start` to `end` inclusive.

    Uses an integer step counter so accumulated float error cannot add or
    drop a step: 0.05..0.60 by 0.05 always yields 12 values.
    """
    if increment <= 0:
        raise ValueError(f"increment must be positive, got {increment}")
    if end < start:
        return []
    steps = math.floor((end - start) / increment + _STEP_EPSILON) + 1
    return [round(start + i * increment, 10) for i in range(steps)]


@dataclass(frozen=True)
class SweepConfig:
    """
    Parameters for one full sweep.

    Use `SweepConfig.from_settings(...)` to start from environment settings
    and override selected fields.
    """

    num_workers: int = 5_000
    avail_low: int = 1
    avail_high: int = 3
    start: float = 0.05
    end: float = 0.60
    increment: float = 0.05
    concurrency: int = 64
    strategies: Tuple[str, ...] = ("all",)
    seed: Optional[int] = None
    results_log: str = "data.log"
    collections: Collections = field(default_factory=Collections)

    def __post_init__(self) -> None:
        # Overrides bypass Settings validation, so the same bounds are checked here.
        if self.num_workers <= 0:
            raise ValueError(f"num_workers must be positive, got {self.num_workers}")
        if self.avail_low < 1:
            raise ValueError(f"avail_low must be at least 1, got {self.avail_low}")
        if self.avail_low > self.avail_high:
            raise ValueError(f"avail_low ({self.avail_low}) exceeds avail_high ({self.avail_high})")
        if not (0.0 <= self.start <= 1.0 and 0.0 <= self.end <= 1.0):
            raise ValueError(f"start and end must be within [0, 1], got {self.start}..{self.end}")
        if self.increment <= 0:
            raise ValueError(f"increment must be positive, got {self.increment}")
        if self.concurrency <= 0:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")
        _resolve_strategies(self.strategies)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "SweepConfig":
        settings = settings or get_settings()
        base = cls(
            num_workers=settings.num_workers,
            avail_low=settings.avail_low,
            avail_high=settings.avail_high,
            start=settings.avail_chance_start,
            end=settings.avail_chance_end,
            increment=settings.avail_chance_increment,
            concurrency=settings.build_concurrency,
            seed=settings.benchmark_seed,
            results_log=settings.results_log,
            collections=Collections(
                workers=settings.workers_collection,
                availabilities=settings.availabilities_collection,
            ),
        )
        return replace(base, **{k: v for k, v in overrides.items() if v is not None})

    def chances(self) -> List[float]:
        return sweep_chances(self.start, self.end, self.increment)


async def run_step(
    store: DocumentStore,
    config: SweepConfig,
    step: int,
    chance: float,
    strategies: List[AccessStrategy],
) -> Dict[str, Any]:
    """
    Run one clear -> build -> shuffle -> measure cycle and return its record.
    """
    await clear_all_data(store, config.collections)

    with profile_block(f"build p={chance}") as profile:
        stats = await build_dataset(
            store,
            num_workers=config.num_workers,
            availability_chance=chance,
            avail_low=config.avail_low,
            avail_high=config.avail_high,
            concurrency=config.concurrency,
            collections=config.collections,
        )

    sampled_ids = list(stats.sampled_worker_ids)
    # Randomize lookup order to limit cache effects between consecutive ids.
    scramble_array(sampled_ids)

    log.info(
        f"[SET {step}] Dataset ready, querying {len(sampled_ids)} workers",
        extra={
            "step": step,
            "availability_chance": chance,
            "availabilities": stats.availabilities,
            "workers_with_availabilities": stats.workers_with_availabilities,
        },
    )

    results: List[StrategyResult] = []
    for strategy in strategies:
        result = await strategy.measure(store, sampled_ids)
        log.info(
            f"[SET {step}] {strategy.name} avg {result['mean_ms']}ms",
            extra={"strategy": strategy.name, "samples": result["samples"]},
        )
        results.append(result)

    record: Dict[str, Any] = {
        "step": step,
        "availability_chance": chance,
        "workers": stats.workers,
        "availabilities": stats.availabilities,
        "workers_with_availabilities": stats.workers_with_availabilities,
        "workers_without_availabilities": stats.workers_without_availabilities,
        "generation_ms": floor_ms(profile.duration_ms),
        "peak_rss_bytes": profile.peak_rss_bytes,
    }
    for result in results:
        record[MEAN_FIELDS[result["strategy"]]] = result["mean_ms"]
    return record


async def run_sweep(
    config: Optional[SweepConfig] = None,
    store: Optional[DocumentStore] = None,
    console: Optional[Console] = None,
) -> List[Dict[str, Any]]:
    """
    Run every sweep step in order and return the per-step records.

    Parameters
    ----------
    config : SweepConfig | None
        Sweep parameters. Defaults to `SweepConfig.from_settings()`.
    store : DocumentStore | None
        Store to run against. When omitted, a MongoDB store is opened from
        settings for the duration of the sweep.
    console : rich.console.Console | None
        Console for progress output.

    Any failure aborts the sweep; records already appended to the results
    log are kept.
    """
    config = config or SweepConfig.from_settings()
    strategies = _resolve_strategies(config.strategies, config.collections)
    chances = config.chances()
    if store is None:
        async with open_store() as mongo_store:
            return await run_sweep(config, mongo_store, console)

    console = console or Console()
    results_log = get_results_logger(config.results_log)

    if config.seed is not None:
        seed_random_source(config.seed)

    print_banner(
        {
            "workers": config.num_workers,
            "avail_low": config.avail_low,
            "avail_high": config.avail_high,
            "start": config.start,
            "end": config.end,
            "increment": config.increment,
            "steps": len(chances),
            "strategies": [s.name for s in strategies],
        },
        console,
    )

    sweep_start = time.perf_counter()
    records: List[Dict[str, Any]] = []
    for step, chance in enumerate(chances, start=1):
        print_step_header(step, len(chances), chance, console)
        try:
            record = await run_step(store, config, step, chance, strategies)
        except Exception:
            log.exception(
                f"[SET {step}] Sweep aborted", extra={"step": step, "availability_chance": chance}
            )
            raise
        log_step_record(results_log, record)
        print_step_result(record, console)
        records.append(record)

    duration_ms = floor_ms((time.perf_counter() - sweep_start) * 1000)
    print_results(records, console)
    console.print(f"Done querying! Took {duration_ms}ms. Results appended to {config.results_log}.")
    log.info(
        f"[SWEEP COMPLETE] {len(records)} sets",
        extra={"sets": len(records), "duration_ms": duration_ms},
    )
    return records


def run_sweep_sync(config: Optional[SweepConfig] = None) -> List[Dict[str, Any]]:
    """Blocking wrapper around `run_sweep` for synchronous callers."""
    return asyncio.run(run_sweep(config))


__all__ = [
    "SweepConfig",
    "available_strategies",
    "run_step",
    "run_sweep",
    "run_sweep_sync",
    "sweep_chances",
]

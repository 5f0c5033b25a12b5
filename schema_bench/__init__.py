"""
Schema Strategy Benchmark - compares MongoDB one-to-many schema layouts.

This package measures the lookup latency of three ways to resolve a worker
and its availabilities:

- Embedded baseline: a single worker point lookup
- Reference array: worker lookup, then availabilities by `_id` membership
- Back-reference: availabilities filtered on their `worker` field

across a sweep of synthetic datasets in which a growing share of workers own
availabilities.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from schema_bench.config import Settings, get_settings
from schema_bench.dataset import Collections, DatasetStats, build_dataset, clear_all_data
from schema_bench.orchestrator import (
    SweepConfig,
    available_strategies,
    run_sweep,
    run_sweep_sync,
    sweep_chances,
)
from schema_bench.strategies.abstract import (
    AbstractAccessStrategy,
    AccessStrategy,
    StrategyResult,
)
from schema_bench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Dataset
    "Collections",
    "DatasetStats",
    "build_dataset",
    "clear_all_data",
    # Orchestration
    "SweepConfig",
    "available_strategies",
    "run_sweep",
    "run_sweep_sync",
    "sweep_chances",
    # Strategy abstractions
    "AccessStrategy",
    "AbstractAccessStrategy",
    "StrategyResult",
    # Logging
    "configure_logging",
    "get_logger",
]

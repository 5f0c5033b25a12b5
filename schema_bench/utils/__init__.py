"""
Utilities package for the schema strategy benchmark.

Exports shared helpers for logging, profiling, and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from schema_bench.utils.logging import configure_logging, get_logger, get_results_logger
from schema_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "get_results_logger",
    "ProfileStats",
    "profile_block",
]

"""
Strategies package for the schema benchmark.

This module re-exports the abstract interfaces and the concrete access
strategies so downstream code can import from `schema_bench.strategies`
directly.
"""

from schema_bench.strategies.abstract import (
    AbstractAccessStrategy,
    AccessStrategy,
    StrategyResult,
)
from schema_bench.strategies.back_reference import BackReferenceStrategy
from schema_bench.strategies.embedded import EmbeddedStrategy
from schema_bench.strategies.reference_array import ReferenceArrayStrategy

__all__ = [
    # Abstracts
    "AbstractAccessStrategy",
    "AccessStrategy",
    "StrategyResult",
    # Concrete strategies
    "BackReferenceStrategy",
    "EmbeddedStrategy",
    "ReferenceArrayStrategy",
]

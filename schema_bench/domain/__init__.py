"""
Domain package for the schema strategy benchmark.

Exports the document models and the random data generators used to build
each benchmark dataset.
"""

from schema_bench.domain.generator import (
    generate_random_availability,
    generate_random_worker,
    scramble_array,
    seed_random_source,
)
from schema_bench.domain.models import Address, Availability, RepeatDays, TimeOfDay, Worker

__all__ = [
    "Address",
    "Availability",
    "RepeatDays",
    "TimeOfDay",
    "Worker",
    "generate_random_availability",
    "generate_random_worker",
    "scramble_array",
    "seed_random_source",
]

"""
Random data generation for worker and availability documents.

Every helper draws from a single module-level `random.Random` so a whole
benchmark run can be made reproducible with `seed_random_source(seed)`.
"""

from __future__ import annotations

import random
import string
from datetime import UTC, datetime
from typing import Any, MutableSequence, Optional

from schema_bench.domain.models import (
    WEEKDAYS,
    Address,
    Availability,
    RepeatDays,
    TimeOfDay,
    Worker,
)

PHONE_NUMBER_MIN = 1_000_000_000
PHONE_NUMBER_MAX = 10_000_000_000
# Upper bound (exclusive) for generated birth dates, in epoch milliseconds.
BIRTH_DATE_MAX_MS = 1_000_000_000_000

_rng = random.Random()


def seed_random_source(seed: Optional[int]) -> None:
    """Reseed the shared random source. `None` reseeds from system entropy."""
    _rng.seed(seed)


def random_source() -> random.Random:
    return _rng


def random_int(low: int, high: int, inclusive: bool = False) -> int:
    """
    Uniform integer in [low, high), or [low, high] when `inclusive` is set.
    """
    return _rng.randrange(low, high + 1 if inclusive else high)


def random_letter() -> str:
    letters = string.ascii_uppercase if _rng.random() > 0.5 else string.ascii_lowercase
    return letters[_rng.randrange(26)]


def random_word(min_len: int, max_len: Optional[int] = None) -> str:
    """
    Random-cased letters. Length is `min_len`, or drawn from [min_len, max_len)
    when `max_len` is given.
    """
    length = min_len if max_len is None else random_int(min_len, max_len)
    return "".join(random_letter() for _ in range(length))


def random_alphanumeric(length: int) -> str:
    return "".join(
        random_letter() if _rng.random() > 0.5 else str(random_int(0, 10)) for _ in range(length)
    )


def random_paragraph(word_count: int) -> str:
    return " ".join(random_word(3, 10) for _ in range(word_count))


def random_phone_number() -> int:
    return random_int(PHONE_NUMBER_MIN, PHONE_NUMBER_MAX)


def scramble_array(seq: MutableSequence[Any]) -> None:
    """
    Shuffle `seq` in place by swapping len(seq) pairs of random indices.

    This is not a uniform permutation. It is kept as-is so results stay
    comparable with earlier sweeps.
    """
    length = len(seq)
    for _ in range(length):
        idx1 = random_int(0, length)
        idx2 = random_int(0, length)
        seq[idx1], seq[idx2] = seq[idx2], seq[idx1]


def generate_random_worker() -> Worker:
    """Build a worker with every profile field populated and no availabilities."""
    return Worker(
        email=f"{random_alphanumeric(12)}@{random_word(6)}.com",
        password=random_word(14),
        notes=random_paragraph(random_int(3, 20)),
        birthDate=datetime.fromtimestamp(random_int(0, BIRTH_DATE_MAX_MS) / 1000, tz=UTC),
        emergencyContactName=random_word(6),
        emergencyContactNumber=random_phone_number(),
        rating=_rng.random() * 5,
        workedHours=_rng.random() * 100,
        agency=random_alphanumeric(24),
        phoneCode=1,
        phoneNumber=random_phone_number(),
        firstName=random_word(3, 7),
        lastName=random_word(3, 7),
        about=random_paragraph(random_int(3, 20)),
        address=Address(
            line1=random_word(3, 7),
            line2=random_word(3, 7),
            city=random_word(3, 7),
            province=random_word(3, 6),
            postalCode=random_alphanumeric(6),
            country=random_word(3, 6),
        ),
    )


def _random_time_of_day() -> TimeOfDay:
    return TimeOfDay(hour=random_int(0, 23, inclusive=True), minute=random_int(0, 59, inclusive=True))


def generate_random_availability(worker_id: Any = None) -> Availability:
    """
    Build an availability owned by `worker_id`. Start and end times are
    independent; no ordering between them is enforced.
    """
    return Availability(
        worker=worker_id,
        name=random_word(3, 10),
        repeatDays=RepeatDays(**{day: _rng.random() > 0.5 for day in WEEKDAYS}),
        startTime=_random_time_of_day(),
        endTime=_random_time_of_day(),
    )


__all__ = [
    "generate_random_availability",
    "generate_random_worker",
    "random_alphanumeric",
    "random_int",
    "random_letter",
    "random_paragraph",
    "random_phone_number",
    "random_source",
    "random_word",
    "scramble_array",
    "seed_random_source",
]

"""
Bucket derivation rules.

The catalog files dated records under ``century-N`` folders. This is the one
place where the century math lives; the matcher's filters and the placement
validator both go through it.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from .models import Entity

DEFAULT_PREFIX = "century-"


def century_from_year(year: int) -> int:
    """
    Century a year belongs to (years are 1-indexed, there is no year 0).

    Examples:
        1 → 1, 100 → 1, 101 → 2, 1560 → 16, 2000 → 20, 2001 → 21
    """
    if year == 0:
        raise ValueError("There is no year 0")
    return (year - 1) // 100 + 1


def bucket_from_label(label: str, prefix: str = DEFAULT_PREFIX) -> Optional[int]:
    """
    Parse ``century-16`` into 16; None when the label is not a bucket.

    Centuries before the common era keep their sign (``century--1``), so
    every value ``century_from_year`` returns has a label that parses back.
    """
    match = re.fullmatch(rf"{re.escape(prefix)}(-?\d+)", label)
    if not match:
        return None
    return int(match.group(1))


def bucket_label(bucket: int, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}{bucket}"


def century_rule(date_field: str) -> Callable[[Entity], Optional[int]]:
    """
    Build an expected-bucket function for entities dated by ``date_field``.

    The returned function yields None when the entity has no value for the
    field, which the placement validator reports as a missing date.
    """

    def expected_bucket(entity: Entity) -> Optional[int]:
        year = entity.year(date_field)
        if year is None:
            return None
        return century_from_year(year)

    expected_bucket.__name__ = f"century_of_{date_field}"
    return expected_bucket

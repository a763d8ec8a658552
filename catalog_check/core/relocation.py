"""
Planning moves that fix misplaced entities.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Relocation, ValidationError, WrongBucket


def plan_relocations(errors: Iterable[ValidationError]) -> list[Relocation]:
    """One relocation per WrongBucket error, in report order."""
    return [
        Relocation(
            id=error.id,
            name=error.name,
            source=error.source,
            from_bucket=error.actual_bucket,
            to_bucket=error.expected_bucket,
        )
        for error in errors
        if isinstance(error, WrongBucket)
    ]

"""
Placement validation for bucketed collections.

Checks two invariants over a corpus split into ``century-N`` folders:
- every id appears only once across all buckets
- every dated entity sits in the bucket its date derives

Violations are collected and returned, never raised, so one run reports
every problem.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable, Optional

from .models import (
    DuplicateId,
    Entity,
    MissingDateValue,
    PlacedEntity,
    PlacementReport,
    WrongBucket,
)

logger = logging.getLogger(__name__)

ExpectedBucket = Callable[[Entity], Optional[int]]


class PlacementValidator:
    """
    Validates bucket placement and id uniqueness.

    Args:
        expected_bucket: Maps an entity to the bucket it belongs in, or None
            when the entity lacks the date needed to decide (see
            ``buckets.century_rule``).
        date_field: Name of the date field, used to report the offending value
    """

    def __init__(self, expected_bucket: ExpectedBucket, date_field: Optional[str] = None) -> None:
        self.expected_bucket = expected_bucket
        self.date_field = date_field

    def validate(self, corpus: Iterable[PlacedEntity]) -> PlacementReport:
        """
        Single pass over the corpus in input order.

        Input order should be stable (bucket order, then file order) so
        reports are reproducible.
        """
        report = PlacementReport()
        first_seen: dict[str, PlacedEntity] = {}
        checked = 0

        for placed in corpus:
            checked += 1
            entity = placed.entity

            original = first_seen.get(entity.id)
            if original is not None:
                report.errors.append(
                    DuplicateId(
                        id=entity.id,
                        name=entity.name,
                        locations=(original.location, placed.location),
                    )
                )
            else:
                first_seen[entity.id] = placed

            expected = self.expected_bucket(entity)
            if expected is None:
                report.warnings.append(
                    MissingDateValue(
                        id=entity.id,
                        name=entity.name,
                        bucket=placed.bucket,
                        source=placed.source,
                    )
                )
            elif expected != placed.bucket:
                report.errors.append(
                    WrongBucket(
                        id=entity.id,
                        name=entity.name,
                        date_value=self._date_value(entity),
                        expected_bucket=expected,
                        actual_bucket=placed.bucket,
                        source=placed.source,
                    )
                )

        logger.debug(
            "Checked %d entities: %d error(s), %d warning(s)",
            checked,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def _date_value(self, entity: Entity) -> Optional[int]:
        if self.date_field is None:
            return None
        return entity.year(self.date_field)


def validate_placement(
    corpus: Iterable[PlacedEntity],
    expected_bucket: ExpectedBucket,
    date_field: Optional[str] = None,
) -> PlacementReport:
    return PlacementValidator(expected_bucket, date_field).validate(corpus)

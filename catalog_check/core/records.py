"""
Checks for flat collections (basilicas.json, places.json).

These work on raw parsed records rather than entities because incomplete
records are exactly what they report on.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from .models import DuplicateId, Location, RecordProblem

MISSING_FIELDS = "missing_fields"
INVALID_TYPE = "invalid_type"
MISSING_REFERENCE = "missing_reference"
UNKNOWN_REFERENCE = "unknown_reference"

# A record and the place it was read from (file path, "basilicas.json[3]", ...).
SourcedRecord = tuple[Mapping[str, Any], Location]


def find_duplicate_ids(records: Iterable[SourcedRecord]) -> list[DuplicateId]:
    """
    Group records sharing an id.

    Every id seen more than once yields one DuplicateId listing all of its
    locations in first-seen order. Records without an id are skipped.
    """
    grouped: dict[str, list[SourcedRecord]] = {}
    for record, location in records:
        record_id = record.get("id")
        if not record_id:
            continue
        grouped.setdefault(str(record_id), []).append((record, location))

    duplicates = []
    for record_id, items in grouped.items():
        if len(items) < 2:
            continue
        first_record = items[0][0]
        duplicates.append(
            DuplicateId(
                id=record_id,
                name=str(first_record.get("name") or ""),
                locations=tuple(location for _, location in items),
            )
        )
    return duplicates


def check_required_fields(
    records: Iterable[SourcedRecord], fields: Sequence[str]
) -> list[RecordProblem]:
    problems = []
    for record, location in records:
        missing = [name for name in fields if not record.get(name)]
        if missing:
            problems.append(
                _problem(record, location, MISSING_FIELDS, f"Missing required fields: {', '.join(missing)}")
            )
    return problems


def check_allowed_values(
    records: Iterable[SourcedRecord], field_name: str, allowed: Sequence[str]
) -> list[RecordProblem]:
    """Report present values of ``field_name`` that are not in ``allowed``."""
    allowed_set = set(allowed)
    problems = []
    for record, location in records:
        value = record.get(field_name)
        if value and value not in allowed_set:
            problems.append(
                _problem(
                    record,
                    location,
                    INVALID_TYPE,
                    f'Invalid {field_name}: "{value}". Must be one of: {", ".join(allowed)}',
                )
            )
    return problems


def check_references(
    records: Iterable[SourcedRecord],
    field_name: str,
    known_ids: Iterable[str],
    target: str = "collection",
) -> list[RecordProblem]:
    """Report empty references and references to ids that do not exist."""
    known = set(known_ids)
    problems = []
    for record, location in records:
        value = record.get(field_name)
        if not value:
            problems.append(_problem(record, location, MISSING_REFERENCE, f"Missing {field_name}"))
        elif value not in known:
            problems.append(
                _problem(
                    record,
                    location,
                    UNKNOWN_REFERENCE,
                    f'Invalid {field_name}: "{value}" not found in {target}',
                )
            )
    return problems


def _problem(
    record: Mapping[str, Any], location: Location, kind: str, message: str
) -> RecordProblem:
    return RecordProblem(
        id=_optional_str(record.get("id")),
        name=_optional_str(record.get("name")),
        source=location.source,
        kind=kind,
        message=message,
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)

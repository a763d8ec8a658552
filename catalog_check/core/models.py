"""
Domain models for catalog validation.

These are pure data models with no dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol, Union

TIER_EXACT = "exact"
TIER_CONTAINS = "contains"
TIER_PARTIAL = "partial"


class InvalidEntity(ValueError):
    """Raised when a record cannot be turned into an entity."""


class Identified(Protocol):
    """Anything the matcher can score: it only needs an id and a name."""

    id: str
    name: str


@dataclass(frozen=True)
class Entity:
    """
    A catalog record (person, event, basilica, place).

    Example:
        Entity(id="council-trent", name="Council of Trent", kind="event",
               attributes={"startYear": 1545, "endYear": 1563, "type": "council"})
    """
    id: str
    """Identifier, expected to be unique within the catalog"""

    name: str
    """Display name"""

    kind: str = "entity"
    """Collection kind (person, event, basilica, place)"""

    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)
    """Every other field of the source record"""

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def year(self, key: str) -> Optional[int]:
        """Return the year stored under ``key``, or None when absent."""
        value = self.attributes.get(key)
        if value is None:
            return None
        return _check_year(self.id, key, value)

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        kind: str,
        year_fields: Iterable[str] = (),
    ) -> "Entity":
        if not isinstance(record, Mapping):
            raise InvalidEntity(f"Expected an object, got {type(record).__name__}")
        entity_id = record.get("id")
        name = record.get("name")
        if not isinstance(entity_id, str) or not entity_id.strip():
            raise InvalidEntity("Record has no usable 'id'")
        if not isinstance(name, str) or not name.strip():
            raise InvalidEntity(f"Record '{entity_id}' has no usable 'name'")
        attributes = {k: v for k, v in record.items() if k not in ("id", "name")}
        for key in year_fields:
            if attributes.get(key) is not None:
                _check_year(entity_id, key, attributes[key])
        return cls(id=entity_id, name=name, kind=kind, attributes=attributes)


def _check_year(entity_id: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidEntity(f"'{entity_id}': {key} must be an integer year, got {value!r}")
    if value == 0:
        raise InvalidEntity(f"'{entity_id}': {key} is 0 (there is no year 0)")
    return value


@dataclass(frozen=True)
class Location:
    """Where a record physically sits."""
    bucket: Optional[int]
    source: str


@dataclass(frozen=True)
class PlacedEntity:
    """An entity together with the bucket it was found in."""
    entity: Entity
    bucket: int
    source: str

    @property
    def id(self) -> str:
        return self.entity.id

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def location(self) -> Location:
        return Location(self.bucket, self.source)


@dataclass(frozen=True)
class MatchResult:
    """
    A candidate duplicate for a search query.

    Exactly one result is produced per matching entity.
    """
    entity: Identified
    """The matched entity"""

    score: int
    """100 for exact, 80 for contains, 50 + 10 per word match for partial"""

    tier: str
    """The rule that fired (exact, contains, partial)"""


@dataclass(frozen=True)
class DuplicateId:
    """The same id appears in more than one place."""
    id: str
    name: str
    locations: tuple[Location, ...]


@dataclass(frozen=True)
class WrongBucket:
    """A dated entity is filed under the wrong century."""
    id: str
    name: str
    date_value: Optional[int]
    expected_bucket: int
    actual_bucket: int
    source: str


@dataclass(frozen=True)
class MissingDateValue:
    """The field needed to place an entity is absent."""
    id: str
    name: str
    bucket: int
    source: str


ValidationError = Union[DuplicateId, WrongBucket]
ValidationWarning = MissingDateValue


@dataclass
class PlacementReport:
    """Errors and warnings from one placement validation run."""
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Warnings alone never fail a run."""
        return not self.errors

    @property
    def duplicates(self) -> list[DuplicateId]:
        return [e for e in self.errors if isinstance(e, DuplicateId)]

    @property
    def misplaced(self) -> list[WrongBucket]:
        return [e for e in self.errors if isinstance(e, WrongBucket)]


@dataclass(frozen=True)
class RecordProblem:
    """A problem found by the flat record checks."""
    id: Optional[str]
    name: Optional[str]
    source: str
    kind: str
    """missing_fields, invalid_type, missing_reference or unknown_reference"""

    message: str


@dataclass(frozen=True)
class Relocation:
    """A file move that would fix a WrongBucket error."""
    id: str
    name: str
    source: str
    from_bucket: int
    to_bucket: int

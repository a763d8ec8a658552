"""
Core validation engine for the catalog.

This package contains pure business logic with no I/O dependencies:
- Text normalization
- Duplicate candidate matching (exact, contains, partial)
- Century placement and id uniqueness validation
- Flat record checks and relocation planning

Corpora are loaded by the caller (see ``catalog_check.loader``).
"""

from __future__ import annotations

from .buckets import bucket_from_label, bucket_label, century_from_year, century_rule
from .matching import EntityMatcher, attribute_equals, find_matches, in_century, kind_is
from .models import (
    DuplicateId,
    Entity,
    InvalidEntity,
    Location,
    MatchResult,
    MissingDateValue,
    PlacedEntity,
    PlacementReport,
    RecordProblem,
    Relocation,
    WrongBucket,
)
from .normalize import id_words, normalize, text_words
from .placement import PlacementValidator, validate_placement
from .relocation import plan_relocations

__all__ = [
    "DuplicateId",
    "Entity",
    "EntityMatcher",
    "InvalidEntity",
    "Location",
    "MatchResult",
    "MissingDateValue",
    "PlacedEntity",
    "PlacementReport",
    "PlacementValidator",
    "RecordProblem",
    "Relocation",
    "WrongBucket",
    "attribute_equals",
    "bucket_from_label",
    "bucket_label",
    "century_from_year",
    "century_rule",
    "find_matches",
    "id_words",
    "in_century",
    "kind_is",
    "normalize",
    "plan_relocations",
    "text_words",
    "validate_placement",
]

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..config import Settings
from ..core.buckets import bucket_label
from ..core.matching import EntityMatcher, attribute_equals
from ..core.models import MatchResult, PlacedEntity
from ..loader import COLLECTION_KINDS, load_bucketed, load_flat
from .output import CommandReport, display_path, found, indent, ok

logger = logging.getLogger(__name__)

SEARCHABLE = ("people", "councils", "events", "basilicas")


def run(settings: Settings, collection: str, terms: Sequence[str]) -> CommandReport:
    """
    Look up each term in a collection before adding it.

    The report fails when any term has a potential match, so a new record
    is only added after the matches have been reviewed.
    """
    if collection not in SEARCHABLE:
        raise ValueError(f"Cannot search {collection!r}; expected one of {', '.join(SEARCHABLE)}")
    corpus, entity_filter = _load_corpus(settings, collection)
    matcher = EntityMatcher(corpus, entity_filter)
    logger.info("Searching %d %s record(s)", len(matcher.corpus), collection)

    report = CommandReport()
    for term in terms:
        matches = matcher.find_matches(term)
        if not matches:
            report.add(ok(f'"{term}"', "no matches - safe to add"))
            continue
        report.fail(found(f'"{term}"', f"{len(matches)} potential match(es)"))
        for index, match in enumerate(matches, start=1):
            report.lines.extend(_describe(settings, collection, index, match))

    if report.ok:
        report.add(f"All {collection} checked - none found. Safe to proceed with adding.")
    else:
        report.add(f"Some {collection} may already exist. Please review before adding.")
    return report


def _load_corpus(
    settings: Settings, collection: str
) -> tuple[list[Any], Optional[Callable[[Any], bool]]]:
    if collection == "basilicas":
        flat = load_flat(settings.data.basilicas_path)
        return flat.entities(COLLECTION_KINDS["basilicas"]), None

    source = "events" if collection == "councils" else collection
    corpus = load_bucketed(
        settings.data.collection_dir(source),
        COLLECTION_KINDS[source],
        prefix=settings.placement.bucket_prefix,
    )
    if collection != "councils":
        return corpus.entities, None
    is_council = attribute_equals("type", "council")
    return corpus.entities, lambda placed: is_council(placed.entity)


def _describe(settings: Settings, collection: str, index: int, match: MatchResult) -> list[str]:
    item = match.entity
    entity = item.entity if isinstance(item, PlacedEntity) else item
    lines = [
        indent(f"{index}. {entity.name} (id: {entity.id})"),
        indent(f"Score: {match.score}% ({match.tier} match)", 2),
    ]
    if collection == "people":
        lines.append(indent(f"Death year: {entity.get('deathYear') or 'unknown'}", 2))
    elif collection in ("councils", "events"):
        lines.append(indent(f"Years: {_years(entity.get('startYear'), entity.get('endYear'))}", 2))
    else:
        lines.append(indent(f"Place: {entity.get('placeId') or 'N/A'}", 2))
    if isinstance(item, PlacedEntity):
        lines.append(indent(f"Location: {bucket_label(item.bucket, settings.placement.bucket_prefix)}", 2))
        lines.append(indent(f"File: {display_path(item.source, settings.data.root)}", 2))
    return lines


def _years(start: Any, end: Any) -> str:
    if end and end != start:
        return f"{start}-{end}"
    return str(start)

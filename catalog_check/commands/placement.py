from __future__ import annotations

import logging

from ..config import Settings
from ..core.buckets import bucket_label, century_rule
from ..core.models import PlacementReport
from ..core.placement import validate_placement
from ..loader import COLLECTION_KINDS, BucketedCorpus, load_bucketed
from .output import CommandReport, display_path, error, indent, ok, warning

logger = logging.getLogger(__name__)

BUCKETED = ("people", "events")


def check(settings: Settings, collection: str) -> tuple[BucketedCorpus, PlacementReport]:
    date_field = settings.placement.date_field(collection)
    corpus = load_bucketed(
        settings.data.collection_dir(collection),
        COLLECTION_KINDS[collection],
        year_fields=(date_field,),
        prefix=settings.placement.bucket_prefix,
    )
    result = validate_placement(corpus.entities, century_rule(date_field), date_field)
    return corpus, result


def run(settings: Settings, collection: str = "people") -> CommandReport:
    """Check century placement and duplicate ids of a bucketed collection."""
    corpus, result = check(settings, collection)
    date_field = settings.placement.date_field(collection)
    prefix = settings.placement.bucket_prefix
    root = settings.data.root
    report = CommandReport(ok=result.ok)

    if result.ok and not result.warnings:
        report.add(ok("Placement", f"{len(corpus)} {collection} in correct century folders"))

    if result.duplicates:
        report.add(error("Duplicate ids", str(len(result.duplicates))))
        for dup in result.duplicates:
            report.add(indent(f"- {dup.name} (id: {dup.id})"))
            for location in dup.locations:
                report.add(
                    indent(f"Found in {bucket_label(location.bucket, prefix)}: {display_path(location.source, root)}", 2)
                )

    if result.misplaced:
        report.add(error("Wrong century placement", str(len(result.misplaced))))
        for wrong in result.misplaced:
            report.add(indent(f"- {wrong.name} (id: {wrong.id})"))
            report.add(indent(f"{date_field}: {wrong.date_value}", 2))
            report.add(indent(f"Expected: {bucket_label(wrong.expected_bucket, prefix)}", 2))
            report.add(indent(f"Actual: {bucket_label(wrong.actual_bucket, prefix)}", 2))
            report.add(indent(f"File: {display_path(wrong.source, root)}", 2))

    if result.warnings:
        report.add(warning(f"Missing {date_field}", str(len(result.warnings))))
        for missing in result.warnings:
            report.add(indent(f"- {missing.name} (id: {missing.id})"))
            report.add(indent(f"Folder: {bucket_label(missing.bucket, prefix)}", 2))
            report.add(indent(f"File: {display_path(missing.source, root)}", 2))

    if corpus.problems:
        report.add(warning("Unreadable files", str(len(corpus.problems))))
        for problem in corpus.problems:
            report.add(indent(f"- {display_path(problem.source, root)}: {problem.message}"))

    logger.info(
        "Placement check of %s: %d error(s), %d warning(s)",
        collection,
        len(result.errors),
        len(result.warnings),
    )
    return report

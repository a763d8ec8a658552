from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings
from ..core.buckets import bucket_label
from ..core.models import Relocation
from ..core.relocation import plan_relocations
from . import placement
from .output import CommandReport, display_path, error, indent, ok, warning

logger = logging.getLogger(__name__)


def run(settings: Settings, collection: str = "people", *, dry_run: bool = False) -> CommandReport:
    """Move misplaced record files into the century folder their date derives."""
    corpus, result = placement.check(settings, collection)
    moves = plan_relocations(result.errors)
    prefix = settings.placement.bucket_prefix
    root = settings.data.root
    report = CommandReport()

    if not moves:
        report.add(ok("Placement", f"all {len(corpus)} {collection} already in the right folder"))
        return report

    moved = 0
    for move in moves:
        target = target_path(corpus.root, move, prefix)
        label = f"{move.name} (id: {move.id})"
        route = f"{bucket_label(move.from_bucket, prefix)} -> {bucket_label(move.to_bucket, prefix)}"
        if dry_run:
            report.add(indent(f"[dry-run] Would move {label}: {route}"))
            continue
        if target.exists():
            report.fail(error(label, f"target exists: {display_path(str(target), root)}"))
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        Path(move.source).rename(target)
        logger.info("Moved %s to %s", move.source, target)
        report.add(indent(f"Moved {label}: {route}"))
        moved += 1

    suffix = " (dry-run)" if dry_run else ""
    report.add(f"Relocation complete{suffix}: {moved} of {len(moves)} file(s) moved.")
    if result.duplicates:
        report.add(warning("Duplicate ids", "not fixed automatically; run `catalog-check placement`"))
    if moved:
        report.add("Regenerate the century index files before committing.")
    return report


def target_path(collection_root: Path, move: Relocation, prefix: str) -> Path:
    return collection_root / bucket_label(move.to_bucket, prefix) / Path(move.source).name

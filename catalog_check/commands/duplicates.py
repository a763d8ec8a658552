from __future__ import annotations

from ..config import Settings
from ..core.records import find_duplicate_ids
from ..loader import RecordTree, load_record_tree
from .output import CommandReport, display_path, error, indent, ok

COLLECTIONS = ("people", "events")


def run(settings: Settings) -> CommandReport:
    """Report duplicate ids within the people and events collections."""
    report = CommandReport()
    summary: list[str] = []
    for collection in COLLECTIONS:
        tree = load_record_tree(
            settings.data.collection_dir(collection),
            prefix=settings.placement.bucket_prefix,
        )
        duplicates = _report_collection(settings, collection, tree, report)
        summary.append(f"{collection.capitalize()} checked: {tree.checked}")
        summary.append(f"Duplicate {collection} ids: {duplicates}")

    report.add()
    report.lines.extend(summary)
    if report.ok:
        report.add(ok("Duplicates", "no duplicates found"))
    return report


def _report_collection(
    settings: Settings, collection: str, tree: RecordTree, report: CommandReport
) -> int:
    root = settings.data.root
    if tree.problems:
        report.fail(error(f"Parse errors in {collection} files", str(len(tree.problems))))
        for problem in tree.problems:
            report.add(indent(f"- {display_path(problem.source, root)}"))
            report.add(indent(f"Error: {problem.message}", 2))

    duplicates = find_duplicate_ids(tree.records)
    if duplicates:
        report.fail(error(f"Duplicate {collection} ids", str(len(duplicates))))
        for dup in duplicates:
            report.add(indent(f"- ID: {dup.id} (found {len(dup.locations)} times)"))
            for location in dup.locations:
                report.add(indent(f"File: {display_path(location.source, root)}", 2))
    return len(duplicates)

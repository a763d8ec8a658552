from __future__ import annotations

from ..config import Settings
from ..core.models import RecordProblem
from ..core.records import (
    check_allowed_values,
    check_references,
    check_required_fields,
    find_duplicate_ids,
)
from ..loader import load_flat
from .output import CommandReport, error, indent, ok


def run(settings: Settings) -> CommandReport:
    """Validate basilicas.json: ids, required fields, types and place references."""
    basilicas = load_flat(settings.data.basilicas_path)
    places = load_flat(settings.data.places_path)
    place_ids = [record.get("id") for record, _ in places.records if record.get("id")]

    records = basilicas.records
    duplicates = find_duplicate_ids(records)
    missing_fields = check_required_fields(records, settings.basilicas.required_fields)
    invalid_types = check_allowed_values(records, "type", settings.basilicas.allowed_types)
    bad_places = check_references(records, "placeId", place_ids, target=settings.data.places_file)

    report = CommandReport()
    report.add(f"Basilicas: {len(records)}, places: {len(places.records)}")

    if basilicas.problems:
        report.fail(error("Unreadable basilica records", str(len(basilicas.problems))))
        for problem in basilicas.problems:
            report.add(indent(f"- {problem.source}: {problem.message}"))

    if duplicates:
        report.fail(error("Duplicate basilica ids", str(len(duplicates))))
        for dup in duplicates:
            report.add(indent(f"- ID: {dup.id} (found {len(dup.locations)} times)"))
            for location in dup.locations:
                report.add(indent(f"{dup.name} at {location.source}", 2))

    _add_problems(report, "Missing required fields", missing_fields)
    _add_problems(report, "Invalid basilica types", invalid_types)
    _add_problems(report, "Invalid or missing place ids", bad_places)

    report.add()
    report.add(f"Duplicate ids: {len(duplicates)}")
    report.add(f"Missing required fields: {len(missing_fields)}")
    report.add(f"Invalid types: {len(invalid_types)}")
    report.add(f"Invalid/missing placeIds: {len(bad_places)}")
    if report.ok:
        report.add(ok("Basilicas", "all basilicas are valid"))
    return report


def _add_problems(report: CommandReport, label: str, problems: list[RecordProblem]) -> None:
    if not problems:
        return
    report.fail(error(label, str(len(problems))))
    for problem in problems:
        report.add(indent(f"- {problem.source}: {problem.name or 'Unknown'} (id: {problem.id or 'N/A'})"))
        report.add(indent(f"Error: {problem.message}", 2))

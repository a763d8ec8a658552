"""
Reading catalog collections from disk.

Bucketed collections live in ``<collection>/century-N/<id>.json`` (one object
per file); flat collections are a single JSON array. Unreadable files and
records are collected as problems instead of aborting the load.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from .core.buckets import DEFAULT_PREFIX, bucket_from_label
from .core.models import Entity, InvalidEntity, Location, PlacedEntity

logger = logging.getLogger(__name__)

COLLECTION_KINDS = {
    "people": "person",
    "events": "event",
    "basilicas": "basilica",
    "places": "place",
}


@dataclass(frozen=True)
class LoadProblem:
    source: str
    message: str


@dataclass
class BucketedCorpus:
    """Entities of one bucketed collection, in bucket then file order."""
    root: Path
    entities: list[PlacedEntity] = field(default_factory=list)
    problems: list[LoadProblem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entities)


@dataclass
class FlatCollection:
    """Raw records of a flat collection, each with its location."""
    path: Path
    records: list[tuple[dict[str, Any], Location]] = field(default_factory=list)
    problems: list[LoadProblem] = field(default_factory=list)

    def entities(self, kind: str) -> list[Entity]:
        """Records that form valid entities; the rest are skipped."""
        result = []
        for record, location in self.records:
            try:
                result.append(Entity.from_record(record, kind))
            except InvalidEntity as exc:
                logger.debug("Skipping %s: %s", location.source, exc)
        return result


@dataclass
class RecordTree:
    """Raw records found anywhere below a collection directory."""
    root: Path
    records: list[tuple[dict[str, Any], Location]] = field(default_factory=list)
    problems: list[LoadProblem] = field(default_factory=list)

    @property
    def checked(self) -> int:
        return len(self.records) + len(self.problems)


def iter_bucket_dirs(root: Path, prefix: str = DEFAULT_PREFIX) -> Iterator[tuple[int, Path]]:
    """Yield ``(bucket, directory)`` pairs sorted by bucket number."""
    buckets = []
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        bucket = bucket_from_label(entry.name, prefix)
        if bucket is None:
            logger.debug("Ignoring non-bucket directory %s", entry)
            continue
        buckets.append((bucket, entry))
    yield from sorted(buckets)


def iter_record_files(directory: Path) -> Iterator[Path]:
    # index.ts sits next to the records; only *.json is read
    yield from sorted(directory.glob("*.json"))


def load_bucketed(
    root: Path,
    kind: str,
    year_fields: Iterable[str] = (),
    prefix: str = DEFAULT_PREFIX,
) -> BucketedCorpus:
    """
    Load every record file under the ``century-N`` folders of ``root``.

    Args:
        root: Collection directory (e.g. ``src/data/people``)
        kind: Entity kind to assign (person, event)
        year_fields: Date fields validated while loading
        prefix: Bucket folder prefix

    Raises:
        FileNotFoundError: If ``root`` does not exist
    """
    if not root.is_dir():
        raise FileNotFoundError(f"{root} not found")
    year_fields = tuple(year_fields)
    corpus = BucketedCorpus(root=root)
    for bucket, directory in iter_bucket_dirs(root, prefix):
        for path in iter_record_files(directory):
            source = str(path)
            try:
                record = _read_json(path)
                entity = Entity.from_record(record, kind, year_fields)
            except (OSError, ValueError) as exc:
                logger.warning("Error reading %s: %s", path, exc)
                corpus.problems.append(LoadProblem(source, str(exc)))
                continue
            corpus.entities.append(PlacedEntity(entity=entity, bucket=bucket, source=source))
    logger.debug("Loaded %d %s record(s) from %s", len(corpus.entities), kind, root)
    return corpus


def load_record_tree(root: Path, prefix: str = DEFAULT_PREFIX) -> RecordTree:
    """
    Read every record file below ``root``, at any depth.

    Only unparseable JSON is a problem here; records are kept as parsed so
    incomplete ones still take part in id checks. Files with "index" in
    their name are generated listings and are skipped.

    Raises:
        FileNotFoundError: If ``root`` does not exist
    """
    if not root.is_dir():
        raise FileNotFoundError(f"{root} not found")
    tree = RecordTree(root=root)
    for path in sorted(root.rglob("*.json")):
        if "index" in path.name or not path.is_file():
            continue
        source = str(path)
        try:
            record = _read_json(path)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to parse %s: %s", path, exc)
            tree.problems.append(LoadProblem(source, f"Failed to parse JSON: {exc}"))
            continue
        if not isinstance(record, dict):
            logger.debug("Ignoring %s: not a JSON object", path)
            record = {}
        tree.records.append((record, Location(bucket_from_label(path.parent.name, prefix), source)))
    return tree


def load_flat(path: Path) -> FlatCollection:
    """
    Load a JSON array of records.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file is not valid JSON or not an array
    """
    if not path.is_file():
        raise FileNotFoundError(f"{path} not found")
    data = _read_json(path)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    collection = FlatCollection(path=path)
    for index, record in enumerate(data):
        source = f"{path.name}[{index}]"
        if not isinstance(record, dict):
            collection.problems.append(LoadProblem(source, "Record is not an object"))
            continue
        collection.records.append((record, Location(None, source)))
    return collection


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)

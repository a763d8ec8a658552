from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ("catalog-check.yaml", "catalog-check.yml")


class DataSettings(BaseModel):
    root: Path = Path("src/data")
    people_dir: str = "people"
    events_dir: str = "events"
    basilicas_file: str = "basilicas.json"
    places_file: str = "places.json"

    @field_validator("root", mode="before")
    @classmethod
    def _expand_root(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()

    def collection_dir(self, collection: str) -> Path:
        if collection == "people":
            return self.root / self.people_dir
        if collection == "events":
            return self.root / self.events_dir
        raise ValueError(f"Unknown bucketed collection: {collection}")

    @property
    def basilicas_path(self) -> Path:
        return self.root / self.basilicas_file

    @property
    def places_path(self) -> Path:
        return self.root / self.places_file


class PlacementSettings(BaseModel):
    bucket_prefix: str = "century-"
    date_fields: Dict[str, str] = Field(
        default_factory=lambda: {"people": "deathYear", "events": "startYear"}
    )

    def date_field(self, collection: str) -> str:
        try:
            return self.date_fields[collection]
        except KeyError:
            raise ValueError(f"No date field configured for {collection}") from None


class BasilicaSettings(BaseModel):
    required_fields: List[str] = Field(default_factory=lambda: ["id", "name", "placeId", "type"])
    allowed_types: List[str] = Field(
        default_factory=lambda: [
            "major-basilica",
            "papal-basilica",
            "patriarchal-basilica",
            "historic-basilica",
        ]
    )


class Settings(BaseModel):
    data: DataSettings = DataSettings()
    placement: PlacementSettings = PlacementSettings()
    basilicas: BasilicaSettings = BasilicaSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})

    @classmethod
    def from_config(cls, explicit_path: Optional[Path]) -> "Settings":
        path = find_config(explicit_path)
        if path is None:
            return cls()
        return cls.load(path)


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for name in CONFIG_NAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None

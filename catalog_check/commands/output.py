from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


@dataclass(slots=True)
class CommandReport:
    ok: bool = True
    lines: list[str] = field(default_factory=list)

    def add(self, line: str = "") -> None:
        self.lines.append(line)

    def fail(self, line: str) -> None:
        self.ok = False
        self.lines.append(line)


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def warning(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "WARNING", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ERROR", detail).render()


def found(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "FOUND", detail).render()


def indent(text: str, level: int = 1) -> str:
    return "  " * level + text


def display_path(source: str, root: Path) -> str:
    """Show ``source`` relative to ``root`` when it lives below it."""
    try:
        return str(Path(source).relative_to(root))
    except ValueError:
        return source

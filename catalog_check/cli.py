from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .commands import basilicas as cmd_basilicas
from .commands import duplicates as cmd_duplicates
from .commands import exists as cmd_exists
from .commands import placement as cmd_placement
from .commands import relocate as cmd_relocate
from .commands.output import CommandReport
from .config import Settings

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
            message = message.replace(root, "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Catalog data checks")
    parser.add_argument("--config", type=Path, help="Path to catalog-check.yaml")
    parser.add_argument("--data-root", type=Path, help="Override data.root from the config")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    exists_parser = subparsers.add_parser(
        "exists", help="Check whether records already exist before adding them"
    )
    exists_parser.add_argument("collection", choices=cmd_exists.SEARCHABLE)
    exists_parser.add_argument("terms", nargs="+", help="Names or ids to look up")

    placement_parser = subparsers.add_parser(
        "placement", help="Check century placement and duplicate ids"
    )
    placement_parser.add_argument(
        "--collection", choices=cmd_placement.BUCKETED, default="people"
    )

    subparsers.add_parser(
        "duplicates", help="Report duplicate ids in the people and events collections"
    )
    subparsers.add_parser(
        "basilicas", help="Validate basilicas.json against places.json"
    )

    fix_parser = subparsers.add_parser(
        "fix-placement", help="Move misplaced records into their correct century folder"
    )
    fix_parser.add_argument(
        "--collection", choices=cmd_placement.BUCKETED, default="people"
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report the moves that would be made",
    )
    return parser


def load_settings(config: Optional[Path], data_root: Optional[Path]) -> Settings:
    settings = Settings.from_config(config)
    if data_root is not None:
        data = settings.data.model_copy(update={"root": data_root.expanduser().resolve()})
        settings = settings.model_copy(update={"data": data})
    return settings


def configure_logging(level_name: str, roots: list[Path]) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def run_command(args: argparse.Namespace, settings: Settings) -> CommandReport:
    match args.command:
        case "exists":
            return cmd_exists.run(settings, args.collection, args.terms)
        case "placement":
            return cmd_placement.run(settings, args.collection)
        case "duplicates":
            return cmd_duplicates.run(settings)
        case "basilicas":
            return cmd_basilicas.run(settings)
        case "fix-placement":
            return cmd_relocate.run(settings, args.collection, dry_run=args.dry_run)
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args.config, args.data_root)
    warn_buffer = configure_logging(args.log_level, [settings.data.root])

    try:
        report = run_command(args, settings)
        for line in report.lines:
            print(line)
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(f"Error: {exc}") from exc
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")

    if not report.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()

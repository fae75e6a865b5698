"""Command-line interface.

Usage:
    sdrecorder SOURCE TARGET [--config PATH] [--prefix PREFIX] [--no-clear]
               [--format-command CMD] [-q | -v | -d] [--no-color]
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sdrecorder import __version__
from sdrecorder.core.config import ConfigResolver
from sdrecorder.core.copier import target_name
from sdrecorder.core.errors import ConfigError, RecorderError
from sdrecorder.core.logging import apply_logging_level, get_logger, set_colors
from sdrecorder.core.recorder import Recorder, RecordResult

log = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


@dataclass(frozen=True)
class CLIArgs:
    source: Path
    target: Path
    config: Path | None
    prefix: str | None
    no_clear: bool
    format_command: str | None
    level: str | None
    no_color: bool
    summary: bool


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sdrecorder",
        description=(
            "Copy WAV/MP3 files to an SD card as 0001.EXT, 0002.EXT, ... in sorted-name "
            "order and write a 9999.H header with #define names for every track."
        ),
    )
    p.add_argument("source", type=Path, help="Folder holding the sound files")
    p.add_argument("target", type=Path, help="SD card root or output folder (cleared first)")

    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--prefix", default=None, help="Identifier prefix (default: SND_)")
    p.add_argument("--no-clear", action="store_true", help="Do not clear the target first")
    p.add_argument(
        "--format-command",
        default=None,
        help="Command used to format a drive root; {target} and {drive} are substituted",
    )
    p.add_argument("--no-summary", dest="summary", action="store_false")
    p.add_argument("--no-color", action="store_true")

    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", dest="level", action="store_const", const="quiet")
    verbosity.add_argument("-v", "--verbose", dest="level", action="store_const", const="verbose")
    verbosity.add_argument("-d", "--debug", dest="level", action="store_const", const="debug")

    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def parse_cli_args(argv: list[str]) -> CLIArgs:
    """Parse argv for unit tests and the command implementation."""
    ns = _build_parser().parse_args(argv)
    return CLIArgs(
        source=ns.source,
        target=ns.target,
        config=ns.config,
        prefix=ns.prefix,
        no_clear=bool(ns.no_clear),
        format_command=ns.format_command,
        level=ns.level,
        no_color=bool(ns.no_color),
        summary=bool(ns.summary),
    )


def config_overrides(args: CLIArgs) -> dict[str, Any]:
    """Translate parsed flags into nested ConfigResolver CLI args."""
    cli_args: dict[str, Any] = {}
    if args.prefix is not None:
        cli_args.setdefault("identifier", {})["prefix"] = args.prefix
    if args.no_clear:
        cli_args.setdefault("target", {})["clear"] = False
    if args.format_command is not None:
        cli_args.setdefault("target", {})["format_command"] = args.format_command
    if args.level is not None:
        cli_args.setdefault("logging", {})["level"] = args.level
    if args.no_color:
        cli_args.setdefault("logging", {})["color"] = False
    return cli_args


def print_summary(console: Console, result: RecordResult, *, width: int = 4) -> None:
    table = Table(title=escape(f"{result.track_count} tracks -> {result.target}"))
    table.add_column("File", style="cyan")
    table.add_column("Identifier", style="green")
    table.add_column("Source")

    for row in result.table:
        table.add_row(
            target_name(Path(row.original_file_name), row.index, width=width),
            row.identifier,
            escape(f"{row.original_folder}/{row.original_file_name}"),
        )

    console.print(table)
    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} file(s)[/yellow]")


def run(argv: list[str]) -> int:
    """Run the recorder and return a process exit code."""
    args = parse_cli_args(argv)

    try:
        if args.config is not None and not args.config.is_file():
            raise ConfigError(f"Config file not found: {args.config}")
        resolver = ConfigResolver(cli_args=config_overrides(args), user_config_path=args.config)
        settings = resolver.build_settings()
    except RecorderError as e:
        log.error(str(e))
        return EXIT_FAILED

    apply_logging_level(settings.logging_level)
    set_colors(settings.color)
    console = Console(no_color=not settings.color, highlight=False)

    console.print(f"Source: {args.source}", markup=False)
    console.print(f"Target: {args.target.absolute()}", markup=False)

    try:
        result = Recorder(settings).run(args.source, args.target)
    except RecorderError as e:
        log.error(str(e))
        return EXIT_FAILED
    except KeyboardInterrupt:
        log.error("Interrupted")
        return EXIT_INTERRUPTED

    if args.summary and settings.logging_level != "quiet":
        print_summary(console, result, width=settings.index_width)
    console.print("DONE")
    return EXIT_OK

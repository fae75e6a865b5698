"""Console logging for the recorder.

Four verbosity levels:
- QUIET (0): Warnings + errors
- NORMAL (1): Info + warnings + errors
- VERBOSE (2): Detailed info
- DEBUG (3): Everything including internal state

Usage:
    from sdrecorder.core.logging import get_logger, set_verbosity

    logger = get_logger(__name__)
    set_verbosity(2)  # VERBOSE

    logger.verbose("Copying 01 - Intro.mp3")
    logger.warning("Skipping invalid file: notes.txt")
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from enum import IntEnum

from sdrecorder.core.errors import ConfigError


class VerbosityLevel(IntEnum):
    """Verbosity levels for the recorder."""

    QUIET = 0  # Warnings + errors
    NORMAL = 1  # Info + warnings + errors
    VERBOSE = 2  # Detailed info
    DEBUG = 3  # Everything


LEVEL_NAMES: dict[str, VerbosityLevel] = {
    "quiet": VerbosityLevel.QUIET,
    "normal": VerbosityLevel.NORMAL,
    "verbose": VerbosityLevel.VERBOSE,
    "debug": VerbosityLevel.DEBUG,
}

_VERBOSITY: VerbosityLevel = VerbosityLevel.NORMAL
_USE_COLORS: bool = True

# Sinks receive the plain (uncolored) line of every emitted record.
_SINKS: list[Callable[[str, str], None]] = []


def set_verbosity(level: int | VerbosityLevel) -> None:
    """Set global verbosity level.

    Args:
        level: Verbosity level (0-3 or VerbosityLevel enum)
    """
    global _VERBOSITY

    if isinstance(level, int):
        level = VerbosityLevel(level)

    _VERBOSITY = level


def get_verbosity() -> VerbosityLevel:
    """Get current verbosity level."""
    return _VERBOSITY


def apply_logging_level(level_name: str) -> None:
    """Set verbosity from a resolved ``logging.level`` name."""
    try:
        set_verbosity(LEVEL_NAMES[level_name])
    except KeyError as e:
        allowed = ", ".join(LEVEL_NAMES)
        raise ConfigError(f"Invalid logging level {level_name!r}. Allowed values: {allowed}") from e


def set_colors(enabled: bool) -> None:
    """Enable or disable colored output."""
    global _USE_COLORS
    _USE_COLORS = enabled


def add_log_sink(sink: Callable[[str, str], None]) -> None:
    """Register a callback receiving ``(level_name, plain_line)`` for each record."""
    _SINKS.append(sink)


def remove_log_sink(sink: Callable[[str, str], None]) -> None:
    with contextlib.suppress(ValueError):
        _SINKS.remove(sink)


def _publish(level_name: str, plain: str) -> None:
    for sink in list(_SINKS):
        try:
            sink(level_name, plain)
        except Exception:
            # Never route through the logger here (recursion).
            msg = "Log sink raised; suppressed.\n" + traceback.format_exc()
            with contextlib.suppress(Exception):
                sys.stderr.write(msg)


class RecorderLogger:
    """Logger with verbosity support."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "VERBOSE": "\033[34m",  # Blue
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "RESET": "\033[0m",
    }

    def __init__(self, name: str):
        self.name = name

    def _format_message(self, level: str, message: str) -> str:
        stream = sys.stderr if level == "ERROR" else sys.stdout
        if _USE_COLORS and stream.isatty():
            color = self.COLORS.get(level, "")
            reset = self.COLORS["RESET"]
            return f"{color}[{level.lower()}]{reset} {message}"
        return f"[{level.lower()}] {message}"

    def _log(self, level: VerbosityLevel, level_name: str, message: str) -> None:
        if level > _VERBOSITY:
            return

        _publish(level_name, f"[{level_name.lower()}] {message}")

        formatted = self._format_message(level_name, message)
        print(formatted, file=sys.stderr if level_name == "ERROR" else sys.stdout)

    def debug(self, message: str) -> None:
        """Log debug message (verbosity >= DEBUG)."""
        self._log(VerbosityLevel.DEBUG, "DEBUG", message)

    def verbose(self, message: str) -> None:
        """Log verbose message (verbosity >= VERBOSE)."""
        self._log(VerbosityLevel.VERBOSE, "VERBOSE", message)

    def info(self, message: str) -> None:
        """Log info message (verbosity >= NORMAL)."""
        self._log(VerbosityLevel.NORMAL, "INFO", message)

    def warning(self, message: str) -> None:
        """Log warning message (verbosity >= QUIET)."""
        self._log(VerbosityLevel.QUIET, "WARNING", message)

    def error(self, message: str) -> None:
        """Log error message (always shown)."""
        self._log(VerbosityLevel.QUIET, "ERROR", message)


_LOGGERS: dict[str, RecorderLogger] = {}


def get_logger(name: str = __name__) -> RecorderLogger:
    """Get logger instance for module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name not in _LOGGERS:
        _LOGGERS[name] = RecorderLogger(name)

    return _LOGGERS[name]

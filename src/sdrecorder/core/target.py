"""Target preparation: the card must be empty before track 0001 is written.

A plain directory has its contents deleted. A drive or mount root is
formatted with the configured ``target.format_command`` when one is set,
otherwise cleared like a directory. Protected drives are never touched.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from pathlib import Path

from sdrecorder.core.config import RecorderSettings
from sdrecorder.core.errors import ConfigError, TargetError
from sdrecorder.core.logging import get_logger

_logger = get_logger(__name__)


def _resolve(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError as e:
        raise TargetError(f"Failed to resolve target '{path}': {e}") from e


def is_drive_root(path: Path) -> bool:
    """True for ``E:\\``, ``/`` and mount points such as ``/media/sdcard``."""
    resolved = _resolve(path)
    return resolved == Path(resolved.anchor) or os.path.ismount(resolved)


def drive_label(path: Path) -> str:
    """Drive letter (``E``) on Windows, the resolved path elsewhere."""
    resolved = _resolve(path)
    if resolved.drive:
        return resolved.drive.rstrip(":").upper()
    return str(resolved)


def is_protected(path: Path, protected: tuple[str, ...]) -> bool:
    label = drive_label(path)
    resolved = str(_resolve(path))
    for entry in protected:
        if entry.rstrip(":").upper() == label.upper() or entry == resolved:
            return True
    return False


def clear_directory(target: Path) -> int:
    """Delete every child of ``target`` recursively. Returns removed entry count."""
    try:
        children = sorted(target.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise TargetError(f"Failed to list target '{target}': {e}") from e

    removed = 0
    for child in children:
        try:
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        except OSError as e:
            raise TargetError(f"Failed to delete '{child}': {e}") from e
        removed += 1
    return removed


def format_drive(target: Path, command: str) -> None:
    """Run the configured format command for a drive root, logging its output."""
    try:
        cmd_line = command.format(target=str(target), drive=drive_label(target))
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(
            f"Invalid target.format_command: {command!r}",
            "Only the {target} and {drive} placeholders are supported",
        ) from e

    cmd = shlex.split(cmd_line)
    _logger.info(f"Formatting {target}: {cmd_line}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise TargetError(f"Failed to run format command {cmd[0]!r}: {e}") from e

    for line in (result.stdout + result.stderr).splitlines():
        if line.strip():
            _logger.info(line)

    if result.returncode != 0:
        raise TargetError(
            f"Format command failed with exit code {result.returncode}",
            "Format the card manually and re-run with --no-clear",
        )


def prepare_target(target: Path, settings: RecorderSettings | None = None) -> None:
    """Make sure ``target`` exists and is empty.

    Raises:
        TargetError: If the target is a file, is protected, or cannot be cleared
    """
    settings = settings or RecorderSettings()

    if target.is_file():
        raise TargetError(f"Target should be a directory: {target}")

    if not settings.clear_target:
        _logger.warning(f"Not clearing {target}; existing files may shadow new tracks")
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TargetError(f"Failed to create target '{target}': {e}") from e
        return

    if not target.exists():
        try:
            target.mkdir(parents=True)
        except OSError as e:
            raise TargetError(f"Failed to create target '{target}': {e}") from e
        return

    if is_drive_root(target):
        if is_protected(target, settings.protected_targets):
            raise TargetError(
                f"You probably don't want to format {drive_label(target)}",
                "Point TARGET at the SD card, or change target.protected",
            )
        if settings.format_command:
            format_drive(target, settings.format_command)
            return

    removed = clear_directory(target)
    _logger.verbose(f"cleared {target} removed={removed}")

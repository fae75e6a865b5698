"""Copy sound files to their numbered slot on the target."""

from __future__ import annotations

import errno
from pathlib import Path

from sdrecorder.core.errors import CopyError, DiskFullError, IndexOverflowError
from sdrecorder.core.logging import get_logger
from sdrecorder.core.naming import extension_of

_logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_INDEX_WIDTH = 4


def target_name(file: Path, index: int, *, width: int = DEFAULT_INDEX_WIDTH) -> str:
    """Return the slot file name, e.g. ``0007.MP3`` for index 7 and ``x.Mp3``."""
    if index < 1 or index >= 10**width:
        raise IndexOverflowError(index, width)
    return f"{index:0{width}d}.{extension_of(file.name).upper()}"


def copy_track(
    file: Path,
    target_dir: Path,
    index: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    width: int = DEFAULT_INDEX_WIDTH,
) -> Path:
    """Copy ``file`` byte for byte to ``target_dir`` under its numbered name.

    The target directory is created when missing. A failed copy is not cleaned
    up; the whole run is expected to abort.

    Raises:
        IndexOverflowError: If ``index`` does not fit ``width`` digits
        DiskFullError: If the target medium is full
        CopyError: On any other read or write failure
    """
    dst = target_dir / target_name(file, index, width=width)

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        with open(file, "rb") as src_f, open(dst, "wb") as dst_f:
            while True:
                chunk = src_f.read(chunk_size)
                if not chunk:
                    break
                dst_f.write(chunk)
    except OSError as e:
        if e.errno == errno.ENOSPC:
            raise DiskFullError(str(dst)) from e
        raise CopyError(f"Failed to copy '{file}' to '{dst}': {e}") from e

    _logger.debug(f"copied {file} -> {dst.name}")
    return dst

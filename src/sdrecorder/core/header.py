"""Reference header listing every identifier and its track index.

The header is documentation for firmware authors; the player never reads it.
"""

from __future__ import annotations

from pathlib import Path

from sdrecorder.core.context import IdentifierTable, TableRow
from sdrecorder.core.errors import CopyError

DEFAULT_HEADER_NAME = "9999.H"


def define_line(row: TableRow) -> str:
    """Format one ``#define`` line (without newline)."""
    return (
        f"#define {row.identifier}\t\t{row.index} "
        f"/* {row.original_folder}/{row.original_file_name} */"
    )


def render_header(table: IdentifierTable) -> str:
    return "".join(define_line(row) + "\n" for row in table)


def write_header(
    target_dir: Path,
    table: IdentifierTable,
    name: str = DEFAULT_HEADER_NAME,
) -> Path:
    """Write the rendered table to ``target_dir/name`` as UTF-8."""
    path = target_dir / name
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(render_header(table), encoding="utf-8", newline="\n")
    except OSError as e:
        raise CopyError(f"Failed to write reference file '{path}': {e}") from e
    return path

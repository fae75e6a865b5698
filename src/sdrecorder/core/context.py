"""State threaded through one recording run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class TableRow:
    """One ``#define`` entry: identifier, track index and where it came from."""

    identifier: str
    index: int
    original_folder: str
    original_file_name: str


@dataclass
class IdentifierTable:
    """Append-only table of identifier rows in traversal order."""

    rows: list[TableRow] = field(default_factory=list)

    def append(self, row: TableRow) -> None:
        self.rows.append(row)

    def identifiers(self) -> list[str]:
        return [row.identifier for row in self.rows]

    def __iter__(self) -> Iterator[TableRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class TraversalState:
    """Mutable counters owned by a single traversal.

    ``next_index`` is pre-incremented, so the first eligible file gets 1.
    ``folder_counter`` grows once per directory entered as a child and only
    feeds the fallback label of unnamed folders.
    """

    next_index: int = 0
    folder_counter: int = 0
    used_identifiers: set[str] = field(default_factory=set)
    table: IdentifierTable = field(default_factory=IdentifierTable)
    skipped: list[Path] = field(default_factory=list)

    def claim_index(self) -> int:
        self.next_index += 1
        return self.next_index

    def enter_folder(self) -> None:
        self.folder_counter += 1

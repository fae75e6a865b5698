"""Depth-first walk assigning track indices in sorted-name order."""

from __future__ import annotations

from pathlib import Path

from sdrecorder.core.config import RecorderSettings
from sdrecorder.core.context import TraversalState
from sdrecorder.core.copier import copy_track
from sdrecorder.core.errors import FileError, NotADirectoryError
from sdrecorder.core.header import define_line
from sdrecorder.core.logging import get_logger
from sdrecorder.core.naming import IdentifierGenerator, extension_of

_logger = get_logger(__name__)


def sorted_children(directory: Path) -> list[Path]:
    """List immediate children sorted by name (code point order, case-sensitive).

    OS enumeration order is never relied upon.

    Raises:
        FileError: If the directory cannot be listed
    """
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FileError(f"Failed to list '{directory}': {e}") from e


class Indexer:
    """Walk a source tree, copy eligible files and fill the identifier table.

    A fresh ``TraversalState`` is created for every call to ``traverse``; the
    indexer itself holds only settings.
    """

    def __init__(self, settings: RecorderSettings | None = None) -> None:
        self.settings = settings or RecorderSettings()
        self.generator = IdentifierGenerator(
            prefix=self.settings.identifier_prefix,
            folder_fallback=self.settings.folder_fallback,
        )
        self._extensions = frozenset(ext.lower() for ext in self.settings.extensions)

    def is_eligible(self, file: Path) -> bool:
        return extension_of(file.name).lower() in self._extensions

    def traverse(self, root_dir: Path, target_dir: Path) -> TraversalState:
        """Process ``root_dir`` recursively into the flat ``target_dir``.

        Returns:
            The finished traversal state (table, counters, skipped files)

        Raises:
            NotADirectoryError: If ``root_dir`` is not a directory
            FileError: If a directory in the tree cannot be listed
            CopyError: If copying any track fails
        """
        if not root_dir.is_dir():
            raise NotADirectoryError(str(root_dir))

        state = TraversalState()
        self._visit(root_dir, target_dir, state)
        _logger.verbose(
            f"traversal done tracks={state.next_index} folders={state.folder_counter} "
            f"skipped={len(state.skipped)}"
        )
        return state

    def _visit(self, directory: Path, target_dir: Path, state: TraversalState) -> None:
        for child in sorted_children(directory):
            if child.is_dir():
                state.enter_folder()
                _logger.debug(f"entering {child} folder_counter={state.folder_counter}")
                self._visit(child, target_dir, state)
            elif self.is_eligible(child):
                self._record(child, target_dir, state)
            else:
                state.skipped.append(child)
                _logger.warning(f"Skipping invalid file: {child}")

    def _record(self, file: Path, target_dir: Path, state: TraversalState) -> None:
        index = state.claim_index()
        copy_track(
            file,
            target_dir,
            index,
            chunk_size=self.settings.chunk_size,
            width=self.settings.index_width,
        )
        row = self.generator.register(file, index, state)
        _logger.info(define_line(row))

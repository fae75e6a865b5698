"""Run orchestration: prepare target, index and copy, write the header."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from sdrecorder.core.config import RecorderSettings
from sdrecorder.core.context import IdentifierTable
from sdrecorder.core.errors import NotADirectoryError, TargetError
from sdrecorder.core.header import write_header
from sdrecorder.core.logging import get_logger
from sdrecorder.core.target import prepare_target
from sdrecorder.core.traversal import Indexer

_logger = get_logger(__name__)


@dataclass
class RecordResult:
    """Summary of a finished run."""

    source: Path
    target: Path
    header_path: Path
    table: IdentifierTable
    folders: int = 0
    skipped: list[Path] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def track_count(self) -> int:
        return len(self.table)


def _overlaps(a: Path, b: Path) -> bool:
    try:
        ra, rb = a.resolve(), b.resolve()
    except OSError as e:
        raise TargetError(f"Failed to resolve '{a}' or '{b}': {e}") from e
    return ra == rb or ra.is_relative_to(rb) or rb.is_relative_to(ra)


class Recorder:
    """Copy a source tree onto a card in one sequential pass.

    Example:
        result = Recorder(settings).run(Path("sounds"), Path("/media/sdcard"))
        print(result.track_count)
    """

    def __init__(self, settings: RecorderSettings | None = None) -> None:
        self.settings = settings or RecorderSettings()

    def run(self, source: Path, target: Path) -> RecordResult:
        """Record ``source`` onto ``target``.

        The source is validated before the target is touched. Already copied
        files stay on the target when a later step fails.

        Raises:
            NotADirectoryError: If ``source`` is not a directory
            TargetError: If the target overlaps the source or cannot be prepared
            CopyError: If a track or the header cannot be written
        """
        if not source.is_dir():
            raise NotADirectoryError(str(source))
        if _overlaps(source, target):
            raise TargetError(
                f"Source '{source}' and target '{target}' overlap",
                "Use a target outside the source tree",
            )

        start = time.perf_counter()

        prepare_target(target, self.settings)
        state = Indexer(self.settings).traverse(source, target)
        header_path = write_header(target, state.table, self.settings.header_name)

        duration_s = time.perf_counter() - start
        _logger.verbose(
            f"record status=succeeded tracks={state.next_index} "
            f"skipped={len(state.skipped)} duration_ms={int(duration_s * 1000)}"
        )

        return RecordResult(
            source=source,
            target=target,
            header_path=header_path,
            table=state.table,
            folders=state.folder_counter,
            skipped=list(state.skipped),
            duration_s=duration_s,
        )

"""Identifier generation from folder and file names.

Sound files are usually pre-ordered by their producer (``"01 - Intro.mp3"``).
The ordering digits drive the index assignment through the directory sort, but
they are stripped before building the symbolic ``#define`` name.
"""

from __future__ import annotations

import re
from pathlib import Path

from sdrecorder.core.context import TableRow, TraversalState
from sdrecorder.core.errors import ConfigError

# Characters allowed in a leading ordering prefix.
_PREFIX_CHARS = frozenset("0123456789-_")
# A prefix must end with one of these (whitespace is checked separately).
_PREFIX_TERMINATORS = frozenset("-_")
_MAX_EXTENSION_LEN = 3

_INVALID_CHARS_RE = re.compile(r"[^A-Z0-9_]")
_UNDERSCORES_RE = re.compile(r"_+")


def _is_prefix_char(ch: str) -> bool:
    return ch in _PREFIX_CHARS or ch.isspace()


def _is_prefix_terminator(ch: str) -> bool:
    return ch in _PREFIX_TERMINATORS or ch.isspace()


def strip_extension(name: str) -> str:
    """Drop the last dot-suffix when it is at most three characters long.

    Examples:
        "Intro.mp3" -> "Intro"
        "My.Favorite.Song.mp3" -> "My.Favorite.Song"
        "Track.flac" -> "Track.flac"
    """
    stem, dot, ext = name.rpartition(".")
    if dot and len(ext) <= _MAX_EXTENSION_LEN:
        return stem
    return name


def strip_number(name: str) -> str:
    """Remove a manually assigned ordering prefix and a short extension.

    The prefix is the longest leading run of digits, hyphens, underscores and
    whitespace that ends with a hyphen, underscore or whitespace. A name made
    only of those characters is all prefix.

    Examples:
        "01 - Intro.mp3" -> "Intro"
        "02_Rock" -> "Rock"
        "Track" -> "Track"
        "03_" -> ""
        "01" -> ""
    """
    stem = strip_extension(name)

    run_end = 0
    while run_end < len(stem) and _is_prefix_char(stem[run_end]):
        run_end += 1
    if run_end == len(stem):
        return ""

    cut = 0
    for pos in range(run_end, 0, -1):
        if _is_prefix_terminator(stem[pos - 1]):
            cut = pos
            break

    return stem[cut:]


def extension_of(name: str) -> str:
    """Return the text after the last dot, or an empty string."""
    _stem, dot, ext = name.rpartition(".")
    return ext if dot else ""


def sanitize(raw: str) -> str:
    """Upper-case and reduce to ``[A-Z0-9]`` words joined by single underscores."""
    text = _INVALID_CHARS_RE.sub("_", raw.upper())
    return _UNDERSCORES_RE.sub("_", text).strip("_")


class IdentifierGenerator:
    """Derive unique ``#define`` names and record them in the run's table.

    Example:
        gen = IdentifierGenerator(prefix="SND_")
        gen.derive(Path("src/02 - Rock/My Song!.wav"), state)  # 'SND_ROCK_MY_SONG'
    """

    def __init__(self, prefix: str = "SND_", folder_fallback: str = "DIR") -> None:
        if not prefix[:1].isascii() or not prefix[:1].isalpha():
            raise ConfigError(
                f"Invalid identifier prefix: {prefix!r}",
                "The prefix must start with a letter, e.g. SND_",
            )
        self.prefix = prefix
        self.folder_fallback = folder_fallback

    def folder_label(self, file: Path, state: TraversalState) -> str:
        label = strip_number(file.parent.name)
        if not label:
            return f"{self.folder_fallback}{state.folder_counter}"
        return label

    def file_label(self, file: Path) -> str:
        """Stripped file name; a purely numeric name (``"01.mp3"``) keeps its digits."""
        return strip_number(file.name) or strip_extension(file.name)

    def base_identifier(self, file: Path, state: TraversalState) -> str:
        raw = f"{self.prefix}{self.folder_label(file, state)}_{self.file_label(file)}"
        return sanitize(raw)

    def derive(self, file: Path, state: TraversalState) -> str:
        """Return a unique identifier for ``file`` without recording it."""
        base = self.base_identifier(file, state)
        identifier = base
        suffix = 0
        while identifier in state.used_identifiers:
            suffix += 1
            identifier = f"{base}_{suffix}"
        return identifier

    def register(self, file: Path, index: int, state: TraversalState) -> TableRow:
        """Derive the identifier for ``file`` and append its row to the table."""
        identifier = self.derive(file, state)
        state.used_identifiers.add(identifier)
        row = TableRow(
            identifier=identifier,
            index=index,
            original_folder=file.parent.name,
            original_file_name=file.name,
        )
        state.table.append(row)
        return row

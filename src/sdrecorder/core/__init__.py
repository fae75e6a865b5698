"""Core of the SD card recorder.

Deterministic indexing, identifier generation and numbered copying of sound
files for flat-namespace playback modules.
"""

from sdrecorder.core.config import ConfigResolver, RecorderSettings
from sdrecorder.core.context import IdentifierTable, TableRow, TraversalState
from sdrecorder.core.copier import copy_track, target_name
from sdrecorder.core.errors import (
    ConfigError,
    CopyError,
    DiskFullError,
    FileError,
    IndexOverflowError,
    NotADirectoryError,
    RecorderError,
    TargetError,
)
from sdrecorder.core.header import render_header, write_header
from sdrecorder.core.logging import VerbosityLevel, get_logger, set_colors, set_verbosity
from sdrecorder.core.naming import IdentifierGenerator, sanitize, strip_number
from sdrecorder.core.recorder import Recorder, RecordResult
from sdrecorder.core.target import prepare_target
from sdrecorder.core.traversal import Indexer

__all__ = [
    # Config
    "ConfigResolver",
    "RecorderSettings",
    # Context
    "IdentifierTable",
    "TableRow",
    "TraversalState",
    # Errors
    "RecorderError",
    "ConfigError",
    "FileError",
    "NotADirectoryError",
    "CopyError",
    "DiskFullError",
    "IndexOverflowError",
    "TargetError",
    # Engine
    "Indexer",
    "IdentifierGenerator",
    "strip_number",
    "sanitize",
    "copy_track",
    "target_name",
    "render_header",
    "write_header",
    "prepare_target",
    "Recorder",
    "RecordResult",
    # Logging
    "VerbosityLevel",
    "get_logger",
    "set_verbosity",
    "set_colors",
]

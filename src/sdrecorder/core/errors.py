"""Error handling with friendly messages."""

from __future__ import annotations


class RecorderError(Exception):
    """Base exception for all recorder errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(RecorderError):
    """Configuration error."""

    pass


class FileError(RecorderError):
    """File operation error."""

    pass


class NotADirectoryError(FileError):
    """Source root is missing or is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Directory not found: {path}",
            "Pass the folder that holds your sound files as SOURCE",
        )


class CopyError(FileError):
    """Reading a source track or writing its numbered copy failed."""

    pass


class DiskFullError(CopyError):
    """Target medium is full."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Disk full: Cannot write to '{path}'",
            "Use a larger card or fewer sound files",
        )


class IndexOverflowError(FileError):
    """Track index does not fit the numeric slot width."""

    def __init__(self, index: int, width: int) -> None:
        super().__init__(
            f"Track index {index} does not fit in {width} digits",
            "Split the source tree across several cards",
        )


class TargetError(FileError):
    """Target could not be prepared (cleared or formatted)."""

    pass

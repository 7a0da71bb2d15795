"""Exception hierarchy for Audit Asset Core.

This module defines the exception hierarchy used throughout the Audit Asset Core library.
All exceptions inherit from AssetCoreError, providing a consistent error handling interface.

A file named by a TraceSerializationError or AssetWriteError must not be trusted:
its on-disk content is undefined.
"""

from dataclasses import dataclass
from pathlib import Path


class AssetCoreError(Exception):
    """Base exception for all Audit Asset Core errors."""


class TraceSerializationError(AssetCoreError):
    """Raised when a document holds a value that cannot be written as JSON."""


class AssetWriteError(AssetCoreError):
    """Raised when a file or sink cannot be opened, written, flushed or closed."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ScreenshotFetchError(AssetCoreError):
    """Raised when the screenshot filmstrip for a pass could not be retrieved."""

    def __init__(self, message: str, pass_name: str) -> None:
        super().__init__(message)
        self.pass_name = pass_name


class AssetPreparationError(AssetCoreError):
    """Raised when a pass's raw artifacts cannot be assembled into an AssetBundle."""

    def __init__(self, message: str, pass_name: str) -> None:
        super().__init__(message)
        self.pass_name = pass_name


@dataclass(frozen=True, slots=True)
class FileWriteFailure:
    """One asset file that could not be written."""

    pass_index: int
    path: Path
    error: BaseException


class AssetSaveError(AssetCoreError):
    """Raised after all writes settle when one or more asset files failed."""

    def __init__(self, failures: list[FileWriteFailure]) -> None:
        names = ", ".join(str(f.path) for f in failures)
        super().__init__(f"Failed to save {len(failures)} asset file(s): {names}")
        self.failures = failures

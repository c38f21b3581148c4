"""Exception hierarchy for dotstow."""

from __future__ import annotations

from pathlib import Path


class DotstowError(RuntimeError):
    """Base class for every error dotstow reports to the user."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    @property
    def kind(self) -> str:
        return type(self).__name__


class PathNotUnderRoot(DotstowError):
    def __init__(self, path: Path, root: Path) -> None:
        super().__init__(f"'{path}' is not located under '{root}'", path)
        self.root = root


class SourceMissing(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' does not exist", path)


class AlreadyExists(DotstowError):
    """Raised when a relocation would collide with an existing path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' already exists", path)


class LinkPathOccupied(DotstowError):
    """Raised instead of ever overwriting whatever sits at a link path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' is occupied and will not be overwritten", path)


class NotASymlink(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' exists but is not a symlink", path)


class MissingLink(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"no symlink found at '{path}'", path)


class DuplicateLinkPath(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' is already tracked", path)


class NotTracked(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' is not tracked", path)


class UnsupportedFileType(DotstowError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' is not a regular file or directory", path)


class InvalidRoot(DotstowError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid root directory '{path}': {reason}", path)


class ConfigParseError(DotstowError):
    """Raised when the registry file cannot be parsed or validated."""


class FilesystemError(DotstowError):
    """Wraps an ``OSError`` raised while touching the filesystem."""

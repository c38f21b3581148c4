"""Core package for the dotstow project."""

from .cli import app, run
from .errors import (
    AlreadyExists,
    ConfigParseError,
    DotstowError,
    DuplicateLinkPath,
    FilesystemError,
    InvalidRoot,
    LinkPathOccupied,
    MissingLink,
    NotASymlink,
    NotTracked,
    PathNotUnderRoot,
    SourceMissing,
    UnsupportedFileType,
)
from .manager import DotstowManager
from .models import DotfileEntry, LinkState, OperationAction, OperationResult, StatusEntry
from .registry import Registry

__all__ = [
    "DotstowManager",
    "Registry",
    "DotfileEntry",
    "LinkState",
    "OperationAction",
    "OperationResult",
    "StatusEntry",
    "DotstowError",
    "AlreadyExists",
    "ConfigParseError",
    "DuplicateLinkPath",
    "FilesystemError",
    "InvalidRoot",
    "LinkPathOccupied",
    "MissingLink",
    "NotASymlink",
    "NotTracked",
    "PathNotUnderRoot",
    "SourceMissing",
    "UnsupportedFileType",
    "app",
    "run",
]

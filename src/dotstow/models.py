"""Shared models and enums for dotstow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import DotstowError


@dataclass(frozen=True, slots=True)
class DotfileEntry:
    """A tracked dotfile: the live symlink and the stowed file it points to."""

    link_path: Path
    stow_path: Path


@dataclass(frozen=True, slots=True)
class Roots:
    """A symlink root paired with the dotfiles directory it was stowed into."""

    symlink_dir: Path
    dotfiles_dir: Path


class OperationAction(str, Enum):
    """Outcome of a stow, deploy or restore for a single path."""

    STOWED = "stowed"
    DEPLOYED = "deployed"
    RESTORED = "restored"
    UNCHANGED = "unchanged"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result emitted for each path handed to an operation."""

    path: Path
    action: OperationAction
    stow_path: Path | None = None
    details: str | None = None
    error: DotstowError | None = None

    @property
    def ok(self) -> bool:
        return self.action not in (OperationAction.FAILED, OperationAction.PARTIAL)


class LinkState(str, Enum):
    """Live state of a tracked entry as reported by ``dotstow status``."""

    LINKED = "linked"
    MISSING_LINK = "missing_link"
    OCCUPIED = "occupied"
    STOW_MISSING = "stow_missing"


@dataclass(frozen=True, slots=True)
class StatusEntry:
    entry: DotfileEntry
    state: LinkState
    details: str | None = None

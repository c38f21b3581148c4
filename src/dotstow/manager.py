"""High level orchestration for dotstow operations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

from .errors import (
    DotstowError,
    DuplicateLinkPath,
    InvalidRoot,
    NotTracked,
    SourceMissing,
    UnsupportedFileType,
)
from .filesystem import link_back, prune_empty_parents, relocate, relocate_back, symlink_points_to, unlink
from .models import DotfileEntry, LinkState, OperationAction, OperationResult, StatusEntry
from .paths import (
    canonical,
    exists,
    expand_globs,
    expand_path,
    is_regular_file_or_dir,
    relative_to_root,
    resolve_under,
)
from .registry import Registry

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str]


class DotstowManager:
    """Coordinates stow, deploy and restore against the registry.

    The registry is loaded once when the manager is created and saved once at
    the end of each mutating command. Nothing guards against two processes
    sharing a registry file.
    """

    def __init__(self, config_path: Path) -> None:
        self.registry = Registry.load(config_path)

    def stow(self, symlink_dir: PathArg, dotfiles_dir: PathArg, files: Iterable[PathArg]) -> list[OperationResult]:
        symlink_root = self._require_directory(symlink_dir, may_be_missing=False)
        dotfiles_root = self._require_directory(dotfiles_dir, may_be_missing=True)
        results: list[OperationResult] = []

        try:
            for pattern in files:
                for raw in expand_globs(pattern):
                    results.append(self._collect(raw, self._stow_entry, raw, symlink_root, dotfiles_root))
            if any(result.action is OperationAction.STOWED for result in results):
                self.registry.add_root(symlink_root, dotfiles_root)
        finally:
            self._save_if_changed()

        return results

    def deploy(self, files: Iterable[PathArg]) -> list[OperationResult]:
        return [self._collect(raw, self._deploy_path, raw) for raw in files]

    def deploy_all(self) -> list[OperationResult]:
        return [
            self._collect(entry.link_path, self._deploy_entry, entry) for entry in self.registry.entries()
        ]

    def restore(self, dotfiles_dir: PathArg, files: Iterable[PathArg]) -> list[OperationResult]:
        dotfiles_root = self._require_directory(dotfiles_dir, may_be_missing=False)
        results: list[OperationResult] = []

        try:
            for raw in files:
                results.append(self._collect(raw, self._restore_entry, raw, dotfiles_root))
        finally:
            self._save_if_changed()

        return results

    def status(self) -> list[StatusEntry]:
        return [self._status_for_entry(entry) for entry in self.registry.entries()]

    # ------------------------------------------------------------------
    # Internal helpers

    def _save_if_changed(self) -> None:
        if self.registry.dirty:
            self.registry.save()

    def _collect(self, raw: PathArg, action: Callable[..., OperationResult], *args: object) -> OperationResult:
        try:
            return action(*args)
        except DotstowError as exc:
            logger.error("%s", exc)
            return OperationResult(
                path=Path(raw),
                action=OperationAction.FAILED,
                details=str(exc),
                error=exc,
            )

    def _require_directory(self, raw: PathArg, *, may_be_missing: bool) -> Path:
        path = expand_path(raw)
        if not exists(path):
            if not may_be_missing:
                raise InvalidRoot(path, "does not exist")
            # Created by the first relocate into it.
            return path.resolve(strict=False)
        if not path.is_dir():
            raise InvalidRoot(path, "not a directory")
        return path.resolve()

    def _lookup(self, raw: PathArg) -> DotfileEntry:
        path = canonical(raw)
        entry = self.registry.find(path) or self.registry.find_by_stow_path(path)
        if entry is None:
            raise NotTracked(path)
        return entry

    def _stow_entry(self, raw: PathArg, symlink_root: Path, dotfiles_root: Path) -> OperationResult:
        link_path = resolve_under(raw, symlink_root)

        existing = self.registry.find(link_path)
        if existing is not None:
            if symlink_points_to(link_path, existing.stow_path):
                return OperationResult(
                    path=link_path,
                    action=OperationAction.UNCHANGED,
                    stow_path=existing.stow_path,
                    details="already stowed",
                )
            raise DuplicateLinkPath(link_path)

        if not exists(link_path):
            raise SourceMissing(link_path)
        if not is_regular_file_or_dir(link_path):
            raise UnsupportedFileType(link_path)
        if dotfiles_root.is_relative_to(link_path) or link_path.is_relative_to(dotfiles_root):
            raise InvalidRoot(dotfiles_root, f"overlaps '{link_path}'")

        target_dir = dotfiles_root / relative_to_root(link_path, symlink_root).parent
        stow_path = relocate(link_path, target_dir)

        try:
            link_back(stow_path, link_path)
        except DotstowError as exc:
            logger.warning(
                "'%s' was moved to '%s' but could not be linked back (%s); move it back by hand or re-run stow",
                link_path,
                stow_path,
                exc,
            )
            return OperationResult(
                path=link_path,
                action=OperationAction.PARTIAL,
                stow_path=stow_path,
                details=f"relocated to '{stow_path}' but not linked: {exc}",
                error=exc,
            )

        self.registry.add(DotfileEntry(link_path=link_path, stow_path=stow_path))
        logger.info("stowed '%s' -> '%s'", link_path, stow_path)
        return OperationResult(path=link_path, action=OperationAction.STOWED, stow_path=stow_path)

    def _deploy_path(self, raw: PathArg) -> OperationResult:
        return self._deploy_entry(self._lookup(raw))

    def _deploy_entry(self, entry: DotfileEntry) -> OperationResult:
        created = link_back(entry.stow_path, entry.link_path)
        if created:
            logger.info("deployed '%s' -> '%s'", entry.link_path, entry.stow_path)
        else:
            logger.debug("'%s' already points to '%s'", entry.link_path, entry.stow_path)
        return OperationResult(
            path=entry.link_path,
            action=OperationAction.DEPLOYED if created else OperationAction.UNCHANGED,
            stow_path=entry.stow_path,
        )

    def _restore_entry(self, raw: PathArg, dotfiles_root: Path) -> OperationResult:
        entry = self._lookup(raw)
        relative_to_root(entry.stow_path, dotfiles_root)
        if not is_regular_file_or_dir(entry.stow_path):
            raise SourceMissing(entry.stow_path)

        unlink(entry.link_path, expected_target=entry.stow_path)
        try:
            relocate_back(entry.stow_path, entry.link_path.parent)
        except DotstowError as exc:
            logger.warning(
                "removed the link at '%s' but could not move '%s' back (%s); run deploy to re-link it",
                entry.link_path,
                entry.stow_path,
                exc,
            )
            return OperationResult(
                path=entry.link_path,
                action=OperationAction.PARTIAL,
                stow_path=entry.stow_path,
                details=f"unlinked but still stored at '{entry.stow_path}': {exc}",
                error=exc,
            )

        prune_empty_parents(entry.stow_path, dotfiles_root)
        self.registry.remove(entry.link_path)
        logger.info("restored '%s'", entry.link_path)
        return OperationResult(path=entry.link_path, action=OperationAction.RESTORED, stow_path=entry.stow_path)

    def _status_for_entry(self, entry: DotfileEntry) -> StatusEntry:
        if not is_regular_file_or_dir(entry.stow_path):
            return StatusEntry(entry=entry, state=LinkState.STOW_MISSING, details="Stowed copy is missing")
        if symlink_points_to(entry.link_path, entry.stow_path):
            return StatusEntry(entry=entry, state=LinkState.LINKED)
        if exists(entry.link_path):
            return StatusEntry(entry=entry, state=LinkState.OCCUPIED, details="Something else sits at the link path")
        return StatusEntry(entry=entry, state=LinkState.MISSING_LINK, details="Run 'dotstow deploy' to re-link")

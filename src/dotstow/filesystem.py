"""Filesystem primitives for dotstow.

Every mutation of a dotfile path goes through this module: moving a file into
the dotfiles directory, linking it back, and the inverse of both. ``OSError``
is wrapped into :class:`~dotstow.errors.FilesystemError` so callers only ever
handle ``DotstowError``.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .errors import (
    AlreadyExists,
    FilesystemError,
    LinkPathOccupied,
    MissingLink,
    NotASymlink,
    SourceMissing,
)
from .paths import exists, is_regular_file_or_dir

logger = logging.getLogger(__name__)


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory exists."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Cannot create directory '{path.parent}': {exc}", path.parent) from exc


def relocate(src: Path, dst_dir: Path) -> Path:
    """Move ``src`` into ``dst_dir`` keeping its basename and return the new path.

    ``shutil.move`` renames when both sides share a filesystem and otherwise
    copies before deleting, so ``src`` is only removed once the copy exists.
    """

    if not exists(src):
        raise SourceMissing(src)

    destination = dst_dir / src.name
    if exists(destination):
        raise AlreadyExists(destination)

    ensure_parent(destination)
    logger.debug("moving '%s' to '%s'", src, destination)
    try:
        shutil.move(os.fspath(src), os.fspath(destination))
    except OSError as exc:
        raise FilesystemError(f"Cannot move '{src}' to '{destination}': {exc}", src) from exc
    return destination


def relocate_back(stow_path: Path, dst_dir: Path) -> Path:
    """Move a stowed file back into ``dst_dir``; the inverse of :func:`relocate`."""

    return relocate(stow_path, dst_dir)


def link_back(stow_path: Path, link_path: Path) -> bool:
    """Create a symlink at ``link_path`` pointing to ``stow_path``.

    Returns ``True`` if a link was created and ``False`` if ``link_path``
    already pointed at ``stow_path``. Anything else at ``link_path`` is left
    alone and reported as :class:`LinkPathOccupied`.
    """

    if not is_regular_file_or_dir(stow_path):
        raise SourceMissing(stow_path)

    if exists(link_path):
        if symlink_points_to(link_path, stow_path):
            return False
        raise LinkPathOccupied(link_path)

    ensure_parent(link_path)
    try:
        try:
            relative_target = os.path.relpath(stow_path, start=link_path.parent)
            link_path.symlink_to(relative_target, target_is_directory=stow_path.is_dir())
        except ValueError:
            link_path.symlink_to(stow_path, target_is_directory=stow_path.is_dir())
    except FileExistsError as exc:
        raise LinkPathOccupied(link_path) from exc
    except OSError as exc:
        raise FilesystemError(f"Cannot create symlink '{link_path}': {exc}", link_path) from exc

    logger.debug("linked '%s' -> '%s'", link_path, stow_path)
    return True


def unlink(link_path: Path, expected_target: Path | None = None) -> None:
    """Remove the symlink at ``link_path``.

    When ``expected_target`` is given the link must resolve to it; a symlink
    pointing elsewhere is somebody else's and is reported as occupied.
    """

    if not link_path.is_symlink():
        if link_path.exists():
            raise NotASymlink(link_path)
        raise MissingLink(link_path)

    if expected_target is not None and not symlink_points_to(link_path, expected_target):
        raise LinkPathOccupied(link_path)

    try:
        link_path.unlink()
    except OSError as exc:
        raise FilesystemError(f"Cannot remove symlink '{link_path}': {exc}", link_path) from exc


def symlink_points_to(source: Path, target: Path) -> bool:
    """Return ``True`` if ``source`` symlink resolves to ``target``."""

    if not source.is_symlink():
        return False
    current = Path(os.readlink(source))
    current_resolved = (source.parent / current).resolve(strict=False)
    target_resolved = target.resolve(strict=False)
    return current_resolved == target_resolved


def prune_empty_parents(path: Path, stop: Path) -> None:
    """Remove empty directories from ``path.parent`` up to, not including, ``stop``."""

    current = path.parent
    while current != stop and current.is_relative_to(stop):
        try:
            current.rmdir()
        except OSError:
            return
        logger.debug("removed empty directory '%s'", current)
        current = current.parent

"""Path canonicalization and containment checks."""

from __future__ import annotations

import glob
import os
from pathlib import Path

from .errors import PathNotUnderRoot


def expand_path(raw: str | os.PathLike[str], *, base_dir: Path | None = None) -> Path:
    """Return an absolute ``Path`` by expanding env vars and user segments."""

    expanded = Path(os.path.expandvars(str(raw))).expanduser()
    if not expanded.is_absolute():
        expanded = (base_dir or Path.cwd()) / expanded
    return Path(os.path.abspath(expanded))


def canonical(raw: str | os.PathLike[str], *, base_dir: Path | None = None) -> Path:
    """Canonicalize ``raw`` without following its final component.

    The parent directories are fully resolved, so ``~/.bashrc`` stays the path
    of the link itself even when it is a symlink into the dotfiles directory.
    """

    path = expand_path(raw, base_dir=base_dir)
    if path.parent == path:
        return path
    return path.parent.resolve(strict=False) / path.name


def resolve_under(raw: str | os.PathLike[str], root: Path, *, base_dir: Path | None = None) -> Path:
    """Return the canonical path of ``raw`` if it lies strictly below ``root``."""

    path = canonical(raw, base_dir=base_dir)
    resolved_root = expand_path(root, base_dir=base_dir).resolve(strict=False)
    if path == resolved_root or not path.is_relative_to(resolved_root):
        raise PathNotUnderRoot(path, resolved_root)
    return path


def expand_globs(raw: str | os.PathLike[str], *, base_dir: Path | None = None) -> list[Path]:
    """Expand shell-style wildcards in ``raw``, sorted.

    A pattern with no matches, or an argument without wildcards, comes back
    unchanged so the caller reports it as missing.
    """

    path = expand_path(raw, base_dir=base_dir)
    if not glob.has_magic(str(path)):
        return [path]
    matches = sorted(glob.glob(str(path), include_hidden=True))
    return [Path(match) for match in matches] or [path]


def relative_to_root(path: Path, root: Path) -> Path:
    """Return ``path`` relative to ``root``; both must already be canonical."""

    if path == root or not path.is_relative_to(root):
        raise PathNotUnderRoot(path, root)
    return path.relative_to(root)


def exists(path: Path) -> bool:
    """Return ``True`` for anything at ``path``, dangling symlinks included."""

    return path.exists() or path.is_symlink()


def is_symlink(path: Path) -> bool:
    return path.is_symlink()


def is_regular_file_or_dir(path: Path) -> bool:
    if path.is_symlink():
        return False
    return path.is_file() or path.is_dir()

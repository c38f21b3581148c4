"""Registry persistence for dotstow."""

from __future__ import annotations

import os
import tempfile
import tomllib
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from tomli_w import dump as toml_dump

from .errors import ConfigParseError, DuplicateLinkPath, FilesystemError, NotTracked
from .models import DotfileEntry, Roots


def _require_absolute(value: Path) -> Path:
    if not value.is_absolute():
        raise ValueError(f"'{value}' must be an absolute path")
    return value


class _EntryRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    link_path: Path
    stow_path: Path

    @field_validator("link_path", "stow_path")
    @classmethod
    def check_absolute(cls, value: Path) -> Path:
        return _require_absolute(value)


class _RootsRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    symlink_dir: Path
    dotfiles_dir: Path

    @field_validator("symlink_dir", "dotfiles_dir")
    @classmethod
    def check_absolute(cls, value: Path) -> Path:
        return _require_absolute(value)


class _RegistryDocument(BaseModel):
    """Schema of the TOML registry file."""

    model_config = ConfigDict(extra="forbid")

    roots: list[_RootsRecord] = Field(default_factory=list)
    entries: list[_EntryRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_link_paths(self) -> "_RegistryDocument":
        seen: set[Path] = set()
        for record in self.entries:
            if record.link_path in seen:
                raise ValueError(f"link_path '{record.link_path}' is listed more than once")
            seen.add(record.link_path)
        return self


class Registry:
    """Tracked dotfiles keyed by link path, loaded and saved wholesale.

    ``dirty`` is set by any change since the registry was loaded or last saved.
    """

    def __init__(
        self,
        path: Path,
        entries: Iterable[DotfileEntry] = (),
        roots: Iterable[Roots] = (),
    ) -> None:
        self.path = path
        self._entries: dict[Path, DotfileEntry] = {}
        self._roots: list[Roots] = []
        for entry in entries:
            self.add(entry)
        for pair in roots:
            self.add_root(pair.symlink_dir, pair.dotfiles_dir)
        self.dirty = False

    @classmethod
    def load(cls, path: Path) -> "Registry":
        if not path.exists():
            return cls(path)

        try:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigParseError(f"Registry '{path}' is not valid TOML: {exc}", path) from exc
        except OSError as exc:
            raise FilesystemError(f"Cannot read registry '{path}': {exc}", path) from exc

        try:
            document = _RegistryDocument.model_validate(data)
        except ValidationError as exc:
            raise ConfigParseError(f"Registry '{path}' is malformed: {exc}", path) from exc

        return cls(
            path,
            entries=(DotfileEntry(record.link_path, record.stow_path) for record in document.entries),
            roots=(Roots(record.symlink_dir, record.dotfiles_dir) for record in document.roots),
        )

    def save(self) -> None:
        payload = {
            "roots": [
                {"symlink_dir": str(pair.symlink_dir), "dotfiles_dir": str(pair.dotfiles_dir)}
                for pair in self._roots
            ],
            "entries": [
                {"link_path": str(entry.link_path), "stow_path": str(entry.stow_path)}
                for entry in self._entries.values()
            ],
        }

        temp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            temp_path = Path(temp_name)
            with os.fdopen(fd, "wb") as handle:
                toml_dump(payload, handle)
            os.replace(temp_path, self.path)
            self.dirty = False
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise FilesystemError(f"Cannot write registry '{self.path}': {exc}", self.path) from exc

    def add(self, entry: DotfileEntry) -> None:
        if entry.link_path in self._entries:
            raise DuplicateLinkPath(entry.link_path)
        self._entries[entry.link_path] = entry
        self.dirty = True

    def remove(self, link_path: Path) -> DotfileEntry:
        try:
            entry = self._entries.pop(link_path)
        except KeyError:
            raise NotTracked(link_path) from None
        self.dirty = True
        return entry

    def find(self, link_path: Path) -> DotfileEntry | None:
        return self._entries.get(link_path)

    def find_by_stow_path(self, stow_path: Path) -> DotfileEntry | None:
        for entry in self._entries.values():
            if entry.stow_path == stow_path:
                return entry
        return None

    def entries(self) -> list[DotfileEntry]:
        return list(self._entries.values())

    def add_root(self, symlink_dir: Path, dotfiles_dir: Path) -> None:
        pair = Roots(symlink_dir, dotfiles_dir)
        if pair not in self._roots:
            self._roots.append(pair)
            self.dirty = True

    def roots(self) -> list[Roots]:
        return list(self._roots)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, link_path: object) -> bool:
        return link_path in self._entries

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dotstow.errors import (
    AlreadyExists,
    FilesystemError,
    LinkPathOccupied,
    MissingLink,
    NotASymlink,
    SourceMissing,
)
from dotstow.filesystem import (
    ensure_parent,
    link_back,
    prune_empty_parents,
    relocate,
    relocate_back,
    symlink_points_to,
    unlink,
)


def test_relocate_moves_file_keeping_basename(fake_home: Path, dotfiles_dir: Path) -> None:
    source = fake_home / ".bashrc"
    source.write_text("export A=1\n")

    stow_path = relocate(source, dotfiles_dir)

    assert stow_path == dotfiles_dir / ".bashrc"
    assert stow_path.read_text() == "export A=1\n"
    assert not source.exists()


def test_relocate_moves_directory_recursively(fake_home: Path, dotfiles_dir: Path) -> None:
    source = fake_home / "nvim"
    (source / "lua").mkdir(parents=True)
    (source / "lua" / "init.lua").write_text("-- init\n")

    stow_path = relocate(source, dotfiles_dir / ".config")

    assert (stow_path / "lua" / "init.lua").read_text() == "-- init\n"
    assert not source.exists()


def test_relocate_refuses_collision(fake_home: Path, dotfiles_dir: Path) -> None:
    source = fake_home / ".vimrc"
    source.write_text("new\n")
    (dotfiles_dir / ".vimrc").write_text("old\n")

    with pytest.raises(AlreadyExists):
        relocate(source, dotfiles_dir)

    assert source.read_text() == "new\n"
    assert (dotfiles_dir / ".vimrc").read_text() == "old\n"


def test_relocate_missing_source(fake_home: Path, dotfiles_dir: Path) -> None:
    with pytest.raises(SourceMissing):
        relocate(fake_home / "missing", dotfiles_dir)


def test_relocate_wraps_os_errors(fake_home: Path, dotfiles_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = fake_home / ".profile"
    source.write_text("x\n")

    def fail_move(*_args, **_kwargs):
        raise PermissionError("mocked")

    monkeypatch.setattr("dotstow.filesystem.shutil.move", fail_move)

    with pytest.raises(FilesystemError) as excinfo:
        relocate(source, dotfiles_dir)

    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert source.exists()


def test_link_back_creates_relative_symlink(fake_home: Path, dotfiles_dir: Path) -> None:
    stow_path = dotfiles_dir / ".bashrc"
    stow_path.write_text("x\n")
    link = fake_home / ".bashrc"

    assert link_back(stow_path, link) is True
    assert link.is_symlink()
    assert not os.path.isabs(os.readlink(link))
    assert symlink_points_to(link, stow_path)
    assert link.read_text() == "x\n"


def test_link_back_is_idempotent(fake_home: Path, dotfiles_dir: Path) -> None:
    stow_path = dotfiles_dir / ".bashrc"
    stow_path.write_text("x\n")
    link = fake_home / ".bashrc"
    link_back(stow_path, link)

    assert link_back(stow_path, link) is False


def test_link_back_creates_missing_parents(fake_home: Path, dotfiles_dir: Path) -> None:
    stow_path = dotfiles_dir / ".config" / "git" / "config"
    stow_path.parent.mkdir(parents=True)
    stow_path.write_text("[user]\n")
    link = fake_home / ".config" / "git" / "config"

    link_back(stow_path, link)

    assert symlink_points_to(link, stow_path)


def test_link_back_never_overwrites(fake_home: Path, dotfiles_dir: Path) -> None:
    stow_path = dotfiles_dir / ".bashrc"
    stow_path.write_text("stowed\n")
    occupied = fake_home / ".bashrc"
    occupied.write_text("local\n")
    foreign_link = fake_home / ".zshrc"
    foreign_link.symlink_to(fake_home / "somewhere")

    with pytest.raises(LinkPathOccupied):
        link_back(stow_path, occupied)
    with pytest.raises(LinkPathOccupied):
        link_back(stow_path, foreign_link)

    assert occupied.read_text() == "local\n"
    assert os.readlink(foreign_link) == str(fake_home / "somewhere")


def test_link_back_requires_stowed_file(fake_home: Path, dotfiles_dir: Path) -> None:
    with pytest.raises(SourceMissing):
        link_back(dotfiles_dir / "missing", fake_home / "missing")
    assert not (fake_home / "missing").is_symlink()


def test_unlink_errors(fake_home: Path) -> None:
    regular = fake_home / "regular"
    regular.write_text("x")

    with pytest.raises(NotASymlink):
        unlink(regular)
    with pytest.raises(MissingLink):
        unlink(fake_home / "nothing")


def test_unlink_checks_expected_target(fake_home: Path, dotfiles_dir: Path) -> None:
    stow_path = dotfiles_dir / ".bashrc"
    stow_path.write_text("x\n")
    link = fake_home / ".bashrc"
    link.symlink_to(fake_home / "other")

    with pytest.raises(LinkPathOccupied):
        unlink(link, expected_target=stow_path)
    assert link.is_symlink()

    link.unlink()
    link_back(stow_path, link)
    unlink(link, expected_target=stow_path)
    assert not link.is_symlink()
    assert stow_path.exists()


def test_relocate_back_is_inverse(fake_home: Path, dotfiles_dir: Path) -> None:
    source = fake_home / ".gitconfig"
    source.write_text("[core]\n")

    stow_path = relocate(source, dotfiles_dir)
    restored = relocate_back(stow_path, fake_home)

    assert restored == source
    assert source.read_text() == "[core]\n"
    assert not stow_path.exists()


def test_prune_empty_parents_stops_at_root(dotfiles_dir: Path) -> None:
    nested = dotfiles_dir / ".config" / "git" / "config"
    keep = dotfiles_dir / ".config" / "fish"
    keep.mkdir(parents=True)
    nested.parent.mkdir(parents=True)

    prune_empty_parents(nested, dotfiles_dir)

    assert not (dotfiles_dir / ".config" / "git").exists()
    assert (dotfiles_dir / ".config").exists()
    assert dotfiles_dir.exists()


def test_ensure_parent(tmp_path: Path) -> None:
    target = tmp_path / "deep" / "file.txt"
    ensure_parent(target)
    assert target.parent.exists()

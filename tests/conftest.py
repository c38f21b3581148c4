from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path.resolve() / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("DOTSTOW_CONFIG", raising=False)
    return home


@pytest.fixture
def dotfiles_dir(fake_home: Path) -> Path:
    directory = fake_home / ".dotfiles"
    directory.mkdir()
    return directory


@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    return tmp_path.resolve() / "state" / "config.toml"

"""Location of the dotstow registry file."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from .paths import expand_path

APP_NAME = "dotstow"
DEFAULT_CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "DOTSTOW_CONFIG"


def user_config_dir() -> Path:
    """Return the per-user configuration directory for dotstow."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home()))) / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def default_config_path() -> Path:
    return user_config_dir() / DEFAULT_CONFIG_FILENAME


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the registry file: explicit path, then ``$DOTSTOW_CONFIG``, then the default.

    A directory is taken to contain ``config.toml``.
    """

    if path is None:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        path = Path(env_value) if env_value else default_config_path()

    resolved = expand_path(path)
    if resolved.is_dir():
        resolved = resolved / DEFAULT_CONFIG_FILENAME
    return resolved

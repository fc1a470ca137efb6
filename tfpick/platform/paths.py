"""User-level directory and install location lookups.

These are the only functions that read HOME / PATH / APPDATA. Everything
downstream receives the resolved values explicitly.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from tfpick.core.config import DEFAULT_LOCATION
from tfpick.core.result import Err, Ok, Result

from .detection import detect_os

__all__ = [
    "InstallPathError",
    "InstallTarget",
    "find_in_path",
    "home",
    "resolve_install_target",
    "user_config_dir",
    "default_base_dir",
]

APP_NAME = "tfpick"


@dataclass(frozen=True, slots=True)
class InstallPathError:
    """No location could be determined for the binary."""

    tool: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.tool}"


@dataclass(frozen=True, slots=True)
class InstallTarget:
    """Where the binary will be written.

    Attributes:
        path: Absolute path of the executable
        on_path: True if an existing binary was found via PATH
    """

    path: Path
    on_path: bool


def home() -> Path | None:
    """Get the user's home directory, or None if it cannot be determined."""
    # Env vars first for CI/container scenarios
    var = "USERPROFILE" if detect_os() == "windows" else "HOME"
    value = os.environ.get(var)
    if value:
        return Path(value)
    try:
        return Path.home()
    except RuntimeError:
        return None


def user_config_dir(home_dir: Path | None) -> Path | None:
    """Directory holding ``config.toml``.

    ``~/.config/tfpick`` (or ``$XDG_CONFIG_HOME/tfpick``) on Unix,
    ``%APPDATA%/tfpick`` on Windows.
    """
    if detect_os() == "windows":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home_dir / "AppData" / "Roaming" / APP_NAME if home_dir else None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home_dir / ".config" / APP_NAME if home_dir else None


def default_base_dir(home_dir: Path | None) -> Path | None:
    """``~/.local/bin``: cached archives and the fallback install directory."""
    if home_dir is None:
        return None
    return home_dir / DEFAULT_LOCATION


def find_in_path(name: str, path_var: str | None = None) -> Path | None:
    """Find an existing executable named ``name`` on PATH."""
    found = shutil.which(name, path=path_var)
    return Path(found).absolute() if found else None


def resolve_install_target(
    exe_name: str,
    path_hit: Path | None,
    base_dir: Path | None,
) -> Result[InstallTarget, InstallPathError]:
    """Choose the install location.

    An existing binary found on PATH is replaced in place; otherwise the
    binary goes into ``base_dir``. Neither available is a fatal
    precondition failure.
    """
    if path_hit is not None:
        return Ok(InstallTarget(path=path_hit, on_path=True))
    if base_dir is not None:
        return Ok(InstallTarget(path=base_dir / exe_name, on_path=False))
    return Err(
        InstallPathError(
            tool=exe_name,
            message="could not find a path to install to (not on PATH and no home directory)",
        )
    )

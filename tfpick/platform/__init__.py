"""Platform abstraction layer."""

from .detection import PlatformTarget, detect, normalize_arch, normalize_os
from .paths import (
    InstallPathError,
    InstallTarget,
    default_base_dir,
    find_in_path,
    home,
    resolve_install_target,
    user_config_dir,
)

__all__ = [
    # detection
    "PlatformTarget",
    "detect",
    "normalize_arch",
    "normalize_os",
    # paths
    "InstallPathError",
    "InstallTarget",
    "default_base_dir",
    "find_in_path",
    "home",
    "resolve_install_target",
    "user_config_dir",
]

"""Operating system and architecture detection.

Release archives are published per ``{os}_{arch}`` pair using Go's naming
(``linux_amd64``, ``darwin_arm64``, ``windows_386``). This module maps the
host's Python-reported names onto that vocabulary.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "PlatformTarget",
    "detect",
    "detect_arch",
    "detect_os",
    "normalize_arch",
    "normalize_os",
]

_OS_PREFIXES: tuple[tuple[str, str], ...] = (
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win32", "windows"),
    ("cygwin", "windows"),
    ("msys", "windows"),
    ("freebsd", "freebsd"),
    ("openbsd", "openbsd"),
    ("sunos", "solaris"),
)

_ARCH_SYNONYMS: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "x86": "386",
    "i386": "386",
    "i686": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
}


@dataclass(frozen=True, slots=True)
class PlatformTarget:
    """Normalized (os, arch) pair used to pick an archive variant."""

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def exe_name(self, name: str) -> str:
        """Executable file name for ``name`` on this platform."""
        return f"{name}.exe" if self.is_windows else name

    def __str__(self) -> str:
        return f"{self.os}_{self.arch}"


def normalize_os(system: str) -> str:
    """Map a ``sys.platform`` value onto the release naming."""
    system = system.lower()
    for prefix, name in _OS_PREFIXES:
        if system.startswith(prefix):
            return name
    return system


def normalize_arch(machine: str) -> str:
    """Map a machine name onto the release naming.

    Unknown names pass through lower-cased.
    """
    machine = machine.lower()
    return _ARCH_SYNONYMS.get(machine, machine)


@lru_cache(maxsize=1)
def detect_os() -> str:
    """Detect the current operating system (cached)."""
    return normalize_os(_sys.platform)


@lru_cache(maxsize=1)
def detect_arch() -> str:
    """Detect the current CPU architecture (cached)."""
    # NOTE: platform.machine() may query WMI on Windows (slow/hangs on some machines).
    if detect_os() == "windows":
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return normalize_arch(machine)


def detect() -> PlatformTarget:
    """Detect the host's release target."""
    return PlatformTarget(os=detect_os(), arch=detect_arch())

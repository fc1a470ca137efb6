"""Binary installation from a release archive.

Release archives contain a single executable. The first entry (index 0)
is taken as that executable without looking at its name, and streamed to
the install path with mode ``0o755``. A failure midway leaves whatever
was written in place.
"""

from __future__ import annotations

import os
import shutil
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tfpick.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from tfpick.releases.archive import ArchiveHandle

__all__ = ["BinaryInstaller", "InstallError", "InstalledBinary", "EXECUTABLE_MODE"]

# rwxr-xr-x
EXECUTABLE_MODE = 0o755


@dataclass(frozen=True, slots=True)
class InstallError:
    """Installation error details.

    Attributes:
        target: Path that was being written
        message: Human-readable error message
    """

    target: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.target}"


@dataclass(frozen=True, slots=True)
class InstalledBinary:
    """Result of a successful installation.

    Attributes:
        path: Installed executable
        entry_name: Archive entry that was extracted
        size: Bytes written
    """

    path: Path
    entry_name: str
    size: int


class BinaryInstaller:
    """Writes the first archive entry to the install path.

    Usage:
        installer = BinaryInstaller()
        result = installer.install(handle, Path("~/.local/bin/terraform").expanduser())
    """

    def install(
        self,
        archive: ArchiveHandle,
        target: Path,
    ) -> Result[InstalledBinary, InstallError]:
        """Extract entry 0 of ``archive`` to ``target``.

        Args:
            archive: Fetched release archive
            target: Executable path to create or truncate

        Returns:
            Ok with InstalledBinary, or Err with InstallError
        """
        try:
            with archive.open() as zf:
                entries = zf.infolist()
                if not entries:
                    return Err(InstallError(target=target, message="Archive is empty"))
                entry = entries[0]

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(entry) as src, open(target, "wb") as dst:
                    os.chmod(target, EXECUTABLE_MODE)
                    shutil.copyfileobj(src, dst)
                    size = dst.tell()

            return Ok(InstalledBinary(path=target, entry_name=entry.filename, size=size))

        except zipfile.BadZipFile as e:
            return Err(InstallError(target=target, message=f"Invalid zip file: {e}"))
        except (zlib.error, NotImplementedError, RuntimeError) as e:
            return Err(InstallError(target=target, message=f"Cannot decompress entry: {e}"))
        except OSError as e:
            return Err(InstallError(target=target, message=f"IO error: {e}"))

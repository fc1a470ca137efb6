"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tfpick.core.config import ConfigError
from tfpick.core.errors import ErrorCode
from tfpick.output.console import Style
from tfpick.platform.paths import InstallPathError
from tfpick.releases.archive import ArchiveError
from tfpick.releases.constraints import ConstraintError
from tfpick.releases.http import HttpError
from tfpick.releases.installer import InstallError
from tfpick.releases.manifest import ManifestError
from tfpick.releases.resolution import SelectionError, UnresolvedVersion

if TYPE_CHECKING:
    from tfpick.output.console import ConsoleProtocol

__all__ = ["AppError", "error_exit_code", "print_error"]

type AppError = (
    ConfigError
    | InstallPathError
    | HttpError
    | ConstraintError
    | ManifestError
    | SelectionError
    | UnresolvedVersion
    | ArchiveError
    | InstallError
)


def print_error(error: AppError, console: ConsoleProtocol) -> None:
    """Print a fatal error with a hint where one helps."""
    match error:
        case InstallPathError(tool=tool):
            console.error(str(error))
            console.print(
                f"hint: put {tool} on your PATH or set HOME so ~/.local/bin can be used",
                Style.DIM,
            )
        case HttpError(url=url, status=status):
            console.error(f"request failed: {error}")
            if status == 404 and url.endswith(".zip"):
                console.print("hint: this version may not exist for your platform", Style.DIM)
        case ConstraintError():
            console.error(str(error))
        case ManifestError():
            console.error(str(error))
        case SelectionError(reason="no_tty"):
            console.error(str(error))
            console.print("hint: pass --install VERSION or set TF_VERSION", Style.DIM)
        case SelectionError() | UnresolvedVersion():
            console.error(str(error))
        case ArchiveError(source=source):
            console.error(str(error))
            if not source.startswith(("http://", "https://")):
                console.print(f"hint: delete the cached file {source} and retry", Style.DIM)
        case InstallError():
            console.error(f"installation failed: {error}")
        case ConfigError():
            console.error(str(error))


def error_exit_code(error: AppError) -> int:
    """Get the process exit code for an error."""
    match error:
        case ConfigError():
            return int(ErrorCode.USER_ERROR)
        case InstallPathError():
            return int(ErrorCode.ENV_ERROR)
        case HttpError():
            return int(ErrorCode.NETWORK_ERROR)
        case ConstraintError() | ArchiveError():
            return int(ErrorCode.PARSE_ERROR)
        case ManifestError() | InstallError():
            return int(ErrorCode.IO_ERROR)
        case SelectionError(reason="cancelled") | UnresolvedVersion():
            return int(ErrorCode.USER_ERROR)
        case SelectionError():
            return int(ErrorCode.ENV_ERROR)
    return int(ErrorCode.USER_ERROR)

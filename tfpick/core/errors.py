"""Exit codes for the tfpick CLI.

Every fatal failure ends the process with one of these codes. The numeric
values are part of the CLI contract and should remain stable:
- 0: Success
- 1: User error (bad option, invalid config, selection cancelled)
- 2: Environment error (no install location, no interactive terminal)
- 3: Parse error (malformed constraint, version or archive)
- 4: Network error (index or archive download failed)
- 5: I/O error (manifest unreadable, binary could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    PARSE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

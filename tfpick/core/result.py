"""Result type for explicit error handling.

Every fallible step of the install pipeline (index fetch, constraint
matching, archive download, extraction) returns ``Ok(value)`` or
``Err(error)`` instead of raising, so the CLI decides in one place how a
failure is reported and which exit code it maps to.

Usage:
    match fetch_versions(http, url, include_prerelease=False):
        case Ok(versions):
            ...
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]

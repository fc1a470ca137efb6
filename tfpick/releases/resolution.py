"""Deciding which version to install.

Resolution is an ordered chain of strategies. Each strategy either
resolves a version, passes (``Ok(None)``) to the next one, or fails the
whole resolution (``Err``). The default chain is:

1. ExplicitVersion: ``--install`` / ``TF_VERSION``, trusted verbatim
2. ConstraintVersion: the module's ``required_version`` matched against the index
3. InteractiveVersion: the user picks from the index

The release index is fetched lazily and at most once, so an explicit
version never touches the network.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol

from tfpick.core.result import Err, Ok, Result
from tfpick.releases.constraints import ConstraintError, resolve_by_constraint
from tfpick.releases.http import HttpError
from tfpick.releases.listing import fetch_versions
from tfpick.releases.manifest import ManifestError

if TYPE_CHECKING:
    from tfpick.output.console import ConsoleProtocol
    from tfpick.releases.http import HttpClient

__all__ = [
    "ConstraintReader",
    "ConstraintVersion",
    "ExplicitVersion",
    "InteractiveVersion",
    "ResolveError",
    "ResolvedVersion",
    "SelectionError",
    "Selector",
    "UnresolvedVersion",
    "VersionListing",
    "VersionResolver",
    "VersionStrategy",
]

VersionSource = Literal["explicit", "constraint", "interactive"]


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """The version chosen for installation and how it was chosen."""

    version: str
    source: VersionSource


@dataclass(frozen=True, slots=True)
class SelectionError:
    """Interactive selection failed.

    Attributes:
        reason: "no_tty", "empty" or "cancelled"
        message: Human-readable error message
    """

    reason: Literal["no_tty", "empty", "cancelled"]
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UnresolvedVersion:
    """Every strategy passed without choosing a version."""

    message: str = "no version could be resolved"

    def __str__(self) -> str:
        return self.message


type ResolveError = (
    HttpError | ConstraintError | ManifestError | SelectionError | UnresolvedVersion
)
type StrategyResult = Result[ResolvedVersion | None, ResolveError]
type Selector = Callable[[list[str]], Result[str, SelectionError]]
type ConstraintReader = Callable[[], Result[str | None, ManifestError]]


class VersionStrategy(Protocol):
    def resolve(self) -> StrategyResult: ...


class VersionListing:
    """Release index listing, fetched on first use and then reused."""

    def __init__(self, http: HttpClient, index_url: str, *, include_prerelease: bool) -> None:
        self._http = http
        self._index_url = index_url
        self._include_prerelease = include_prerelease
        self._versions: list[str] | None = None

    @property
    def fetched(self) -> bool:
        return self._versions is not None

    def get(self) -> Result[list[str], HttpError]:
        if self._versions is not None:
            return Ok(self._versions)
        result = fetch_versions(
            self._http, self._index_url, include_prerelease=self._include_prerelease
        )
        if isinstance(result, Ok):
            self._versions = result.value
        return result


@dataclass(frozen=True, slots=True)
class ExplicitVersion:
    version: str | None

    def resolve(self) -> StrategyResult:
        if not self.version:
            return Ok(None)
        return Ok(ResolvedVersion(version=self.version, source="explicit"))


@dataclass(frozen=True, slots=True)
class ConstraintVersion:
    listing: VersionListing
    read_constraint: ConstraintReader
    console: ConsoleProtocol

    def resolve(self) -> StrategyResult:
        constraint_result = self.read_constraint()
        if isinstance(constraint_result, Err):
            return constraint_result
        constraint = constraint_result.value
        if constraint is None:
            return Ok(None)

        self.console.info(f"module constraint is {constraint}")

        versions = self.listing.get()
        if isinstance(versions, Err):
            return versions

        match resolve_by_constraint(constraint, versions.value):
            case Err() as err:
                return err
            case Ok(None):
                self.console.warning(f"no listed version satisfies {constraint!r}")
                return Ok(None)
            case Ok(version):
                return Ok(ResolvedVersion(version=version, source="constraint"))


@dataclass(frozen=True, slots=True)
class InteractiveVersion:
    listing: VersionListing
    select: Selector

    def resolve(self) -> StrategyResult:
        versions = self.listing.get()
        if isinstance(versions, Err):
            return versions
        if not versions.value:
            return Err(SelectionError(reason="empty", message="release index lists no versions"))

        chosen = self.select(versions.value)
        if isinstance(chosen, Err):
            return chosen
        return Ok(ResolvedVersion(version=chosen.value, source="interactive"))


class VersionResolver:
    """Runs strategies in order until one resolves.

    Usage:
        resolver = VersionResolver([ExplicitVersion(args.install), ...])
        result = resolver.resolve()
    """

    def __init__(self, strategies: Sequence[VersionStrategy]) -> None:
        self._strategies = list(strategies)

    def resolve(self) -> Result[ResolvedVersion, ResolveError]:
        for strategy in self._strategies:
            result = strategy.resolve()
            if isinstance(result, Err):
                return result
            if result.value is not None:
                return Ok(result.value)
        return Err(UnresolvedVersion())

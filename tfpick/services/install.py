from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tfpick.core.result import Err, Ok, Result
from tfpick.releases.archive import ArchiveFetcher, FetchError
from tfpick.releases.installer import BinaryInstaller, InstalledBinary, InstallError
from tfpick.releases.resolution import (
    ConstraintReader,
    ConstraintVersion,
    ExplicitVersion,
    InteractiveVersion,
    ResolvedVersion,
    ResolveError,
    Selector,
    VersionListing,
    VersionResolver,
)

if TYPE_CHECKING:
    from tfpick.core.config import Config
    from tfpick.output.console import ConsoleProtocol
    from tfpick.platform.detection import PlatformTarget
    from tfpick.platform.paths import InstallTarget
    from tfpick.releases.http import HttpClient


type PipelineError = ResolveError | FetchError | InstallError


@dataclass(frozen=True, slots=True)
class InstallRequest:
    """What the user asked for on the command line."""

    explicit_version: str | None = None
    include_prerelease: bool = False


@dataclass(frozen=True, slots=True)
class InstallReport:
    version: ResolvedVersion
    binary: InstalledBinary
    from_cache: bool


class InstallService:
    """Resolve -> fetch -> install, strictly in sequence.

    All process-wide state (install target, cache dir, platform) is passed
    in already resolved.
    """

    def __init__(
        self,
        *,
        config: Config,
        platform: PlatformTarget,
        target: InstallTarget,
        cache_dir: Path | None,
        http: HttpClient,
        console: ConsoleProtocol,
        select: Selector,
        read_constraint: ConstraintReader,
    ) -> None:
        self._config = config
        self._platform = platform
        self._target = target
        self._http = http
        self._console = console
        self._select = select
        self._read_constraint = read_constraint
        self._fetcher = ArchiveFetcher(
            http,
            console,
            tool=config.release.tool,
            base_url=config.release.index_url,
            cache_dir=cache_dir,
        )
        self._installer = BinaryInstaller()

    @property
    def fetcher(self) -> ArchiveFetcher:
        return self._fetcher

    def resolver(self, request: InstallRequest) -> VersionResolver:
        listing = VersionListing(
            self._http,
            self._config.release.index_url,
            include_prerelease=request.include_prerelease,
        )
        return VersionResolver(
            [
                ExplicitVersion(request.explicit_version),
                ConstraintVersion(listing, self._read_constraint, self._console),
                InteractiveVersion(listing, self._select),
            ]
        )

    def run(self, request: InstallRequest) -> Result[InstallReport, PipelineError]:
        tool = self._config.release.tool
        target = self._target.path

        resolved = self.resolver(request).resolve()
        if isinstance(resolved, Err):
            return resolved
        version = resolved.value

        self._console.info(f"{tool} {version.version} will be installed to {target}")

        archive = self._fetcher.fetch_archive(version.version, self._platform)
        if isinstance(archive, Err):
            return archive
        handle = archive.value

        installed = self._installer.install(handle, target)
        if isinstance(installed, Err):
            return installed

        self._console.info(f"extracted {installed.value.entry_name} to {target}")
        return Ok(
            InstallReport(version=version, binary=installed.value, from_cache=handle.from_cache)
        )

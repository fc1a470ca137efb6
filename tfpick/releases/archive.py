"""Release archive fetching with a local cache.

Archives are cached as ``{cache_dir}/{tool}_{version}_{os}_{arch}.zip``.
A cached file is used as-is: it is neither re-validated against the
remote nor checksummed. Downloads are kept in memory and written to the
cache best-effort; a failed cache write only produces a warning.
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tfpick.core.result import Err, Ok, Result
from tfpick.releases.http import HttpError

if TYPE_CHECKING:
    from tfpick.output.console import ConsoleProtocol
    from tfpick.platform.detection import PlatformTarget
    from tfpick.releases.http import HttpClient

__all__ = ["ArchiveError", "ArchiveFetcher", "ArchiveHandle", "FetchError", "cache_key"]


@dataclass(frozen=True, slots=True)
class ArchiveError:
    """Archive content is not a readable ZIP file.

    Attributes:
        key: Cache key of the archive
        source: Cache path or download URL the bytes came from
        message: Decoder message
    """

    key: str
    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.key} (from {self.source})"


type FetchError = HttpError | ArchiveError


@dataclass(frozen=True, slots=True)
class ArchiveHandle:
    """A fetched release archive held in memory.

    Attributes:
        key: Cache key (archive file name)
        content: Raw ZIP bytes
        from_cache: True if served from the local cache
        source: Cache path or download URL
    """

    key: str
    content: bytes
    from_cache: bool
    source: str

    def open(self) -> zipfile.ZipFile:
        """Open the content as a ZIP archive.

        Raises:
            zipfile.BadZipFile: If the content is not a ZIP archive.
        """
        return zipfile.ZipFile(io.BytesIO(self.content))


def cache_key(tool: str, version: str, os_name: str, arch: str) -> str:
    """Archive file name for ``(tool, version, os, arch)``.

    Example: ``cache_key("terraform", "1.3.0", "linux", "amd64")`` ->
    ``"terraform_1.3.0_linux_amd64.zip"``.
    """
    return f"{tool}_{version}_{os_name}_{arch}.zip"


class ArchiveFetcher:
    """Locates or downloads release archives.

    Usage:
        fetcher = ArchiveFetcher(http, console, tool="terraform",
                                 base_url=BASE_URL, cache_dir=cache_dir)
        result = fetcher.fetch_archive("1.3.0", target)
    """

    def __init__(
        self,
        http: HttpClient,
        console: ConsoleProtocol,
        *,
        tool: str,
        base_url: str,
        cache_dir: Path | None,
    ) -> None:
        """Initialize fetcher.

        Args:
            http: HTTP client for downloads
            console: Progress and warning output
            tool: Tool name used in archive names
            base_url: Release index URL; archives live under ``{base_url}/{version}/``
            cache_dir: Cache directory, or None to disable caching
        """
        self._http = http
        self._console = console
        self._tool = tool
        self._base_url = base_url.rstrip("/")
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path | None:
        return self._cache_dir

    def cache_path(self, key: str) -> Path | None:
        if self._cache_dir is None:
            return None
        return self._cache_dir / key

    def archive_url(self, version: str, key: str) -> str:
        return f"{self._base_url}/{version}/{key}"

    def fetch_archive(
        self,
        version: str,
        target: PlatformTarget,
    ) -> Result[ArchiveHandle, FetchError]:
        """Return the archive for ``version`` on ``target``.

        Args:
            version: Resolved version
            target: Host platform

        Returns:
            Ok with ArchiveHandle, Err(HttpError) if the download fails, or
            Err(ArchiveError) if the bytes are not a ZIP archive
        """
        key = cache_key(self._tool, version, target.os, target.arch)
        path = self.cache_path(key)

        if path is not None and path.exists():
            self._console.info(f"using cached archive at {path}")
            try:
                content = path.read_bytes()
            except OSError as e:
                return Err(
                    ArchiveError(key=key, source=str(path), message=f"cannot read cache ({e})")
                )
            return self._decode(
                ArchiveHandle(key=key, content=content, from_cache=True, source=str(path))
            )

        url = self.archive_url(version, key)
        self._console.info(f"downloading archive from {url}")
        result = self._http.get_bytes(url)
        if isinstance(result, Err):
            return result

        handle = ArchiveHandle(key=key, content=result.value, from_cache=False, source=url)
        decoded = self._decode(handle)
        if isinstance(decoded, Ok):
            self._store(path, handle.content)
        return decoded

    def _decode(self, handle: ArchiveHandle) -> Result[ArchiveHandle, ArchiveError]:
        try:
            with handle.open():
                pass
        except zipfile.BadZipFile as e:
            return Err(
                ArchiveError(
                    key=handle.key,
                    source=handle.source,
                    message=f"invalid zip archive ({e})",
                )
            )
        return Ok(handle)

    def _store(self, path: Path | None, content: bytes) -> None:
        """Write a download to the cache; failures are reported, not raised."""
        if path is None:
            self._console.warning("unable to cache archive (no cache directory)")
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            self._console.warning(f"unable to cache archive at {path}: {e}")

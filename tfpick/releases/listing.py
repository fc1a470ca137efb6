"""Version discovery from the release index.

The index is an HTML directory listing in which every published release
appears as a link such as ``<a href="/terraform/1.3.0-rc1/">``. Versions
are extracted line by line, in document order (newest first on the
HashiCorp index), without sorting or de-duplication.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from tfpick.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from tfpick.releases.http import HttpClient, HttpError

__all__ = ["fetch_versions", "list_versions"]

_STABLE_RE = re.compile(r'/(\d+\.\d+\.\d+)/?"')
_ANY_RE = re.compile(r'/(\d+\.\d+\.\d+)(?:-[a-zA-Z0-9-]+)?/?"')

_TRIM = '/"'


def list_versions(index_text: str, include_prerelease: bool) -> list[str]:
    """Extract advertised versions from index text.

    Args:
        index_text: Raw release index document
        include_prerelease: Also accept ``-<identifier>`` suffixed versions

    Returns:
        Versions in order of appearance, at most one per line
    """
    pattern = _ANY_RE if include_prerelease else _STABLE_RE
    versions: list[str] = []
    for line in index_text.split("\n"):
        match = pattern.search(line)
        if match is not None:
            versions.append(match.group(0).strip(_TRIM))
    return versions


def fetch_versions(
    http: HttpClient,
    index_url: str,
    *,
    include_prerelease: bool,
) -> Result[list[str], HttpError]:
    """Fetch the release index and list its versions."""
    result = http.get_text(index_url)
    if isinstance(result, Err):
        return result
    return Ok(list_versions(result.value, include_prerelease))

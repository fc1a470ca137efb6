"""Release discovery, resolution, fetching and installation.

This package provides:
- HTTP client for the release index and archives (http.py)
- Version listing and constraint matching (listing.py, constraints.py)
- The module's required_version lookup (manifest.py)
- Version resolution chain (resolution.py)
- Archive cache/fetch and binary installation (archive.py, installer.py)
"""

from tfpick.releases.archive import ArchiveError, ArchiveFetcher, ArchiveHandle, cache_key
from tfpick.releases.constraints import ConstraintError, resolve_by_constraint
from tfpick.releases.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from tfpick.releases.installer import BinaryInstaller, InstalledBinary, InstallError
from tfpick.releases.listing import fetch_versions, list_versions
from tfpick.releases.manifest import ManifestError, read_required_version
from tfpick.releases.resolution import (
    ConstraintVersion,
    ExplicitVersion,
    InteractiveVersion,
    ResolvedVersion,
    SelectionError,
    UnresolvedVersion,
    VersionListing,
    VersionResolver,
)

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Listing / constraints
    "fetch_versions",
    "list_versions",
    "ConstraintError",
    "resolve_by_constraint",
    "ManifestError",
    "read_required_version",
    # Resolution
    "ConstraintVersion",
    "ExplicitVersion",
    "InteractiveVersion",
    "ResolvedVersion",
    "SelectionError",
    "UnresolvedVersion",
    "VersionListing",
    "VersionResolver",
    # Fetch / install
    "ArchiveError",
    "ArchiveFetcher",
    "ArchiveHandle",
    "cache_key",
    "BinaryInstaller",
    "InstalledBinary",
    "InstallError",
]

"""Application services."""

from .install import InstallReport, InstallRequest, InstallService

__all__ = ["InstallReport", "InstallRequest", "InstallService"]

"""Typed configuration loading.

The optional ``config.toml`` lets a user point tfpick at a mirror of the
release index, install a differently named tool, or move the cache and
default install directory. Every key is optional.

    [release]
    tool = "terraform"
    base_url = "https://releases.hashicorp.com/terraform"

    [paths]
    base_dir = "~/.local/bin"
    cache_dir = "~/.local/bin"

    [http]
    timeout = 30.0
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "HttpConfig",
    "PathsConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_BASE_URL",
    "DEFAULT_LOCATION",
    "DEFAULT_TOOL",
]

DEFAULT_TOOL = "terraform"
DEFAULT_BASE_URL = "https://releases.hashicorp.com/terraform"
# Relative to the home directory.
DEFAULT_LOCATION = ".local/bin"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Config file could not be read or has the wrong shape."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Where releases come from and which tool they contain."""

    tool: str = DEFAULT_TOOL
    base_url: str = DEFAULT_BASE_URL

    @property
    def index_url(self) -> str:
        return self.base_url.rstrip("/")


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """User overrides for local directories.

    None means "derive from the home directory" (``~/.local/bin``).
    """

    base_dir: str | None = None
    cache_dir: str | None = None


@dataclass(frozen=True, slots=True)
class HttpConfig:
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        release: StrDict = get_table(data, "release") or {}
        paths: StrDict = get_table(data, "paths") or {}
        http: StrDict = get_table(data, "http") or {}

        timeout = get_float(http, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"http.timeout must be positive, got {timeout}")

        return cls(
            release=ReleaseConfig(
                tool=get_str(release, "tool") or DEFAULT_TOOL,
                base_url=get_str(release, "base_url") or DEFAULT_BASE_URL,
            ),
            paths=PathsConfig(
                base_dir=get_str(paths, "base_dir"),
                cache_dir=get_str(paths, "cache_dir"),
            ),
            http=HttpConfig(timeout=timeout or DEFAULT_TIMEOUT),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax in {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config {path}: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure in {path}: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, defaults otherwise.

    A file that exists but is malformed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tfpick.core.config import Config, ConfigError, load_config, load_config_or_default
from tfpick.core.result import Err, Ok, Result
from tfpick.output.console import ConsoleProtocol, RichConsole
from tfpick.platform.detection import PlatformTarget, detect
from tfpick.platform.paths import (
    InstallPathError,
    InstallTarget,
    default_base_dir,
    find_in_path,
    home,
    resolve_install_target,
    user_config_dir,
)
from tfpick.releases.http import HttpClient, RealHttpClient


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    platform: PlatformTarget
    target: InstallTarget
    cache_dir: Path | None
    http: HttpClient
    console: ConsoleProtocol


def _load(config_path: Path | None, home_dir: Path | None) -> Result[Config, ConfigError]:
    if config_path is not None:
        return load_config(config_path.expanduser())
    config_dir = user_config_dir(home_dir)
    if config_dir is None:
        return Ok(Config())
    return load_config_or_default(config_dir / "config.toml")


def _configured_dir(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def build_context(
    config_path: Path | None = None,
    console: ConsoleProtocol | None = None,
) -> Result[CLIContext, ConfigError | InstallPathError]:
    """Resolve config, platform and local paths once for the whole run."""
    console = console or RichConsole()
    home_dir = home()

    config_result = _load(config_path, home_dir)
    if isinstance(config_result, Err):
        return config_result
    config = config_result.value

    platform = detect()
    base_dir = _configured_dir(config.paths.base_dir) or default_base_dir(home_dir)
    cache_dir = _configured_dir(config.paths.cache_dir) or base_dir

    exe_name = platform.exe_name(config.release.tool)
    target_result = resolve_install_target(exe_name, find_in_path(exe_name), base_dir)
    if isinstance(target_result, Err):
        return target_result
    target = target_result.value

    if not target.on_path:
        console.warning(f"could not locate {exe_name}, installing to {target.path}")
        console.print(
            f"make sure to include {target.path.parent} in your $PATH",
        )

    return Ok(
        CLIContext(
            config=config,
            platform=platform,
            target=target,
            cache_dir=cache_dir,
            http=RealHttpClient(timeout=config.http.timeout),
            console=console,
        )
    )

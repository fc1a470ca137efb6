from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tfpick import __version__
from tfpick.cli.context import CLIContext
from tfpick.core.config import Config, ConfigError, ReleaseConfig
from tfpick.core.errors import ErrorCode
from tfpick.core.result import Err, Ok, Result
from tfpick.output.console import MockConsole
from tfpick.platform.detection import PlatformTarget
from tfpick.platform.paths import InstallTarget
from tfpick.releases.http import MockHttpClient
from tfpick.releases.resolution import SelectionError

BASE_URL = "https://releases.example.com/terraform"
INDEX = "\n".join(f'<a href="/terraform/{v}/">' for v in ["1.3.0", "1.3.0-rc1", "1.2.0", "1.0.0"])

runner = CliRunner()


def _zip(data: bytes) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("terraform", data)
    return buffer.getvalue()


def _archive_url(version: str) -> str:
    return f"{BASE_URL}/{version}/terraform_{version}_linux_amd64.zip"


class FakeEnv:
    def __init__(self, tmp_path: Path) -> None:
        self.http = MockHttpClient()
        self.http.set_text(BASE_URL, INDEX)
        for version in ("1.3.0", "1.3.0-rc1", "1.2.0", "1.0.0"):
            self.http.set_bytes(_archive_url(version), _zip(version.encode()))
        self.console = MockConsole()
        self.target = tmp_path / "bin" / "terraform"
        self.offered: list[list[str]] = []
        self.answer: Result[str, SelectionError] | None = None

    def context(self) -> CLIContext:
        return CLIContext(
            config=Config(release=ReleaseConfig(base_url=BASE_URL)),
            platform=PlatformTarget(os="linux", arch="amd64"),
            target=InstallTarget(path=self.target, on_path=False),
            cache_dir=self.target.parent,
            http=self.http,
            console=self.console,
        )

    def selector(self, _tool: str):
        def select(versions: list[str]) -> Result[str, SelectionError]:
            self.offered.append(versions)
            return self.answer if self.answer is not None else Ok(versions[0])

        return select


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeEnv:
    import tfpick.cli.app as app_module

    fake = FakeEnv(tmp_path)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("TF_VERSION", raising=False)
    monkeypatch.delenv("TFPICK_CONFIG", raising=False)
    monkeypatch.setattr(app_module, "build_context", lambda _path, _console: Ok(fake.context()))
    monkeypatch.setattr(app_module, "version_selector", fake.selector)
    return fake


def test_version_flag() -> None:
    from tfpick.cli.app import app

    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_explicit_install_flag(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    result = runner.invoke(app, ["-i", "1.0.0"])

    assert result.exit_code == 0
    assert env.target.read_bytes() == b"1.0.0"
    assert env.offered == []
    assert env.console.find("terraform 1.0.0 installed to")


def test_env_var_install(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    result = runner.invoke(app, [], env={"TF_VERSION": "1.2.0"})

    assert result.exit_code == 0
    assert env.target.read_bytes() == b"1.2.0"


def test_module_constraint(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    Path("version.tf").write_text('terraform { required_version = "1.0.0" }', encoding="utf-8")

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert env.target.read_bytes() == b"1.0.0"
    assert env.console.find("module constraint is 1.0.0")
    assert env.offered == []


def test_interactive_default_is_first(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert env.offered == [["1.3.0", "1.2.0", "1.0.0"]]
    assert env.target.read_bytes() == b"1.3.0"


def test_list_all_offers_prereleases(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    env.answer = Ok("1.3.0-rc1")

    result = runner.invoke(app, ["--list-all"])

    assert result.exit_code == 0
    assert "1.3.0-rc1" in env.offered[0]
    assert env.target.read_bytes() == b"1.3.0-rc1"


def test_no_tty_exit_code(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    env.answer = Err(SelectionError(reason="no_tty", message="no terminal"))

    result = runner.invoke(app, [])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)
    assert env.console.has_error()
    assert not env.target.exists()


def test_unknown_version_is_network_error(env: FakeEnv) -> None:
    from tfpick.cli.app import app

    result = runner.invoke(app, ["--install", "9.9.9"])

    assert result.exit_code == int(ErrorCode.NETWORK_ERROR)
    assert env.console.find("request failed")


def test_context_error_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    import tfpick.cli.app as app_module

    monkeypatch.setattr(
        app_module, "build_context", lambda _path, _console: Err(ConfigError("broken config"))
    )

    result = runner.invoke(app_module.app, ["-i", "1.0.0"])

    assert result.exit_code == int(ErrorCode.USER_ERROR)

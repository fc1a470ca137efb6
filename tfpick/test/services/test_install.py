"""Tests for services/install.py - Resolve, fetch and install pipeline."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from tfpick.core.config import Config, ReleaseConfig
from tfpick.core.result import Err, Ok, Result
from tfpick.output.console import MockConsole
from tfpick.platform.detection import PlatformTarget
from tfpick.platform.paths import InstallTarget
from tfpick.releases.archive import ArchiveError
from tfpick.releases.http import HttpError, MockHttpClient
from tfpick.releases.installer import InstallError
from tfpick.releases.resolution import SelectionError
from tfpick.services.install import InstallRequest, InstallService

BASE_URL = "https://releases.example.com/terraform"
LINUX = PlatformTarget(os="linux", arch="amd64")
INDEX = "\n".join(f'<a href="/terraform/{v}/">' for v in ["1.3.0", "1.2.0-rc1", "1.2.0"])


def make_zip(data: bytes) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("terraform", data)
    return buffer.getvalue()


def archive_url(version: str) -> str:
    return f"{BASE_URL}/{version}/terraform_{version}_linux_amd64.zip"


def pick_first(versions: list[str]) -> Result[str, SelectionError]:
    return Ok(versions[0])


@pytest.fixture
def http() -> MockHttpClient:
    client = MockHttpClient()
    client.set_text(BASE_URL, INDEX)
    for version in ("1.3.0", "1.2.0", "1.2.0-rc1", "1.0.0"):
        client.set_bytes(archive_url(version), make_zip(f"terraform {version}".encode()))
    return client


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


def make_service(
    tmp_path: Path,
    http: MockHttpClient,
    console: MockConsole,
    *,
    constraint: str | None = None,
    select=pick_first,
) -> InstallService:
    return InstallService(
        config=Config(release=ReleaseConfig(base_url=BASE_URL + "/")),
        platform=LINUX,
        target=InstallTarget(path=tmp_path / "bin" / "terraform", on_path=False),
        cache_dir=tmp_path / "cache",
        http=http,
        console=console,
        select=select,
        read_constraint=lambda: Ok(constraint),
    )


class TestInstallServiceRun:
    """Tests for InstallService.run()."""

    def test_explicit_version(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        service = make_service(tmp_path, http, console, constraint=">= 1.3.0")

        result = service.run(InstallRequest(explicit_version="1.0.0"))

        assert isinstance(result, Ok)
        assert result.value.version.version == "1.0.0"
        assert result.value.version.source == "explicit"
        assert (tmp_path / "bin" / "terraform").read_bytes() == b"terraform 1.0.0"
        assert http.calls == [("get_bytes", archive_url("1.0.0"))]

    def test_constraint(self, tmp_path: Path, http: MockHttpClient, console: MockConsole) -> None:
        service = make_service(tmp_path, http, console, constraint="< 1.3.0")

        result = service.run(InstallRequest())

        assert isinstance(result, Ok)
        assert result.value.version.version == "1.2.0"
        assert result.value.version.source == "constraint"

    def test_interactive_with_prereleases(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        offered: list[list[str]] = []

        def select(versions: list[str]) -> Result[str, SelectionError]:
            offered.append(versions)
            return Ok("1.2.0-rc1")

        service = make_service(tmp_path, http, console, select=select)

        result = service.run(InstallRequest(include_prerelease=True))

        assert isinstance(result, Ok)
        assert offered == [["1.3.0", "1.2.0-rc1", "1.2.0"]]
        assert (tmp_path / "bin" / "terraform").read_bytes() == b"terraform 1.2.0-rc1"

    def test_progress_messages(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        make_service(tmp_path, http, console).run(InstallRequest(explicit_version="1.3.0"))

        text = console.text
        assert "terraform 1.3.0 will be installed to" in text
        assert f"downloading archive from {archive_url('1.3.0')}" in text
        assert "extracted terraform to" in text

    def test_second_run_uses_cache(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        service = make_service(tmp_path, http, console)
        request = InstallRequest(explicit_version="1.3.0")

        first = service.run(request)
        second = service.run(request)

        assert isinstance(first, Ok) and first.value.from_cache is False
        assert isinstance(second, Ok) and second.value.from_cache is True
        assert http.calls.count(("get_bytes", archive_url("1.3.0"))) == 1
        assert (tmp_path / "cache" / "terraform_1.3.0_linux_amd64.zip").is_file()

    def test_unknown_version(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        result = make_service(tmp_path, http, console).run(InstallRequest(explicit_version="9.9.9"))

        assert isinstance(result, Err)
        assert isinstance(result.error, HttpError)
        assert result.error.status == 404
        assert not (tmp_path / "bin" / "terraform").exists()

    def test_bad_archive(self, tmp_path: Path, http: MockHttpClient, console: MockConsole) -> None:
        http.set_bytes(archive_url("1.3.0"), b"not a zip")

        result = make_service(tmp_path, http, console).run(InstallRequest(explicit_version="1.3.0"))

        assert isinstance(result, Err)
        assert isinstance(result.error, ArchiveError)

    def test_install_failure(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        (tmp_path / "bin" / "terraform").mkdir(parents=True)

        result = make_service(tmp_path, http, console).run(InstallRequest(explicit_version="1.3.0"))

        assert isinstance(result, Err)
        assert isinstance(result.error, InstallError)

    def test_selection_cancelled(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        cancelled = SelectionError(reason="cancelled", message="version selection cancelled")
        service = make_service(tmp_path, http, console, select=lambda _: Err(cancelled))

        result = service.run(InstallRequest())

        assert result == Err(cancelled)
        assert not any(method == "get_bytes" for method, _ in http.calls)


class TestInstallServiceWiring:
    def test_fetcher_uses_config(
        self, tmp_path: Path, http: MockHttpClient, console: MockConsole
    ) -> None:
        fetcher = make_service(tmp_path, http, console).fetcher

        assert fetcher.cache_dir == tmp_path / "cache"
        assert fetcher.archive_url("1.3.0", "k.zip") == f"{BASE_URL}/1.3.0/k.zip"

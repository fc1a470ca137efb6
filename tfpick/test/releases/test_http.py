"""Tests for releases/http.py - HTTP client abstraction."""

from __future__ import annotations

import pytest

from tfpick.core.result import Err, Ok
from tfpick.releases.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


# =============================================================================
# HttpError tests
# =============================================================================


class TestHttpError:
    """Tests for HttpError dataclass."""

    def test_str_with_status(self) -> None:
        error = HttpError(url="https://example.com/x.zip", status=404, message="Not Found")
        assert str(error) == "HTTP 404: Not Found (https://example.com/x.zip)"

    def test_str_without_status(self) -> None:
        """Transport errors carry status 0."""
        error = HttpError(url="https://example.com", status=0, message="Connection refused")
        assert str(error) == "Connection refused (https://example.com)"

    def test_is_frozen(self) -> None:
        error = HttpError(url="https://example.com", status=404, message="Not Found")
        with pytest.raises(AttributeError):
            error.status = 500  # type: ignore[misc]


# =============================================================================
# MockHttpClient tests
# =============================================================================


class TestMockHttpClient:
    """Tests for MockHttpClient."""

    def test_isinstance_check(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_get_text(self) -> None:
        client = MockHttpClient()
        client.set_text("https://example.com/", "<html/>")
        assert client.get_text("https://example.com/") == Ok("<html/>")

    def test_get_bytes(self) -> None:
        client = MockHttpClient()
        client.set_bytes("https://example.com/a.zip", b"PK")
        assert client.get_bytes("https://example.com/a.zip") == Ok(b"PK")

    def test_unknown_url_is_404(self) -> None:
        client = MockHttpClient()

        result = client.get_bytes("https://example.com/missing.zip")

        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_configured_error(self) -> None:
        client = MockHttpClient()
        error = HttpError(url="https://example.com/", status=500, message="boom")
        client.set_text("https://example.com/", error)
        assert client.get_text("https://example.com/") == Err(error)

    def test_records_calls(self) -> None:
        client = MockHttpClient()
        client.get_text("https://a")
        client.get_bytes("https://b")
        assert client.calls == [("get_text", "https://a"), ("get_bytes", "https://b")]


# =============================================================================
# RealHttpClient tests
# =============================================================================


class TestRealHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(RealHttpClient(), HttpClient)

    def test_defaults(self) -> None:
        client = RealHttpClient()
        assert client.timeout == 30.0
        assert client.user_agent.startswith("tfpick/")

    def test_invalid_url(self) -> None:
        result = RealHttpClient().get_text("not a url")

        assert isinstance(result, Err)
        assert result.error.status == 0

    @pytest.mark.network
    def test_fetch_release_index(self) -> None:
        result = RealHttpClient(timeout=10.0).get_text("https://releases.hashicorp.com/terraform")

        assert isinstance(result, Ok)
        assert "terraform_" in result.value

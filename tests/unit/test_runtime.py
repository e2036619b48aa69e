"""Unit tests for the warden.runtime module."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon.asgi
import falcon.testing
import pytest

from warden import runtime


class TestCreateApp:
    """Tests for the create_app factory function."""

    def test_health_only_without_token(self) -> None:
        """Without a token only the probes are served."""
        app = runtime.create_app()
        client = falcon.testing.TestClient(app)

        assert isinstance(app, falcon.asgi.App)
        assert client.simulate_get("/health").status_code == HTTPStatus.OK
        assert client.simulate_get("/ready").json == {
            "status": "ready",
            "webhooks": False,
        }
        result = client.simulate_post("/webhooks/github")
        assert result.status_code == HTTPStatus.NOT_FOUND

    def test_webhooks_enabled_with_token(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A token mounts the webhook endpoint."""
        monkeypatch.setenv("WARDEN_GITHUB_TOKEN", "ghp_example")
        monkeypatch.setenv("WARDEN_WEBHOOK_SECRET", "s3cret")
        client = falcon.testing.TestClient(runtime.create_app())

        assert client.simulate_get("/ready").json == {
            "status": "ready",
            "webhooks": True,
        }
        result = client.simulate_post(
            "/webhooks/github", headers={"X-GitHub-Event": "ping"}
        )
        assert result.status_code == HTTPStatus.UNAUTHORIZED


class TestParsePort:
    """Tests for ``_parse_port``."""

    @pytest.mark.parametrize(("raw", "expected"), [("1", 1), ("8080", 8080)])
    def test_valid_ports(self, raw: str, expected: int) -> None:
        """Valid port numbers are returned as integers."""
        assert runtime._parse_port(raw) == expected  # noqa: SLF001

    @pytest.mark.parametrize("raw", ["0", "65536", "http", ""])
    def test_invalid_ports_exit(self, raw: str) -> None:
        """Invalid ports terminate the process."""
        with pytest.raises(SystemExit):
            runtime._parse_port(raw)  # noqa: SLF001


def test_main_starts_granian(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() serves the runtime factory with the configured address."""
    started: dict[str, typ.Any] = {}

    class _FakeGranian:
        def __init__(self, target: str, **kwargs: typ.Any) -> None:  # noqa: ANN401
            started["target"] = target
            started.update(kwargs)

        def serve(self) -> None:
            started["served"] = True

    monkeypatch.setattr("granian.Granian", _FakeGranian)
    monkeypatch.setattr(runtime, "configure_logging", lambda level: (level, False))
    monkeypatch.setenv("WARDEN_HOST", "127.0.0.1")
    monkeypatch.setenv("WARDEN_PORT", "9000")

    runtime.main()

    assert started["target"] == "warden.runtime:create_app"
    assert started["address"] == "127.0.0.1"
    assert started["port"] == 9000
    assert started["factory"] is True
    assert started["served"] is True

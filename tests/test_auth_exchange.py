from __future__ import annotations

import json
from pathlib import Path

import httpx
from fastapi.testclient import TestClient

from playground_runner.app import create_app
from playground_runner.config import RunnerConfig
from playground_runner.oauth import GITHUB_TOKEN_URL
from playground_runner.telemetry import TelemetryClient


class RecordingTelemetry(TelemetryClient):
    def __init__(self) -> None:
        super().__init__(None)
        self.exceptions: list[BaseException] = []

    def track_exception(self, error, properties=None) -> None:
        self.exceptions.append(error)


def _config() -> RunnerConfig:
    return RunnerConfig.model_validate(
        {
            "instrumentation_key": "ikey",
            "production": {
                "client_id": "prod-id",
                "client_secret": "prod-secret",
                "redirect_uri": "https://playground.example/auth",
            },
        }
    )


def test_exchange_relays_provider_body(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    seen: list[httpx.Request] = []
    upstream_body = b'{"access_token":"gho_123","token_type":"bearer","scope":"gist"}'

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=upstream_body)

    app = create_app(config=_config(), transport=httpx.MockTransport(handler))
    with TestClient(app) as client:
        r = client.post("/auth/production", json={"code": "abc", "state": "xyz"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.content == upstream_body

    assert len(seen) == 1
    outbound = seen[0]
    assert outbound.method == "POST"
    assert str(outbound.url) == GITHUB_TOKEN_URL
    assert outbound.headers["accept"] == "application/json"
    assert json.loads(outbound.content) == {
        "client_id": "prod-id",
        "client_secret": "prod-secret",
        "redirect_uri": "https://playground.example/auth",
        "code": "abc",
        "state": "xyz",
    }


def test_provider_rejection_is_still_relayed_with_200(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    rejected = b'{"error":"bad_verification_code"}'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, content=rejected)

    app = create_app(config=_config(), transport=httpx.MockTransport(handler))
    with TestClient(app) as client:
        r = client.post("/auth/production", data={"code": "stale"})

    assert r.status_code == 200
    assert r.content == rejected


def test_empty_code_renders_invalid_code_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    telemetry = RecordingTelemetry()
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    app = create_app(
        config=_config(), telemetry=telemetry, transport=httpx.MockTransport(handler)
    )
    with TestClient(app) as client:
        for body in ({"code": "   "}, {"state": "xyz"}, {"code": 12}):
            r = client.post("/auth/production", json=body)
            assert r.status_code == 200
            assert r.headers["content-type"].startswith("text/html")
            assert "Received invalid code." in r.text

    assert calls == []
    assert len(telemetry.exceptions) == 3


def test_unknown_environment_renders_configuration_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    telemetry = RecordingTelemetry()

    app = create_app(
        config=_config(),
        telemetry=telemetry,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
    )
    with TestClient(app) as client:
        r = client.post("/auth/staging", json={"code": "abc"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Bad environment configuration: staging" in r.text
    assert len(telemetry.exceptions) == 1


def test_transport_failure_renders_upstream_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    telemetry = RecordingTelemetry()

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    app = create_app(
        config=_config(), telemetry=telemetry, transport=httpx.MockTransport(handler)
    )
    with TestClient(app) as client:
        r = client.post("/auth/production", json={"code": "abc"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Error retrieving GitHub access token" in r.text
    assert "ConnectError" in r.text
    assert len(telemetry.exceptions) == 1

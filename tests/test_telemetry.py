from __future__ import annotations

from pathlib import Path

import yaml
from applicationinsights import TelemetryClient as AppInsightsClient
from fastapi.testclient import TestClient

from playground_runner.app import create_app
from playground_runner.telemetry import TelemetryClient, setup_telemetry


class FakeBackend:
    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.exceptions: list[tuple] = []
        self.flushed = 0

    def track_event(self, name, properties=None, measurements=None) -> None:
        self.events.append((name, properties, measurements))

    def track_exception(self, type=None, value=None, tb=None, properties=None) -> None:
        self.exceptions.append((type, value, properties))

    def flush(self) -> None:
        self.flushed += 1


def test_setup_telemetry_with_key_uses_app_insights() -> None:
    client = setup_telemetry("00000000-0000-0000-0000-000000000000")

    assert client.enabled
    assert isinstance(client.backend, AppInsightsClient)
    assert client.backend.context.instrumentation_key == "00000000-0000-0000-0000-000000000000"


def test_setup_telemetry_without_key_is_log_only() -> None:
    client = setup_telemetry(None)

    assert not client.enabled
    client.track_event("[RUNNER] Running x", {"ID": "x"})
    client.track_exception(ValueError("boom"))
    client.flush()


def test_events_and_exceptions_are_forwarded_to_backend() -> None:
    backend = FakeBackend()
    client = TelemetryClient("ikey", backend)

    client.track_event("[RUNNER] Compilation Complete", {"ID": "s1"}, {"TOTAL_COMPILE": 1.5})
    try:
        raise RuntimeError("render failed")
    except RuntimeError as e:
        client.track_exception(e)
    client.flush()

    assert backend.events == [("[RUNNER] Compilation Complete", {"ID": "s1"}, {"TOTAL_COMPILE": 1.5})]
    assert len(backend.exceptions) == 1
    exc_type, exc_value, _ = backend.exceptions[0]
    assert exc_type is RuntimeError
    assert str(exc_value) == "render failed"
    assert backend.flushed == 1


def test_snippet_run_reaches_backend_and_flushes_on_shutdown(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RUNNER_HOME", str(tmp_path))
    backend = FakeBackend()
    snippet = yaml.safe_dump({"id": "snip-7", "script": {"content": "console.log(1)"}})

    with TestClient(create_app(telemetry=TelemetryClient("ikey", backend))) as client:
        r = client.post("/", json={"snippet": snippet})
        assert r.status_code == 200
        bad = client.post("/", json={})
        assert "Received invalid snippet data." in bad.text

    assert [name for name, _, _ in backend.events] == [
        "[RUNNER] Compilation Complete",
        "[RUNNER] Running snip-7",
    ]
    assert len(backend.exceptions) == 1
    assert backend.flushed == 1

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from playground_runner.home import RunnerPaths

_RESERVED_KEYS = frozenset({"instrumentation_key", "environments", "network", "logging"})


class OAuthEnvironment(BaseModel):
    """OAuth application registered with GitHub for one deployment environment."""

    client_id: str
    client_secret: str
    redirect_uri: str | None = Field(default=None)


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class LoggingConfig(BaseModel):
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class RunnerConfig(BaseModel):
    instrumentation_key: str | None = Field(default=None)
    environments: dict[str, OAuthEnvironment] = Field(default_factory=dict)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="before")
    @classmethod
    def _collect_flat_environments(cls, data: Any) -> Any:
        """Accept environments declared at the top level next to instrumentation_key.

        `{"instrumentation_key": "...", "local": {...}}` is equivalent to
        `{"instrumentation_key": "...", "environments": {"local": {...}}}`.
        """

        if not isinstance(data, dict):
            return data

        flat = {k: v for k, v in data.items() if k not in _RESERVED_KEYS}
        if not flat:
            return data

        out = {k: v for k, v in data.items() if k in _RESERVED_KEYS}
        environments = dict(out.get("environments") or {})
        environments.update(flat)
        out["environments"] = environments
        return out

    def environment(self, name: str) -> OAuthEnvironment | None:
        return self.environments.get(name)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_runner_config(paths: RunnerPaths) -> RunnerConfig:
    """Load config from ${RUNNER_HOME}/config/runner.json.

    - If missing: returns defaults (no OAuth environments, no telemetry key).
    - Top-level keys other than `instrumentation_key`, `environments`, `network` and
      `logging` are OAuth environments. An environment named `network` or `logging`
      must be declared under `environments`.
    - Validation is performed by Pydantic.
    """

    config_path = paths.runner_config_path
    if not config_path.exists():
        return RunnerConfig()

    raw = _read_json(config_path)
    return RunnerConfig.model_validate(raw)


def write_runner_config(paths: RunnerPaths, config: RunnerConfig) -> None:
    """Persist config to ${RUNNER_HOME}/config/runner.json."""

    payload = config.model_dump(mode="json", exclude_none=True)
    paths.config_dir.mkdir(parents=True, exist_ok=True)
    paths.runner_config_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

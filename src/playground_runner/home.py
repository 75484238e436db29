"""The runner home directory.

Holds `config/runner.json` (OAuth environments, instrumentation key, network and
logging settings) and `logs/runner.log`. Nothing else is persisted.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunnerPaths:
    home: Path
    config_dir: Path
    logs_dir: Path

    @property
    def runner_config_path(self) -> Path:
        return self.config_dir / "runner.json"

    @property
    def log_path(self) -> Path:
        return self.logs_dir / "runner.log"


def resolve_runner_home(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ

    raw = (env.get("RUNNER_HOME") or "").strip()
    if raw:
        candidate = Path(raw).expanduser()
        # Relative values are anchored at the user's home, never the CWD.
        if not candidate.is_absolute():
            candidate = (Path.home() / candidate).resolve()
        else:
            candidate = candidate.resolve()
        return candidate

    def default_home() -> Path:
        if sys.platform.startswith("win"):
            base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
            if base:
                return Path(base) / "PlaygroundRunner"
            return Path.home() / "AppData" / "Local" / "PlaygroundRunner"

        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / "PlaygroundRunner"

        xdg = os.environ.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg) / "playground-runner"
        return Path.home() / ".local" / "share" / "playground-runner"

    return default_home().resolve()


def ensure_runner_layout(home: Path) -> RunnerPaths:
    home.mkdir(parents=True, exist_ok=True)

    config_dir = home / "config"
    logs_dir = home / "logs"

    for path in (config_dir, logs_dir):
        path.mkdir(parents=True, exist_ok=True)

    return RunnerPaths(home=home, config_dir=config_dir, logs_dir=logs_dir)

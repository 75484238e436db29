from playground_runner.config import OAuthEnvironment, RunnerConfig, load_runner_config
from playground_runner.errors import RunnerError
from playground_runner.home import RunnerPaths, ensure_runner_layout, resolve_runner_home

__version__ = "0.1.0"

__all__ = [
    "OAuthEnvironment",
    "RunnerConfig",
    "RunnerError",
    "RunnerPaths",
    "__version__",
    "ensure_runner_layout",
    "load_runner_config",
    "resolve_runner_home",
]

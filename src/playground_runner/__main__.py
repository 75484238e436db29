from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

import uvicorn

from playground_runner.app import create_app
from playground_runner.config import load_runner_config
from playground_runner.home import ensure_runner_layout, resolve_runner_home

logger = logging.getLogger("playground_runner")


def main() -> None:
    home = resolve_runner_home()
    paths = ensure_runner_layout(home)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            RotatingFileHandler(paths.log_path, maxBytes=10 * 1024 * 1024, backupCount=5),
            logging.StreamHandler(),
        ],
    )

    config = load_runner_config(paths)

    host = os.environ.get("RUNNER_BIND") or config.network.bind_host

    env_port = os.environ.get("PORT")
    port = int(env_port) if env_port else config.network.port

    logger.info(f"Add-in Playground Runner listening on port {port}")
    uvicorn.run(create_app(config=config), host=host, port=port)


if __name__ == "__main__":
    main()

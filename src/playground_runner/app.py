from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from playground_runner import rendering
from playground_runner.api.router import render_error
from playground_runner.api.router import router as runner_router
from playground_runner.config import RunnerConfig, load_runner_config
from playground_runner.home import ensure_runner_layout, resolve_runner_home
from playground_runner.telemetry import TelemetryClient, setup_telemetry

logger = logging.getLogger(__name__)


def create_app(
    *,
    config: RunnerConfig | None = None,
    telemetry: TelemetryClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the runner application.

    `config` and `telemetry` default to what the runner home provides; `transport`
    replaces the network layer of the outbound HTTP client.
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        home = resolve_runner_home()
        paths = ensure_runner_layout(home)
        runner_config = config if config is not None else load_runner_config(paths)

        # Configure Logging
        file_handler = RotatingFileHandler(
            paths.log_path,
            maxBytes=runner_config.logging.max_size_mb * 1024 * 1024,
            backupCount=runner_config.logging.backup_count,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(formatter)

        root = logging.getLogger()
        root.setLevel(logging.INFO)
        # Avoid adding duplicate handlers if reloaded
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            root.addHandler(file_handler)

        logger.info("Playground Runner starting up")
        logger.info(f"Logs directory: {paths.logs_dir}")
        logger.info(f"OAuth environments: {sorted(runner_config.environments)}")

        app.state.runner_home = home
        app.state.runner_paths = paths
        app.state.runner_config = runner_config
        app.state.telemetry = (
            telemetry
            if telemetry is not None
            else setup_telemetry(runner_config.instrumentation_key)
        )
        app.state.http_client = httpx.AsyncClient(transport=transport)

        try:
            yield
        finally:
            await app.state.http_client.aclose()
            app.state.telemetry.flush()

    app = FastAPI(title="Playground Runner", version="0.1.0", lifespan=_lifespan)
    app.state.editor_page = rendering.EDITOR_PAGE

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    # The runner is embedded by the editor and the gallery, which live on other origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        telemetry_client = getattr(request.app.state, "telemetry", None)
        if telemetry_client is None:
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
        return render_error(exc, telemetry_client, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal server error", status_code=500)

    app.include_router(runner_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app

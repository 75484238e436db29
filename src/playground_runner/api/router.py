from __future__ import annotations

import logging
import time
from pathlib import Path

import httpx
import yaml
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from playground_runner import rendering
from playground_runner.api.models import AuthExchangeRequest, RunnerPostData, read_body
from playground_runner.config import RunnerConfig
from playground_runner.errors import RunnerError, build_error_context
from playground_runner.oauth import exchange_code
from playground_runner.snippets import compile_snippet
from playground_runner.telemetry import TelemetryClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["runner"])


def get_config(request: Request) -> RunnerConfig:
    config = getattr(request.app.state, "runner_config", None)
    if config is None:
        raise HTTPException(status_code=500, detail="Runner config not initialized")
    return config


def get_telemetry(request: Request) -> TelemetryClient:
    telemetry = getattr(request.app.state, "telemetry", None)
    if telemetry is None:
        raise HTTPException(status_code=500, detail="Telemetry not initialized")
    return telemetry


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise HTTPException(status_code=500, detail="HTTP client not initialized")
    return client


def get_editor_page(request: Request) -> Path:
    return Path(getattr(request.app.state, "editor_page", rendering.EDITOR_PAGE))


def render_error(
    error: BaseException,
    telemetry: TelemetryClient,
    return_url: str | None = None,
    *,
    status_code: int = 200,
) -> HTMLResponse:
    """Render any failure as the error page.

    Application failures are answered with 200; callers (the editor and the
    gallery) only look at the page content.
    """

    telemetry.track_exception(error)

    context = build_error_context(error, return_url)
    body = rendering.generate(
        rendering.ERROR_TEMPLATE,
        {"message": context.message, "details": context.details, "return_url": context.return_url},
    )
    return HTMLResponse(content=body, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
async def editor_runner(
    editor_page: Path = Depends(get_editor_page),  # noqa: B008
    telemetry: TelemetryClient = Depends(get_telemetry),  # noqa: B008
) -> HTMLResponse:
    try:
        html = await run_in_threadpool(editor_page.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read editor page %s: %s", editor_page, e)
        return render_error(e, telemetry)
    return HTMLResponse(content=html, status_code=200)


@router.post("/auth/{env}", response_model=None)
async def auth_exchange(
    env: str,
    request: Request,
    config: RunnerConfig = Depends(get_config),  # noqa: B008
    telemetry: TelemetryClient = Depends(get_telemetry),  # noqa: B008
    http_client: httpx.AsyncClient = Depends(get_http_client),  # noqa: B008
) -> Response:
    try:
        body = await read_body(request)
        payload = AuthExchangeRequest.from_body(body)

        source = config.environment(env)
        if source is None:
            raise RunnerError(f"Bad environment configuration: {env}")

        content = await exchange_code(http_client, source, code=payload.code, state=payload.state)
    except Exception as e:  # noqa: BLE001
        return render_error(e, telemetry)

    return Response(content=content, status_code=200, media_type="application/json")


@router.post("/", response_class=HTMLResponse)
async def run_snippet(
    request: Request,
    telemetry: TelemetryClient = Depends(get_telemetry),  # noqa: B008
) -> HTMLResponse:
    return_url: str | None = None

    try:
        body = await read_body(request)
        data = RunnerPostData.from_body(body)
        return_url = data.return_url

        start = time.perf_counter()
        compiled = compile_snippet(yaml.safe_load(data.snippet))
        ts_end = time.perf_counter()

        rendering.init_code_helpers()

        html = rendering.generate(rendering.INNER_TEMPLATE, rendering.snippet_context(compiled))

        # A return destination means the run was launched from the gallery: add its chrome.
        if data.return_url:
            wrapper_context = rendering.create_outer_template_context(
                html, data.as_dict(), compiled
            )
            html = rendering.generate(rendering.OUTER_TEMPLATE, wrapper_context)

        html = rendering.replace_all_tabs_with_spaces(html)

        snippet_end = time.perf_counter()
        telemetry.track_event(
            "[RUNNER] Compilation Complete",
            {"ID": compiled.id},
            {
                "SNIPPET_COMPILE": (ts_end - start) * 1000,
                "TEMPLATE_COMPILE": (snippet_end - ts_end) * 1000,
                "TOTAL_COMPILE": (snippet_end - start) * 1000,
            },
        )
        telemetry.track_event(f"[RUNNER] Running {compiled.id}", {"ID": compiled.id})
    except Exception as e:  # noqa: BLE001
        return render_error(e, telemetry, return_url)

    return HTMLResponse(content=html, status_code=200)

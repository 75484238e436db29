from __future__ import annotations

import logging
from typing import Final

import httpx

from playground_runner.config import OAuthEnvironment
from playground_runner.errors import RunnerError

logger = logging.getLogger(__name__)

GITHUB_TOKEN_URL: Final[str] = "https://github.com/login/oauth/access_token"


async def exchange_code(
    client: httpx.AsyncClient,
    source: OAuthEnvironment,
    *,
    code: str,
    state: str | None = None,
) -> bytes:
    """Trade an OAuth authorization code for an access token.

    Returns GitHub's raw response body. A code GitHub rejects still comes back as
    a normal JSON body; only transport failures raise.
    """

    payload = {
        "client_id": source.client_id,
        "client_secret": source.client_secret,
        "redirect_uri": source.redirect_uri,
        "code": code,
        "state": state,
    }

    try:
        response = await client.post(
            GITHUB_TOKEN_URL,
            headers={"Accept": "application/json"},
            json=payload,
        )
    except httpx.HTTPError as e:
        raise RunnerError("Error retrieving GitHub access token", details=e) from e

    logger.info("GitHub token exchange answered %s", response.status_code)
    return response.content

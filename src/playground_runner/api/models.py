from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from playground_runner.errors import RunnerError

INVALID_SNIPPET_MESSAGE = "Received invalid snippet data."
INVALID_CODE_MESSAGE = "Received invalid code."


async def read_body(request: Request) -> dict[str, Any]:
    """Read a JSON or form-encoded body into a plain dict.

    Empty or unparseable bodies read as `{}`; validation is left to the caller.
    """

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class RunnerPostData(BaseModel):
    """Canonical snippet run request.

    Clients either post `{snippet, returnUrl, ...}` directly or wrap the same
    object, JSON-encoded, in a `data` field.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    snippet: str
    return_url: str | None = Field(default=None, alias="returnUrl")

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> RunnerPostData:
        data: Any = body
        if not _has_snippet(data):
            wrapped = body.get("data")
            if isinstance(wrapped, str):
                try:
                    data = json.loads(wrapped)
                except ValueError as e:
                    raise RunnerError(INVALID_SNIPPET_MESSAGE, details=body) from e
            elif isinstance(wrapped, dict):
                data = wrapped

        if not _has_snippet(data):
            raise RunnerError(INVALID_SNIPPET_MESSAGE, details=body)

        return_url = data.get("returnUrl")
        return cls.model_validate(
            {**data, "returnUrl": return_url if isinstance(return_url, str) and return_url else None}
        )

    def as_dict(self) -> dict[str, Any]:
        """The request as the client sent it (original field names, extras kept)."""

        return self.model_dump(by_alias=True)


def _has_snippet(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    snippet = data.get("snippet")
    return isinstance(snippet, str) and bool(snippet.strip())


class AuthExchangeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str
    state: str | None = None

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> AuthExchangeRequest:
        code = body.get("code")
        if not isinstance(code, str) or not code.strip():
            raise RunnerError(INVALID_CODE_MESSAGE, details=body)

        state = body.get("state")
        return cls(code=code, state=state if isinstance(state, str) else None)

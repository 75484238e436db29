from __future__ import annotations

from typing import Any

import yaml
from pydantic import BaseModel


class RunnerError(Exception):
    """A known application failure.

    `details` carries whatever structured data explains the failure (the received
    request body, validation errors, a transport error). It is dumped as YAML into
    the error page.
    """

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ErrorContext(BaseModel):
    message: str
    details: str
    return_url: str | None = None


def _dump(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseException):
        value = _describe_exception(value)
    try:
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False)
    except yaml.YAMLError:
        return repr(value)


def _describe_exception(error: BaseException) -> dict[str, Any]:
    return {
        "name": type(error).__name__,
        "message": str(error),
        "args": [a if isinstance(a, (str, int, float, bool)) else repr(a) for a in error.args],
    }


def build_error_context(error: BaseException, return_url: str | None = None) -> ErrorContext:
    if isinstance(error, RunnerError):
        message = error.message
        details = _dump(error.details) if error.details is not None else ""
    else:
        message = str(error) or type(error).__name__
        details = _dump(_describe_exception(error))

    return ErrorContext(message=message, details=details, return_url=return_url or None)

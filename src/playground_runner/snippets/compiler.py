from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Any

from pydantic import ValidationError

from playground_runner.errors import RunnerError
from playground_runner.snippets.libraries import parse_libraries
from playground_runner.snippets.model import WEB_HOST, CompiledSnippet, Snippet

logger = logging.getLogger(__name__)

OFFICE_JS_URL = "https://appsforoffice.microsoft.com/lib/1/hosted/office.js"


def new_snippet_id() -> str:
    """Generate an ID for snippets that were exported without one.

    IDs are SHA-256 hex strings (64 chars) of a random UUID.
    """

    return hashlib.sha256(uuid.uuid4().bytes).hexdigest()


def load_snippet(raw: Any) -> Snippet:
    if not isinstance(raw, dict):
        raise RunnerError("Invalid snippet: expected a YAML mapping.", details=raw)

    try:
        return Snippet.model_validate(raw)
    except ValidationError as e:
        raise RunnerError(
            "Invalid snippet definition.",
            details=[
                {"loc": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e


def compile_snippet(raw: Any) -> CompiledSnippet:
    """Compile a parsed snippet (the YAML mapping) into renderable fragments.

    Scripts are emitted in their authored language; TypeScript that only uses
    JavaScript syntax runs unchanged in the browser.
    """

    snippet = load_snippet(raw)
    refs = parse_libraries(snippet.libraries)

    compiled = CompiledSnippet(
        id=snippet.id or new_snippet_id(),
        name=snippet.name,
        description=snippet.description,
        author=snippet.author,
        host=snippet.host,
        script=snippet.script.content,
        script_language=snippet.script.language,
        html=snippet.template.content,
        css=snippet.style.content,
        scripts=refs.scripts,
        links=refs.links,
        office_js=None if snippet.host == WEB_HOST else OFFICE_JS_URL,
    )

    logger.debug(
        "Compiled snippet %s (%s): %d scripts, %d links",
        compiled.id,
        compiled.host,
        len(compiled.scripts),
        len(compiled.links),
    )
    return compiled

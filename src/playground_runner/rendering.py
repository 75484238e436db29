from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from playground_runner.snippets.model import CompiledSnippet

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
ASSETS_DIR = BASE_DIR / "assets"
EDITOR_PAGE = ASSETS_DIR / "editor-runner.html"

INNER_TEMPLATE = "inner-template.html"
OUTER_TEMPLATE = "outer-template.html"
ERROR_TEMPLATE = "error.html"

TAB_REPLACEMENT = "    "

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _script_safe(value: Any) -> Markup:
    # Inline <script> bodies end at the first "</script", whatever its context.
    text = "" if value is None else str(value)
    return Markup(text.replace("</script", "<\\/script").replace("</SCRIPT", "<\\/SCRIPT"))


def _style_safe(value: Any) -> Markup:
    text = "" if value is None else str(value)
    return Markup(text.replace("</style", "<\\/style").replace("</STYLE", "<\\/STYLE"))


def _markup(value: Any) -> Markup:
    return Markup("" if value is None else str(value))


_CODE_HELPERS = {
    "script_safe": _script_safe,
    "style_safe": _style_safe,
    "markup": _markup,
}


def init_code_helpers() -> None:
    """Register the filters templates use to embed snippet code. Idempotent."""

    for name, helper in _CODE_HELPERS.items():
        templates.env.filters.setdefault(name, helper)


def generate(template_name: str, context: dict[str, Any]) -> str:
    init_code_helpers()
    return templates.env.get_template(template_name).render(**context)


def snippet_context(compiled: CompiledSnippet) -> dict[str, Any]:
    return {"snippet": compiled}


def create_outer_template_context(
    html: str, data: dict[str, Any], compiled: CompiledSnippet
) -> dict[str, Any]:
    """Context for wrapping a rendered snippet page in the gallery chrome."""

    return {
        "snippet": compiled,
        "iframe_content": html,
        "return_url": data.get("returnUrl"),
        "host": compiled.host,
        "data": data,
    }


def replace_all_tabs_with_spaces(text: str) -> str:
    return text.replace("\t", TAB_REPLACEMENT)

from __future__ import annotations

import re
from dataclasses import dataclass, field

UNPKG_BASE = "https://unpkg.com"

_URL_RE = re.compile(r"^(https?:)?//\S", re.IGNORECASE)
_COMMENT_RE = re.compile(r"^(#|//(\s|$))")


@dataclass(frozen=True)
class LibraryReferences:
    scripts: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)


def _is_comment(line: str) -> bool:
    return _COMMENT_RE.match(line) is not None


def _is_type_definition(line: str) -> bool:
    lowered = line.lower()
    return lowered.startswith("@types/") or lowered.startswith("dt~")


def _is_stylesheet(ref: str) -> bool:
    path = ref.split("?", 1)[0].split("#", 1)[0]
    return path.lower().endswith(".css")


def resolve_reference(line: str) -> str:
    """Turn a library line into a loadable URL.

    URLs and absolute paths are used as-is; anything else is an npm package
    specifier (`jquery`, `office-ui-fabric-js@1.4.0/dist/css/fabric.min.css`)
    served from unpkg.
    """

    if _URL_RE.match(line) or line.startswith("/"):
        return line
    return f"{UNPKG_BASE}/{line}"


def parse_libraries(raw: str) -> LibraryReferences:
    scripts: list[str] = []
    links: list[str] = []
    seen: set[str] = set()

    for part in raw.splitlines():
        line = part.strip()
        if not line:
            continue
        if _is_comment(line) or _is_type_definition(line):
            continue

        ref = resolve_reference(line)
        if ref in seen:
            continue
        seen.add(ref)

        if _is_stylesheet(ref):
            links.append(ref)
        else:
            scripts.append(ref)

    return LibraryReferences(scripts=scripts, links=links)

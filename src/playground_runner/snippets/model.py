from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEB_HOST = "WEB"


class SnippetSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str = Field(default="")
    language: str

    @field_validator("content", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        if v is None:
            return ""
        # YAML scalars such as `42` or `true` are still snippet text.
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("language", mode="before")
    @classmethod
    def _normalize_language(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class ScriptSection(SnippetSection):
    language: Literal["typescript", "javascript"] = "typescript"


class TemplateSection(SnippetSection):
    language: Literal["html"] = "html"


class StyleSection(SnippetSection):
    language: Literal["css"] = "css"


class Snippet(BaseModel):
    """A snippet as authored in the editor and exported to YAML."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = Field(default="Untitled snippet")
    description: str | None = None
    author: str | None = None
    host: str = Field(default=WEB_HOST)
    script: ScriptSection = Field(default_factory=ScriptSection)
    template: TemplateSection = Field(default_factory=TemplateSection)
    style: StyleSection = Field(default_factory=StyleSection)
    libraries: str = Field(default="")

    @field_validator("id", "description", "author", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("name", mode="before")
    @classmethod
    def _name_text(cls, v: Any) -> Any:
        if v is None:
            return "Untitled snippet"
        text = str(v).strip()
        return text or "Untitled snippet"

    @field_validator("host", mode="before")
    @classmethod
    def _normalize_host(cls, v: Any) -> Any:
        if v is None:
            return WEB_HOST
        text = str(v).strip().upper()
        return text or WEB_HOST

    @field_validator("libraries", mode="before")
    @classmethod
    def _join_libraries(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(str(item) for item in v if item is not None)
        return v


class CompiledSnippet(BaseModel):
    id: str
    name: str
    description: str | None = None
    author: str | None = None
    host: str = WEB_HOST
    script: str = ""
    script_language: str = "typescript"
    html: str = ""
    css: str = ""
    scripts: list[str] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list)
    office_js: str | None = None

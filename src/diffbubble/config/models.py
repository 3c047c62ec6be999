"""Settings schema for diffbubble."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from diffbubble.ui.themes import DEFAULT_THEME, validate_theme

ContextMode = Literal["focus", "full"]
DiffModeName = Literal["all", "staged", "unstaged"]


class KeyBindings(BaseModel):
    search: str = Field(default="/")
    next_file: str = Field(default="j")
    prev_file: str = Field(default="k")
    toggle_line_numbers: str = Field(default="n")
    toggle_context: str = Field(default="c")
    cycle_theme: str = Field(default="t")
    quit: str = Field(default="q")


class AppSettings(BaseModel):
    schema_version: int = Field(default=1)
    theme: str = Field(default=DEFAULT_THEME, description="Color theme name")
    line_numbers: bool = Field(default=True)
    context_mode: ContextMode = Field(default="focus")
    diff_mode: DiffModeName = Field(default="all")
    key_bindings: KeyBindings = Field(default_factory=KeyBindings)

    @field_validator("theme", mode="before")
    @classmethod
    def fallback_theme(cls, value: Any) -> Any:
        if not isinstance(value, str) or not validate_theme(value):
            return DEFAULT_THEME
        return value

    @field_validator("context_mode", mode="before")
    @classmethod
    def fallback_context_mode(cls, value: Any) -> Any:
        if value not in ("focus", "full"):
            return "focus"
        return value

    @field_validator("diff_mode", mode="before")
    @classmethod
    def fallback_diff_mode(cls, value: Any) -> Any:
        if value not in ("all", "staged", "unstaged"):
            return "all"
        return value

    @property
    def full_context(self) -> bool:
        return self.context_mode == "full"

    def setting_items(self) -> list[tuple[str, str]]:
        """Flatten key/value pairs for display."""

        result: list[tuple[str, str]] = []

        def walk(prefix: str, value: object) -> None:
            if isinstance(value, BaseModel):
                for key, nested in value.model_dump().items():
                    walk(f"{prefix}.{key}" if prefix else key, nested)
            elif isinstance(value, dict):
                for key, nested in value.items():
                    walk(f"{prefix}.{key}" if prefix else key, nested)
            else:
                result.append((prefix, str(value)))

        walk("", self)
        return result

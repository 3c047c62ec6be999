"""Built-in color themes and the rich styles derived from them."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict
from rich.style import Style

DEFAULT_THEME = "dark"


class Theme(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    addition_bg: str
    addition_fg: str
    deletion_bg: str
    deletion_fg: str
    context_fg: str
    header_fg: str

    border_color: str
    focused_border_color: str
    title_fg: str

    modified_fg: str
    added_fg: str
    deleted_fg: str

    background: str
    foreground: str


_THEMES: dict[str, Theme] = {
    theme.name: theme
    for theme in (
        Theme(
            name="dark",
            addition_bg="#1a3a1a",
            addition_fg="#43BF6D",
            deletion_bg="#3a1a1a",
            deletion_fg="#E05252",
            context_fg="#8B8B8B",
            header_fg="#666666",
            border_color="#5C5C5C",
            focused_border_color="#A855F7",
            title_fg="#FFFFFF",
            modified_fg="#F5C842",
            added_fg="#43BF6D",
            deleted_fg="#E05252",
            background="#000000",
            foreground="#FFFFFF",
        ),
        Theme(
            name="light",
            addition_bg="#D4F1D4",
            addition_fg="#0B6622",
            deletion_bg="#F1D4D4",
            deletion_fg="#B62020",
            context_fg="#4A4A4A",
            header_fg="#6A6A6A",
            border_color="#CCCCCC",
            focused_border_color="#8B5CF6",
            title_fg="#000000",
            modified_fg="#D97706",
            added_fg="#16A34A",
            deleted_fg="#DC2626",
            background="#FFFFFF",
            foreground="#000000",
        ),
        Theme(
            name="high-contrast",
            addition_bg="#003300",
            addition_fg="#00FF00",
            deletion_bg="#330000",
            deletion_fg="#FF0000",
            context_fg="#FFFFFF",
            header_fg="#FFFF00",
            border_color="#FFFFFF",
            focused_border_color="#FFFF00",
            title_fg="#FFFFFF",
            modified_fg="#FFFF00",
            added_fg="#00FF00",
            deleted_fg="#FF0000",
            background="#000000",
            foreground="#FFFFFF",
        ),
        Theme(
            name="solarized",
            addition_bg="#0D3A2E",
            addition_fg="#859900",
            deletion_bg="#3A0D0D",
            deletion_fg="#DC322F",
            context_fg="#657B83",
            header_fg="#586E75",
            border_color="#073642",
            focused_border_color="#6C71C4",
            title_fg="#839496",
            modified_fg="#B58900",
            added_fg="#859900",
            deleted_fg="#DC322F",
            background="#002B36",
            foreground="#839496",
        ),
        Theme(
            name="dracula",
            addition_bg="#1A2A1A",
            addition_fg="#50FA7B",
            deletion_bg="#2A1A1A",
            deletion_fg="#FF5555",
            context_fg="#F8F8F2",
            header_fg="#6272A4",
            border_color="#44475A",
            focused_border_color="#BD93F9",
            title_fg="#F8F8F2",
            modified_fg="#F1FA8C",
            added_fg="#50FA7B",
            deleted_fg="#FF5555",
            background="#282A36",
            foreground="#F8F8F2",
        ),
        Theme(
            name="github",
            addition_bg="#E6FFED",
            addition_fg="#24292F",
            deletion_bg="#FFEBE9",
            deletion_fg="#24292F",
            context_fg="#57606A",
            header_fg="#6E7781",
            border_color="#D0D7DE",
            focused_border_color="#0969DA",
            title_fg="#24292F",
            modified_fg="#9A6700",
            added_fg="#1A7F37",
            deleted_fg="#CF222E",
            background="#FFFFFF",
            foreground="#24292F",
        ),
        Theme(
            name="catppuccin",
            addition_bg="#1E2D2F",
            addition_fg="#A6E3A1",
            deletion_bg="#2D1E1E",
            deletion_fg="#F38BA8",
            context_fg="#CDD6F4",
            header_fg="#6C7086",
            border_color="#45475A",
            focused_border_color="#CBA6F7",
            title_fg="#CDD6F4",
            modified_fg="#F9E2AF",
            added_fg="#A6E3A1",
            deleted_fg="#F38BA8",
            background="#1E1E2E",
            foreground="#CDD6F4",
        ),
        Theme(
            name="tokyo-night",
            addition_bg="#1A2B32",
            addition_fg="#9ECE6A",
            deletion_bg="#2B1A1A",
            deletion_fg="#F7768E",
            context_fg="#A9B1D6",
            header_fg="#565F89",
            border_color="#3B4261",
            focused_border_color="#BB9AF7",
            title_fg="#C0CAF5",
            modified_fg="#E0AF68",
            added_fg="#9ECE6A",
            deleted_fg="#F7768E",
            background="#1A1B26",
            foreground="#A9B1D6",
        ),
        Theme(
            name="one-dark",
            addition_bg="#1C2B1F",
            addition_fg="#98C379",
            deletion_bg="#2B1C1C",
            deletion_fg="#E06C75",
            context_fg="#ABB2BF",
            header_fg="#5C6370",
            border_color="#3E4451",
            focused_border_color="#C678DD",
            title_fg="#DCDFE4",
            modified_fg="#E5C07B",
            added_fg="#98C379",
            deleted_fg="#E06C75",
            background="#282C34",
            foreground="#ABB2BF",
        ),
    )
}


def list_themes() -> list[str]:
    return list(_THEMES)


def validate_theme(name: str) -> bool:
    return name in _THEMES


def get_theme(name: str | None) -> Theme:
    if name and name in _THEMES:
        return _THEMES[name]
    return _THEMES[DEFAULT_THEME]


def next_theme(name: str) -> Theme:
    names = list_themes()
    index = names.index(name) if name in names else -1
    return _THEMES[names[(index + 1) % len(names)]]


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a #RRGGBB color, got {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


@dataclass(slots=True, frozen=True)
class DiffStyles:
    """Rich styles for one theme, handed to the renderer explicitly."""

    theme: Theme
    addition: Style
    deletion: Style
    header: Style
    file_item: Style
    status_modified: Style
    status_added: Style
    status_deleted: Style
    stats: Style
    footer: Style
    error: Style
    match: Style
    current_match: Style

    @classmethod
    def from_theme(cls, theme: Theme) -> "DiffStyles":
        return cls(
            theme=theme,
            addition=Style(color=theme.addition_fg, bgcolor=theme.addition_bg),
            deletion=Style(color=theme.deletion_fg, bgcolor=theme.deletion_bg),
            header=Style(color=theme.header_fg),
            file_item=Style(color=theme.foreground),
            status_modified=Style(color=theme.modified_fg, bold=True),
            status_added=Style(color=theme.added_fg, bold=True),
            status_deleted=Style(color=theme.deleted_fg, bold=True),
            stats=Style(color=theme.context_fg),
            footer=Style(color=theme.context_fg),
            error=Style(color=theme.deletion_fg),
            match=Style(color=theme.background, bgcolor=theme.modified_fg),
            current_match=Style(color=theme.background, bgcolor=theme.focused_border_color, bold=True),
        )

    @classmethod
    def named(cls, name: str | None) -> "DiffStyles":
        return cls.from_theme(get_theme(name))

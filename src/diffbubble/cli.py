"""CLI entrypoint for diffbubble."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import IO, get_args

import click
from pydantic import ValidationError

from diffbubble.app import DiffbubbleApp
from diffbubble.config.models import ContextMode, DiffModeName
from diffbubble.config.store import SettingsStore
from diffbubble.diff.aligner import DiffReadError, align
from diffbubble.errors import DiffbubbleError
from diffbubble.git.source import DEFAULT_CONTEXT, FULL_CONTEXT, DiffMode, GitDiffSource
from diffbubble.paths import settings_path
from diffbubble.runtime_logging import configure_runtime_logging
from diffbubble.ui.render import render_plain
from diffbubble.ui.themes import get_theme, hex_to_rgb, list_themes, validate_theme
from diffbubble.version import __version__


def _resolve_mode(staged: bool, unstaged: bool) -> DiffMode | None:
    if staged and unstaged:
        raise click.UsageError("Cannot use both --staged and --unstaged flags together")
    if staged:
        return DiffMode.STAGED
    if unstaged:
        return DiffMode.UNSTAGED
    return None


def _check_theme(_ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    if value is not None and not validate_theme(value):
        raise click.BadParameter(f"Invalid theme '{value}'. Available themes: {', '.join(list_themes())}")
    return value


def _setting_choices() -> dict[str, list[str]]:
    return {
        "theme": list_themes(),
        "context_mode": list(get_args(ContextMode)),
        "diff_mode": list(get_args(DiffModeName)),
    }


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version", prog_name="diffbubble")
@click.pass_context
def main(ctx: click.Context) -> None:
    """diffbubble: side-by-side git diffs in the terminal."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
@click.argument("project_dir", required=False, default=".")
@click.option("--file", "initial_file", help="Open with a specific file selected")
@click.option("--staged", is_flag=True, help="Show only staged changes (git diff --cached)")
@click.option("--unstaged", is_flag=True, help="Show only unstaged changes")
@click.option("--revision", help="Compare against a commit or range instead of HEAD")
@click.option("--theme", "theme_name", callback=_check_theme, help="Color theme")
@click.option("--log-level", help="Runtime log level (off, error, warning, info, debug)")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Runtime log file path")
def run(
    project_dir: str,
    initial_file: str | None,
    staged: bool,
    unstaged: bool,
    revision: str | None,
    theme_name: str | None,
    log_level: str | None,
    log_file: str | None,
) -> None:
    """Run the interactive diff viewer."""
    mode = _resolve_mode(staged, unstaged)
    app = DiffbubbleApp(
        project_root=Path(project_dir),
        initial_file=initial_file,
        mode=mode,
        revision=revision,
        theme_name=theme_name,
        log_level=log_level,
        log_file=log_file,
    )
    app.run()


@main.command()
@click.argument("path", required=False)
@click.option("--input", "input_file", type=click.File("rb"), help="Read a unified diff from a file ('-' for stdin)")
@click.option("--staged", is_flag=True, help="Show only staged changes")
@click.option("--unstaged", is_flag=True, help="Show only unstaged changes")
@click.option("--revision", help="Compare against a commit or range instead of HEAD")
@click.option("--full", is_flag=True, help="Show the whole file as context")
@click.option("--width", default=60, type=click.IntRange(min=8), show_default=True, help="Column width")
@click.option("--line-numbers/--no-line-numbers", default=True, show_default=True)
def show(
    path: str | None,
    input_file: IO[bytes] | None,
    staged: bool,
    unstaged: bool,
    revision: str | None,
    full: bool,
    width: int,
    line_numbers: bool,
) -> None:
    """Print an aligned side-by-side diff without the TUI."""
    logger = configure_runtime_logging()
    try:
        if input_file is not None:
            rows = align(input_file)
        else:
            source = GitDiffSource(
                Path.cwd(),
                mode=_resolve_mode(staged, unstaged) or DiffMode.ALL,
                revision=revision,
            )
            context = FULL_CONTEXT if full else DEFAULT_CONTEXT
            raw = asyncio.run(source.file_diff(path, context) if path else source.diff())
            rows = align(raw)
    except DiffReadError as exc:
        logger.error("cli.show.read_failed", error=str(exc), partial_rows=len(exc.partial_rows))
        raise click.ClickException(str(exc)) from exc
    except DiffbubbleError as exc:
        logger.error("cli.show.failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    logger.debug("cli.show.aligned", rows=len(rows))
    if rows:
        click.echo(render_plain(rows, width=width, show_line_numbers=line_numbers))


@main.command("themes")
def themes_command() -> None:
    """List available color themes."""
    for name in list_themes():
        click.echo(name)


@main.command("theme-colors")
@click.argument("name", callback=_check_theme)
def theme_colors(name: str) -> None:
    """Preview the colors of a theme."""
    theme = get_theme(name)
    click.echo(f"Theme: {theme.name}")
    click.echo("─" * 50)

    groups = {
        "Diff Colors": [
            ("Addition (text)", theme.addition_fg),
            ("Addition (bg)", theme.addition_bg),
            ("Deletion (text)", theme.deletion_fg),
            ("Deletion (bg)", theme.deletion_bg),
            ("Context", theme.context_fg),
            ("Headers", theme.header_fg),
        ],
        "UI Colors": [
            ("Focused border", theme.focused_border_color),
            ("Border", theme.border_color),
            ("Title", theme.title_fg),
        ],
        "File List Colors": [
            ("Modified", theme.modified_fg),
            ("Added", theme.added_fg),
            ("Deleted", theme.deleted_fg),
        ],
        "General": [
            ("Background", theme.background),
            ("Foreground", theme.foreground),
        ],
    }
    for title, colors in groups.items():
        click.echo(f"\n{title}:")
        for label, color in colors:
            r, g, b = hex_to_rgb(color)
            swatch = f"\033[48;2;{r};{g};{b}m   \033[0m"
            click.echo(f"  {label + ':':<20} {swatch}  {color}")


@main.command("settings-path")
def settings_path_command() -> None:
    """Print settings file path."""
    click.echo(str(settings_path()))


@main.command("settings")
@click.argument("project_dir", required=False, default=".")
def settings_command(project_dir: str) -> None:
    """Show effective settings for a project."""
    settings = SettingsStore(project_root=Path(project_dir)).load()
    for key, value in settings.setting_items():
        click.echo(f"{key} = {value}")


@main.command("config")
@click.argument("key")
@click.argument("value")
def config_command(key: str, value: str) -> None:
    """Set a user setting, e.g. `diffbubble config key_bindings.quit x`."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    choices = _setting_choices().get(key)
    if choices is not None and parsed not in choices:
        raise click.BadParameter(f"Invalid {key} '{value}'. Available: {', '.join(choices)}", param_hint="VALUE")

    store = SettingsStore()
    try:
        updated = store.update(key, parsed)
    except KeyError as exc:
        raise click.BadParameter(exc.args[0], param_hint="KEY") from exc
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="VALUE") from exc
    click.echo(f"{key} = {dict(updated.setting_items())[key]}")


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "diffbubble",
        "version": __version__,
        "description": "Terminal UI for side-by-side git diffs",
    }
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()

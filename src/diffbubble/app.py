"""diffbubble Textual application shell."""

from __future__ import annotations

from pathlib import Path

from textual.app import App

from diffbubble.config.store import SettingsStore
from diffbubble.git.source import DiffMode, GitDiffSource
from diffbubble.runtime_logging import configure_runtime_logging
from diffbubble.screens.main import DiffScreen, DiffSource
from diffbubble.ui.themes import validate_theme
from diffbubble.version import __version__

APP_TITLE = "Git Diff Side-by-Side"


class DiffbubbleApp(App[None]):
    TITLE = APP_TITLE
    SUB_TITLE = f"diffbubble {__version__}"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(
        self,
        *,
        project_root: Path,
        initial_file: str | None = None,
        mode: DiffMode | None = None,
        revision: str | None = None,
        theme_name: str | None = None,
        source: DiffSource | None = None,
        settings_store: SettingsStore | None = None,
        log_level: str | None = None,
        log_file: str | Path | None = None,
    ) -> None:
        self.project_root = project_root.expanduser().resolve()
        self.logger = configure_runtime_logging(level=log_level, log_file=log_file)

        self.settings_store = settings_store or SettingsStore(project_root=self.project_root)
        self.settings = self.settings_store.load()
        if theme_name and validate_theme(theme_name):
            self.settings.theme = theme_name

        # CLI flags win over the configured diff mode.
        self.mode = mode or DiffMode.parse(self.settings.diff_mode)
        self.initial_file = initial_file
        self.source = source or GitDiffSource(self.project_root, mode=self.mode, revision=revision)

        self.logger.info(
            "app.initialized",
            project_root=str(self.project_root),
            mode=self.mode.value,
            revision=revision,
            theme=self.settings.theme,
        )
        super().__init__()

    def on_mount(self) -> None:
        self.push_screen(
            DiffScreen(
                source=self.source,
                settings=self.settings,
                initial_file=self.initial_file,
            )
        )

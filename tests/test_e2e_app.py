from __future__ import annotations

import tempfile
import unittest
import warnings
from collections.abc import Callable
from pathlib import Path
from typing import Any

from diffbubble.app import DiffbubbleApp
from diffbubble.config.store import SettingsStore
from diffbubble.git import FULL_CONTEXT, DiffMode, FileStat, FileStatus, GitCommandError
from diffbubble.screens.main import DiffScreen
from diffbubble.widgets.diff_pane import DiffPane
from diffbubble.widgets.file_list import FileList

warnings.filterwarnings("ignore", category=ResourceWarning)

DIFFS = {
    "a.py": b"@@ -1,2 +1,3 @@\n keep\n-old value\n+new value\n+extra\n",
    "b.py": b"@@ -4 +4 @@\n-before\n+after\n",
}


class FakeSource:
    def __init__(
        self,
        files: list[FileStat] | None = None,
        *,
        mode: DiffMode = DiffMode.ALL,
        error: Exception | None = None,
    ) -> None:
        self.mode = mode
        self.files = files if files is not None else [
            FileStat("a.py", FileStatus.MODIFIED, 2, 1),
            FileStat("b.py", FileStatus.ADDED, 1, 1),
        ]
        self.error = error
        self.requests: list[tuple[str, int]] = []

    async def modified_files(self) -> list[FileStat]:
        if self.error is not None:
            raise self.error
        return list(self.files)

    async def file_diff(self, path: str, context_lines: int = 0) -> bytes:
        self.requests.append((path, context_lines))
        return DIFFS[path]


class DiffbubbleAppE2ETests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.project_root = Path(self.tmp.name)
        self.store = SettingsStore(path=self.project_root / "settings.json", project_root=self.project_root)

    async def asyncTearDown(self) -> None:
        self.tmp.cleanup()

    def _make_app(self, source: FakeSource, **kwargs: Any) -> DiffbubbleApp:
        return DiffbubbleApp(
            project_root=self.project_root,
            source=source,
            settings_store=self.store,
            log_level="off",
            **kwargs,
        )

    async def _wait_for(self, pilot, predicate: Callable[[], bool]) -> None:  # noqa: ANN001
        for _ in range(40):
            if predicate():
                return
            await pilot.pause(0.05)
        raise AssertionError("condition not reached")

    async def _loaded_screen(self, app: DiffbubbleApp, pilot) -> DiffScreen:  # noqa: ANN001
        await self._wait_for(pilot, lambda: isinstance(app.screen, DiffScreen))
        screen = app.screen
        assert isinstance(screen, DiffScreen)
        await self._wait_for(pilot, lambda: bool(screen.rows) or screen.error is not None)
        return screen

    async def test_files_load_and_first_diff_renders(self) -> None:
        source = FakeSource()
        app = self._make_app(source)
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            self.assertEqual(screen.query_one("#files", FileList).option_count, 2)
            self.assertEqual(screen.selected_index, 0)
            self.assertEqual(source.requests, [("a.py", 0)])
            old = screen.query_one("#old", DiffPane)
            new = screen.query_one("#new", DiffPane)
            self.assertEqual(old.rendered_lines, new.rendered_lines)
            self.assertEqual(old.rendered_lines, 5)

    async def test_initial_file_is_selected(self) -> None:
        source = FakeSource()
        app = self._make_app(source, initial_file="b.py")
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            self.assertEqual(screen.selected_index, 1)
            self.assertEqual(source.requests, [("b.py", 0)])

    async def test_next_file_key_loads_following_diff(self) -> None:
        source = FakeSource()
        app = self._make_app(source)
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)
            await pilot.press("j")
            await self._wait_for(pilot, lambda: ("b.py", 0) in source.requests)
            await self._wait_for(pilot, lambda: len(screen.rows) == 2)

            self.assertEqual(screen.selected_index, 1)

    async def test_empty_change_set_shows_mode_hint(self) -> None:
        app = self._make_app(FakeSource([], mode=DiffMode.STAGED))
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            assert screen.error is not None
            self.assertIn("No staged changes found.", screen.error)
            self.assertTrue(screen.query_one("#body").has_class("hidden"))

    async def test_git_failure_shows_error_panel(self) -> None:
        error = GitCommandError(["diff", "HEAD"], 128, "fatal: not a git repository")
        app = self._make_app(FakeSource(error=error))
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            assert screen.error is not None
            self.assertTrue(screen.error.startswith("Unable to load git diff."))
            self.assertIn("not a git repository", screen.error)

    async def test_toggle_line_numbers_and_context(self) -> None:
        source = FakeSource()
        app = self._make_app(source)
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            await pilot.press("n")
            await pilot.pause(0.05)
            self.assertFalse(screen.show_line_numbers)

            await pilot.press("c")
            await self._wait_for(pilot, lambda: ("a.py", FULL_CONTEXT) in source.requests)
            self.assertTrue(screen.full_context)

    async def test_theme_cycles_to_next_builtin(self) -> None:
        app = self._make_app(FakeSource())
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            await pilot.press("t")
            await pilot.pause(0.05)
            self.assertEqual(screen.diff_styles.theme.name, "light")
            self.assertEqual(screen.settings.theme, "light")

    async def test_theme_flag_overrides_settings(self) -> None:
        app = self._make_app(FakeSource(), theme_name="dracula")
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            self.assertEqual(screen.diff_styles.theme.name, "dracula")

    async def test_search_finds_and_clears_matches(self) -> None:
        app = self._make_app(FakeSource())
        async with app.run_test() as pilot:
            screen = await self._loaded_screen(app, pilot)

            await pilot.press("/")
            await pilot.pause(0.05)
            self.assertTrue(screen.search_mode)
            await pilot.press("v", "a", "l", "u", "e")
            await pilot.pause(0.05)

            self.assertEqual(len(screen.matches), 2)
            self.assertEqual(screen.current_match, 0)
            self.assertEqual(screen.matches[0].line_number, 2)

            await pilot.press("enter")
            await pilot.pause(0.05)
            self.assertFalse(screen.search_mode)
            self.assertEqual(screen.search_query, "value")

            await pilot.press("n")
            await pilot.pause(0.05)
            self.assertEqual(screen.current_match, 1)
            self.assertTrue(screen.show_line_numbers)

            await pilot.press("escape")
            await pilot.pause(0.05)
            self.assertEqual(screen.matches, [])
            self.assertEqual(screen.search_query, "")

    async def test_quit_key_exits(self) -> None:
        app = self._make_app(FakeSource())
        async with app.run_test() as pilot:
            await self._loaded_screen(app, pilot)
            await pilot.press("q")
            await pilot.pause(0.05)

        self.assertIsNone(app.return_value)


if __name__ == "__main__":
    unittest.main()

"""Load/save application settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from diffbubble.config.models import AppSettings
from diffbubble.paths import repo_settings_path, settings_path
from diffbubble.runtime_logging import get_runtime_logger


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SettingsStore:
    """User settings, optionally overridden by a ``.diffbubble.json`` in the repo."""

    def __init__(self, path: Path | None = None, project_root: Path | None = None) -> None:
        self.path = path or settings_path()
        self.repo_path = repo_settings_path(project_root) if project_root is not None else None
        self.logger = get_runtime_logger()

    def _read_user(self) -> dict[str, Any]:
        if not self.path.exists():
            self.save(AppSettings())
            return {}

        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw)
            AppSettings.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            # Fall back to defaults while preserving corrupt payload for debugging.
            backup = self.path.with_suffix(".corrupt.json")
            backup.write_text(raw, encoding="utf-8")
            self.logger.warning("settings.user.corrupt", path=str(self.path), error=str(exc))
            self.save(AppSettings())
            return {}
        return data if isinstance(data, dict) else {}

    def _read_repo(self) -> dict[str, Any]:
        if self.repo_path is None or not self.repo_path.exists():
            return {}
        try:
            data = json.loads(self.repo_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("settings.repo.unreadable", path=str(self.repo_path), error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> AppSettings:
        data = _merge(self._read_user(), self._read_repo())
        try:
            return AppSettings.model_validate(data)
        except ValidationError as exc:
            self.logger.warning("settings.repo.invalid", error=str(exc))
            return AppSettings.model_validate(self._read_user())

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
        self.path.write_text(f"{payload}\n", encoding="utf-8")

    def update(self, dotted_key: str, value: Any) -> AppSettings:
        """Change one user setting; repository overrides are left untouched."""

        data = AppSettings.model_validate(self._read_user()).model_dump()

        keys = dotted_key.split(".")
        cursor: dict[str, Any] = data
        for key in keys[:-1]:
            nested = cursor.get(key)
            if not isinstance(nested, dict):
                raise KeyError(f"Unknown setting path: {dotted_key}")
            cursor = nested
        if keys[-1] not in cursor:
            raise KeyError(f"Unknown setting path: {dotted_key}")
        cursor[keys[-1]] = value

        updated = AppSettings.model_validate(data)
        self.save(updated)
        return updated

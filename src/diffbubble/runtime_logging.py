"""Structured JSONL runtime logging for diffbubble.

Events are dotted names (``git.command.failed``, ``diff.aligned``) written one
JSON object per line. The level and sink come from the ``--log-level`` /
``--log-file`` options or the ``DIFFBUBBLE_LOG_LEVEL`` /
``DIFFBUBBLE_LOG_FILE`` environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from diffbubble.paths import state_root

LogLevel = Literal["off", "error", "warning", "info", "debug"]

LEVEL_ENV = "DIFFBUBBLE_LOG_LEVEL"
FILE_ENV = "DIFFBUBBLE_LOG_FILE"
DEFAULT_LEVEL: LogLevel = "warning"

_LEVEL_VALUES: dict[str, int] = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
    "off": 100,
}

_runtime_logger: "RuntimeLogger | None" = None


def parse_level(value: str | None, default: LogLevel = DEFAULT_LEVEL) -> LogLevel:
    normalized = (value or "").strip().lower()
    if normalized not in _LEVEL_VALUES:
        return default
    return normalized  # type: ignore[return-value]


def default_log_file() -> Path:
    return state_root() / "logs" / "diffbubble.runtime.jsonl"


@dataclass(slots=True)
class RuntimeLogger:
    level: LogLevel
    sink_path: Path

    def enabled(self, level: str) -> bool:
        return _LEVEL_VALUES[level] >= _LEVEL_VALUES[self.level] and self.level != "off"

    def log(self, level: str, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        payload = {
            "ts": datetime.now(UTC).isoformat(),
            "level": level,
            "event": event,
            "pid": os.getpid(),
            **fields,
        }
        self.sink_path.parent.mkdir(parents=True, exist_ok=True)
        with self.sink_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, sort_keys=True, default=str) + "\n")

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log("error", event, **fields)


def configure_runtime_logging(
    *,
    level: str | None = None,
    log_file: str | Path | None = None,
) -> RuntimeLogger:
    """Install the process-wide logger; explicit arguments win over the environment."""

    global _runtime_logger

    effective_level = parse_level(level or os.getenv(LEVEL_ENV))
    if effective_level == "off":
        # Never touches the filesystem.
        _runtime_logger = RuntimeLogger(level="off", sink_path=Path(os.devnull))
        return _runtime_logger

    path = log_file or os.getenv(FILE_ENV)
    sink = Path(path).expanduser().resolve() if path else default_log_file()
    _runtime_logger = RuntimeLogger(level=effective_level, sink_path=sink)
    _runtime_logger.info("logging.configured", configured_level=effective_level, sink_path=str(sink))
    return _runtime_logger


def get_runtime_logger() -> RuntimeLogger:
    global _runtime_logger
    if _runtime_logger is None:
        _runtime_logger = configure_runtime_logging()
    return _runtime_logger

"""Scheduler and logging configuration sourced from environment."""

from __future__ import annotations

import os
from typing import TextIO

from stepengine.api.config import LoggingConfig, SchedulerConfig

_LOG_FORMATS = frozenset({"text", "json"})


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _log_format(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in _LOG_FORMATS else default


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with package-prefixed override."""
    value = os.getenv("STEPENGINE_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper()


def load_scheduler_config(*, log_stream: TextIO | None = None) -> SchedulerConfig:
    """Load immutable scheduler configuration from env vars."""
    return SchedulerConfig(
        busy_loop=_flag("STEPENGINE_BUSY_LOOP", False),
        fatal=_flag("STEPENGINE_FATAL", False),
        log_stream=log_stream,
        log_format=_log_format("STEPENGINE_LOG_FORMAT", "text"),
    )


def load_logging_config() -> LoggingConfig:
    """Load host logging configuration from env vars."""
    file_path = (os.getenv("STEPENGINE_LOG_FILE") or "").strip() or None
    return LoggingConfig(
        level_name=resolve_log_level_name(),
        console_format=_log_format("STEPENGINE_LOG_FORMAT", "text"),
        file_path=file_path,
        file_format=_log_format("STEPENGINE_LOG_FILE_FORMAT", "json"),
    )
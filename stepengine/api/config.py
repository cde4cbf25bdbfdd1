"""Public scheduler and logging configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Construction options for a scheduler instance."""

    busy_loop: bool = False
    fatal: bool = False
    log_stream: TextIO | None = None
    log_format: str = "text"  # text|json
    logger_name: str = "stepengine.scheduler"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Host logging pipeline configuration."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json

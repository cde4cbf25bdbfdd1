"""Logging setup for hosts and per-scheduler diagnostic loggers."""

from __future__ import annotations

import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import TextIO

from stepengine.api.config import LoggingConfig
from stepengine.runtime.config import load_logging_config, resolve_log_level_name
from stepengine.runtime.json_codec import dumps_text

PACKAGE_LOGGER = "stepengine"
_INSTALLED_MARK = "_stepengine_installed"
_QUEUE_LISTENER: QueueListener | None = None
TEXT_PREFIX = "[stepengine] "
TEXT_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"

_STANDARD_RECORD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """JSON formatter with extra-field preservation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_FIELDS}
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return dumps_text(payload)


def configure_logging(
    config: LoggingConfig, *, logger_name: str = PACKAGE_LOGGER
) -> logging.Logger:
    """Attach console and optional file output to the package logger namespace.

    Only ``logger_name`` is touched and it stops propagating to the root logger.
    Calling again replaces the handlers installed by the previous call. File
    output goes through a background queue listener.
    """
    global _QUEUE_LISTENER

    target = logging.getLogger(logger_name)
    shutdown_logging()
    for handler in list(target.handlers):
        if getattr(handler, _INSTALLED_MARK, False):
            target.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_resolve_formatter(config.console_format))
    outputs: list[logging.Handler] = [console_handler]
    if config.file_path:
        file_path = Path(config.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, mode="a", encoding="utf-8", delay=True)
        file_handler.setFormatter(_resolve_formatter(config.file_format))
        outputs.append(file_handler)

    if len(outputs) == 1:
        installed: logging.Handler = console_handler
    else:
        log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
        installed = QueueHandler(log_queue)
        _QUEUE_LISTENER = QueueListener(log_queue, *outputs, respect_handler_level=True)
        _QUEUE_LISTENER.start()

    setattr(installed, _INSTALLED_MARK, True)
    target.addHandler(installed)
    target.setLevel(_level_from_name(config.level_name))
    target.propagate = False
    return target


def shutdown_logging() -> None:
    """Drain and stop the file queue listener, if one is running."""
    global _QUEUE_LISTENER

    if _QUEUE_LISTENER is not None:
        _QUEUE_LISTENER.stop()
        for handler in _QUEUE_LISTENER.handlers:
            handler.close()
        _QUEUE_LISTENER = None


def setup_logging() -> logging.Logger:
    """Configure the package logger from env vars unless it already has handlers."""
    target = logging.getLogger(PACKAGE_LOGGER)
    if target.handlers:
        return target
    return configure_logging(load_logging_config())


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the package namespace."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def create_scheduler_logger(
    name: str,
    *,
    stream: TextIO | None = None,
    fmt: str = "text",
) -> logging.Logger:
    """Return the logger a scheduler writes its diagnostics to.

    Without a stream this is the shared namespaced logger, left to the host's
    logging configuration. With a stream the logger is private to the caller,
    so several schedulers never stack handlers on one another.
    """
    if stream is None:
        return logging.getLogger(name)
    logger = logging.Logger(name)
    logger.setLevel(_level_from_name(resolve_log_level_name()))
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_resolve_formatter(fmt))
    logger.addHandler(handler)
    return logger


def _level_from_name(level_name: str) -> int:
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _resolve_formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(
        f"{TEXT_PREFIX}%(asctime)s %(levelname)s %(message)s",
        datefmt=TEXT_DATE_FORMAT,
    )

"""Logging configuration for board automation runs.

Records go to stderr as JSON. Inside a GitHub Actions job, warnings and
errors are also written to stdout as workflow commands (``::error::...``) so
they show up as annotations on the run.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

from pythonjsonlogger.json import JsonFormatter

DEFAULT_SERVICE = "project-status-sync"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(service)s %(message)s"

_LOGGING_CONFIGURED = False


class _ServiceFilter(logging.Filter):
    def __init__(self, service: str | None):
        super().__init__()
        self._service = service or DEFAULT_SERVICE

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self._service
        return True


def escape_workflow_data(value: str) -> str:
    """Escape a message for use in a workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsAnnotationHandler(logging.StreamHandler):
    """Emit ``::warning::`` / ``::error::`` workflow commands for WARNING and above."""

    def __init__(self, stream: TextIO | None = None) -> None:
        # The runner only parses workflow commands from stdout.
        super().__init__(stream or sys.stdout)
        self.setLevel(logging.WARNING)

    def format(self, record: logging.LogRecord) -> str:
        command = "error" if record.levelno >= logging.ERROR else "warning"
        return f"::{command}::{escape_workflow_data(record.getMessage())}"


def running_in_actions() -> bool:
    return os.getenv("GITHUB_ACTIONS") == "true"


def configure_logging(service_name: str | None = None) -> None:
    """Install the JSON stderr handler, plus annotations when running in Actions."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    json_handler = logging.StreamHandler()
    json_handler.setFormatter(JsonFormatter(LOG_FORMAT))
    json_handler.addFilter(_ServiceFilter(service_name))
    root.addHandler(json_handler)

    if running_in_actions():
        root.addHandler(ActionsAnnotationHandler())

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Reset logging configuration for tests."""
    global _LOGGING_CONFIGURED
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    _LOGGING_CONFIGURED = False


def log_outcome(
    logger: logging.Logger,
    message: str,
    *,
    applied: bool | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log run outcomes; runs that changed nothing are logged as warnings."""
    level = logging.WARNING if applied is False else logging.INFO
    logger.log(level, message, extra=extra)

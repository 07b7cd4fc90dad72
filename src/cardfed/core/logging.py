# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Cardfed Contributors

"""Logging setup for cardfed.

Every address book request runs under a correlation id, taken from the
caller's ``X-Request-ID`` header or generated. A ``CorrelationIdFilter``
on each handler stamps it onto the records, so the access log lines of one
federated fetch or sync can be grepped together.

Output is JSON when stderr is not a terminal (or ``CARDFED_LOG_FORMAT=json``)
and a plain one-line format otherwise. Log files always get JSON.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import CoreSettings

_correlation_id: ContextVar[str | None] = ContextVar("cardfed_correlation_id", default=None)

# Shown in text output for records logged outside a request
NO_CORRELATION_ID = "-"


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Bind ``correlation_id`` to the current context (task or thread)."""
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Run a block under a correlation id, restoring the previous one after.

    Args:
        correlation_id: Id to use; a new one is generated if None.

    Yields:
        The correlation id in effect inside the block.
    """
    cid = correlation_id or generate_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Copies the current correlation id onto ``record.correlation_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Access log records carry their ``extra_data`` (operation, federated
    flag, sanitized arguments) under ``"extra"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if record.levelno >= logging.WARNING:
            log_data["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_data["extra"] = extra_data

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Single-line text format for terminals: time, level, logger, [cid] message."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s [%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        # Records that bypassed CorrelationIdFilter still need the field
        if getattr(record, "correlation_id", None) is None:
            record = logging.makeLogRecord(record.__dict__)
            record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return super().format(record)


def _use_json(log_format: str) -> bool:
    log_format = log_format.lower()
    if log_format in ("json", "text"):
        return log_format == "json"
    return not sys.stderr.isatty()


def configure_logging(
    settings: CoreSettings | None = None,
    *,
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install cardfed's handlers on the root logger.

    Existing root handlers are replaced.

    Args:
        settings: Source of ``log_level``, ``log_format`` and ``log_file``;
            defaults to ``get_config()``.
        level: Overrides ``settings.log_level``
        json_format: Overrides ``settings.log_format``
        log_file: Overrides ``settings.log_file``
    """
    if settings is None:
        from .config import get_config

        settings = get_config()

    level = level if level is not None else settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if json_format is None:
        json_format = _use_json(settings.log_format)
    log_file = log_file if log_file is not None else settings.log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else StandardFormatter())
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(CorrelationIdFilter())
        root_logger.addHandler(handler)


class AccessLogger:
    """Logger for address book operations.

    Logs each operation and whether it took the federated path. Credential
    material is replaced before it reaches a handler.
    """

    SENSITIVE_PARAMS = {
        "password",
        "secret",
        "authorization",
        "credential",
    }

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("cardfed.access")

    def log_access(
        self,
        operation: str,
        arguments: dict[str, Any],
        federated: bool,
        level: int = logging.DEBUG,
    ) -> None:
        """Log an address book operation with sanitized arguments.

        Args:
            operation: Operation name, e.g. ``fetch_one``
            arguments: Operation arguments (will be sanitized)
            federated: Whether the caller was recognized as a trusted peer
            level: Log level
        """
        path = "federated" if federated else "local"
        self.logger.log(
            level,
            f"Address book {operation} ({path})",
            extra={
                "extra_data": {
                    "operation": operation,
                    "federated": federated,
                    "arguments": self._sanitize(arguments),
                }
            },
        )

    def log_withheld(self, operation: str, card_uri: str, reasons: list[str]) -> None:
        """Log a card that was withheld from a trusted peer after redaction."""
        self.logger.info(
            f"Withheld card {card_uri} from federated {operation}: {'; '.join(reasons)}",
            extra={
                "extra_data": {
                    "operation": operation,
                    "card_uri": card_uri,
                    "reasons": reasons,
                }
            },
        )

    def _sanitize(self, data: Any) -> Any:
        """Recursively sanitize sensitive data."""
        if isinstance(data, dict):
            result = {}
            for key, value in data.items():
                if any(s in key.lower() for s in self.SENSITIVE_PARAMS):
                    result[key] = "[REDACTED]"
                else:
                    result[key] = self._sanitize(value)
            return result
        elif isinstance(data, list | tuple):
            return [self._sanitize(item) for item in data]
        elif isinstance(data, str) and len(data) > 500:
            return data[:500] + "..."
        else:
            return data


# Default access logger
access_logger = AccessLogger()

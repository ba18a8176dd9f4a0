"""Logging configuration for ACMECORE.

Two formatters (JSON lines and plain text) and :func:`configure_logging`,
which wires the ``acmecore`` logger tree from
:class:`~acmecore.config.settings.LoggingSettings`.

When the audit log is enabled, every security event emitted on
``acmecore.security`` is also appended, as JSON, to a size-rotated file.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from acmecore.config.settings import AuditLogSettings, LoggingSettings

ROOT_LOGGER = "acmecore"
SECURITY_LOGGER = "acmecore.security"

# Attribute names every LogRecord carries; anything else came in via
# ``extra=`` and is copied into the JSON output.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Caller extras (security events carry ``event_id`` and ``severity``)
    are merged in; names starting with ``_`` are skipped.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        data: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
        }
        data.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info and record.exc_info[0] is not None:
            data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output for consoles."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _audit_handler(audit: AuditLogSettings) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        audit.file,
        maxBytes=audit.max_file_size_bytes,
        backupCount=audit.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(StructuredFormatter())
    return handler


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Configure the ``acmecore`` logger tree and return its root.

    Safe to call repeatedly: previously installed handlers are closed
    and replaced.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
    root.propagate = False
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        StructuredFormatter() if settings.format == "json" else TextFormatter(),
    )
    root.addHandler(console)

    # Security events are always recorded, whatever the root level.
    security = logging.getLogger(SECURITY_LOGGER)
    security.setLevel(logging.INFO)
    for old in security.handlers[:]:
        security.removeHandler(old)
        old.close()

    if settings.audit.enabled and settings.audit.file:
        try:
            security.addHandler(_audit_handler(settings.audit))
        except OSError as exc:
            root.warning("Could not open audit log file %s: %s", settings.audit.file, exc)

    return root

"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation — these builders
are what the package actually reads.

Access pattern::

    from acmecore.config import get_config

    log_cfg = get_config().settings.logging
    print(log_cfg.level, log_cfg.format)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UNSPECIFIED = "Unspecified"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditLogSettings:
    """Rotating file that receives a JSON copy of every security event."""

    enabled: bool
    file: str | None
    max_file_size_bytes: int
    backup_count: int


@dataclass(frozen=True)
class LoggingSettings:
    """Logging configuration (level, format, audit)."""

    level: str
    format: str
    audit: AuditLogSettings


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    a = d.get("audit") or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "json"),
        audit=AuditLogSettings(
            enabled=a.get("enabled", False),
            file=a.get("file"),
            max_file_size_bytes=a.get("max_file_size_bytes", 104857600),
            backup_count=a.get("backup_count", 10),
        ),
    )


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BuildSettings:
    """Build metadata stamped in by the release pipeline."""

    id: str
    time: str
    host: str


def _build_build(data: dict | None) -> BuildSettings:
    d = data or {}
    return BuildSettings(
        id=d.get("id") or UNSPECIFIED,
        time=d.get("time") or UNSPECIFIED,
        host=d.get("host") or UNSPECIFIED,
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CoreSettings:
    """Root of the typed settings tree."""

    logging: LoggingSettings
    build: BuildSettings


def build_settings(data: dict[str, Any]) -> CoreSettings:
    """Build the complete frozen settings tree from a validated dict."""
    return CoreSettings(
        logging=_build_logging(data.get("logging")),
        build=_build_build(data.get("build")),
    )

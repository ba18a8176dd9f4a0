"""Configuration subsystem for ACMECORE.

Public API::

    from acmecore.config import get_config, CoreConfig

    # At startup:
    CoreConfig(config_file="config.yaml")

    # Everywhere else:
    cfg = get_config()
    level = cfg.settings.logging.level   # typed access
    build = cfg.get("build.id")          # dynamic dot-path
"""

from acmecore.config.core_config import (
    ConfigValidationError,
    CoreConfig,
    get_config,
    has_config,
)
from acmecore.config.settings import (
    AuditLogSettings,
    BuildSettings,
    CoreSettings,
    LoggingSettings,
)

__all__ = [
    "AuditLogSettings",
    "BuildSettings",
    "ConfigValidationError",
    "CoreConfig",
    "CoreSettings",
    "LoggingSettings",
    "get_config",
    "has_config",
]

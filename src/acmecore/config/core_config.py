"""ACMECORE configuration loader.

Lifecycle::

    # 1. The host application creates the singleton (once, at startup)
    CoreConfig(config_file="/etc/acmecore/config.yaml")

    # 2. Any module retrieves it afterwards
    from acmecore.config import get_config
    cfg = get_config()
    cfg.settings.logging.level  # typed access

    # 3. Dynamic access
    cfg.get("build.id", default="Unspecified")

Loading order: read YAML/JSON, resolve ``${VAR}`` references, validate
against the bundled JSON Schema, run cross-field checks, build the
frozen settings tree.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from acmecore.config.settings import CoreSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton reference
# ---------------------------------------------------------------------------
_instance: CoreConfig | None = None


def get_config() -> CoreConfig:
    """Return the initialised configuration singleton.

    Raises :class:`RuntimeError` if :class:`CoreConfig` has not been
    created yet.
    """
    if _instance is None:
        msg = (
            "Configuration not initialised. "
            "CoreConfig must be created with config_file= before calling get_config()."
        )
        raise RuntimeError(msg)
    return _instance


def has_config() -> bool:
    """Return ``True`` once a :class:`CoreConfig` has been created."""
    return _instance is not None


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when schema or cross-field validation finds problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


def _read_file(path: Path) -> dict[str, Any]:
    """Parse *path* as YAML or JSON depending on its suffix."""
    with path.open(encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Top level of {path} must be a mapping"
        raise ConfigValidationError([msg])
    return data


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class CoreConfig:
    """Central configuration for the ACMECORE primitives.

    The JSON schema is bundled at ``config/schema.json``; users supply
    only ``config_file``.  After construction the typed settings tree
    is available at :pyattr:`settings` and the raw dict via
    :pyattr:`data` / :pymeth:`get`.
    """

    def __init__(self, *, config_file: str | Path) -> None:
        """Load, validate and publish the configuration singleton."""
        global _instance  # noqa: PLW0603

        self._source = Path(config_file)
        self._data = self._load(self._source)
        self._settings: CoreSettings = build_settings(self._data)
        _instance = self

    # -- lifecycle ------------------------------------------------------------

    def _load(self, path: Path) -> dict[str, Any]:
        """Read *path*, resolve env vars, then validate.

        Env-var resolution runs **before** schema validation so that
        substituted values (e.g. ``${LOG_LEVEL:-INFO}``) are checked
        against enum constraints in the schema.
        """
        data = _read_file(path)
        _resolve_env_vars(data)
        self._validate_schema(data)
        self.additional_checks(data)
        return data

    @staticmethod
    def _validate_schema(data: dict[str, Any]) -> None:
        schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
        validator = jsonschema.Draft7Validator(schema)
        errors = [
            f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        ]
        if errors:
            raise ConfigValidationError(errors)

    def additional_checks(self, data: dict[str, Any]) -> None:
        """Semantic & cross-field validation, run after the schema passes."""
        errors: list[str] = []
        warnings: list[str] = []

        logging_cfg = data.get("logging") or {}
        audit = logging_cfg.get("audit") or {}

        if audit.get("enabled") and not audit.get("file"):
            errors.append(
                "logging.audit.file is required when logging.audit.enabled is true",
            )
        if audit.get("file") and not audit.get("enabled"):
            warnings.append(
                "logging.audit.file is set but logging.audit.enabled is false; "
                "security events will not be written to it",
            )

        for w in warnings:
            log.warning("Config warning: %s", w)

        if errors:
            raise ConfigValidationError(errors)

    # -- typed access ---------------------------------------------------------

    @property
    def settings(self) -> CoreSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    @property
    def data(self) -> dict[str, Any]:
        """Resolved raw configuration dict."""
        return self._data

    def get(self, dotted: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return the raw value at dot-path *dotted*, or *default*."""
        node: Any = self._data
        for part in dotted.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # -- helpers --------------------------------------------------------------

    def reload_settings(self) -> CoreSettings:
        """Re-read the config file and rebuild settings.

        Does not reset the singleton; the caller decides whether to
        swap the returned tree in.
        """
        return build_settings(self._load(self._source))

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        global _instance  # noqa: PLW0603
        _instance = None

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        return f"<CoreConfig config_file={self._source}>"

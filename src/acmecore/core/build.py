"""Build metadata accessors.

Release pipelines stamp ``build.id``, ``build.time`` and ``build.host``
into the configuration file; without it every accessor reports
``"Unspecified"``.
"""

from __future__ import annotations

from acmecore.config import get_config, has_config
from acmecore.config.settings import UNSPECIFIED, BuildSettings


def _build() -> BuildSettings | None:
    return get_config().settings.build if has_config() else None


def get_build_id() -> str:
    """Return the build identifier (VCS revision or release tag)."""
    build = _build()
    return build.id if build else UNSPECIFIED


def get_build_time() -> str:
    """Return the build timestamp."""
    build = _build()
    return build.time if build else UNSPECIFIED


def get_build_host() -> str:
    """Return the host the build ran on."""
    build = _build()
    return build.host if build else UNSPECIFIED

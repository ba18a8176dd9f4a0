"""Logging subsystem for ACMECORE.

Public API::

    from acmecore.logging import configure_logging

    configure_logging(settings.logging)
"""

from acmecore.logging.setup import configure_logging

__all__ = ["configure_logging"]

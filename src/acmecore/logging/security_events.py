"""Structured security event logger.

Emits standardized security events for SIEM integration.
All events are logged to the ``acmecore.security`` logger with
a consistent ``event_id`` field for filtering and alerting.

Key material is redacted via
:func:`~acmecore.logging.sanitize.sanitize_for_logs` before emission.
"""

from __future__ import annotations

import logging
from typing import Any

from acmecore.logging.sanitize import sanitize_for_logs, sanitize_jwk

security_log = logging.getLogger("acmecore.security")


def _emit(
    event_id: str,
    message: str,
    *args: Any,  # noqa: ANN401
    severity: str = "INFO",
    **extra: Any,  # noqa: ANN401
) -> None:
    """Emit a structured security event.

    All *extra* keyword arguments are sanitized to redact
    cryptographic material before logging.
    """
    data: dict[str, object] = {
        "event_id": event_id,
        "severity": severity,
    }
    data.update(sanitize_for_logs(extra))
    level = getattr(logging, severity.upper(), logging.INFO)
    security_log.log(level, message, *args, extra=data)


def key_digest_rejected(key_type: str, reason: str, jwk: Any = None) -> None:  # noqa: ANN401
    """Log a key that could not be digested into an identity.

    A JWK mapping is redacted even when it lacks a ``kty`` member.
    """
    if isinstance(jwk, dict):
        jwk = sanitize_jwk(jwk)
    _emit(
        "acmecore.security.key_digest_rejected",
        "Key digest rejected for %s: %s",
        key_type,
        reason,
        severity="WARNING",
        key_type=key_type,
        jwk=jwk,
    )


def randomness_unavailable(reason: str) -> None:
    """Log failure of the secure random source."""
    _emit(
        "acmecore.security.randomness_unavailable",
        "Secure random source unavailable: %s",
        reason,
        severity="CRITICAL",
    )


def fingerprint_mismatch(expected_length: int, candidate_length: int) -> None:
    """Log a fingerprint that did not match its expected digest."""
    _emit(
        "acmecore.security.fingerprint_mismatch",
        "Fingerprint mismatch",
        severity="WARNING",
        expected_length=expected_length,
        candidate_length=candidate_length,
    )

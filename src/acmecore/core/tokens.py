"""Challenge tokens drawn from a secure random source.

Randomness is an injected capability: every function takes an optional
:class:`RandomSource` and falls back to the operating-system CSPRNG.
A failing source is fatal -- :class:`~acmecore.errors.RandomnessUnavailable`
is raised and must not be replaced with a weaker generator.
"""

from __future__ import annotations

import logging
import secrets
from typing import Protocol

from acmecore.core.encoding import b64url_encode
from acmecore.errors import RandomnessUnavailable
from acmecore.logging import security_events

log = logging.getLogger(__name__)

TOKEN_BYTES = 32
"""Entropy per challenge token (RFC 8555 §8.3 requires at least 128 bits)."""


class RandomSource(Protocol):
    """Anything that can hand out *n* unpredictable bytes."""

    def read(self, n: int) -> bytes: ...


class SystemRandomSource:
    """Operating-system CSPRNG via :mod:`secrets`."""

    def read(self, n: int) -> bytes:
        return secrets.token_bytes(n)


_SYSTEM_SOURCE = SystemRandomSource()


def _read_exact(source: RandomSource, n: int) -> bytes:
    try:
        data = source.read(n)
    except Exception as exc:  # noqa: BLE001
        reason = f"{type(exc).__name__}: {exc}"
        security_events.randomness_unavailable(reason)
        raise RandomnessUnavailable(reason) from exc
    if not isinstance(data, bytes) or len(data) != n:
        got = len(data) if isinstance(data, bytes) else type(data).__name__
        reason = f"short read from random source: wanted {n} bytes, got {got}"
        security_events.randomness_unavailable(reason)
        raise RandomnessUnavailable(reason)
    return data


def random_string(byte_length: int, source: RandomSource | None = None) -> str:
    """Return *byte_length* random bytes as unpadded base64url text."""
    return b64url_encode(
        _read_exact(_SYSTEM_SOURCE if source is None else source, byte_length),
    )


def new_token(source: RandomSource | None = None) -> str:
    """Return a fresh challenge token.

    The token is 43 characters of the URL-safe base64 alphabet encoding
    :data:`TOKEN_BYTES` random bytes, safe to embed in URLs and file names.
    """
    token = random_string(TOKEN_BYTES, source)
    log.debug("Generated challenge token (%d chars)", len(token))
    return token

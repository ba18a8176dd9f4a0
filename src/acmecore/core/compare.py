"""Equality checks that do not leak where two values first differ.

Every byte of equal-length inputs is visited and folded into a single
difference accumulator before the result is read.  Length itself is
not secret: digests and fingerprints have a fixed, public size.
"""

from __future__ import annotations

import hashlib
import logging

from acmecore.core.keys import KeyLike, key_digest
from acmecore.errors import AcmeProblem
from acmecore.logging import security_events

log = logging.getLogger(__name__)


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """Return ``True`` iff *a* and *b* have the same length and bytes."""
    if len(a) != len(b):
        return False
    diff = 0
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0


def key_digest_equals(a: KeyLike, b: KeyLike) -> bool:
    """Return ``True`` iff both keys digest to the same identity.

    Total over arbitrary inputs: a key that cannot be digested never
    equals anything, itself included.
    """
    try:
        digest_a = key_digest(a)
        digest_b = key_digest(b)
    except AcmeProblem as exc:
        log.debug("Key digest comparison failed: %s", exc.detail)
        return False
    return constant_time_equals(digest_a.encode("ascii"), digest_b.encode("ascii"))


def fingerprint_equals(candidate: bytes, expected: bytes) -> bool:
    """Return ``True`` iff SHA-256 of *candidate* is the raw digest *expected*.

    Parameters
    ----------
    candidate:
        The data presented for verification (e.g. a DER certificate).
    expected:
        The previously stored 32-byte SHA-256 fingerprint.

    """
    actual = hashlib.sha256(candidate).digest()
    if constant_time_equals(actual, expected):
        return True
    security_events.fingerprint_mismatch(len(expected), len(candidate))
    return False

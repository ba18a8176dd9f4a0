"""Base64url helpers and JSON integration for protocol values.

:class:`JSONBuffer` carries raw bytes through JSON messages as unpadded
base64url (RFC 7515 §2).  :class:`AcmeJSONEncoder` teaches :mod:`json`
to emit protocol value types (:class:`JSONBuffer`,
:class:`~acmecore.core.urls.AcmeURL`) as plain strings.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any

from acmecore.core.urls import AcmeURL
from acmecore.errors import MalformedError

_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]*\Z")

# --- Base64url helpers (RFC 7515 S2) -------------------------------------


def b64url_encode(b: bytes) -> str:
    """Encode bytes to base64url without padding."""
    return base64.urlsafe_b64encode(b).rstrip(b"=").decode("ascii")


def b64url_decode(s: str) -> bytes:
    """Decode a base64url string (no padding required).

    Raises
    ------
    MalformedError
        If *s* contains characters outside the base64url alphabet.

    """
    if not isinstance(s, str):
        msg = f"Expected base64url string, got {type(s).__name__}"
        raise MalformedError(msg)
    if _B64URL_RE.match(s) is None:
        msg = "Invalid base64url data: unexpected characters"
        raise MalformedError(msg)
    remainder = len(s) % 4
    if remainder:
        s += "=" * (4 - remainder)
    try:
        return base64.urlsafe_b64decode(s)
    except (binascii.Error, ValueError) as exc:
        msg = f"Invalid base64url data: {exc}"
        raise MalformedError(msg) from exc


# --- JSONBuffer ------------------------------------------------------------


@dataclass(frozen=True)
class JSONBuffer:
    """Raw bytes that serialize to JSON as unpadded base64url."""

    data: bytes

    def to_json(self) -> str:
        """Return the base64url text form."""
        return b64url_encode(self.data)

    @classmethod
    def from_json(cls, value: Any) -> JSONBuffer:  # noqa: ANN401
        """Decode the base64url text form."""
        return cls(b64url_decode(value))

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)


# --- JSON encoder ------------------------------------------------------------


def json_default(obj: Any) -> Any:  # noqa: ANN401
    """``default=`` hook for :func:`json.dumps`.

    Renders protocol value types as the plain string they stand for.
    """
    if isinstance(obj, (AcmeURL, JSONBuffer)):
        return obj.to_json()
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


class AcmeJSONEncoder(json.JSONEncoder):
    """:class:`json.JSONEncoder` that understands protocol value types."""

    def default(self, o: Any) -> Any:  # noqa: ANN401
        if isinstance(o, (AcmeURL, JSONBuffer)):
            return o.to_json()
        return super().default(o)

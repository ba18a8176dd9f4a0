"""RFC 7807 Problem Details raised by the ACMECORE primitives.

Provides :class:`AcmeProblem` — an exception that carries an RFC 8555
error-type URN and renders itself as a problem-details dictionary —
plus the narrower subclasses raised by the codecs and key utilities.

Usage::

    raise MalformedError("Serial number should be 32 characters long")

Callers in the HTTP layer turn ``exc.to_dict()`` into an
``application/problem+json`` response.
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# RFC 8555 §6.7 — ACME error-type URNs used by this package
# ---------------------------------------------------------------------------
_P = "urn:ietf:params:acme:error:"

BAD_PUBLIC_KEY = _P + "badPublicKey"
MALFORMED = _P + "malformed"

# Content type for RFC 7807 responses
PROBLEM_CONTENT_TYPE = "application/problem+json"


# ---------------------------------------------------------------------------
# Problem exceptions
# ---------------------------------------------------------------------------


class AcmeProblem(Exception):
    """An RFC 7807 *problem details* object that doubles as an exception.

    Parameters
    ----------
    error_type:
        A URN string (one of the constants above) or ``"about:blank"``.
    detail:
        Human-readable explanation of the problem.
    status:
        HTTP status code the caller should answer with (default 400).
    title:
        Short summary; omitted when *error_type* is self-explanatory.
    subproblems:
        Optional list of sub-problem dicts (RFC 8555 §6.7.1).

    """

    def __init__(
        self,
        error_type: str,
        detail: str,
        status: int = 400,
        *,
        title: str | None = None,
        subproblems: list[dict[str, Any]] | None = None,
    ) -> None:
        self.error_type = error_type
        self.detail = detail
        self.status = status
        self.title = title
        self.subproblems = subproblems
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the RFC 7807 JSON structure."""
        body: dict[str, Any] = {
            "type": self.error_type,
            "detail": self.detail,
            "status": self.status,
        }
        if self.title is not None:
            body["title"] = self.title
        if self.subproblems:
            body["subproblems"] = self.subproblems
        return body


class MalformedError(AcmeProblem):
    """Input text could not be parsed (serial, URL, base64)."""

    def __init__(self, detail: str) -> None:
        super().__init__(MALFORMED, detail)


class BadPublicKey(AcmeProblem):
    """A key was supplied but its parameters are unusable."""

    def __init__(self, detail: str) -> None:
        super().__init__(BAD_PUBLIC_KEY, detail)


class UnknownKeyType(BadPublicKey):
    """The object handed to the key digest is not a supported key variant."""

    def __init__(self, key: object, detail: str | None = None) -> None:
        self.key_type = type(key).__name__
        super().__init__(detail or f"unknown key type {self.key_type}")


# ---------------------------------------------------------------------------
# Fatal conditions
# ---------------------------------------------------------------------------


class RandomnessUnavailable(BaseException):
    """The secure random source failed.

    Derives from :class:`BaseException` so generic ``except Exception``
    handlers do not turn it into an error response: there is no safe
    way to continue issuing challenges without secure randomness.
    """

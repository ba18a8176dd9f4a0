"""Parsed URL value carried through protocol messages.

:class:`AcmeURL` wraps the standard library's split URL so handlers can
inspect scheme, host and path, while its text and JSON forms stay
exactly the string a client sent.

Usage::

    from acmecore.core.urls import AcmeURL

    url = AcmeURL.parse("https://acme.example.com/acme/chall/42")
    url.host        # "acme.example.com"
    str(url)        # "https://acme.example.com/acme/chall/42"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, urlsplit

from acmecore.errors import MalformedError


@dataclass(frozen=True)
class AcmeURL:
    """A fully parsed absolute or relative URL.

    Attributes
    ----------
    parts:
        The components as returned by :func:`urllib.parse.urlsplit`.

    """

    parts: SplitResult

    @classmethod
    def parse(cls, text: str) -> AcmeURL:
        """Parse *text* with the standard URL parser.

        Raises
        ------
        MalformedError
            If *text* is not a string or the parser rejects it
            (unbalanced IPv6 brackets, non-numeric or out-of-range port).

        """
        if not isinstance(text, str):
            msg = f"URL must be a string, got {type(text).__name__}"
            raise MalformedError(msg)
        try:
            parts = urlsplit(text)
            # Port is validated lazily by urllib; force it here.
            parts.port  # noqa: B018
        except ValueError as exc:
            msg = f"Invalid URL '{text}': {exc}"
            raise MalformedError(msg) from exc
        return cls(parts)

    @classmethod
    def from_json(cls, value: Any) -> AcmeURL:  # noqa: ANN401
        """Build from the JSON string form."""
        return cls.parse(value)

    def to_json(self) -> str:
        """Return the JSON string form (the canonical URL text)."""
        return str(self)

    def __str__(self) -> str:
        return self.parts.geturl()

    # -- component accessors ------------------------------------------------

    @property
    def scheme(self) -> str:
        return self.parts.scheme

    @property
    def host(self) -> str | None:
        return self.parts.hostname

    @property
    def port(self) -> int | None:
        return self.parts.port

    @property
    def path(self) -> str:
        return self.parts.path

    @property
    def query(self) -> str:
        return self.parts.query

    @property
    def fragment(self) -> str:
        return self.parts.fragment

    @property
    def is_absolute(self) -> bool:
        """Return ``True`` when both scheme and network location are present."""
        return bool(self.parts.scheme and self.parts.netloc)

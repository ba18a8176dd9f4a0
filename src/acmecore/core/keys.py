"""Public-key identity digests (RFC 7517 / 7638).

Uses the ``cryptography`` library for key objects.  A key reaches
:func:`key_digest` in one of three shapes:

* a :class:`JsonWebKey` wrapper record,
* the wrapper's JSON form (a parsed JWK ``dict``),
* the bare ``cryptography`` public key the wrapper holds.

:func:`_unwrap` resolves all three to the bare key once, at the entry
point; the digest itself only ever sees ``cryptography`` key objects.
The digest covers the DER SubjectPublicKeyInfo encoding, which depends
only on the key numbers, so equal keys always hash identically however
their JWK members were encoded.

Security note:
    The digest is used as an account identity.  Changes to the
    canonical form change every stored identity.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from acmecore.core.encoding import b64url_decode, b64url_encode
from acmecore.errors import AcmeProblem, BadPublicKey, UnknownKeyType
from acmecore.logging import security_events

log = logging.getLogger(__name__)

PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey

# Canonical JWK curve names to cryptography curve classes and
# coordinate sizes in bytes.
_EC_CURVES: dict[str, tuple[type[ec.EllipticCurve], int]] = {
    "P-256": (ec.SECP256R1, 32),
    "P-384": (ec.SECP384R1, 48),
    "P-521": (ec.SECP521R1, 66),
}

_CURVE_NAMES: dict[str, str] = {
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
}


def _int_to_b64(value: int, length: int | None = None) -> str:
    """Encode a non-negative integer as big-endian base64url.

    Without *length* the minimal byte length is used (RFC 7518 §6.3.1);
    EC coordinates pass their fixed field size (RFC 7518 §6.2.1.2).
    """
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    return b64url_encode(value.to_bytes(length, "big"))


# --- JsonWebKey wrapper ---------------------------------------------------


@dataclass(frozen=True)
class JsonWebKey:
    """A public JSON Web Key.

    Attributes
    ----------
    key:
        The ``cryptography`` public key object.
    key_id:
        Optional ``kid`` member.
    algorithm:
        Optional ``alg`` member.

    """

    key: PublicKey
    key_id: str | None = None
    algorithm: str | None = None

    @classmethod
    def from_dict(cls, jwk_dict: Mapping[str, Any]) -> JsonWebKey:
        """Build from a parsed JWK mapping.

        Raises
        ------
        UnknownKeyType
            If ``kty`` is neither ``RSA`` nor ``EC``.
        BadPublicKey
            If the key members are missing or invalid.

        """
        return cls(
            key=jwk_to_public_key(jwk_dict),
            key_id=jwk_dict.get("kid"),
            algorithm=jwk_dict.get("alg"),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> JsonWebKey:
        """Build from JWK JSON text."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"JWK is not valid JSON: {exc}"
            raise BadPublicKey(msg) from exc
        if not isinstance(data, dict):
            raise BadPublicKey("JWK must be a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Render the public members plus ``kid``/``alg`` when set."""
        data = canonical_members(self.key)
        if self.key_id is not None:
            data["kid"] = self.key_id
        if self.algorithm is not None:
            data["alg"] = self.algorithm
        return data


KeyLike = JsonWebKey | Mapping[str, Any] | rsa.RSAPublicKey | ec.EllipticCurvePublicKey


# --- JWK to public key conversion ----------------------------------------


def jwk_to_public_key(jwk_dict: Mapping[str, Any]) -> PublicKey:
    """Convert a JWK mapping to a ``cryptography`` public key."""
    kty = jwk_dict.get("kty")

    if kty == "RSA":
        return _jwk_to_rsa(jwk_dict)

    if kty == "EC":
        return _jwk_to_ec(jwk_dict)

    raise UnknownKeyType(jwk_dict, f"unknown key type '{kty}'")


def _jwk_to_rsa(jwk_dict: Mapping[str, Any]) -> rsa.RSAPublicKey:
    try:
        n = int.from_bytes(b64url_decode(jwk_dict["n"]), "big")
        e = int.from_bytes(b64url_decode(jwk_dict["e"]), "big")
        return rsa.RSAPublicNumbers(e, n).public_key()
    except AcmeProblem as exc:
        msg = f"Invalid RSA JWK: {exc.detail}"
        raise BadPublicKey(msg) from exc
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Invalid RSA JWK: {exc}"
        raise BadPublicKey(msg) from exc


def _jwk_to_ec(jwk_dict: Mapping[str, Any]) -> ec.EllipticCurvePublicKey:
    crv = jwk_dict.get("crv")
    entry = _EC_CURVES.get(crv) if isinstance(crv, str) else None
    if entry is None:
        msg = f"Unsupported EC curve '{crv}'; supported: {sorted(_EC_CURVES)}"
        raise BadPublicKey(msg)
    curve_cls, _size = entry
    try:
        x = int.from_bytes(b64url_decode(jwk_dict["x"]), "big")
        y = int.from_bytes(b64url_decode(jwk_dict["y"]), "big")
        return ec.EllipticCurvePublicNumbers(x, y, curve_cls()).public_key()
    except AcmeProblem as exc:
        msg = f"Invalid EC JWK: {exc.detail}"
        raise BadPublicKey(msg) from exc
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Invalid EC JWK: {exc}"
        raise BadPublicKey(msg) from exc


# --- Canonical form ---------------------------------------------------------


def _unwrap(key: object) -> PublicKey:
    """Resolve any supported key shape to the bare public key."""
    if isinstance(key, JsonWebKey):
        key = key.key
    elif isinstance(key, Mapping):
        key = jwk_to_public_key(key)

    if isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        return key
    raise UnknownKeyType(key)


def canonical_members(key: PublicKey) -> dict[str, str]:
    """Return the RFC 7638 required members of *key*."""
    if isinstance(key, rsa.RSAPublicKey):
        nums = key.public_numbers()
        return {"e": _int_to_b64(nums.e), "kty": "RSA", "n": _int_to_b64(nums.n)}

    crv = _CURVE_NAMES.get(key.curve.name)
    if crv is None:
        msg = f"Unsupported EC curve '{key.curve.name}'"
        raise BadPublicKey(msg)
    size = _EC_CURVES[crv][1]
    nums = key.public_numbers()
    return {
        "crv": crv,
        "kty": "EC",
        "x": _int_to_b64(nums.x, size),
        "y": _int_to_b64(nums.y, size),
    }


def canonical_json(key: KeyLike) -> bytes:
    """Serialize *key* to its canonical JSON bytes.

    Members in lexicographic order, no whitespace (RFC 7638 §3).
    """
    return json.dumps(
        canonical_members(_unwrap(key)),
        sort_keys=True,
        separators=(",", ":"),
    ).encode("ascii")


def canonical_der(key: KeyLike) -> bytes:
    """Serialize *key* to DER SubjectPublicKeyInfo bytes.

    This is the form :func:`key_digest` hashes.  EC keys are limited to
    the curves a JWK can name.
    """
    public_key = _unwrap(key)
    if isinstance(public_key, ec.EllipticCurvePublicKey) and (
        public_key.curve.name not in _CURVE_NAMES
    ):
        msg = f"Unsupported EC curve '{public_key.curve.name}'"
        raise BadPublicKey(msg)
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


# --- Digests -------------------------------------------------------------------


def key_digest(key: KeyLike) -> str:
    """Return the standard-base64 SHA-256 digest of *key*'s DER SPKI form.

    Raises
    ------
    UnknownKeyType
        If *key* is not one of the supported shapes.
    BadPublicKey
        If a JWK mapping is malformed.

    """
    try:
        canonical = canonical_der(key)
    except AcmeProblem as exc:
        log.debug("Problem digesting key: %s", exc.detail)
        security_events.key_digest_rejected(
            type(key).__name__,
            exc.detail,
            jwk=dict(key) if isinstance(key, Mapping) else None,
        )
        raise
    return base64.b64encode(hashlib.sha256(canonical).digest()).decode("ascii")


def fingerprint256(data: bytes) -> str:
    """Return the unpadded base64url SHA-256 digest of *data*."""
    return b64url_encode(hashlib.sha256(data).digest())

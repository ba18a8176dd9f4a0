"""Unit tests for acmecore.core.keys — JWK wrapper and key identity digests."""

from __future__ import annotations

import base64
import hashlib
import json
import logging

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from acmecore.core.keys import (
    JsonWebKey,
    canonical_der,
    canonical_json,
    fingerprint256,
    jwk_to_public_key,
    key_digest,
)
from acmecore.errors import BAD_PUBLIC_KEY, BadPublicKey, UnknownKeyType

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _generate_ec_key(curve=ec.SECP256R1):
    return ec.generate_private_key(curve())


def _generate_rsa_key(size=2048):
    return rsa.generate_private_key(public_exponent=65537, key_size=size)


def _ec_jwk(key) -> dict:
    """Extract the public JWK dict from an EC private key."""
    pub = key.public_key()
    nums = pub.public_numbers()
    curve_name, size = {
        "secp256r1": ("P-256", 32),
        "secp384r1": ("P-384", 48),
        "secp521r1": ("P-521", 66),
    }[pub.curve.name]
    return {
        "kty": "EC",
        "crv": curve_name,
        "x": _b64(nums.x.to_bytes(size, "big")),
        "y": _b64(nums.y.to_bytes(size, "big")),
    }


# SHA-256 of JWK_1's DER SubjectPublicKeyInfo, as stored by existing deployments.
JWK_1_DIGEST = "ul04Iq07ulKnnrebv2hv3yxCGgVvoHs8hjq2tVKx3mc="


# ---------------------------------------------------------------------------
# TestJsonWebKey
# ---------------------------------------------------------------------------


class TestJsonWebKey:
    def test_from_dict_rsa(self, jwk1_dict):
        jwk = JsonWebKey.from_dict(jwk1_dict)
        assert isinstance(jwk.key, rsa.RSAPublicKey)
        assert jwk.key.public_numbers().e == 65537

    def test_from_json_keeps_kid_and_alg(self, jwk1_dict):
        jwk1_dict.update(kid="key-1", alg="RS256")
        jwk = JsonWebKey.from_json(json.dumps(jwk1_dict))
        assert jwk.key_id == "key-1"
        assert jwk.algorithm == "RS256"

    def test_to_dict_uses_minimal_encoding(self, jwk1_dict):
        jwk = JsonWebKey.from_dict(jwk1_dict)
        assert jwk.to_dict() == {"e": "AQAB", "kty": "RSA", "n": jwk1_dict["n"]}

    def test_to_dict_ec(self):
        key = _generate_ec_key(ec.SECP384R1)
        jwk_dict = _ec_jwk(key)
        assert JsonWebKey(key.public_key()).to_dict() == jwk_dict

    def test_from_json_invalid(self):
        with pytest.raises(BadPublicKey, match="not valid JSON"):
            JsonWebKey.from_json("{nope")

    def test_from_json_not_object(self):
        with pytest.raises(BadPublicKey, match="JSON object"):
            JsonWebKey.from_json("[1, 2]")


# ---------------------------------------------------------------------------
# TestJwkToPublicKey
# ---------------------------------------------------------------------------


class TestJwkToPublicKey:
    def test_ec_round_trip(self):
        key = _generate_ec_key()
        pub = jwk_to_public_key(_ec_jwk(key))
        expected = key.public_key().public_numbers()
        assert (pub.public_numbers().x, pub.public_numbers().y) == (expected.x, expected.y)
        assert pub.curve.name == "secp256r1"

    def test_unknown_kty(self):
        with pytest.raises(UnknownKeyType, match="unknown key type 'oct'"):
            jwk_to_public_key({"kty": "oct", "k": "c2VjcmV0"})

    def test_rsa_missing_member(self):
        with pytest.raises(BadPublicKey, match="Invalid RSA JWK"):
            jwk_to_public_key({"kty": "RSA", "n": "AQAB"})

    def test_rsa_bad_base64(self):
        with pytest.raises(BadPublicKey, match="Invalid RSA JWK"):
            jwk_to_public_key({"kty": "RSA", "n": "!!!", "e": "AQAB"})

    def test_ec_unsupported_curve(self):
        with pytest.raises(BadPublicKey, match="Unsupported EC curve"):
            jwk_to_public_key({"kty": "EC", "crv": "P-192", "x": "AA", "y": "AA"})

    def test_ec_point_not_on_curve(self):
        jwk_dict = _ec_jwk(_generate_ec_key())
        jwk_dict["y"] = jwk_dict["x"]
        with pytest.raises(BadPublicKey, match="Invalid EC JWK"):
            jwk_to_public_key(jwk_dict)


# ---------------------------------------------------------------------------
# TestKeyDigest
# ---------------------------------------------------------------------------


class TestKeyDigest:
    def test_value_reference_and_bare_key_agree(self, jwk1_dict):
        jwk = JsonWebKey.from_dict(jwk1_dict)
        assert key_digest(jwk) == JWK_1_DIGEST
        assert key_digest(jwk1_dict) == JWK_1_DIGEST
        assert key_digest(jwk.key) == JWK_1_DIGEST

    def test_digest_covers_spki_der(self, jwk1_dict):
        pub = JsonWebKey.from_dict(jwk1_dict).key
        der = pub.public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        assert canonical_der(jwk1_dict) == der
        assert key_digest(pub) == base64.b64encode(hashlib.sha256(der).digest()).decode()

    def test_digest_is_padded_standard_base64_sha256(self, jwk1_dict):
        digest = key_digest(jwk1_dict)
        assert len(digest) == 44
        assert digest.endswith("=")
        assert len(base64.b64decode(digest, validate=True)) == 32

    def test_encoding_differences_do_not_matter(self, jwk1_dict):
        padded = dict(jwk1_dict, e="AAEAAQ")
        minimal = dict(jwk1_dict, e="AQAB")
        assert key_digest(padded) == key_digest(minimal)

    def test_metadata_does_not_change_digest(self, jwk1_dict):
        plain = JsonWebKey.from_dict(jwk1_dict)
        tagged = JsonWebKey(plain.key, key_id="abc", algorithm="RS256")
        assert key_digest(plain) == key_digest(tagged)

    def test_different_keys_differ(self, jwk1_dict, jwk2_dict):
        assert key_digest(jwk1_dict) != key_digest(jwk2_dict)

    def test_ec_variants_agree(self):
        key = _generate_ec_key()
        jwk_dict = _ec_jwk(key)
        digest = key_digest(key.public_key())
        assert key_digest(jwk_dict) == digest
        assert key_digest(JsonWebKey.from_dict(jwk_dict)) == digest

    def test_canonical_json_member_order(self):
        key = _generate_ec_key()
        jwk_dict = _ec_jwk(key)
        expected = (
            '{"crv":"P-256","kty":"EC","x":"' + jwk_dict["x"] + '","y":"' + jwk_dict["y"] + '"}'
        )
        assert canonical_json(key.public_key()) == expected.encode()

    @pytest.mark.parametrize("bad", [object(), None, "RSA", 42, b"key", ["kty"]])
    def test_unknown_types_rejected(self, bad):
        with pytest.raises(UnknownKeyType) as info:
            key_digest(bad)
        assert info.value.error_type == BAD_PUBLIC_KEY

    def test_unnamed_ec_curve_rejected(self):
        key = ec.generate_private_key(ec.SECP256K1()).public_key()
        with pytest.raises(BadPublicKey, match="Unsupported EC curve"):
            key_digest(key)

    def test_private_key_rejected(self):
        with pytest.raises(UnknownKeyType):
            key_digest(_generate_rsa_key())

    def test_unsupported_algorithm_rejected(self):
        with pytest.raises(UnknownKeyType):
            key_digest(ed25519.Ed25519PrivateKey.generate().public_key())

    def test_rejection_logs_redacted_event(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="acmecore"):
            with pytest.raises(UnknownKeyType):
                key_digest({"n": "secret-modulus", "e": "AQAB"})
        events = [r for r in caplog.records if r.name == "acmecore.security"]
        assert len(events) == 1
        assert events[0].event_id == "acmecore.security.key_digest_rejected"
        assert events[0].jwk == {"n": "[REDACTED]", "e": "[REDACTED]"}
        assert "secret-modulus" not in caplog.text


# ---------------------------------------------------------------------------
# TestFingerprint256
# ---------------------------------------------------------------------------


class TestFingerprint256:
    def test_matches_sha256(self):
        data = b"certificate DER bytes"
        assert fingerprint256(data) == _b64(hashlib.sha256(data).digest())

    def test_unpadded(self):
        assert len(fingerprint256(b"")) == 43

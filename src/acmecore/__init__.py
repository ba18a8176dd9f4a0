"""ACMECORE: identity and integrity primitives for an ACME server.

Public API::

    from acmecore import new_token, serial_to_string, key_digest

    token = new_token()
    serial = serial_to_string(0x16345785D8A0000)
    identity = key_digest(JsonWebKey.from_dict(jwk))
"""

from acmecore.core.build import get_build_host, get_build_id, get_build_time
from acmecore.core.compare import constant_time_equals, fingerprint_equals, key_digest_equals
from acmecore.core.encoding import (
    AcmeJSONEncoder,
    JSONBuffer,
    b64url_decode,
    b64url_encode,
    json_default,
)
from acmecore.core.keys import JsonWebKey, KeyLike, fingerprint256, key_digest
from acmecore.core.serial import SERIAL_LENGTH, serial_to_string, string_to_serial
from acmecore.core.tokens import RandomSource, SystemRandomSource, new_token, random_string
from acmecore.core.urls import AcmeURL
from acmecore.errors import (
    AcmeProblem,
    BadPublicKey,
    MalformedError,
    RandomnessUnavailable,
    UnknownKeyType,
)

__all__ = [
    "SERIAL_LENGTH",
    "AcmeJSONEncoder",
    "AcmeProblem",
    "AcmeURL",
    "BadPublicKey",
    "JSONBuffer",
    "JsonWebKey",
    "KeyLike",
    "MalformedError",
    "RandomSource",
    "RandomnessUnavailable",
    "SystemRandomSource",
    "UnknownKeyType",
    "b64url_decode",
    "b64url_encode",
    "constant_time_equals",
    "fingerprint256",
    "fingerprint_equals",
    "get_build_host",
    "get_build_id",
    "get_build_time",
    "json_default",
    "key_digest",
    "key_digest_equals",
    "new_token",
    "random_string",
    "serial_to_string",
    "string_to_serial",
]

"""Certificate serial numbers in their fixed-width storage form.

A serial is persisted and displayed as exactly 32 lowercase hex digits
(128 bits), left-padded with zeros.  Decoding accepts only that form,
so ``serial_to_string(string_to_serial(s)) == s`` for every accepted
``s``.
"""

from __future__ import annotations

from acmecore.errors import MalformedError

SERIAL_LENGTH = 32
"""Characters in the textual serial form."""

_HEX_DIGITS = frozenset("0123456789abcdef")
_MAX_SERIAL = (1 << (4 * SERIAL_LENGTH)) - 1


def serial_to_string(n: int) -> str:
    """Render *n* as 32 zero-padded lowercase hex digits.

    Serials are generated internally, so an out-of-range value is a
    programming error rather than bad input.

    Raises
    ------
    TypeError
        If *n* is not an :class:`int`.
    ValueError
        If *n* is negative or needs more than 32 hex digits.

    """
    if not isinstance(n, int) or isinstance(n, bool):
        msg = f"Serial number must be an int, got {type(n).__name__}"
        raise TypeError(msg)
    if n < 0 or n > _MAX_SERIAL:
        msg = f"Serial number {n} does not fit in {SERIAL_LENGTH} hex digits"
        raise ValueError(msg)
    return f"{n:0{SERIAL_LENGTH}x}"


def string_to_serial(s: str) -> int:
    """Parse the 32-character hex form back into an integer.

    Raises
    ------
    MalformedError
        On the wrong length or any character outside ``0-9a-f``.

    """
    if not isinstance(s, str) or len(s) != SERIAL_LENGTH:
        raise MalformedError("Serial number should be 32 characters long")
    for pos, ch in enumerate(s):
        if ch not in _HEX_DIGITS:
            msg = f"Serial number has invalid character {ch!r} at position {pos}"
            raise MalformedError(msg)
    return int(s, 16)

"""Base58 and Base58Check codecs over the Bitcoin alphabet.

Leading zero bytes map one-to-one onto leading ``1`` characters, so the
encoded length of a fixed-size payload only depends on its leading zeros.
"""

from __future__ import annotations

from hdkey.utils.crypto import sha256d

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
CHECKSUM_LENGTH = 4

_DIGITS = {char: value for value, char in enumerate(ALPHABET)}


def checksum(payload: bytes) -> bytes:
    """Base58Check checksum: the first 4 bytes of SHA256d(payload)."""
    return sha256d(payload)[:CHECKSUM_LENGTH]


def base58_encode(data: bytes) -> str:
    """Encode raw bytes to Base58 (no checksum)."""
    zeros = len(data) - len(data.lstrip(b"\x00"))
    n = int.from_bytes(data, "big")
    digits: list[str] = []
    while n:
        n, digit = divmod(n, 58)
        digits.append(ALPHABET[digit])
    return ALPHABET[0] * zeros + "".join(reversed(digits))


def base58_decode(text: str) -> bytes:
    """Decode a Base58 string to raw bytes (no checksum).

    Raises:
        ValueError: If ``text`` contains a character outside the alphabet.
    """
    n = 0
    for position, char in enumerate(text):
        digit = _DIGITS.get(char)
        if digit is None:
            msg = f"Invalid Base58 character {char!r} at position {position}"
            raise ValueError(msg)
        n = n * 58 + digit
    zeros = len(text) - len(text.lstrip(ALPHABET[0]))
    return b"\x00" * zeros + n.to_bytes((n.bit_length() + 7) // 8, "big")


def base58check_encode(payload: bytes) -> str:
    return base58_encode(payload + checksum(payload))


def base58check_decode(text: str) -> bytes:
    """Decode a Base58Check string and return the payload without its checksum.

    Raises:
        ValueError: If the string is not Base58, is shorter than a checksum,
            or the checksum does not match.
    """
    raw = base58_decode(text)
    if len(raw) < CHECKSUM_LENGTH:
        msg = f"Base58Check string too short: {len(raw)} bytes"
        raise ValueError(msg)
    payload = raw[:-CHECKSUM_LENGTH]
    if raw[-CHECKSUM_LENGTH:] != checksum(payload):
        msg = "Base58Check checksum mismatch"
        raise ValueError(msg)
    return payload

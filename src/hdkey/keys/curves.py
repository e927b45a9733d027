"""Curve operations for the two supported algorithms.

- secp256k1 (BIP-32) through ``ecdsa``: scalar-to-point, point addition,
  point-at-infinity test, SEC1 compression / decompression.
- ed25519 (SLIP-0010) through ``pynacl``: scalar-to-point only.

The curve objects are stateless; a single shared instance per algorithm is
looked up with :func:`get_curve`.
"""

from __future__ import annotations

import enum
from typing import ClassVar

from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.ellipticcurve import INFINITY
from ecdsa.keys import MalformedPointError
from nacl.signing import SigningKey as Ed25519SigningKey


class Algorithm(enum.StrEnum):
    """Supported key derivation algorithms."""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"


# ---------------------------------------------------------------------------
# SEC1 point encoding
# ---------------------------------------------------------------------------

_P = SECP256k1.curve.p()


def _sec1_compressed(x: int, y: int) -> bytes:
    return bytes([0x02 | (y & 1)]) + x.to_bytes(32, "big")


def decompress_public_key(pubkey: bytes) -> bytes:
    """Return the 65-byte uncompressed form of a 33- or 65-byte public key.

    Raises:
        ValueError: If the encoding is malformed or the point is not on the curve.
    """
    if len(pubkey) == 65 and pubkey[0] == 0x04:
        x = int.from_bytes(pubkey[1:33], "big")
        y = int.from_bytes(pubkey[33:], "big")
    elif len(pubkey) == 33 and pubkey[0] in (0x02, 0x03):
        x = int.from_bytes(pubkey[1:], "big")
        # p = 3 (mod 4), so a square root of y^2 = x^3 + 7 is (x^3 + 7)^((p+1)/4)
        y = pow((pow(x, 3, _P) + 7) % _P, (_P + 1) // 4, _P)
        if y & 1 != pubkey[0] & 1:
            y = _P - y
    else:
        msg = f"Invalid public key encoding (length {len(pubkey)})"
        raise ValueError(msg)
    if x >= _P or y >= _P or (y * y - pow(x, 3, _P) - 7) % _P:
        msg = "Public key is not on the secp256k1 curve"
        raise ValueError(msg)
    return b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")


def compress_public_key(pubkey: bytes) -> bytes:
    """Return the 33-byte SEC1 compressed form of a public key.

    Accepts compressed (33 bytes), uncompressed (65 bytes, ``0x04`` prefix)
    or bare ``X || Y`` (64 bytes) encodings.

    Raises:
        ValueError: If the encoding is malformed or the point is not on the curve.
    """
    if len(pubkey) == 64:
        pubkey = b"\x04" + pubkey
    uncompressed = decompress_public_key(pubkey)
    return _sec1_compressed(
        int.from_bytes(uncompressed[1:33], "big"),
        int.from_bytes(uncompressed[33:], "big"),
    )


# ---------------------------------------------------------------------------
# Curve operations
# ---------------------------------------------------------------------------


class Curve:
    """Operations a derivation algorithm needs from its curve."""

    algorithm: ClassVar[Algorithm]
    seed_key: ClassVar[bytes]
    supports_public_derivation: ClassVar[bool]
    supports_extended_keys: ClassVar[bool]

    def public_key(self, private_key: bytes) -> bytes:
        """Map a 32-byte private key to its 33-byte public key encoding."""
        raise NotImplementedError

    def validate_private_key(self, private_key: bytes) -> None:
        if len(private_key) != 32:
            msg = f"Private key must be 32 bytes, got {len(private_key)}"
            raise ValueError(msg)

    def validate_public_key(self, public_key: bytes) -> None:
        raise NotImplementedError


class Secp256k1Curve(Curve):
    algorithm = Algorithm.SECP256K1
    seed_key = b"Bitcoin seed"
    supports_public_derivation = True
    supports_extended_keys = True

    order: int = SECP256k1.order

    def public_key(self, private_key: bytes) -> bytes:
        try:
            sk = SigningKey.from_string(private_key, curve=SECP256k1)
        except MalformedPointError as exc:
            raise ValueError(str(exc)) from exc
        point = sk.get_verifying_key().pubkey.point
        return _sec1_compressed(point.x(), point.y())

    def validate_private_key(self, private_key: bytes) -> None:
        super().validate_private_key(private_key)
        if not 0 < int.from_bytes(private_key, "big") < self.order:
            msg = "Private key scalar out of range [1, n-1]"
            raise ValueError(msg)

    def validate_public_key(self, public_key: bytes) -> None:
        if len(public_key) != 33 or public_key[0] not in (0x02, 0x03):
            msg = "secp256k1 public key must be 33 bytes with a 0x02/0x03 prefix"
            raise ValueError(msg)
        decompress_public_key(public_key)

    def add_scalar_to_point(self, scalar: int, public_key: bytes) -> bytes | None:
        """Return ``G * scalar + P`` compressed, or None at the point at infinity."""
        try:
            parent = VerifyingKey.from_string(public_key, curve=SECP256k1).pubkey.point
        except MalformedPointError as exc:
            raise ValueError(str(exc)) from exc
        child = SECP256k1.generator * scalar + parent
        if child == INFINITY:
            return None
        return _sec1_compressed(child.x(), child.y())


class Ed25519Curve(Curve):
    algorithm = Algorithm.ED25519
    seed_key = b"ed25519 seed"
    supports_public_derivation = False
    supports_extended_keys = False

    def public_key(self, private_key: bytes) -> bytes:
        # SLIP-0010 prefixes the 32-byte point with 0x00 to keep keys 33 bytes.
        return b"\x00" + Ed25519SigningKey(private_key).verify_key.encode()

    def validate_public_key(self, public_key: bytes) -> None:
        if len(public_key) != 33 or public_key[0] != 0x00:
            msg = "ed25519 public key must be 33 bytes with a 0x00 prefix"
            raise ValueError(msg)


_CURVES: dict[Algorithm, Curve] = {
    Algorithm.SECP256K1: Secp256k1Curve(),
    Algorithm.ED25519: Ed25519Curve(),
}


def get_curve(algorithm: Algorithm | str) -> Curve:
    """Return the shared curve operations for ``algorithm``.

    Raises:
        ValueError: If the algorithm is not supported.
    """
    return _CURVES[Algorithm(algorithm)]


SECP256K1_ORDER = Secp256k1Curve.order

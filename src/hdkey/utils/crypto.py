"""Hashing and keyed-hashing helpers."""

from __future__ import annotations

import hashlib
import hmac

from Crypto.Hash import RIPEMD160, keccak


def sha256(data: bytes) -> bytes:
    """Single SHA-256 hash."""
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """SHA-256 applied twice."""
    return sha256(sha256(data))


def ripemd160(data: bytes) -> bytes:
    """RIPEMD-160 hash.

    OpenSSL 3 builds often drop ripemd160 from ``hashlib``, so this goes
    through pycryptodome.
    """
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """Bitcoin Hash160: RIPEMD-160(SHA-256(data))."""
    return ripemd160(sha256(data))


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    """HMAC-SHA512, the keyed hash behind every BIP-32 / SLIP-0010 step."""
    return hmac.new(key, data, hashlib.sha512).digest()


def keccak256(data: bytes) -> bytes:
    """Keccak-256 with the pre-NIST padding, as used by Ethereum."""
    return keccak.new(digest_bits=256, data=data).digest()

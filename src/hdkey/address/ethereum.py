"""Ethereum addresses with EIP-55 mixed-case checksums."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Self

from hdkey.errors import InvalidAddress, InvalidKey
from hdkey.keys.curves import decompress_public_key
from hdkey.utils.crypto import keccak256

_HEX40_RE = re.compile(r"^[0-9a-fA-F]{40}$")


def _strip_0x(address: str) -> str:
    if address[:2] in ("0x", "0X"):
        return address[2:]
    return address


@dataclass(frozen=True)
class EthereumAddress:
    """An Ethereum account address for a secp256k1 public key.

    Attributes:
        public_key: 65-byte uncompressed public key.
    """

    public_key: bytes

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Self:
        """Accepts 33-byte compressed or 65-byte uncompressed keys."""
        try:
            uncompressed = decompress_public_key(public_key)
        except ValueError as exc:
            raise InvalidKey(str(exc)) from exc
        return cls(uncompressed)

    @property
    def raw_address(self) -> bytes:
        """Last 20 bytes of Keccak-256 over the 64-byte X || Y."""
        return keccak256(self.public_key[1:])[-20:]

    @property
    def address(self) -> str:
        return self.checksum_address(self.raw_address.hex())

    def __str__(self) -> str:
        return self.address

    @staticmethod
    def checksum_address(address: str) -> str:
        """Return the EIP-55 form of a 40-hex-digit address.

        Raises:
            InvalidAddress: If the input is not 40 hex digits (with optional 0x).
        """
        addr = _strip_0x(address)
        if not _HEX40_RE.match(addr):
            msg = f"Invalid Ethereum address: {address!r}"
            raise InvalidAddress(msg)
        addr = addr.lower()
        digest = keccak256(addr.encode("ascii")).hex()
        return "0x" + "".join(
            char.upper() if int(nibble, 16) >= 8 else char
            for char, nibble in zip(addr, digest, strict=False)
        )

    @staticmethod
    def is_valid(address: str) -> bool:
        """All-lowercase and all-uppercase addresses carry no checksum and are valid."""
        addr = _strip_0x(address)
        if not _HEX40_RE.match(addr):
            return False
        if addr == addr.lower() or addr == addr.upper():
            return True
        return addr == EthereumAddress.checksum_address(addr)[2:]

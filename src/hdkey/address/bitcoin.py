"""P2PKH Bitcoin addresses derived from public keys.

- Address generation from compressed / uncompressed SEC1 public keys
- Address validation (length and Base58Check checksum)
- Public key hash extraction
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

from hdkey.errors import InvalidAddress, InvalidKey
from hdkey.keys.base58 import base58_encode, base58check_decode, checksum
from hdkey.keys.versions import BITCOIN_MAIN, VersionBytes
from hdkey.utils.crypto import hash160


@dataclass(frozen=True)
class BitcoinAddress:
    """A P2PKH address for a secp256k1 public key.

    Attributes:
        public_key: 33-byte compressed or 65-byte uncompressed public key.
        version: Profile supplying the address prefix byte.
    """

    public_key: bytes
    version: VersionBytes = field(default=BITCOIN_MAIN)

    def __post_init__(self) -> None:
        length = len(self.public_key)
        if length not in (33, 65) or not 0x02 <= self.public_key[0] <= 0x04:
            msg = "Invalid public key for a Bitcoin address"
            raise InvalidKey(msg)

    @classmethod
    def from_public_key(cls, public_key: bytes, version: VersionBytes | None = None) -> Self:
        return cls(public_key, version if version is not None else BITCOIN_MAIN)

    @property
    def raw_address(self) -> bytes:
        """``prefix || Hash160(public_key) || checksum`` (25 bytes)."""
        prefixed = bytes([self.version.pubkey_hash]) + hash160(self.public_key)
        return prefixed + checksum(prefixed)

    @property
    def address(self) -> str:
        return base58_encode(self.raw_address)

    def __str__(self) -> str:
        return self.address

    @staticmethod
    def is_valid(address: str) -> bool:
        """Check the address length and its Base58Check checksum."""
        if not 26 <= len(address) <= 35:
            return False
        try:
            base58check_decode(address)
        except ValueError:
            return False
        return True


def address_to_pubkey_hash(address: str) -> bytes:
    """Extract the 20-byte public key hash from a P2PKH address.

    Raises:
        InvalidAddress: If the address is not valid Base58Check or not P2PKH-sized.
    """
    try:
        payload = base58check_decode(address)
    except ValueError as exc:
        raise InvalidAddress(str(exc)) from exc
    if len(payload) != 21:
        msg = f"Invalid address payload length: {len(payload)}"
        raise InvalidAddress(msg)
    return payload[1:]

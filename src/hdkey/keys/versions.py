"""Version-byte profiles for extended keys and addresses.

A profile pairs the two BIP-32 magic numbers (one for serialized private
keys, one for public keys) with the P2PKH address prefix of the same network.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Network(enum.StrEnum):
    """Named version profiles."""

    BITCOIN_MAIN = "bitcoin_main"
    BITCOIN_TEST = "bitcoin_test"


@dataclass(frozen=True)
class VersionBytes:
    """Version magic numbers for one network profile.

    Attributes:
        public: 32-bit version of serialized extended public keys.
        private: 32-bit version of serialized extended private keys.
        pubkey_hash: 1-byte P2PKH address prefix.
    """

    public: int
    private: int
    pubkey_hash: int = 0x00

    def __post_init__(self) -> None:
        for name in ("public", "private"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFFFFFFFF:
                msg = f"{name} version must fit in 32 bits, got {value:#x}"
                raise ValueError(msg)
        if not 0 <= self.pubkey_hash <= 0xFF:
            msg = f"pubkey_hash prefix must fit in 8 bits, got {self.pubkey_hash:#x}"
            raise ValueError(msg)


BITCOIN_MAIN = VersionBytes(public=0x0488B21E, private=0x0488ADE4, pubkey_hash=0x00)  # xpub / xprv
BITCOIN_TEST = VersionBytes(public=0x043587CF, private=0x04358394, pubkey_hash=0x6F)  # tpub / tprv

_PROFILES: dict[Network, VersionBytes] = {
    Network.BITCOIN_MAIN: BITCOIN_MAIN,
    Network.BITCOIN_TEST: BITCOIN_TEST,
}


def get_version(network: Network | str) -> VersionBytes:
    """Return the version profile registered under ``network``.

    Raises:
        ValueError: If the name is unknown.
    """
    return _PROFILES[Network(network)]

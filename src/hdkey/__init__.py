"""Hierarchical deterministic keys (BIP-32 / SLIP-0010)."""

from hdkey.keys.curves import Algorithm
from hdkey.keys.hd_key import HARDENED_OFFSET, HDKey, parse_path
from hdkey.keys.versions import BITCOIN_MAIN, BITCOIN_TEST, Network, VersionBytes

__all__ = [
    "BITCOIN_MAIN",
    "BITCOIN_TEST",
    "HARDENED_OFFSET",
    "Algorithm",
    "HDKey",
    "Network",
    "VersionBytes",
    "parse_path",
]

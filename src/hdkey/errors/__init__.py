"""Typed error taxonomy."""

from hdkey.errors.derivation_errors import (
    HardenedDerivationRequiresPrivateKey,
    InvalidDerivationPath,
    InvalidIndex,
    InvalidSeed,
    UnsupportedAlgorithm,
    UnsupportedOperation,
)
from hdkey.errors.encoding_errors import (
    InvalidAddress,
    InvalidChecksum,
    InvalidExtendedKey,
    InvalidKey,
    InvalidMnemonic,
    InvalidVersion,
)
from hdkey.errors.hd_errors import HDKeyError

__all__ = [
    "HDKeyError",
    "HardenedDerivationRequiresPrivateKey",
    "InvalidAddress",
    "InvalidChecksum",
    "InvalidDerivationPath",
    "InvalidExtendedKey",
    "InvalidIndex",
    "InvalidKey",
    "InvalidMnemonic",
    "InvalidSeed",
    "InvalidVersion",
    "UnsupportedAlgorithm",
    "UnsupportedOperation",
]

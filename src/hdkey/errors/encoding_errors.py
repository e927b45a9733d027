"""Errors raised while parsing or encoding keys, addresses and phrases."""

from __future__ import annotations

from hdkey.errors.hd_errors import HDKeyError


class InvalidExtendedKey(HDKeyError):
    """Structurally malformed extended key payload."""

    code = "invalid-extended-key"


class InvalidChecksum(HDKeyError):
    """Extended key checksum does not match its payload."""

    code = "invalid-checksum"


class InvalidVersion(HDKeyError):
    """Parsed version bytes do not match the expected profile."""

    code = "invalid-version"


class InvalidKey(HDKeyError):
    """Private scalar out of range or public key not on the curve."""

    code = "invalid-key"


class InvalidAddress(HDKeyError):
    """Address string is malformed."""

    code = "invalid-address"


class InvalidMnemonic(HDKeyError):
    """Mnemonic entropy or phrase is invalid."""

    code = "invalid-mnemonic"

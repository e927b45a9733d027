"""Errors raised while building or deriving keys."""

from __future__ import annotations

from hdkey.errors.hd_errors import HDKeyError


class UnsupportedAlgorithm(HDKeyError):
    """Root construction requested with an unknown curve algorithm."""

    code = "unsupported-algorithm"


class InvalidSeed(HDKeyError):
    """The seed handed to root construction is unusable (e.g. empty)."""

    code = "invalid-seed"


class InvalidDerivationPath(HDKeyError):
    """A derivation path segment is malformed."""

    code = "invalid-derivation-path"


class InvalidIndex(HDKeyError):
    """A child index already carries the hardened bit or is out of range."""

    code = "invalid-index"


class HardenedDerivationRequiresPrivateKey(HDKeyError):
    """Hardened derivation was attempted on a public-only node."""

    code = "hardened-requires-private-key"


class UnsupportedOperation(HDKeyError):
    """The operation is not defined for the node's algorithm."""

    code = "unsupported-operation"

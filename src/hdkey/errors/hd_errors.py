"""Base exception class for all hdkey errors."""

from __future__ import annotations


class HDKeyError(Exception):
    """Base error for all key derivation and encoding operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    code: str = "hdkey-error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

"""BIP-39 mnemonic phrases: entropy <-> phrase <-> seed.

Thin wrapper over the python-mnemonic reference implementation. The seed it
produces is what :meth:`hdkey.keys.hd_key.HDKey.from_seed` consumes.
"""

from __future__ import annotations

import asyncio
from functools import cache
from typing import Self

import mnemonic

from hdkey.errors import InvalidMnemonic

_VALID_ENTROPY_LENGTHS = (16, 20, 24, 28, 32)


@cache
def _wordlist(language: str) -> mnemonic.Mnemonic:
    if language not in mnemonic.Mnemonic.list_languages():
        msg = f"Unsupported mnemonic language: {language}"
        raise InvalidMnemonic(msg)
    return mnemonic.Mnemonic(language)


class Mnemonic:
    """A BIP-39 mnemonic backed by its entropy."""

    def __init__(self, entropy: bytes, language: str = "english") -> None:
        if len(entropy) not in _VALID_ENTROPY_LENGTHS:
            msg = (
                "Invalid entropy length - it must be a multiple of 4 between 16 and 32 bytes, "
                f"got {len(entropy)}"
            )
            raise InvalidMnemonic(msg)
        self._entropy = bytes(entropy)
        self._language = language
        self._phrase = _wordlist(language).to_mnemonic(self._entropy)

    @classmethod
    def parse(cls, phrase: str, language: str = "english") -> Self:
        """Recover the mnemonic for ``phrase``.

        Raises:
            InvalidMnemonic: On an unknown word, bad word count or checksum.
        """
        wordlist = _wordlist(language)
        normalized = " ".join(phrase.split())
        if not wordlist.check(normalized):
            msg = "Invalid mnemonic phrase"
            raise InvalidMnemonic(msg)
        return cls(bytes(wordlist.to_entropy(normalized)), language)

    @classmethod
    def is_valid(cls, phrase: str, language: str = "english") -> bool:
        return _wordlist(language).check(" ".join(phrase.split()))

    @property
    def entropy(self) -> bytes:
        return self._entropy

    @property
    def phrase(self) -> str:
        return self._phrase

    @property
    def words(self) -> list[str]:
        return self._phrase.split(" ")

    def to_seed(self, passphrase: str = "") -> bytes:
        """64-byte seed: PBKDF2-HMAC-SHA512 over the phrase, 2048 rounds."""
        return mnemonic.Mnemonic.to_seed(self._phrase, passphrase)

    async def to_seed_async(self, passphrase: str = "") -> bytes:
        """:meth:`to_seed` run in a worker thread, off the event loop."""
        return await asyncio.to_thread(self.to_seed, passphrase)

    def __repr__(self) -> str:
        return f"Mnemonic(words={len(self.words)}, language={self._language!r})"

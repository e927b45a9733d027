"""Shared test fixtures for the hdkey test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from hdkey.keys.hd_key import HDKey
from hdkey.keys.versions import BITCOIN_MAIN
from hdkey.utils import crypto

SEED_1 = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of the settings layer."""
    for name in ("HDKEY_NETWORK", "HDKEY_ALGORITHM", "HDKEY_MAX_EXTENDED_KEY_BYTES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("HDKEY_CONFIG_PATH", raising=False)


@pytest.fixture
def master() -> HDKey:
    """BIP-32 test vector 1 root."""
    return HDKey.from_master_seed(SEED_1, BITCOIN_MAIN)


@pytest.fixture
def ed25519_master() -> HDKey:
    """SLIP-0010 ed25519 test vector 1 root."""
    return HDKey.from_ed25519_seed(SEED_1, BITCOIN_MAIN)


@pytest.fixture
def crafted_hmac() -> Callable[[Iterable[int]], Callable[[bytes, bytes], bytes]]:
    """Build an HMAC-SHA512 that forces IL for the first few calls.

    Each forced value replaces the left half of the real digest once; after
    they run out the real primitive is used unchanged.
    """

    def build(il_values: Iterable[int]) -> Callable[[bytes, bytes], bytes]:
        forced = iter(il_values)

        def fake(key: bytes, data: bytes) -> bytes:
            real = crypto.hmac_sha512(key, data)
            il = next(forced, None)
            if il is None:
                return real
            return il.to_bytes(32, "big") + real[32:]

        return fake

    return build

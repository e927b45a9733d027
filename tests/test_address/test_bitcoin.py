"""Tests for P2PKH Bitcoin addresses."""

from __future__ import annotations

import pytest

from hdkey.address.bitcoin import BitcoinAddress, address_to_pubkey_hash
from hdkey.errors import InvalidAddress, InvalidKey
from hdkey.keys.hd_key import HDKey
from hdkey.keys.versions import BITCOIN_TEST
from hdkey.utils.crypto import hash160

COMPRESSED_VECTORS = [
    ("0250863ad64a87ae8a2fe83c1af1a8403cb53f53e486d8511dad8a04887e5b2352", "1PMycacnJaSqwwJqjawXBErnLsZ7RkXUAs"),
    ("023e45506283bb3ffe18025513d459fe0ee0dcf0ce15a2c31e8eecc83f93173871", "1GhfPBLChyD2uDVAEGKwZNuZjrSd6WNY1z"),
    ("0265e20d1c10025e11776306b855ffcfb26176cac2bd4bbfa677056524d100f29a", "16zR1jN5KdfBwEvsWuQUANpzLnACb1TWd8"),
    ("03dbcd1b8c7fad43dafe5a28f593f530a2b30e75f706a5a841b65c6a0dd331a4ef", "1DLxqg3Y1EKZ39t94Umner5m7eHbvk76zt"),
    ("02cf7f68382d44fd74319184ae646b27bcb13a247a5ba08ff9ee0429d2186cd50d", "13BPfGT7vqH6myhHc7k6F3iRnLBj3xywW6"),
    ("031a5acf85fca539622d32116a9bb6679e2046d3172097fdca700e90f8646d03b9", "1CWPPiwmDCvRYDmZy1pMenLVMX1jP5QX62"),
]  # fmt: skip

UNCOMPRESSED_VECTORS = [
    (
        "0450863AD64A87AE8A2FE83C1AF1A8403CB53F53E486D8511DAD8A04887E5B2352"
        "2CD470243453A299FA9E77237716103ABC11A1DF38855ED6F2EE187E9C582BA6",
        "16UwLL9Risc3QfPqBUvKofHmBQ7wMtjvM",
    ),
    (
        "043e45506283bb3ffe18025513d459fe0ee0dcf0ce15a2c31e8eecc83f93173871"
        "10f016f29cbc43199c04f1d822aa1070799d057aa395c414462b2d8bff8f4942",
        "1K6ojDzpsRUYpP4x4s7KTurXZRmiw1CUwF",
    ),
    (
        "0465e20d1c10025e11776306b855ffcfb26176cac2bd4bbfa677056524d100f29a"
        "73847a8a221f4e7ddf09c47420c2356d345be57dbd8bc5707fa93f06565e91dc",
        "15Kxj9SRvHu7GRSQWNqfk1gFXKAoBu7y8b",
    ),
    (
        "04dbcd1b8c7fad43dafe5a28f593f530a2b30e75f706a5a841b65c6a0dd331a4ef"
        "5b334bab26eab7532b1b2ec5a10a29b3926c5aa4af9030aea5c4ca48aea6242b",
        "1PbV3BLAnjDnboK7GKjHDFGuBHnWzN84Na",
    ),
    (
        "04cf7f68382d44fd74319184ae646b27bcb13a247a5ba08ff9ee0429d2186cd50d"
        "3754d5c0c35d49c1811bf83a490cfc4b7e38e46bb91c833f09ee484e622e574e",
        "12THF1F65RH89KhMw8JZynScbQEe3qUknK",
    ),
    (
        "041a5acf85fca539622d32116a9bb6679e2046d3172097fdca700e90f8646d03b9"
        "9382fb3344bd44f46ed4d423c1b18bd766c80f91617a005a57e8977662079259",
        "17JLCFRFqrYKUb5rMPsehtv2oYv7sx82zc",
    ),
]


class TestFromPublicKey:
    @pytest.mark.parametrize(("pubkey_hex", "address"), COMPRESSED_VECTORS)
    def test_compressed(self, pubkey_hex: str, address: str) -> None:
        assert BitcoinAddress.from_public_key(bytes.fromhex(pubkey_hex)).address == address

    @pytest.mark.parametrize(("pubkey_hex", "address"), UNCOMPRESSED_VECTORS)
    def test_uncompressed(self, pubkey_hex: str, address: str) -> None:
        assert BitcoinAddress.from_public_key(bytes.fromhex(pubkey_hex)).address == address

    def test_raw_address_layout(self) -> None:
        pubkey = bytes.fromhex(COMPRESSED_VECTORS[0][0])
        raw = BitcoinAddress.from_public_key(pubkey).raw_address
        assert len(raw) == 25
        assert raw[0] == 0x00
        assert raw[1:21] == hash160(pubkey)

    def test_testnet_prefix(self) -> None:
        addr = BitcoinAddress.from_public_key(bytes.fromhex(COMPRESSED_VECTORS[0][0]), BITCOIN_TEST)
        assert addr.raw_address[0] == 0x6F
        assert addr.address[0] in "mn"

    def test_str(self) -> None:
        pubkey_hex, address = COMPRESSED_VECTORS[1]
        assert str(BitcoinAddress.from_public_key(bytes.fromhex(pubkey_hex))) == address

    def test_from_derived_key(self, master: HDKey) -> None:
        # m/0'/1 of BIP-32 test vector 1
        child = master.derive("m/0'/1")
        assert BitcoinAddress.from_public_key(child.public_key).raw_address[1:21] == (
            child.key_identifier
        )

    @pytest.mark.parametrize(
        "pubkey",
        [b"", b"\x02" * 32, b"\x00" + b"\x01" * 32, b"\x05" + b"\x01" * 64],
    )
    def test_invalid_public_key(self, pubkey: bytes) -> None:
        with pytest.raises(InvalidKey):
            BitcoinAddress.from_public_key(pubkey)


class TestIsValid:
    @pytest.mark.parametrize(
        "address",
        [
            "16UwLL9Risc3QfPqBUvKofHmBQ7wMtjvM",
            "1K6ojDzpsRUYpP4x4s7KTurXZRmiw1CUwF",
            "15Kxj9SRvHu7GRSQWNqfk1gFXKAoBu7y8b",
            "1PbV3BLAnjDnboK7GKjHDFGuBHnWzN84Na",
            "12THF1F65RH89KhMw8JZynScbQEe3qUknK",
            "17JLCFRFqrYKUb5rMPsehtv2oYv7sx82zc",
            "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy",
        ],
    )
    def test_accepts_valid(self, address: str) -> None:
        assert BitcoinAddress.is_valid(address)

    @pytest.mark.parametrize(
        "address",
        [
            # too short
            "16UwLL9Risc3QfPqBUvKofHmBQ7wMtjv",
            "16UwLL9Risc3QfPqBUvKofHmBQ7wMtj",
            # too long
            "1K6ojDzpsRUYpP4x4s7KTurXZRmiw1CUwFXa",
            "1K6ojDzpsRUYpP4x4s7KTurXZRmiw1CUwFXaB",
            # bad checksum
            "16UwLL9Risc3QfPqBUvKofHmBQ7wMtjvL",
            "1K6ojDzpsRUYpP4x4s7KTurXZRmiw1CUwG",
            "15Kxj9SRvHu7GRSQWNqfk1gFXKAoBu7y8a",
            "1PbV3BLAnjDnboK7GKjHDFGuBHnWzN84Nb",
            # invalid characters
            "1 UwLL9Risc3QfPqBUvKofHmBQ7wMtjvM",
            "1K6ojDzp$RUYpP4x4s7KTurXZRmiw1CUwF",
            "15!xj9SRvHu7GRSQWNqfk1gFXKAoBu7y8b",
            "1PbV3BLAnjDnboK7GKjHDF>uBHnWzN84Na",
        ],
    )
    def test_rejects_invalid(self, address: str) -> None:
        assert not BitcoinAddress.is_valid(address)


class TestAddressToPubkeyHash:
    def test_round_trip(self) -> None:
        pubkey = bytes.fromhex(COMPRESSED_VECTORS[2][0])
        address = BitcoinAddress.from_public_key(pubkey).address
        assert address_to_pubkey_hash(address) == hash160(pubkey)

    def test_bad_checksum(self) -> None:
        with pytest.raises(InvalidAddress):
            address_to_pubkey_hash("16UwLL9Risc3QfPqBUvKofHmBQ7wMtjvL")

    def test_bad_character(self) -> None:
        with pytest.raises(InvalidAddress):
            address_to_pubkey_hash("1K6ojDzp$RUYpP4x4s7KTurXZRmiw1CUwF")

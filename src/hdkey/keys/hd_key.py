"""BIP-32 / SLIP-0010 hierarchical deterministic keys.

Implements the HD key tree for two algorithms:
- secp256k1 (BIP-32): hardened and normal derivation, public-parent
  derivation, xprv/xpub serialization (Base58Check)
- ed25519 (SLIP-0010): hardened derivation only, no extended-key text form

Every node is an immutable :class:`HDKey`; derivation returns new nodes.
"""

from __future__ import annotations

import logging
import re
import struct
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Self

from hdkey.config.settings import DEFAULT_MAX_EXTENDED_KEY_BYTES, HDKeySettings
from hdkey.errors import (
    HardenedDerivationRequiresPrivateKey,
    InvalidChecksum,
    InvalidDerivationPath,
    InvalidExtendedKey,
    InvalidIndex,
    InvalidKey,
    InvalidSeed,
    InvalidVersion,
    UnsupportedAlgorithm,
    UnsupportedOperation,
)
from hdkey.keys.base58 import CHECKSUM_LENGTH, base58_decode, base58check_encode, checksum
from hdkey.keys.curves import Algorithm, Curve, Secp256k1Curve, get_curve
from hdkey.keys.versions import VersionBytes
from hdkey.utils import crypto

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HARDENED_OFFSET = 0x80000000  # 2^31

ZERO_FINGERPRINT = b"\x00\x00\x00\x00"

# version[4] || depth[1] || parent_fingerprint[4] || index[4] || chain_code[32] || key_data[33]
_PAYLOAD_LENGTH = 78

_SEGMENT_RE = re.compile(r"^([0-9]+)(['h]?)$")

HmacSha512 = Callable[[bytes, bytes], bytes]


# ---------------------------------------------------------------------------
# Path parsing
# ---------------------------------------------------------------------------


def parse_path(path: str) -> list[tuple[int, bool]]:
    """Parse a derivation path like ``m/44'/0'/0'/0/0`` into ``(index, hardened)`` steps.

    The path is case-insensitive. A leading ``m`` (or ``m'``) means "from this node" and
    contributes no step. ``'`` or ``h`` marks a hardened segment. Whitespace
    around segments is ignored, as are empty segments.

    Raises:
        InvalidDerivationPath: If a segment is not a non-negative integer.
    """
    steps: list[tuple[int, bool]] = []
    for position, raw in enumerate(path.lower().split("/")):
        segment = raw.strip()
        if not segment or (position == 0 and segment in ("m", "m'")):
            continue
        match = _SEGMENT_RE.match(segment)
        if match is None:
            msg = f"Invalid derivation path segment: {raw!r}"
            raise InvalidDerivationPath(msg)
        steps.append((int(match.group(1)), bool(match.group(2))))
    return steps


def _check_index(index: int) -> None:
    """The hardened bit is never part of a caller-supplied index."""
    if not 0 <= index < HARDENED_OFFSET:
        msg = f"Invalid child index: {index}"
        raise InvalidIndex(msg)


def _curve_for(algorithm: Algorithm | str) -> Curve:
    try:
        return get_curve(algorithm)
    except ValueError:
        msg = f"Unsupported algorithm: {algorithm}"
        raise UnsupportedAlgorithm(msg) from None


# ---------------------------------------------------------------------------
# HD key
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HDKey:
    """A node in a hierarchical deterministic key tree.

    Attributes:
        algorithm: Curve algorithm, shared by the whole tree.
        chain_code: 32-byte chain code, the HMAC key for this node's children.
        public_key: 33-byte public key (SEC1 compressed for secp256k1,
            ``0x00 || point`` for ed25519).
        version: Version profile used to serialize this node.
        private_key: 32-byte private scalar, or None for public-only nodes.
        depth: 0 for the root, parent depth + 1 otherwise.
        index: 32-bit child index; values >= 2^31 are hardened.
        parent_fingerprint: First 4 bytes of the parent's key identifier,
            all zero for the root.
        hmac_sha512: Keyed hash used for derivation, inherited by children.
    """

    algorithm: Algorithm
    chain_code: bytes
    public_key: bytes
    version: VersionBytes
    private_key: bytes | None = field(default=None, repr=False)
    depth: int = 0
    index: int = 0
    parent_fingerprint: bytes = ZERO_FINGERPRINT
    hmac_sha512: HmacSha512 = field(default=crypto.hmac_sha512, repr=False, compare=False)

    def __post_init__(self) -> None:
        curve = _curve_for(self.algorithm)
        object.__setattr__(self, "algorithm", curve.algorithm)
        if len(self.chain_code) != 32:
            msg = f"Chain code must be 32 bytes, got {len(self.chain_code)}"
            raise InvalidKey(msg)
        if not 0 <= self.depth <= 0xFF:
            msg = f"Depth must fit in 8 bits, got {self.depth}"
            raise InvalidKey(msg)
        if not 0 <= self.index <= 0xFFFFFFFF:
            msg = f"Index must fit in 32 bits, got {self.index}"
            raise InvalidIndex(msg)
        if len(self.parent_fingerprint) != 4:
            msg = f"Parent fingerprint must be 4 bytes, got {len(self.parent_fingerprint)}"
            raise InvalidKey(msg)
        try:
            curve.validate_public_key(self.public_key)
            if self.private_key is not None:
                curve.validate_private_key(self.private_key)
        except ValueError as exc:
            raise InvalidKey(str(exc)) from exc

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_private_key(
        cls,
        private_key: bytes,
        chain_code: bytes,
        *,
        algorithm: Algorithm | str,
        version: VersionBytes,
        depth: int = 0,
        index: int = 0,
        parent_fingerprint: bytes = ZERO_FINGERPRINT,
        hmac_sha512: HmacSha512 = crypto.hmac_sha512,
    ) -> Self:
        """Build a node that carries both private and public material."""
        curve = _curve_for(algorithm)
        try:
            curve.validate_private_key(private_key)
            public_key = curve.public_key(private_key)
        except ValueError as exc:
            raise InvalidKey(str(exc)) from exc
        return cls(
            algorithm=curve.algorithm,
            chain_code=chain_code,
            public_key=public_key,
            version=version,
            private_key=private_key,
            depth=depth,
            index=index,
            parent_fingerprint=parent_fingerprint,
            hmac_sha512=hmac_sha512,
        )

    @classmethod
    def from_public_key(
        cls,
        public_key: bytes,
        chain_code: bytes,
        *,
        algorithm: Algorithm | str,
        version: VersionBytes,
        depth: int = 0,
        index: int = 0,
        parent_fingerprint: bytes = ZERO_FINGERPRINT,
        hmac_sha512: HmacSha512 = crypto.hmac_sha512,
    ) -> Self:
        """Build a public-only node; it never exposes a private key."""
        return cls(
            algorithm=algorithm,
            chain_code=chain_code,
            public_key=public_key,
            version=version,
            depth=depth,
            index=index,
            parent_fingerprint=parent_fingerprint,
            hmac_sha512=hmac_sha512,
        )

    @classmethod
    def from_seed(
        cls,
        seed: bytes,
        algorithm: Algorithm | str | None = None,
        *,
        version: VersionBytes | None = None,
        hmac_sha512: HmacSha512 = crypto.hmac_sha512,
    ) -> Self:
        """Create the root node of a tree from seed bytes.

        ``I = HMAC-SHA512(key, seed)`` where the key is ``"Bitcoin seed"`` for
        secp256k1 and ``"ed25519 seed"`` for ed25519. ``I[:32]`` is the root
        private key and ``I[32:]`` the root chain code.

        Args:
            seed: Seed bytes, typically 16-64 bytes from a BIP-39 mnemonic.
            algorithm: Curve algorithm; defaults to the configured algorithm.
            version: Version profile; defaults to the configured network.
            hmac_sha512: Keyed hash, injectable for testing.

        Raises:
            InvalidSeed: If the seed is empty.
            UnsupportedAlgorithm: If the algorithm is not supported.
        """
        if algorithm is None or version is None:
            settings = HDKeySettings()
            algorithm = algorithm if algorithm is not None else settings.algorithm
            version = version if version is not None else settings.version
        curve = _curve_for(algorithm)
        if not seed:
            msg = "Seed must not be empty"
            raise InvalidSeed(msg)
        i = hmac_sha512(curve.seed_key, seed)
        il, ir = i[:32], i[32:]
        return cls.from_private_key(
            il,
            ir,
            algorithm=curve.algorithm,
            version=version,
            hmac_sha512=hmac_sha512,
        )

    @classmethod
    def from_master_seed(cls, seed: bytes, version: VersionBytes | None = None) -> Self:
        """Create a secp256k1 (BIP-32) root node."""
        return cls.from_seed(seed, Algorithm.SECP256K1, version=version)

    @classmethod
    def from_ed25519_seed(cls, seed: bytes, version: VersionBytes | None = None) -> Self:
        """Create an ed25519 (SLIP-0010) root node."""
        return cls.from_seed(seed, Algorithm.ED25519, version=version)

    # -- Identity ----------------------------------------------------------

    @cached_property
    def key_identifier(self) -> bytes:
        """Hash160 of the public key."""
        return crypto.hash160(self.public_key)

    @property
    def fingerprint(self) -> bytes:
        """First 4 bytes of the key identifier."""
        return self.key_identifier[:4]

    @property
    def has_parent(self) -> bool:
        """False for roots, whose parent fingerprint is all zero."""
        return self.parent_fingerprint != ZERO_FINGERPRINT

    @property
    def is_private(self) -> bool:
        return self.private_key is not None

    @property
    def is_hardened(self) -> bool:
        return self.index >= HARDENED_OFFSET

    def neuter(self) -> HDKey:
        """Return the public-only counterpart of this node."""
        if self.private_key is None:
            return self
        return replace(self, private_key=None)

    # -- Serialization -----------------------------------------------------

    def serialize(self, version: int, key_data: bytes) -> bytes:
        """Serialize to the 78-byte BIP-32 payload (without checksum)."""
        data = struct.pack(">I", version)
        data += struct.pack("B", self.depth)
        data += self.parent_fingerprint
        data += struct.pack(">I", self.index)
        data += self.chain_code
        data += key_data.rjust(33, b"\x00")
        return data

    def _require_extended_keys(self, kind: str) -> None:
        if not _curve_for(self.algorithm).supports_extended_keys:
            msg = f"Extended {kind} key serialization is not supported for {self.algorithm}"
            raise UnsupportedOperation(msg)

    @property
    def extended_private_key(self) -> str | None:
        """Base58Check xprv string, or None for public-only nodes."""
        self._require_extended_keys("private")
        if self.private_key is None:
            return None
        return base58check_encode(self.serialize(self.version.private, self.private_key))

    @property
    def extended_public_key(self) -> str:
        """Base58Check xpub string."""
        self._require_extended_keys("public")
        return base58check_encode(self.serialize(self.version.public, self.public_key))

    @classmethod
    def parse_extended_key(
        cls,
        key: str,
        version: VersionBytes | None = None,
        *,
        hmac_sha512: HmacSha512 = crypto.hmac_sha512,
    ) -> Self:
        """Decode a Base58Check xprv/xpub string into a secp256k1 node.

        Args:
            key: Extended key text.
            version: Expected version profile. When omitted, both the profile
                and the size limit come from :class:`HDKeySettings`.
            hmac_sha512: Keyed hash for the resulting node, injectable for testing.

        Raises:
            InvalidExtendedKey: If the payload is structurally malformed.
            InvalidChecksum: If the checksum does not match.
            InvalidVersion: If the version bytes do not match ``version``.
            InvalidKey: If the key data is not a valid scalar or point.
        """
        max_bytes = DEFAULT_MAX_EXTENDED_KEY_BYTES
        if version is None:
            settings = HDKeySettings()
            version = settings.version
            max_bytes = settings.max_extended_key_bytes
        try:
            decoded = base58_decode(key.strip())
        except ValueError as exc:
            raise InvalidExtendedKey(str(exc)) from exc
        if len(decoded) > max_bytes:
            msg = f"Extended key too long: {len(decoded)} bytes"
            raise InvalidExtendedKey(msg)
        if len(decoded) < _PAYLOAD_LENGTH + CHECKSUM_LENGTH:
            msg = f"Extended key too short: {len(decoded)} bytes"
            raise InvalidExtendedKey(msg)

        payload = decoded[:-CHECKSUM_LENGTH]
        if decoded[-CHECKSUM_LENGTH:] != checksum(payload):
            msg = "Extended key checksum mismatch"
            raise InvalidChecksum(msg)
        if len(payload) != _PAYLOAD_LENGTH:
            msg = f"Invalid extended key length: {len(payload)}"
            raise InvalidExtendedKey(msg)

        version_read = struct.unpack(">I", payload[:4])[0]
        depth = payload[4]
        parent_fingerprint = payload[5:9]
        index = struct.unpack(">I", payload[9:13])[0]
        chain_code = payload[13:45]
        key_data = payload[45:78]

        is_private = key_data[0] == 0x00
        expected = version.private if is_private else version.public
        if version_read != expected:
            msg = f"Unexpected version bytes: {version_read:#010x} (expected {expected:#010x})"
            raise InvalidVersion(msg)

        logger.debug(
            "Parsed extended %s key at depth %d, index %d",
            "private" if is_private else "public",
            depth,
            index,
        )
        fields = {
            "algorithm": Algorithm.SECP256K1,
            "version": version,
            "depth": depth,
            "index": index,
            "parent_fingerprint": parent_fingerprint,
            "hmac_sha512": hmac_sha512,
        }
        if is_private:
            return cls.from_private_key(key_data[1:], chain_code, **fields)
        return cls.from_public_key(key_data, chain_code, **fields)

    # -- Derivation --------------------------------------------------------

    def derive(self, path: str) -> HDKey:
        """Derive the node at ``path`` relative to this node.

        ``key.derive("m/0'/1")`` equals ``key.derive("m/0'").derive("m/1")``.

        Raises:
            InvalidDerivationPath: If the path is malformed.
            InvalidIndex: If a segment is already >= 2^31.
            HardenedDerivationRequiresPrivateKey: For a hardened segment on a
                public-only node.
            UnsupportedOperation: For a non-hardened segment on ed25519.
        """
        key = self
        for index, hardened in parse_path(path):
            key = key.derive_child(index, hardened=hardened)
        return key

    def derive_child(self, index: int, *, hardened: bool = False) -> HDKey:
        """Derive one child.

        ``index`` is the unhardened component; pass ``hardened=True`` rather
        than adding 2^31. When a candidate key is invalid (``IL >= n``, a zero
        private key, or the point at infinity), the next index is tried with
        the same hardened flag, as BIP-32 requires.
        """
        _check_index(index)
        if hardened and self.private_key is None:
            msg = "Cannot derive a hardened child key from a public key"
            raise HardenedDerivationRequiresPrivateKey(msg)
        curve = _curve_for(self.algorithm)
        if not hardened and not curve.supports_public_derivation:
            msg = f"Non-hardened derivation is not supported for {self.algorithm}"
            raise UnsupportedOperation(msg)

        while True:
            child = self._derive_candidate(curve, index, hardened)
            if child is not None:
                return child
            logger.debug(
                "Invalid child key at index %d (hardened=%s), trying next index",
                index,
                hardened,
            )
            index += 1
            _check_index(index)

    def _derive_candidate(self, curve: Curve, index: int, hardened: bool) -> HDKey | None:
        """Run a single derivation step; None means the candidate is invalid."""
        child_index = index + HARDENED_OFFSET if hardened else index
        if hardened:
            assert self.private_key is not None
            # Data = 0x00 || private_key || index
            data = b"\x00" + self.private_key + struct.pack(">I", child_index)
        else:
            # Data = compressed_pubkey || index
            data = self.public_key + struct.pack(">I", child_index)

        i = self.hmac_sha512(self.chain_code, data)
        il, ir = i[:32], i[32:]

        fields = {
            "algorithm": curve.algorithm,
            "version": self.version,
            "depth": self.depth + 1,
            "index": child_index,
            "parent_fingerprint": self.fingerprint,
            "hmac_sha512": self.hmac_sha512,
        }

        if not isinstance(curve, Secp256k1Curve):
            # SLIP-0010 ed25519: the child key is IL itself.
            return self.from_private_key(il, ir, **fields)

        il_int = int.from_bytes(il, "big")
        if il_int >= curve.order:
            return None

        if self.private_key is not None:
            key_int = (il_int + int.from_bytes(self.private_key, "big")) % curve.order
            if key_int == 0:
                return None
            return self.from_private_key(key_int.to_bytes(32, "big"), ir, **fields)

        child_key = curve.add_scalar_to_point(il_int, self.public_key)
        if child_key is None:
            return None
        return self.from_public_key(child_key, ir, **fields)

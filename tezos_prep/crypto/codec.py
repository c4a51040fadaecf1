"""
Byte-level codecs and primitives used by the signing layer.

Pure functions, no I/O:
    - Hex: strict validation and decoding (``hex_decode``, ``hex_encode``).
    - Base58-check with Tezos type prefixes (``encode_with_prefix``,
      ``decode_with_prefix``).
    - Hashing: Blake2b with a configurable digest size (``hash_with_digest_size``).
    - Ed25519: detached signatures and key derivation (``sign_detached``,
      ``secret_key_from_bytes``).

Key material is accepted either as a 32-byte seed or as the 64-byte
expanded form (seed followed by the public key).
"""

from __future__ import annotations

import hashlib
import re
from enum import Enum

import base58
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from tezos_prep.crypto.errors import CryptoError, CryptoErrorType

_HEX_RE = re.compile(r"[0-9a-fA-F]*")

SEED_LENGTH = 32
EXPANDED_SECRET_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64


class Prefix(Enum):
    """Base58-check type prefixes (raw bytes prepended before encoding)."""

    EDSK2 = bytes([13, 15, 58, 7])  # 32-byte Ed25519 seed
    EDSK = bytes([43, 246, 78, 7])  # 64-byte Ed25519 secret key
    EDPK = bytes([13, 15, 37, 217])
    EDSIG = bytes([9, 245, 205, 134, 18])
    TZ1 = bytes([6, 161, 159])


# =========================================================================
# Hex
# =========================================================================


def is_hex(data: str) -> bool:
    return _HEX_RE.fullmatch(data) is not None


def hex_decode(data: str) -> bytes:
    """Decode a strict hexadecimal string.

    Raises:
        CryptoError(INVALID_HEX): If ``data`` contains non-hex characters.
        CryptoError(INVALID_HEX_DATA_LENGTH): If ``data`` has odd length.
    """
    if not is_hex(data):
        raise CryptoError(CryptoErrorType.INVALID_HEX)
    # Two hex digits per byte
    if len(data) % 2:
        raise CryptoError(CryptoErrorType.INVALID_HEX_DATA_LENGTH)
    return bytes.fromhex(data)


def hex_encode(data: bytes) -> str:
    """Lowercase hex encoding."""
    return data.hex()


# =========================================================================
# Base58-check
# =========================================================================


def encode_with_prefix(prefix: Prefix, data: bytes) -> str:
    return base58.b58encode_check(prefix.value + data).decode("ascii")


def decode_with_prefix(prefix: Prefix, encoded: str) -> bytes:
    """Decode a base58-check string and strip ``prefix``.

    Raises:
        CryptoError(INVALID_CHECKSUM): If the string is not valid base58-check.
        CryptoError(PREFIX_MISMATCH): If the decoded bytes lack ``prefix``.
    """
    try:
        raw = base58.b58decode_check(encoded)
    except ValueError as exc:
        raise CryptoError(CryptoErrorType.INVALID_CHECKSUM, str(exc)) from exc
    if not raw.startswith(prefix.value):
        raise CryptoError(
            CryptoErrorType.PREFIX_MISMATCH,
            f"expected {prefix.name.lower()} prefix",
        )
    return raw[len(prefix.value):]


# =========================================================================
# Hashing
# =========================================================================


def hash_with_digest_size(data: bytes, size: int = 256) -> bytes:
    """Blake2b hash of ``data`` with a digest of ``size`` bits."""
    if size % 8:
        raise ValueError(f"digest size must be a multiple of 8, got: {size}")
    return hashlib.blake2b(data, digest_size=size // 8).digest()


# =========================================================================
# Ed25519
# =========================================================================


def secret_key_from_bytes(key_bytes: bytes) -> Ed25519PrivateKey:
    """Build an Ed25519 private key from a seed or an expanded secret key.

    Raises:
        CryptoError(INVALID_KEY_MATERIAL): On any other length, or when the
            public half of an expanded key does not match its seed.
    """
    if len(key_bytes) == SEED_LENGTH:
        return Ed25519PrivateKey.from_private_bytes(key_bytes)
    if len(key_bytes) == EXPANDED_SECRET_KEY_LENGTH:
        private_key = Ed25519PrivateKey.from_private_bytes(key_bytes[:SEED_LENGTH])
        if public_key_bytes(private_key) != key_bytes[SEED_LENGTH:]:
            raise CryptoError(
                CryptoErrorType.INVALID_KEY_MATERIAL,
                "public key does not match seed",
            )
        return private_key
    raise CryptoError(
        CryptoErrorType.INVALID_KEY_MATERIAL,
        f"expected {SEED_LENGTH} or {EXPANDED_SECRET_KEY_LENGTH} key bytes, got {len(key_bytes)}",
    )


def public_key_bytes(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=Encoding.Raw,
        format=PublicFormat.Raw,
    )


def sign_detached(data: bytes, private_key: Ed25519PrivateKey) -> bytes:
    """Ed25519 detached signature (64 bytes, deterministic)."""
    return private_key.sign(data)

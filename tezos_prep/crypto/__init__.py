"""
Crypto primitives and the unified CryptoError surface.
"""

from tezos_prep.crypto.codec import (
    SIGNATURE_LENGTH,
    Prefix,
    decode_with_prefix,
    encode_with_prefix,
    hash_with_digest_size,
    hex_decode,
    hex_encode,
    is_hex,
    public_key_bytes,
    secret_key_from_bytes,
    sign_detached,
)
from tezos_prep.crypto.errors import CryptoError, CryptoErrorType, catch_unhandled_errors

__all__ = [
    "CryptoError",
    "CryptoErrorType",
    "Prefix",
    "SIGNATURE_LENGTH",
    "catch_unhandled_errors",
    "decode_with_prefix",
    "encode_with_prefix",
    "hash_with_digest_size",
    "hex_decode",
    "hex_encode",
    "is_hex",
    "public_key_bytes",
    "secret_key_from_bytes",
    "sign_detached",
]

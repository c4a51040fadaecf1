"""
Signing backends: the secrets boundary.

A backend turns a 32-byte digest into raw signature bytes. The
``Signature`` class is written once against the ``SigningBackend``
protocol and never knows whether the key lives in-process or behind a
remote signer.

Concrete implementations:
    - LocalKeyBackend: Ed25519 with an ``edsk`` secret key, in-process,
      synchronous under the hood.
    - RemoteBackend: wraps an async callback (hardware wallet, remote
      signer service). Latency, timeouts and retries are the callback's
      concern.

Backends expose a public ``key_id`` where one is known, safe for logs.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

import base58

from tezos_prep.crypto.codec import (
    Prefix,
    encode_with_prefix,
    hash_with_digest_size,
    public_key_bytes,
    secret_key_from_bytes,
    sign_detached,
)
from tezos_prep.crypto.errors import CryptoError, CryptoErrorType, catch_unhandled_errors

SignCallback = Callable[[bytes], Awaitable[bytes]]

# Secret key prefixes accepted by LocalKeyBackend, expanded form first.
_SECRET_KEY_PREFIXES = (Prefix.EDSK, Prefix.EDSK2)


@runtime_checkable
class SigningBackend(Protocol):
    """Interface for producing a signature over a digest."""

    async def sign(self, digest: bytes) -> bytes:
        """Sign ``digest`` and return the raw signature bytes."""
        ...


class LocalKeyBackend:
    """In-process Ed25519 signing from a base58 ``edsk`` secret key.

    Args:
        secret_key: ``edsk`` secret key, either the 32-byte seed form
            (54 chars) or the 64-byte expanded form (98 chars).

    Raises:
        CryptoError(INVALID_KEY_MATERIAL): If the key cannot be decoded.
    """

    def __init__(self, secret_key: str) -> None:
        self._private_key = secret_key_from_bytes(_decode_secret_key(secret_key))

    @property
    def public_key(self) -> str:
        """``edpk`` public key."""
        return encode_with_prefix(Prefix.EDPK, public_key_bytes(self._private_key))

    @property
    def key_id(self) -> str:
        """Identifier safe for logging; the ``edpk`` public key."""
        return self.public_key

    @property
    def public_key_hash(self) -> str:
        """``tz1`` address of the key."""
        digest = hash_with_digest_size(public_key_bytes(self._private_key), size=160)
        return encode_with_prefix(Prefix.TZ1, digest)

    @catch_unhandled_errors
    def sign_sync(self, digest: bytes) -> bytes:
        return sign_detached(digest, self._private_key)

    async def sign(self, digest: bytes) -> bytes:
        return self.sign_sync(digest)


class RemoteBackend:
    """Delegates signing to an async callback.

    The callback receives the digest and its return value is used as the
    signature verbatim. Exceptions it raises propagate unchanged.
    """

    def __init__(self, on_sign: SignCallback) -> None:
        self._on_sign = on_sign

    async def sign(self, digest: bytes) -> bytes:
        return bytes(await self._on_sign(digest))


def _decode_secret_key(secret_key: str) -> bytes:
    try:
        raw = base58.b58decode_check(secret_key)
    except ValueError as exc:
        raise CryptoError(CryptoErrorType.INVALID_KEY_MATERIAL, str(exc)) from exc

    for prefix in _SECRET_KEY_PREFIXES:
        if raw.startswith(prefix.value):
            return raw[len(prefix.value):]

    raise CryptoError(
        CryptoErrorType.INVALID_KEY_MATERIAL,
        "secret key must be an edsk key",
    )

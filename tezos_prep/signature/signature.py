"""
Domain-separated signatures over forged operation bytes.

A ``Signature`` is an immutable signing request: the payload, an optional
watermark, and the key material (a local ``edsk`` secret key or a remote
signing callback). The signature itself is derived on demand, never
stored, and exposed in three encodings:

    - ``signed_bytes``: raw 64-byte signature.
    - ``edsig()``: base58-check with the ``edsig`` prefix.
    - ``hex_including_payload()``: hex(payload) + hex(signature), the form
      injected into the node.

Signing pipeline:
    watermarked = watermark.tag + payload   (payload unchanged if no watermark)
    digest      = blake2b-256(watermarked)
    signature   = backend.sign(digest)

The watermark separates message classes: a block signature can never be
replayed as a generic operation signature over the same bytes, because
the tag byte is part of what gets hashed.

Backend selection happens at call time: the remote callback wins when
present, otherwise the local secret key is used. Neither → CryptoError
(MISSING_SIGNING_BACKEND). The secret key is only decoded for the
duration of a call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tezos_prep.crypto.codec import (
    Prefix,
    encode_with_prefix,
    hash_with_digest_size,
    hex_decode,
    hex_encode,
)
from tezos_prep.crypto.errors import CryptoError, CryptoErrorType, catch_unhandled_errors
from tezos_prep.signature.backend import (
    LocalKeyBackend,
    RemoteBackend,
    SignCallback,
    SigningBackend,
)

logger = logging.getLogger(__name__)


class Watermark(Enum):
    """Replay-domain tags prepended to the payload before hashing."""

    BLOCK = b"\x01"
    ENDORSEMENT = b"\x02"
    GENERIC = b"\x03"

    @property
    def tag(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class SignResult:
    """All encodings of one computed signature.

    Attributes:
        signed_bytes: Raw signature bytes.
        edsig: Base58-check encoding with the ``edsig`` prefix.
        hex_including_payload: Lowercase hex of payload followed by signature.
    """

    signed_bytes: bytes
    edsig: str
    hex_including_payload: str


@dataclass(frozen=True, eq=False)
class Signature:
    """Signing request over ``payload``.

    Two signatures are equal when their ``signed_bytes`` are equal. A
    signature with only a remote signer, or with a secret key that cannot
    be decoded, has no synchronous signature and compares by identity.
    """

    payload: bytes
    watermark: Watermark | None = None
    secret_key: str | None = None
    on_sign: SignCallback | None = None

    # -----------------------------------------------------------------
    # Constructors
    # -----------------------------------------------------------------

    @classmethod
    def from_bytes(
        cls,
        payload: bytes,
        *,
        secret_key: str | None = None,
        watermark: Watermark | None = None,
        on_sign: SignCallback | None = None,
    ) -> Signature:
        return cls(
            payload=bytes(payload),
            watermark=watermark,
            secret_key=secret_key,
            on_sign=on_sign,
        )

    @classmethod
    @catch_unhandled_errors
    def from_hex(
        cls,
        data: str,
        *,
        secret_key: str | None = None,
        watermark: Watermark | None = None,
        on_sign: SignCallback | None = None,
    ) -> Signature:
        """Build a signature request from hexadecimal ``data``.

        Raises:
            CryptoError(INVALID_HEX): If ``data`` is not hexadecimal.
            CryptoError(INVALID_HEX_DATA_LENGTH): If ``data`` has odd length,
                since every byte is two hex digits.
        """
        return cls.from_bytes(
            hex_decode(data),
            secret_key=secret_key,
            watermark=watermark,
            on_sign=on_sign,
        )

    # -----------------------------------------------------------------
    # Derived bytes
    # -----------------------------------------------------------------

    @property
    def watermarked_bytes(self) -> bytes:
        if self.watermark is None:
            return self.payload
        return self.watermark.tag + self.payload

    @property
    @catch_unhandled_errors
    def digest(self) -> bytes:
        """Blake2b-256 of the watermarked payload."""
        return hash_with_digest_size(self.watermarked_bytes, size=256)

    @property
    @catch_unhandled_errors
    def signed_bytes(self) -> bytes:
        """Signature computed with the local secret key.

        Raises:
            CryptoError(MISSING_SIGNING_BACKEND): If no secret key is set.
            CryptoError(INVALID_KEY_MATERIAL): If the key cannot be decoded.
        """
        if self.secret_key is None:
            raise CryptoError(CryptoErrorType.MISSING_SIGNING_BACKEND)
        return LocalKeyBackend(self.secret_key).sign_sync(self.digest)

    async def resolve_signed_bytes(self) -> bytes:
        """Signature bytes from the remote signer if set, else the local key."""
        digest = self.digest
        backend = self._backend()
        if isinstance(backend, RemoteBackend):
            logger.debug("Requesting remote signature for %d-byte payload", len(self.payload))
        # Remote signer failures are the caller's to handle; not wrapped.
        return await backend.sign(digest)

    @catch_unhandled_errors
    def _backend(self) -> SigningBackend:
        """Select the signing backend: remote callback first, then local key.

        Raises:
            CryptoError(MISSING_SIGNING_BACKEND): If neither is set.
            CryptoError(INVALID_KEY_MATERIAL): If the local key cannot be decoded.
        """
        if self.on_sign is not None:
            return RemoteBackend(self.on_sign)
        if self.secret_key is not None:
            return LocalKeyBackend(self.secret_key)
        raise CryptoError(CryptoErrorType.MISSING_SIGNING_BACKEND)

    # -----------------------------------------------------------------
    # Encodings
    # -----------------------------------------------------------------

    async def edsig(self) -> str:
        """Base58-check encoding of the signature with the ``edsig`` prefix."""
        return _encode_edsig(await self.resolve_signed_bytes())

    async def hex_including_payload(self) -> str:
        """Hex of the untagged payload followed by the signature."""
        return hex_encode(self.payload + await self.resolve_signed_bytes())

    async def sign(self) -> SignResult:
        """Compute the signature once and return every encoding of it."""
        signed = await self.resolve_signed_bytes()
        result = SignResult(
            signed_bytes=signed,
            edsig=_encode_edsig(signed),
            hex_including_payload=hex_encode(self.payload + signed),
        )
        logger.debug(
            "Signed %d-byte payload (watermark=%s)",
            len(self.payload),
            self.watermark.name if self.watermark else None,
        )
        return result

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _comparable_bytes(self) -> bytes | None:
        # Remote-only or undecodable keys have no synchronous signature.
        if self.secret_key is None:
            return None
        try:
            return self.signed_bytes
        except CryptoError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        mine, theirs = self._comparable_bytes(), other._comparable_bytes()
        if mine is None or theirs is None:
            return self is other
        return mine == theirs

    def __hash__(self) -> int:
        signed = self._comparable_bytes()
        if signed is None:
            return id(self)
        return hash(signed)


@catch_unhandled_errors
def _encode_edsig(signed: bytes) -> str:
    return encode_with_prefix(Prefix.EDSIG, signed)

"""
Tests for Signature: local and remote signing, watermarks, encodings.

Test plan:
- Determinism: same request → same signed_bytes, 64 bytes, verifies with
  the Ed25519 public key over blake2b-256(tag + payload)
- Watermarks: block != endorsement != generic != none over identical payload
- Encodings: hex_including_payload == hex(payload) + hex(signature) (untagged),
  edsig starts with "edsig" and decodes back to signed_bytes
- from_hex: odd length → INVALID_HEX_DATA_LENGTH, non-hex or trailing
  newline → INVALID_HEX, valid hex equals from_bytes
- Backends: no backend → MISSING_SIGNING_BACKEND, bad key →
  INVALID_KEY_MATERIAL, remote callback gets the digest and its bytes are
  used verbatim, local signing goes through LocalKeyBackend.sign, remote
  wins over local, remote errors propagate unchanged
- Error wrapping: primitive failures surface as CryptoError(UNHANDLED)
- Equality: defined by signed_bytes; remote-only or undecodable keys
  compare by identity
"""

import hashlib

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from tezos_prep.crypto.codec import (
    Prefix,
    decode_with_prefix,
    encode_with_prefix,
    public_key_bytes,
)
from tezos_prep.crypto.errors import CryptoError, CryptoErrorType
from tezos_prep.signature import LocalKeyBackend, Signature, SignResult, Watermark

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SEED = bytes(range(32))
SECRET_KEY = encode_with_prefix(Prefix.EDSK2, SEED)
PAYLOAD = bytes.fromhex(
    "a8b2c4d91e0f6a7b8c9d0e1f2a3b4c5d6e7f8091a2b3c4d5e6f708192a3b4c5d"
    "6c0002298c03ed7d454a101eb7022bc95f7e5f41ac78f00b01"
)
REMOTE_SIGNATURE = b"\xab" * 64


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def _public_key() -> Ed25519PublicKey:
    return Ed25519PrivateKey.from_private_bytes(SEED).public_key()


class RecordingSigner:
    """Remote signer that records digests and returns a canned signature."""

    def __init__(self, signature: bytes = REMOTE_SIGNATURE) -> None:
        self._signature = signature
        self.digests: list[bytes] = []

    async def __call__(self, digest: bytes) -> bytes:
        self.digests.append(digest)
        return self._signature


# ---------------------------------------------------------------------------
# Local signing
# ---------------------------------------------------------------------------


class TestLocalSigning:
    def test_signed_bytes_deterministic(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        assert sig.signed_bytes == sig.signed_bytes

    def test_signed_bytes_length(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        assert len(sig.signed_bytes) == 64

    def test_separate_requests_agree(self) -> None:
        first = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.BLOCK)
        second = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.BLOCK)
        assert first.signed_bytes == second.signed_bytes

    def test_signature_verifies_over_watermarked_digest(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        # raises InvalidSignature on mismatch
        _public_key().verify(sig.signed_bytes, _blake2b_256(b"\x03" + PAYLOAD))

    def test_unwatermarked_digest_is_payload_hash(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        assert sig.watermarked_bytes == PAYLOAD
        assert sig.digest == _blake2b_256(PAYLOAD)
        _public_key().verify(sig.signed_bytes, _blake2b_256(PAYLOAD))

    def test_signature_does_not_verify_under_other_watermark(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.BLOCK)
        with pytest.raises(InvalidSignature):
            _public_key().verify(sig.signed_bytes, _blake2b_256(b"\x02" + PAYLOAD))

    def test_expanded_secret_key_matches_seed(self) -> None:
        private_key = Ed25519PrivateKey.from_private_bytes(SEED)
        expanded = encode_with_prefix(Prefix.EDSK, SEED + public_key_bytes(private_key))
        from_seed = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        from_expanded = Signature.from_bytes(PAYLOAD, secret_key=expanded)
        assert from_seed.signed_bytes == from_expanded.signed_bytes


# ---------------------------------------------------------------------------
# Watermarks
# ---------------------------------------------------------------------------


class TestWatermark:
    def test_tags(self) -> None:
        assert Watermark.BLOCK.tag == b"\x01"
        assert Watermark.ENDORSEMENT.tag == b"\x02"
        assert Watermark.GENERIC.tag == b"\x03"

    def test_tag_prepended(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, watermark=Watermark.ENDORSEMENT)
        assert sig.watermarked_bytes == b"\x02" + PAYLOAD

    def test_block_and_endorsement_differ(self) -> None:
        block = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.BLOCK)
        endorsement = Signature.from_bytes(
            PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.ENDORSEMENT
        )
        assert block.signed_bytes != endorsement.signed_bytes
        assert block != endorsement

    def test_every_domain_distinct(self) -> None:
        signatures = {
            Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=w).signed_bytes
            for w in (None, Watermark.BLOCK, Watermark.ENDORSEMENT, Watermark.GENERIC)
        }
        assert len(signatures) == 4


# ---------------------------------------------------------------------------
# Encodings
# ---------------------------------------------------------------------------


class TestEncodings:
    @pytest.mark.asyncio
    async def test_hex_including_payload(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        assert await sig.hex_including_payload() == PAYLOAD.hex() + sig.signed_bytes.hex()

    @pytest.mark.asyncio
    async def test_hex_including_payload_is_lowercase(self) -> None:
        sig = Signature.from_hex(PAYLOAD.hex().upper(), secret_key=SECRET_KEY)
        result = await sig.hex_including_payload()
        assert result == result.lower()

    @pytest.mark.asyncio
    async def test_edsig_prefix_and_round_trip(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        edsig = await sig.edsig()
        assert edsig.startswith("edsig")
        assert len(edsig) == 99
        assert decode_with_prefix(Prefix.EDSIG, edsig) == sig.signed_bytes

    @pytest.mark.asyncio
    async def test_sign_result_agrees_with_properties(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        result = await sig.sign()
        assert isinstance(result, SignResult)
        assert result.signed_bytes == sig.signed_bytes
        assert result.edsig == await sig.edsig()
        assert result.hex_including_payload == await sig.hex_including_payload()


# ---------------------------------------------------------------------------
# from_hex
# ---------------------------------------------------------------------------


class TestFromHex:
    def test_odd_length_rejected(self) -> None:
        with pytest.raises(CryptoError) as exc_info:
            Signature.from_hex("abc", secret_key=SECRET_KEY)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_HEX_DATA_LENGTH
        assert exc_info.value.is_encoding_error

    def test_non_hex_rejected(self) -> None:
        with pytest.raises(CryptoError) as exc_info:
            Signature.from_hex("zz12", secret_key=SECRET_KEY)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_HEX
        assert exc_info.value.is_encoding_error

    def test_prefixed_hex_rejected(self) -> None:
        with pytest.raises(CryptoError) as exc_info:
            Signature.from_hex("0x12", secret_key=SECRET_KEY)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_HEX

    @pytest.mark.parametrize("data", ["a\n", "abc\n", PAYLOAD.hex() + "\n"])
    def test_trailing_newline_rejected(self, data: str) -> None:
        with pytest.raises(CryptoError) as exc_info:
            Signature.from_hex(data, secret_key=SECRET_KEY)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_HEX
        assert exc_info.value.is_encoding_error

    def test_valid_hex_matches_from_bytes(self) -> None:
        from_hex = Signature.from_hex(PAYLOAD.hex(), secret_key=SECRET_KEY)
        from_bytes = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        assert from_hex.payload == PAYLOAD
        assert from_hex == from_bytes
        assert hash(from_hex) == hash(from_bytes)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class TestBackends:
    def test_missing_backend(self) -> None:
        sig = Signature.from_bytes(PAYLOAD)
        with pytest.raises(CryptoError) as exc_info:
            _ = sig.signed_bytes
        assert exc_info.value.error_type == CryptoErrorType.MISSING_SIGNING_BACKEND

    @pytest.mark.asyncio
    async def test_missing_backend_async(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, watermark=Watermark.GENERIC)
        with pytest.raises(CryptoError) as exc_info:
            await sig.sign()
        assert exc_info.value.error_type == CryptoErrorType.MISSING_SIGNING_BACKEND

    def test_undecodable_secret_key(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key="edsknotakey")
        with pytest.raises(CryptoError) as exc_info:
            _ = sig.signed_bytes
        assert exc_info.value.error_type == CryptoErrorType.INVALID_KEY_MATERIAL

    def test_public_key_is_not_a_secret_key(self) -> None:
        edpk = encode_with_prefix(Prefix.EDPK, SEED)
        with pytest.raises(CryptoError) as exc_info:
            LocalKeyBackend(edpk)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_KEY_MATERIAL

    def test_expanded_key_with_wrong_public_half(self) -> None:
        bad = encode_with_prefix(Prefix.EDSK, SEED + b"\x00" * 32)
        with pytest.raises(CryptoError) as exc_info:
            LocalKeyBackend(bad)
        assert exc_info.value.error_type == CryptoErrorType.INVALID_KEY_MATERIAL

    def test_local_backend_identifiers(self) -> None:
        backend = LocalKeyBackend(SECRET_KEY)
        assert backend.key_id.startswith("edpk")
        assert decode_with_prefix(Prefix.EDPK, backend.key_id) == public_key_bytes(
            Ed25519PrivateKey.from_private_bytes(SEED)
        )
        assert backend.public_key_hash.startswith("tz1")
        assert len(backend.public_key_hash) == 36

    def test_local_backend_public_key_is_key_id(self) -> None:
        backend = LocalKeyBackend(SECRET_KEY)
        assert backend.public_key.startswith("edpk")
        assert backend.key_id == backend.public_key

    @pytest.mark.asyncio
    async def test_local_signing_goes_through_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        digests: list[bytes] = []

        async def recording_sign(self: LocalKeyBackend, digest: bytes) -> bytes:
            digests.append(digest)
            return REMOTE_SIGNATURE

        monkeypatch.setattr(LocalKeyBackend, "sign", recording_sign)
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        assert await sig.resolve_signed_bytes() == REMOTE_SIGNATURE
        assert digests == [_blake2b_256(b"\x03" + PAYLOAD)]

    @pytest.mark.asyncio
    async def test_undecodable_secret_key_async(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key="edsknotakey")
        with pytest.raises(CryptoError) as exc_info:
            await sig.sign()
        assert exc_info.value.error_type == CryptoErrorType.INVALID_KEY_MATERIAL

    @pytest.mark.asyncio
    async def test_remote_wins_over_undecodable_local_key(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key="edsknotakey", on_sign=RecordingSigner())
        assert await sig.resolve_signed_bytes() == REMOTE_SIGNATURE

    @pytest.mark.asyncio
    async def test_remote_signer_receives_digest(self) -> None:
        signer = RecordingSigner()
        sig = Signature.from_bytes(PAYLOAD, watermark=Watermark.GENERIC, on_sign=signer)
        await sig.sign()
        assert signer.digests == [_blake2b_256(b"\x03" + PAYLOAD)]

    @pytest.mark.asyncio
    async def test_remote_signature_used_verbatim(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, on_sign=RecordingSigner())
        result = await sig.sign()
        assert result.signed_bytes == REMOTE_SIGNATURE
        assert result.hex_including_payload == PAYLOAD.hex() + REMOTE_SIGNATURE.hex()
        assert decode_with_prefix(Prefix.EDSIG, result.edsig) == REMOTE_SIGNATURE

    @pytest.mark.asyncio
    async def test_remote_wins_over_local_key(self) -> None:
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, on_sign=RecordingSigner())
        assert await sig.resolve_signed_bytes() == REMOTE_SIGNATURE
        # the synchronous path still uses the local key
        assert sig.signed_bytes != REMOTE_SIGNATURE

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self) -> None:
        async def failing(digest: bytes) -> bytes:
            raise ConnectionError("signer unreachable")

        sig = Signature.from_bytes(PAYLOAD, on_sign=failing)
        with pytest.raises(ConnectionError, match="signer unreachable"):
            await sig.edsig()


# ---------------------------------------------------------------------------
# Error wrapping
# ---------------------------------------------------------------------------


class TestUnhandledErrors:
    def test_hash_failure_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(data: bytes, size: int = 256) -> bytes:
            raise RuntimeError("boom")

        monkeypatch.setattr("tezos_prep.signature.signature.hash_with_digest_size", broken)
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        with pytest.raises(CryptoError) as exc_info:
            _ = sig.signed_bytes
        assert exc_info.value.error_type == CryptoErrorType.UNHANDLED
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_encoding_failure_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(prefix: Prefix, data: bytes) -> str:
            raise TypeError("bad bytes")

        monkeypatch.setattr("tezos_prep.signature.signature.encode_with_prefix", broken)
        sig = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        with pytest.raises(CryptoError) as exc_info:
            await sig.edsig()
        assert exc_info.value.error_type == CryptoErrorType.UNHANDLED


# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


class TestEquality:
    def test_equal_when_signed_bytes_equal(self) -> None:
        a = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        b = Signature.from_hex(PAYLOAD.hex(), secret_key=SECRET_KEY, watermark=Watermark.GENERIC)
        assert a == b
        assert len({a, b}) == 1

    def test_different_payloads_not_equal(self) -> None:
        a = Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        b = Signature.from_bytes(PAYLOAD + b"\x00", secret_key=SECRET_KEY)
        assert a != b

    def test_remote_only_compares_by_identity(self) -> None:
        signer = RecordingSigner()
        a = Signature.from_bytes(PAYLOAD, on_sign=signer)
        b = Signature.from_bytes(PAYLOAD, on_sign=signer)
        assert a == a
        assert a != b

    def test_undecodable_key_compares_by_identity(self) -> None:
        a = Signature.from_bytes(PAYLOAD, secret_key="edsknotakey")
        b = Signature.from_bytes(PAYLOAD, secret_key="edsknotakey")
        assert a == a
        assert a != b
        assert a != Signature.from_bytes(PAYLOAD, secret_key=SECRET_KEY)
        assert len({a, b}) == 2

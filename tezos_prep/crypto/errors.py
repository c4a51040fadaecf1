"""
Crypto error surface: one exception type for every signing failure.

Callers of the signing layer depend on ``CryptoError`` only. Lower-level
failures (``cryptography``, ``base58``, ``binascii``) never escape: they
are wrapped by ``catch_unhandled_errors`` as ``CryptoErrorType.UNHANDLED``
with the original exception chained as ``__cause__``.

Error types:
    - INVALID_HEX: input contains non-hexadecimal characters.
    - INVALID_HEX_DATA_LENGTH: hex input has an odd number of digits.
    - INVALID_CHECKSUM: base58-check payload failed its checksum.
    - PREFIX_MISMATCH: base58 payload does not start with the expected prefix.
    - INVALID_KEY_MATERIAL: secret key could not be decoded.
    - MISSING_SIGNING_BACKEND: neither a local key nor a remote signer.
    - UNHANDLED: anything else raised while hashing, signing or encoding.
"""

from __future__ import annotations

import functools
import inspect
from enum import StrEnum
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class CryptoErrorType(StrEnum):
    INVALID_HEX = "INVALID_HEX"
    INVALID_HEX_DATA_LENGTH = "INVALID_HEX_DATA_LENGTH"
    INVALID_CHECKSUM = "INVALID_CHECKSUM"
    PREFIX_MISMATCH = "PREFIX_MISMATCH"
    INVALID_KEY_MATERIAL = "INVALID_KEY_MATERIAL"
    MISSING_SIGNING_BACKEND = "MISSING_SIGNING_BACKEND"
    UNHANDLED = "UNHANDLED"


# Error types caused by malformed caller input rather than key or backend issues.
_ENCODING_ERROR_TYPES = frozenset(
    {
        CryptoErrorType.INVALID_HEX,
        CryptoErrorType.INVALID_HEX_DATA_LENGTH,
        CryptoErrorType.INVALID_CHECKSUM,
        CryptoErrorType.PREFIX_MISMATCH,
    }
)

_DEFAULT_MESSAGES: dict[CryptoErrorType, str] = {
    CryptoErrorType.INVALID_HEX: "data is not hexadecimal",
    CryptoErrorType.INVALID_HEX_DATA_LENGTH: "hexadecimal data length must be even",
    CryptoErrorType.INVALID_CHECKSUM: "base58 checksum is invalid",
    CryptoErrorType.PREFIX_MISMATCH: "base58 payload has an unexpected prefix",
    CryptoErrorType.INVALID_KEY_MATERIAL: "secret key cannot be decoded",
    CryptoErrorType.MISSING_SIGNING_BACKEND: "no secret key or remote signer provided",
    CryptoErrorType.UNHANDLED: "unhandled crypto error",
}


class CryptoError(Exception):
    """Unified failure raised by the crypto and signature layers.

    Attributes:
        error_type: Machine-readable cause.
        message: Human-readable detail. Never contains key material.
    """

    def __init__(self, error_type: CryptoErrorType, message: str | None = None) -> None:
        self.error_type = error_type
        self.message = message or _DEFAULT_MESSAGES[error_type]
        super().__init__(f"{error_type.value}: {self.message}")

    @property
    def is_encoding_error(self) -> bool:
        """True when the input itself was malformed (bad hex, checksum, prefix)."""
        return self.error_type in _ENCODING_ERROR_TYPES


def _wrap(exc: Exception) -> CryptoError:
    return CryptoError(CryptoErrorType.UNHANDLED, f"{type(exc).__name__}: {exc}")


def catch_unhandled_errors(func: F) -> F:
    """Decorator translating any non-CryptoError exception into UNHANDLED.

    Works on both plain and ``async`` functions. ``CryptoError`` passes
    through untouched so specific error types are preserved.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except CryptoError:
                raise
            except Exception as exc:
                raise _wrap(exc) from exc

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CryptoError:
            raise
        except Exception as exc:
            raise _wrap(exc) from exc

    return wrapper  # type: ignore[return-value]

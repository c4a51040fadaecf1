"""
Signing of forged operations.

Public API:
    - ``Signature``: signing request with ``from_bytes`` / ``from_hex``.
    - ``Watermark``: replay-domain tags (block, endorsement, generic).
    - ``SignResult``: signed bytes, edsig and hex-with-payload together.

Backends (secrets boundary):
    - ``SigningBackend``: protocol.
    - ``LocalKeyBackend``: in-process Ed25519 from an ``edsk`` key.
    - ``RemoteBackend``: async callback.
"""

from tezos_prep.signature.backend import (
    LocalKeyBackend,
    RemoteBackend,
    SignCallback,
    SigningBackend,
)
from tezos_prep.signature.signature import Signature, SignResult, Watermark

__all__ = [
    "LocalKeyBackend",
    "RemoteBackend",
    "SignCallback",
    "SignResult",
    "Signature",
    "SigningBackend",
    "Watermark",
]

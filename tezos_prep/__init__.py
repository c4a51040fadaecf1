"""
Tezos operation preparation: limits, fees and signatures.

Public API:

    Limits and fees (async, read node constants):
        - ``OperationLimitsSetter``: gas/storage limits from a simulation.
        - ``OperationFeesSetter``: minimal fee + burn fee, written to ``fee``.
        - ``FeeParameters``: injectable fee constants.

    Signing:
        - ``Signature``: signs forged bytes, optionally watermarked.
        - ``Watermark``: block / endorsement / generic tags.
        - ``LocalKeyBackend`` / ``RemoteBackend``: signing backends.

    Errors:
        - ``CryptoError`` / ``CryptoErrorType``: every signing failure.
        - ``NetworkFieldParseError``: unparsable node fields.

    Network boundary:
        - ``RpcInterface``: protocol; ``HttpRpcClient``: httpx implementation.
"""

from tezos_prep.crypto import CryptoError, CryptoErrorType
from tezos_prep.operation import (
    FeeComputation,
    FeeParameters,
    Kind,
    NetworkFieldParseError,
    Operation,
    OperationFeesSetter,
    OperationLimitsSetter,
    OperationsList,
    ResourceEstimate,
    origination_operation,
    transaction_operation,
)
from tezos_prep.rpc import HttpRpcClient, HttpTransport, HttpxTransport, RpcInterface
from tezos_prep.signature import (
    LocalKeyBackend,
    RemoteBackend,
    SigningBackend,
    Signature,
    SignResult,
    Watermark,
)

__version__ = "0.1.0"

__all__ = [
    "CryptoError",
    "CryptoErrorType",
    "FeeComputation",
    "FeeParameters",
    "HttpRpcClient",
    "HttpTransport",
    "HttpxTransport",
    "Kind",
    "LocalKeyBackend",
    "NetworkFieldParseError",
    "Operation",
    "OperationFeesSetter",
    "OperationLimitsSetter",
    "OperationsList",
    "RemoteBackend",
    "ResourceEstimate",
    "SignResult",
    "Signature",
    "SigningBackend",
    "Watermark",
    "__version__",
    "origination_operation",
    "transaction_operation",
]

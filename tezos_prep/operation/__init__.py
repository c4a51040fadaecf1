"""
Operation model and resource/fee setters.

    - ``Operation``, ``Kind``, ``OperationsList``: the entity being prepared.
    - ``OperationLimitsSetter``: gas/storage limits from a simulation.
    - ``OperationFeesSetter``: minimal fee plus burn fee.
    - ``NetworkFieldParseError``: unparsable simulation/constants fields.
"""

from tezos_prep.operation.errors import NetworkFieldParseError
from tezos_prep.operation.fees import FeeComputation, FeeParameters, OperationFeesSetter
from tezos_prep.operation.limits import OperationLimitsSetter, ResourceEstimate
from tezos_prep.operation.model import (
    Kind,
    Operation,
    OperationsList,
    origination_operation,
    transaction_operation,
)

__all__ = [
    "FeeComputation",
    "FeeParameters",
    "Kind",
    "NetworkFieldParseError",
    "Operation",
    "OperationFeesSetter",
    "OperationLimitsSetter",
    "OperationsList",
    "ResourceEstimate",
    "origination_operation",
    "transaction_operation",
]

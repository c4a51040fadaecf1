"""
Operation entity and the batch it belongs to.

An ``Operation`` carries the three mutable fields written during
preparation (``gas_limit``, ``storage_limit``, ``fee``) plus the
simulation result the limits are read from. The batch (``OperationsList``)
is an external collaborator: it owns the RPC client and the forged hex
of the whole group. Only the protocol it must satisfy is defined here.

Preparation order:
    simulate → OperationLimitsSetter → forge → OperationFeesSetter → forge → sign
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, Sequence, runtime_checkable

from tezos_prep.rpc.client import RpcInterface


class Kind(StrEnum):
    TRANSACTION = "transaction"
    ORIGINATION = "origination"
    DELEGATION = "delegation"
    REVEAL = "reveal"


@runtime_checkable
class OperationsList(Protocol):
    """The batch an operation belongs to."""

    @property
    def rpc(self) -> RpcInterface:
        """Client used for constants lookups."""
        ...

    @property
    def operations(self) -> Sequence[Operation]:
        """Member operations, in batch order."""
        ...

    @property
    def forged_operation(self) -> str | None:
        """Hex of the forged batch, or None before forging."""
        ...


@dataclass
class Operation:
    """A single manager operation inside a batch.

    Numeric amounts are mutez (1e-6 tez) and are rendered as strings in
    ``to_dict()``, the way the node expects them.
    """

    kind: Kind
    source: str | None = None
    destination: str | None = None
    amount: int | None = None
    balance: int | None = None
    script: dict[str, Any] | None = None
    delegate: str | None = None
    public_key: str | None = None
    counter: int | None = None
    gas_limit: int = 0
    storage_limit: int = 0
    fee: int = 0
    simulation_result: dict[str, Any] | None = None
    operations_list: OperationsList | None = None

    def require_operations_list(self) -> OperationsList:
        if self.operations_list is None:
            raise ValueError(f"{self.kind} operation is not attached to an operations list")
        return self.operations_list

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value}
        if self.source is not None:
            result["source"] = self.source
        result["fee"] = str(self.fee)
        if self.counter is not None:
            result["counter"] = str(self.counter)
        result["gas_limit"] = str(self.gas_limit)
        result["storage_limit"] = str(self.storage_limit)

        if self.kind == Kind.TRANSACTION:
            result["amount"] = str(self.amount or 0)
            result["destination"] = self.destination
        elif self.kind == Kind.ORIGINATION:
            result["balance"] = str(self.balance or 0)
            result["script"] = self.script
        elif self.kind == Kind.DELEGATION:
            if self.delegate is not None:
                result["delegate"] = self.delegate
        elif self.kind == Kind.REVEAL:
            result["public_key"] = self.public_key
        return result


def transaction_operation(amount: int, destination: str) -> Operation:
    """Transfer ``amount`` mutez to ``destination``."""
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got: {amount}")
    if not destination:
        raise ValueError("destination must be non-empty")
    return Operation(kind=Kind.TRANSACTION, amount=amount, destination=destination)


def origination_operation(balance: int, script: dict[str, Any]) -> Operation:
    """Originate a contract with ``script`` (``{"code": ..., "storage": ...}``)."""
    if balance < 0:
        raise ValueError(f"balance must be non-negative, got: {balance}")
    return Operation(kind=Kind.ORIGINATION, balance=balance, script=script)

"""
Fee estimation for a single operation inside a batch.

    operation_size = ceil(len(forged_hex) / 2 / len(batch))
    operation_fee  = ceil((gas_limit + gas_buffer) * minimal_fee_per_gas
                          + operation_size * minimal_fee_per_byte)
    minimal_fee    = ceil(base_operation_minimal_fee + operation_fee)
    burn_fee       = ceil(storage_limit * cost_per_byte)
    total_cost     = burn_fee + minimal_fee

Every named quantity is rounded up on its own; rounding only at the end
could underpay, and a node rejects an underfunded operation.

``operation_size`` halves the forged hex length (two digits per byte) and
spreads the batch envelope evenly over its members. It is an
approximation of this operation's share, kept as is because accepted
fees depend on it.

Arithmetic is exact (Decimal / Fraction): in binary floating point
``1100 * 0.1`` is 110.00000000000001, which would round up one mutez too far.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Mapping

from tezos_prep import config
from tezos_prep.operation.errors import parse_int_field
from tezos_prep.operation.model import Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeParameters:
    """Network fee parameters, in mutez.

    Defaults match the protocol's minimal fee rules. Override per network
    with ``from_env()`` or by passing explicit values.
    """

    base_operation_minimal_fee: int = 100
    gas_buffer: int = 100
    minimal_fee_per_gas: Decimal = Decimal("0.1")
    minimal_fee_per_byte: Decimal = Decimal("1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FeeParameters:
        """Read overrides from TEZOS_PREP_* variables; unset ones keep defaults.

        Raises:
            ValueError: If a variable is set but not a number.
        """
        env = config.environment(environ)
        defaults = cls()
        return cls(
            base_operation_minimal_fee=_env_int(
                env, config.ENV_BASE_OPERATION_MINIMAL_FEE, defaults.base_operation_minimal_fee
            ),
            gas_buffer=_env_int(env, config.ENV_GAS_BUFFER, defaults.gas_buffer),
            minimal_fee_per_gas=_env_decimal(
                env, config.ENV_MINIMAL_FEE_PER_GAS, defaults.minimal_fee_per_gas
            ),
            minimal_fee_per_byte=_env_decimal(
                env, config.ENV_MINIMAL_FEE_PER_BYTE, defaults.minimal_fee_per_byte
            ),
        )


@dataclass(frozen=True)
class FeeComputation:
    operation_size: int
    operation_fee: int
    minimal_fee: int
    burn_fee: int
    total_cost: int


class OperationFeesSetter:
    """Computes and applies the fee of one operation.

    Args:
        operation: Operation with limits already set and attached to a
            forged operations list.
        parameters: Fee parameters. Defaults to ``FeeParameters()``.
    """

    def __init__(self, operation: Operation, parameters: FeeParameters | None = None) -> None:
        self.operation = operation
        self.parameters = parameters or FeeParameters()

    async def execute(self) -> FeeComputation:
        """Write the total cost into ``operation.fee``."""
        computation = await self.estimate()
        self.operation.fee = computation.total_cost
        logger.debug(
            "Applied fee to %s operation: fee=%d (minimal_fee=%d burn_fee=%d)",
            self.operation.kind,
            computation.total_cost,
            computation.minimal_fee,
            computation.burn_fee,
        )
        return computation

    async def estimate(self) -> FeeComputation:
        burn_fee = await self.burn_fee()
        operation_size = self.operation_size
        operation_fee = self._operation_fee(operation_size)
        minimal_fee = self._minimal_fee(operation_fee)
        return FeeComputation(
            operation_size=operation_size,
            operation_fee=operation_fee,
            minimal_fee=minimal_fee,
            burn_fee=burn_fee,
            total_cost=burn_fee + minimal_fee,
        )

    async def total_cost(self) -> int:
        return await self.burn_fee() + self.minimal_fee

    async def burn_fee(self) -> int:
        return math.ceil(self.operation.storage_limit * await self.cost_per_byte())

    async def cost_per_byte(self) -> int:
        constants = await self.operation.require_operations_list().rpc.constants()
        return parse_int_field("cost_per_byte", constants.get("cost_per_byte"))

    @property
    def minimal_fee(self) -> int:
        return self._minimal_fee(self.operation_fee)

    @property
    def operation_fee(self) -> int:
        return self._operation_fee(self.operation_size)

    @property
    def operation_size(self) -> int:
        """Amortized byte size of this operation within its batch.

        Raises:
            ValueError: If the batch is not forged yet or is empty.
        """
        operations_list = self.operation.require_operations_list()
        forged = operations_list.forged_operation
        if forged is None:
            raise ValueError("operations list must be forged before estimating fees")
        count = len(operations_list.operations)
        if count == 0:
            raise ValueError("operations list is empty")
        return math.ceil(Fraction(len(forged), 2) / count)

    def _operation_fee(self, operation_size: int) -> int:
        params = self.parameters
        return math.ceil(
            (self.operation.gas_limit + params.gas_buffer) * params.minimal_fee_per_gas
            + operation_size * params.minimal_fee_per_byte
        )

    def _minimal_fee(self, operation_fee: int) -> int:
        return math.ceil(self.parameters.base_operation_minimal_fee + operation_fee)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc


def _env_decimal(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got: {raw!r}") from exc

"""
Gas and storage limits from a simulation result.

    gas_limit     = int(metadata.operation_result.consumed_gas)
    storage_limit = int(metadata.operation_result.paid_storage_size_diff)
                    + origination_size   (origination only)

``origination_size`` comes from the node constants. Missing or
non-integer fields raise NetworkFieldParseError; no default is ever used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from tezos_prep.operation.errors import NetworkFieldParseError, parse_int_field
from tezos_prep.operation.model import Kind, Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceEstimate:
    gas_limit: int
    storage_limit: int


class OperationLimitsSetter:
    """Derives and applies limits for one simulated operation."""

    def __init__(self, operation: Operation) -> None:
        self.operation = operation

    async def execute(self) -> ResourceEstimate:
        """Write the estimated limits into the operation."""
        estimate = await self.estimate()
        self.operation.gas_limit = estimate.gas_limit
        self.operation.storage_limit = estimate.storage_limit
        logger.debug(
            "Applied limits to %s operation: gas_limit=%d storage_limit=%d",
            self.operation.kind,
            estimate.gas_limit,
            estimate.storage_limit,
        )
        return estimate

    async def estimate(self) -> ResourceEstimate:
        storage_limit = self.simulation_storage_size
        if self.operation.kind == Kind.ORIGINATION:
            storage_limit += await self.origination_default_size()
        return ResourceEstimate(
            gas_limit=self.simulation_consumed_gas,
            storage_limit=storage_limit,
        )

    @property
    def simulation_consumed_gas(self) -> int:
        return self._operation_result_field("consumed_gas")

    @property
    def simulation_storage_size(self) -> int:
        return self._operation_result_field("paid_storage_size_diff")

    async def origination_default_size(self) -> int:
        constants = await self.operation.require_operations_list().rpc.constants()
        return parse_int_field("origination_size", constants.get("origination_size"))

    def _operation_result_field(self, name: str) -> int:
        path = f"metadata.operation_result.{name}"
        metadata: Any = (self.operation.simulation_result or {}).get("metadata")
        operation_result = metadata.get("operation_result") if isinstance(metadata, dict) else None
        if not isinstance(operation_result, dict):
            raise NetworkFieldParseError(path)
        return parse_int_field(path, operation_result.get(name))

"""
RPC protocol: the network boundary.

Defines what the limits and fees setters need from a Tezos node, not a
concrete implementation. Keeps the setters testable and keeps HTTP out
of fee arithmetic.

Concrete implementations:
    - HttpRpcClient (real, over an injectable HttpTransport)
    - FakeRpc (tests)

Constants are returned as the node reports them: a mapping whose numeric
values are usually strings (``"250"``). Callers parse what they use.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RpcInterface(Protocol):
    """Interface for the node calls used while preparing an operation."""

    async def constants(self) -> dict[str, Any]:
        """Fetch the protocol constants of the current head block.

        Raises:
            Exception: On transport failures. Never retried here.
        """
        ...

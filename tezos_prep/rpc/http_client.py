"""
Tezos node RPC client: real network implementation of RpcInterface.

Uses an injectable transport (HttpTransport) so the HTTP layer can be
swapped for test fakes without changing URL building.

No retry loops. No secrets. Only the three endpoints needed to prepare
an operation:
    - constants:      GET  /chains/{chain}/blocks/head/context/constants
    - run_operation:  POST /chains/{chain}/blocks/head/helpers/scripts/run_operation
    - forge:          POST /chains/{chain}/blocks/head/helpers/forge/operations
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tezos_prep import config
from tezos_prep.rpc.transport import HttpTransport, HttpxTransport

logger = logging.getLogger(__name__)


class HttpRpcClient:
    """Tezos RPC client implementing the RpcInterface protocol.

    Args:
        url: Node base URL (e.g. "http://localhost:8732").
        chain: Chain identifier. Default "main".
        transport: Injectable transport. Defaults to HttpxTransport.
    """

    def __init__(
        self,
        url: str,
        chain: str = "main",
        transport: HttpTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._chain = chain
        self._transport = transport or HttpxTransport()

    @classmethod
    def from_env(
        cls,
        transport: HttpTransport | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> HttpRpcClient:
        """Client configured from TEZOS_RPC_URL / TEZOS_CHAIN / TEZOS_RPC_TIMEOUT.

        Raises:
            ValueError: If TEZOS_RPC_TIMEOUT is set but not a number.
        """
        settings = config.load_rpc_settings(environ)
        return cls(
            settings.url,
            chain=settings.chain,
            transport=transport or HttpxTransport(timeout=settings.timeout),
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def head_url(self) -> str:
        return f"{self._url}/chains/{self._chain}/blocks/head"

    # -----------------------------------------------------------------
    # RpcInterface protocol methods
    # -----------------------------------------------------------------

    async def constants(self) -> dict[str, Any]:
        url = f"{self.head_url}/context/constants"
        logger.debug("Fetching constants from %s", url)
        result: dict[str, Any] = await self._transport.get_json(url)
        return result

    # -----------------------------------------------------------------
    # Simulation and forging
    # -----------------------------------------------------------------

    async def run_operation(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Simulate an operation group without committing it.

        Args:
            payload: ``{"operation": {...}, "chain_id": "..."}`` as the node
                expects it.

        Returns:
            The node's response, with per-operation ``metadata`` under
            ``contents``.
        """
        url = f"{self.head_url}/helpers/scripts/run_operation"
        logger.debug("Simulating operation via %s", url)
        result: dict[str, Any] = await self._transport.post_json(url, payload)
        return result

    async def forge_operations(self, payload: dict[str, Any]) -> str:
        """Forge an operation group and return its hex encoding."""
        url = f"{self.head_url}/helpers/forge/operations"
        forged = await self._transport.post_json(url, payload)
        if not isinstance(forged, str):
            raise ValueError(f"forge response must be a hex string, got: {type(forged).__name__}")
        return forged

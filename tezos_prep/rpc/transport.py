"""
Transport protocol for Tezos node RPC calls.

Defines the seam where concrete HTTP implementations plug in. The RPC
client depends on this protocol, not on httpx directly, so the transport
can be swapped without editing client logic.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx


@runtime_checkable
class HttpTransport(Protocol):
    """Async transport for JSON GET/POST requests."""

    async def get_json(self, url: str) -> Any:
        """Send a GET request and return the parsed JSON body.

        Raises:
            Exception: On transport-level failures (connection refused,
                timeout, non-2xx status). Propagated to the caller.
        """
        ...

    async def post_json(self, url: str, payload: Any) -> Any:
        """Send a JSON POST request and return the parsed JSON body."""
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout

    async def get_json(self, url: str) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return response.json()

    async def post_json(self, url: str, payload: Any) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            return response.json()

"""
Tezos node RPC boundary.

    - ``RpcInterface``: protocol used by the limits and fees setters.
    - ``HttpRpcClient``: concrete client (constants, simulation, forging).
    - ``HttpTransport`` / ``HttpxTransport``: injectable HTTP layer.
"""

from tezos_prep.rpc.client import RpcInterface
from tezos_prep.rpc.http_client import HttpRpcClient
from tezos_prep.rpc.transport import HttpTransport, HttpxTransport

__all__ = [
    "HttpRpcClient",
    "HttpTransport",
    "HttpxTransport",
    "RpcInterface",
]

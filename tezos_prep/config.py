"""
Environment configuration, read at call time.

Nothing is read on import: ``load_dotenv()`` runs the first time a
setting is requested from the process environment, and a malformed
value raises only for the caller that asked for it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

# Node RPC endpoint
ENV_RPC_URL = "TEZOS_RPC_URL"
ENV_CHAIN = "TEZOS_CHAIN"
ENV_RPC_TIMEOUT = "TEZOS_RPC_TIMEOUT"

# Fee parameter overrides, read by FeeParameters.from_env()
ENV_BASE_OPERATION_MINIMAL_FEE = "TEZOS_PREP_BASE_OPERATION_MINIMAL_FEE"
ENV_GAS_BUFFER = "TEZOS_PREP_GAS_BUFFER"
ENV_MINIMAL_FEE_PER_GAS = "TEZOS_PREP_MINIMAL_FEE_PER_GAS"
ENV_MINIMAL_FEE_PER_BYTE = "TEZOS_PREP_MINIMAL_FEE_PER_BYTE"


def environment(environ: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return ``environ``, or the process environment after loading ``.env``.

    Variables already set in the process take precedence over ``.env``.
    """
    if environ is not None:
        return environ
    load_dotenv()
    return os.environ


@dataclass(frozen=True)
class RpcSettings:
    url: str = "http://localhost:8732"
    chain: str = "main"
    timeout: float = 30.0


def load_rpc_settings(environ: Mapping[str, str] | None = None) -> RpcSettings:
    """Read the node endpoint settings; unset variables keep defaults.

    Raises:
        ValueError: If TEZOS_RPC_TIMEOUT is set but not a number.
    """
    env = environment(environ)
    defaults = RpcSettings()
    raw_timeout = env.get(ENV_RPC_TIMEOUT)
    timeout = defaults.timeout
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"{ENV_RPC_TIMEOUT} must be a number, got: {raw_timeout!r}") from exc
    return RpcSettings(
        url=env.get(ENV_RPC_URL, defaults.url),
        chain=env.get(ENV_CHAIN, defaults.chain),
        timeout=timeout,
    )

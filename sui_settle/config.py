"""
Configuration from an explicit context or the environment.

Each setting resolves in order: ``ctx`` mapping (any value but None),
environment variable, default. Nothing is read at import time and
nothing is cached in module state; build a config, then pass it around.

    SUI_RPC_URL       full node JSON-RPC endpoint   (http://127.0.0.1:9000)
    SUI_GAS_BUDGET    default gas budget in MIST    (1000000000)
    SUI_RPC_TIMEOUT   HTTP timeout in seconds       (30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from sui_settle.transport import DEFAULT_TIMEOUT
from sui_settle.types import DEFAULT_GAS_BUDGET, GasInfo

DEFAULT_RPC_URL = "http://127.0.0.1:9000"

ENV_RPC_URL = "SUI_RPC_URL"
ENV_GAS_BUDGET = "SUI_GAS_BUDGET"
ENV_RPC_TIMEOUT = "SUI_RPC_TIMEOUT"


def _resolve(
    ctx: Mapping[str, Any],
    key: str,
    env: Mapping[str, str],
    env_name: str,
    default: Any,
) -> Any:
    # An explicit ctx value wins even when falsy, so 0 or "" gets validated.
    value = ctx.get(key)
    if value is not None:
        return value
    return env.get(env_name, default)


@dataclass(frozen=True)
class SettleConfig:
    """Connection and gas settings.

    Attributes:
        rpc_url: Full node JSON-RPC endpoint.
        gas_budget: Gas budget used when the caller supplies none.
        request_timeout: HTTP timeout in seconds.
    """

    rpc_url: str = DEFAULT_RPC_URL
    gas_budget: int = DEFAULT_GAS_BUDGET
    request_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ValueError("rpc_url must be non-empty")
        if self.gas_budget <= 0:
            raise ValueError(f"gas_budget must be > 0, got: {self.gas_budget}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be > 0, got: {self.request_timeout}")

    @classmethod
    def from_env(
        cls,
        ctx: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> SettleConfig:
        """Resolve settings from ``ctx``, then ``environ`` (default os.environ).

        Raises:
            ValueError: If a numeric setting doesn't parse or is out of range.
        """
        ctx = ctx or {}
        env = os.environ if environ is None else environ

        rpc_url = _resolve(ctx, "rpc_url", env, ENV_RPC_URL, DEFAULT_RPC_URL)
        gas_budget = _resolve(ctx, "gas_budget", env, ENV_GAS_BUDGET, DEFAULT_GAS_BUDGET)
        timeout = _resolve(ctx, "request_timeout", env, ENV_RPC_TIMEOUT, DEFAULT_TIMEOUT)

        try:
            return cls(
                rpc_url=str(rpc_url),
                gas_budget=int(gas_budget),
                request_timeout=float(timeout),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid settle configuration: {exc}") from exc

    def gas_info(self, gas_object: str | None = None) -> GasInfo:
        """GasInfo using this config's budget."""
        return GasInfo(object_id=gas_object, budget=self.gas_budget)

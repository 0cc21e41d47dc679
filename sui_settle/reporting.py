"""
Human-readable reporting of execution results and coin listings.

Everything goes through ``logging`` (INFO). Pass your own logger to
route the output; the module logger is used otherwise.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sui_settle.response import ensure_transaction_success, execution_status, gas_used
from sui_settle.types import Balance, Coin, ExecutionResult, GasCostSummary

logger = logging.getLogger(__name__)


def _format_gas(gas: GasCostSummary) -> str:
    return (
        f"computation={gas.computation_cost} storage={gas.storage_cost} "
        f"rebate={gas.storage_rebate} non_refundable={gas.non_refundable_storage_fee} "
        f"net={gas.net}"
    )


def log_effects(result: ExecutionResult, log: logging.Logger | None = None) -> None:
    """Log confirmation, gas and created objects.

    Raises:
        TransactionFailed: If the chain reported a Failure status.
    """
    log = log or logger
    log.info("Confirmed local execution: %s", result.confirmed)

    if result.effects is None:
        log.info("No transaction effects")
        return

    ensure_transaction_success(result)

    log.info("Gas used: %s", _format_gas(result.effects.gas_used))
    if result.effects.created:
        log.info("Created:")
        for ref in result.effects.created:
            log.info("  %s (version %s)", ref.object_id, ref.version)


def log_gas_costs(result: ExecutionResult, log: logging.Logger | None = None) -> None:
    """Log gas costs.

    Raises:
        MissingEffects: If the result carries no effects.
    """
    (log or logger).info("Gas used: %s", _format_gas(gas_used(result)))


def log_transaction_status(result: ExecutionResult, log: logging.Logger | None = None) -> None:
    """Log the execution status.

    Raises:
        MissingEffects: If the result carries no effects.
    """
    (log or logger).info("Transaction status: %s", execution_status(result))


def log_coins(
    coins: Iterable[Coin],
    balance: Balance | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Log an address's coins, optionally preceded by the aggregate balance."""
    log = log or logger
    if balance is not None:
        log.info(
            "Balance of %s: %d across %d coins",
            balance.token_type,
            balance.total_balance,
            balance.coin_object_count,
        )
    for coin in coins:
        log.info("  %s: %d", coin.object_id, coin.balance)

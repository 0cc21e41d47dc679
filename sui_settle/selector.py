"""
Coin selection — find or create a coin worth exactly the payment amount.

    list_coins(address, T) → single scan → decision:

        exact match            → return it (no transaction)
        greater-than match     → split it into [amount, balance - amount],
                                 sign + submit + confirm, return the created
                                 Coin<T> whose value == amount
        nothing >= amount      → InsufficientBalance

Scan rules:
    - The first exact match stops the scan.
    - Greater-than matches never stop the scan; the LAST one seen wins.

Coin listings are re-fetched on every call. A previous split may have
changed the coin set, so nothing is cached.

No local locking: two concurrent selections can pick the same coin to
split. The ledger consumes it on the first split, the second submission
fails there and surfaces as SubmissionFailed. It is never retried here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sui_settle.client import LedgerClient
from sui_settle.errors import (
    InsufficientBalance,
    SplitExecutionFailed,
    SplitReadFailed,
    SplitResultNotFound,
)
from sui_settle.response import execution_status, object_changes
from sui_settle.settler import TransactionSettler
from sui_settle.type_tag import is_coin_of
from sui_settle.types import (
    Coin,
    CoinObject,
    CreatedChange,
    ExecutionResult,
    Failure,
    GasInfo,
    PaymentRequest,
    TransactionOptions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoinScan:
    """Outcome of scanning a coin listing for an amount."""

    exact: Coin | None = None
    greater: Coin | None = None


def scan_coins(coins: Iterable[Coin], amount: int) -> CoinScan:
    """First exact match (short-circuits) and last strictly-greater match."""
    greater: Coin | None = None
    for coin in coins:
        if coin.balance == amount:
            return CoinScan(exact=coin, greater=greater)
        if coin.balance > amount:
            greater = coin
    return CoinScan(greater=greater)


class CoinSelector:
    """Selects or creates an input coin of an exact value.

    Args:
        client: Ledger client for listing coins, building the split and
            reading back created coins.
        settler: Signs and submits the split transaction.
    """

    def __init__(self, client: LedgerClient, settler: TransactionSettler) -> None:
        self._client = client
        self._settler = settler

    async def select_or_create(
        self,
        address: str,
        token_type: str,
        amount: int,
        gas_info: GasInfo,
    ) -> str:
        """Return the id of a ``Coin<token_type>`` worth exactly ``amount``.

        Raises:
            ValueError: If ``amount`` is zero or doesn't fit in u64.
            InsufficientBalance: No coin has balance >= amount.
            SplitExecutionFailed: The split executed and failed on chain.
            SplitResultNotFound: The split confirmed but no matching coin
                appears among the created objects.
            SplitReadFailed: The split confirmed but reading back a created
                coin failed.
            SettlementError: Signing, submission or confirmation failed.
            ResponseError: The split response lacks effects or object changes.
        """
        request = PaymentRequest(amount=amount, token_type=token_type)
        if request.amount == 0:
            raise ValueError("amount must be > 0")

        coins = await self._client.list_coins(address, token_type)
        scan = scan_coins(coins, request.amount)

        if scan.exact is not None:
            logger.debug("Exact Coin<%s> match %s for %d", token_type, scan.exact.object_id, amount)
            return scan.exact.object_id

        if scan.greater is None:
            raise InsufficientBalance(address, token_type, amount)

        return await self._split(address, request, scan.greater, gas_info)

    async def _split(
        self,
        address: str,
        request: PaymentRequest,
        primary: Coin,
        gas_info: GasInfo,
    ) -> str:
        logger.info(
            "Splitting Coin<%s> %s (balance %d) to get %d",
            request.token_type,
            primary.object_id,
            primary.balance,
            request.amount,
        )
        prepared = await self._client.build_split_transaction(
            address,
            primary.object_id,
            [request.amount, primary.balance - request.amount],
            gas_info.object_id,
            gas_info.budget,
        )
        result = await self._settler.sign_and_confirm(prepared, TransactionOptions.full())

        status = execution_status(result)
        if isinstance(status, Failure):
            raise SplitExecutionFailed(
                f"Split transaction {result.digest} failed: {status.message}",
                details={
                    "digest": result.digest,
                    "coin_id": primary.object_id,
                    "error": status.message,
                },
            )

        return await self._find_split_coin(result, request)

    async def _find_split_coin(self, result: ExecutionResult, request: PaymentRequest) -> str:
        for change in object_changes(result):
            if not isinstance(change, CreatedChange):
                continue
            if not is_coin_of(change.object_type, request.token_type):
                continue
            try:
                coin = await self._client.read_object(change.object_id, CoinObject)
            except Exception as exc:
                logger.error("Reading split coin %s from %s failed: %s", change.object_id, result.digest, exc)
                raise SplitReadFailed(
                    request.token_type, request.amount, result.digest, change.object_id
                ) from exc
            if coin.value() == request.amount:
                logger.debug("Split produced %s worth %d", change.object_id, request.amount)
                return change.object_id

        logger.warning("No created Coin<%s> of %d in %s", request.token_type, request.amount, result.digest)
        raise SplitResultNotFound(request.token_type, request.amount, result.digest)

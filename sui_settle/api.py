"""
Signed transaction API — one sender, one client, one signer.

Wires the pieces together with explicit dependency injection:

    SuiJsonRpcClient ─┬─ TransactionSettler (+ Signer) ─┐
                      └──────────────────────────────── CoinSelector

``build_api()`` constructs the whole stack from a SettleConfig. There is
no process-wide instance; create one per sender and pass it around.

``SignedTransactionCaller`` adds Move calls described by objects that
know how to turn themselves into MoveCallArgs given an app config.
"""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from sui_settle.client import MoveCallClient
from sui_settle.config import SettleConfig
from sui_settle.intent import SUI_TRANSACTION_INTENT, Intent
from sui_settle.jsonrpc_client import SuiJsonRpcClient
from sui_settle.selector import CoinSelector
from sui_settle.settler import TransactionSettler
from sui_settle.signer import Signer
from sui_settle.transport import HttpxTransport, JsonRpcTransport
from sui_settle.type_tag import normalize_address
from sui_settle.types import (
    ExecutionResult,
    GasInfo,
    MoveCallArgs,
    PreparedTransaction,
    TransactionOptions,
)

C = TypeVar("C")
C_contra = TypeVar("C_contra", contravariant=True)


class MoveCallable(Protocol[C_contra]):
    """Something that resolves to a Move call given an app config."""

    def to_move_call_args(self, config: C_contra) -> MoveCallArgs:
        ...


class SignedTransactionApi:
    """Settlement and coin selection for a single sender.

    Args:
        client: Ledger client (must also build Move calls).
        signer: Holds the sender's key.
        sender: Address transactions are built and signed for.
        intent: Signature scope.
    """

    def __init__(
        self,
        client: MoveCallClient,
        signer: Signer,
        sender: str,
        *,
        intent: Intent = SUI_TRANSACTION_INTENT,
    ) -> None:
        self._client = client
        self._sender = normalize_address(sender)
        self._settler = TransactionSettler(client, signer, intent=intent)
        self._selector = CoinSelector(client, self._settler)

    @property
    def client(self) -> MoveCallClient:
        return self._client

    @property
    def sender(self) -> str:
        return self._sender

    @property
    def settler(self) -> TransactionSettler:
        return self._settler

    @property
    def selector(self) -> CoinSelector:
        return self._selector

    async def sign_and_execute(
        self,
        prepared: PreparedTransaction,
        options: TransactionOptions,
    ) -> ExecutionResult:
        return await self._settler.sign_and_submit(prepared, options)

    async def sign_and_execute_with_effects(
        self, prepared: PreparedTransaction
    ) -> ExecutionResult:
        return await self._settler.sign_and_submit_with_effects(prepared)

    async def get_coin_amount(self, amount: int, coin_type: str, gas: GasInfo) -> str:
        """Id of a sender-owned ``Coin<coin_type>`` worth exactly ``amount``."""
        return await self._selector.select_or_create(self._sender, coin_type, amount, gas)

    async def call(
        self,
        args: MoveCallArgs,
        gas: GasInfo,
        options: TransactionOptions,
    ) -> ExecutionResult:
        """Build, sign and submit a Move call from the sender."""
        prepared = await self._client.build_move_call(self._sender, args, gas)
        return await self._settler.sign_and_submit(prepared, options)

    async def call_with_effects(self, args: MoveCallArgs, gas: GasInfo) -> ExecutionResult:
        return await self.call(args, gas, TransactionOptions.effects_only())


class SignedTransactionCaller(Generic[C]):
    """Executes MoveCallable requests against an app config.

    Args:
        api: The signed transaction API to submit through.
        config: App config handed to each request (package ids, shared
            object ids, ...).
    """

    def __init__(self, api: SignedTransactionApi, config: C) -> None:
        self.api = api
        self.config = config

    async def call(
        self,
        request: MoveCallable[C],
        gas: GasInfo,
        options: TransactionOptions,
    ) -> ExecutionResult:
        return await self.api.call(request.to_move_call_args(self.config), gas, options)

    async def call_with_effects(self, request: MoveCallable[C], gas: GasInfo) -> ExecutionResult:
        return await self.call(request, gas, TransactionOptions.effects_only())


def build_api(
    config: SettleConfig,
    signer: Signer,
    sender: str,
    *,
    transport: JsonRpcTransport | None = None,
    intent: Intent = SUI_TRANSACTION_INTENT,
) -> SignedTransactionApi:
    """Construct client, settler and selector from ``config``.

    Args:
        config: Connection settings.
        signer: Signer holding ``sender``'s key.
        sender: Sender address.
        transport: Override the HTTP transport (tests, custom headers).
        intent: Signature scope.
    """
    client = SuiJsonRpcClient(
        config.rpc_url,
        transport=transport or HttpxTransport(timeout=config.request_timeout),
    )
    return SignedTransactionApi(client, signer, sender, intent=intent)

"""
Sui JSON-RPC client — real network implementation of LedgerClient.

Translates JSON-RPC responses into Coin/ExecutionResult objects. Uses
an injectable transport (JsonRpcTransport) so the HTTP layer can be
swapped for test fakes without changing parsing logic.

No retry loops. No secrets. No selection logic beyond response parsing.

Response parsing targets the Sui JSON-RPC conventions:
    - Success: {"jsonrpc": "2.0", "result": {...}, "id": N}
    - Error:   {"jsonrpc": "2.0", "error": {"code": ..., "message": ...}, "id": N}
    - Paginated listings: {"data": [...], "nextCursor": ..., "hasNextPage": bool}
    - Execution: digest, effects (status, gasUsed, created/mutated/deleted),
      objectChanges, confirmedLocalExecution
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Sequence, TypeVar

from sui_settle.client import MoveDecodable
from sui_settle.errors import LedgerRpcError
from sui_settle.transport import HttpxTransport, JsonRpcTransport
from sui_settle.type_tag import StructTag
from sui_settle.types import (
    Balance,
    Coin,
    CreatedChange,
    ExecuteRequestType,
    ExecutionResult,
    ExecutionStatus,
    Failure,
    GasCostSummary,
    GasInfo,
    MoveCallArgs,
    ObjectChange,
    ObjectInfo,
    ObjectRef,
    OtherChange,
    PreparedTransaction,
    PublishedChange,
    SignedTransaction,
    Success,
    TransactionEffects,
    TransactionOptions,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=MoveDecodable)


class SuiJsonRpcClient:
    """Sui JSON-RPC client implementing the LedgerClient protocol.

    Args:
        url: Full node JSON-RPC endpoint (e.g. "http://127.0.0.1:9000").
        transport: Injectable transport for HTTP POST. Defaults to
            HttpxTransport. Pass a FakeTransport for testing.
        page_limit: Page size for paginated listings (None = node default).
    """

    def __init__(
        self,
        url: str,
        transport: JsonRpcTransport | None = None,
        page_limit: int | None = None,
    ) -> None:
        self._url = url
        self._transport = transport or HttpxTransport()
        self._page_limit = page_limit
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        """The JSON-RPC endpoint URL."""
        return self._url

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        response = await self._transport.post_json(self._url, payload)
        return _unwrap(method, response)

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    async def list_coins(self, address: str, token_type: str) -> list[Coin]:
        """List every coin of ``token_type`` owned by ``address``.

        Follows ``nextCursor`` until the node reports no further page.
        """
        coins: list[Coin] = []
        cursor: str | None = None
        while True:
            page = await self._call(
                "suix_getCoins", [address, token_type, cursor, self._page_limit]
            )
            coins.extend(_parse_coin(item) for item in page.get("data", []))
            cursor = page.get("nextCursor")
            if not page.get("hasNextPage") or cursor is None:
                break
        logger.debug("Listed %d Coin<%s> for %s", len(coins), token_type, address)
        return coins

    async def get_balance(self, address: str, token_type: str) -> Balance:
        """Aggregate balance of ``token_type`` for ``address``."""
        result = await self._call("suix_getBalance", [address, token_type])
        return Balance(
            token_type=result["coinType"],
            coin_object_count=int(result["coinObjectCount"]),
            total_balance=int(result["totalBalance"]),
        )

    async def read_object(self, object_id: str, cls: type[T]) -> T:
        """Fetch an object and decode its Move fields as ``cls``."""
        result = await self._call(
            "sui_getObject", [object_id, {"showContent": True, "showType": True}]
        )
        fields = _parse_object_fields(object_id, result)
        return cls.from_move_fields(fields)

    async def list_owned_objects(self, address: str) -> list[ObjectInfo]:
        """List every object owned by ``address``."""
        objects: list[ObjectInfo] = []
        cursor: str | None = None
        query = {"options": {"showType": True}}
        while True:
            page = await self._call(
                "suix_getOwnedObjects", [address, query, cursor, self._page_limit]
            )
            for item in page.get("data", []):
                data = item.get("data")
                if isinstance(data, dict):
                    objects.append(
                        ObjectInfo(
                            object_id=data["objectId"],
                            version=data.get("version"),
                            digest=data.get("digest"),
                            object_type=data.get("type"),
                        )
                    )
            cursor = page.get("nextCursor")
            if not page.get("hasNextPage") or cursor is None:
                break
        return objects

    # -----------------------------------------------------------------
    # Transaction building
    # -----------------------------------------------------------------

    async def build_split_transaction(
        self,
        sender: str,
        coin_id: str,
        amounts: Sequence[int],
        gas_object: str | None,
        gas_budget: int,
    ) -> PreparedTransaction:
        """Build a split via ``unsafe_splitCoin``."""
        result = await self._call(
            "unsafe_splitCoin",
            [sender, coin_id, [str(a) for a in amounts], gas_object, str(gas_budget)],
        )
        return PreparedTransaction(
            tx_bytes=result["txBytes"],
            sender=sender,
            gas=GasInfo(object_id=gas_object, budget=gas_budget),
        )

    async def build_move_call(
        self,
        sender: str,
        args: MoveCallArgs,
        gas: GasInfo,
    ) -> PreparedTransaction:
        """Build a Move call via ``unsafe_moveCall``."""
        result = await self._call(
            "unsafe_moveCall",
            [
                sender,
                args.package,
                args.module,
                args.function,
                list(args.type_args),
                list(args.call_args),
                gas.object_id,
                str(gas.budget),
            ],
        )
        return PreparedTransaction(tx_bytes=result["txBytes"], sender=sender, gas=gas)

    # -----------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------

    async def execute(
        self,
        signed: SignedTransaction,
        options: TransactionOptions,
        request_type: ExecuteRequestType = ExecuteRequestType.WAIT_FOR_LOCAL_EXECUTION,
    ) -> ExecutionResult:
        """Execute via ``sui_executeTransactionBlock``.

        Transport exceptions and RPC errors propagate to the caller.
        """
        result = await self._call(
            "sui_executeTransactionBlock",
            [
                signed.prepared.tx_bytes,
                list(signed.signatures),
                options.to_rpc(),
                str(request_type),
            ],
        )
        return _parse_execution_result(result)


# =====================================================================
# Response parsing (pure functions, no I/O)
# =====================================================================


def _unwrap(method: str, response: dict[str, Any]) -> Any:
    """Return the JSON-RPC ``result`` member or raise on an ``error`` member."""
    error = response.get("error")
    if error is not None:
        if isinstance(error, dict):
            raise LedgerRpcError(method, error.get("code"), str(error.get("message", "")))
        raise LedgerRpcError(method, None, str(error))
    if "result" not in response:
        raise LedgerRpcError(method, None, "response has neither result nor error")
    return response["result"]


def _parse_coin(item: dict[str, Any]) -> Coin:
    return Coin(
        object_id=item["coinObjectId"],
        balance=int(item["balance"]),
        token_type=item["coinType"],
        version=item.get("version"),
        digest=item.get("digest"),
    )


def _parse_object_fields(object_id: str, result: dict[str, Any]) -> dict[str, Any]:
    """Extract Move struct fields from a ``sui_getObject`` result."""
    if result.get("error") is not None:
        raise LedgerRpcError("sui_getObject", None, f"object {object_id}: {result['error']}")
    data = result.get("data")
    if not isinstance(data, dict):
        raise LedgerRpcError("sui_getObject", None, f"object {object_id}: no data")
    content = data.get("content")
    if not isinstance(content, dict) or content.get("dataType") != "moveObject":
        raise LedgerRpcError(
            "sui_getObject", None, f"object {object_id}: not a Move object"
        )
    fields: dict[str, Any] = content.get("fields", {})
    return fields


def _parse_status(status: dict[str, Any]) -> ExecutionStatus:
    if status.get("status") == "success":
        return Success()
    return Failure(message=str(status.get("error", "unknown error")))


def _parse_gas(gas: dict[str, Any]) -> GasCostSummary:
    return GasCostSummary(
        computation_cost=int(gas.get("computationCost", 0)),
        storage_cost=int(gas.get("storageCost", 0)),
        storage_rebate=int(gas.get("storageRebate", 0)),
        non_refundable_storage_fee=int(gas.get("nonRefundableStorageFee", 0)),
    )


def _parse_ref(item: dict[str, Any]) -> ObjectRef:
    # created/mutated entries wrap the ref in "reference"; deleted ones don't
    ref = item.get("reference", item)
    version = ref.get("version")
    return ObjectRef(
        object_id=ref["objectId"],
        version=int(version) if version is not None else None,
        digest=ref.get("digest"),
    )


def _parse_effects(effects: dict[str, Any]) -> TransactionEffects:
    return TransactionEffects(
        status=_parse_status(effects.get("status", {})),
        gas_used=_parse_gas(effects.get("gasUsed", {})),
        created=tuple(_parse_ref(i) for i in effects.get("created", [])),
        mutated=tuple(_parse_ref(i) for i in effects.get("mutated", [])),
        deleted=tuple(_parse_ref(i) for i in effects.get("deleted", [])),
    )


def _parse_object_change(item: dict[str, Any]) -> ObjectChange:
    kind = item.get("type")
    if kind == "created":
        return CreatedChange(
            object_id=item["objectId"],
            object_type=StructTag.parse(item["objectType"]),
            version=item.get("version"),
            digest=item.get("digest"),
        )
    if kind == "published":
        return PublishedChange(
            package_id=item["packageId"],
            modules=tuple(item.get("modules", [])),
            version=item.get("version"),
        )
    return OtherChange(kind=str(kind), object_id=item.get("objectId"))


def _parse_execution_result(result: dict[str, Any]) -> ExecutionResult:
    """Parse a ``sui_executeTransactionBlock`` result.

    Missing sections stay None so the interpreter can tell "not
    requested" apart from "empty".
    """
    effects_raw = result.get("effects")
    changes_raw = result.get("objectChanges")
    return ExecutionResult(
        digest=result.get("digest", ""),
        confirmed=bool(result.get("confirmedLocalExecution", False)),
        effects=_parse_effects(effects_raw) if isinstance(effects_raw, dict) else None,
        object_changes=(
            tuple(_parse_object_change(c) for c in changes_raw)
            if isinstance(changes_raw, list)
            else None
        ),
        raw=result,
    )

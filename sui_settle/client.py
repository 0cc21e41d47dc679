"""
Ledger client protocol — the network boundary.

Defines the interface the selector and settler depend on, not a
concrete implementation. This keeps the core testable and keeps
HTTP out of the business logic.

Concrete implementations:
    - SuiJsonRpcClient (JSON-RPC over an injectable transport)
    - FakeLedger (tests)

Methods are async because network I/O is inherently asynchronous.
Every call is a suspension point; none spawns background work.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, TypeVar, runtime_checkable

from sui_settle.types import (
    Coin,
    ExecuteRequestType,
    ExecutionResult,
    GasInfo,
    MoveCallArgs,
    PreparedTransaction,
    SignedTransaction,
    TransactionOptions,
)

T = TypeVar("T", bound="MoveDecodable")


@runtime_checkable
class MoveDecodable(Protocol):
    """A type that can be decoded from an object's Move struct fields."""

    @classmethod
    def from_move_fields(cls: type[T], fields: dict[str, Any]) -> T:
        ...


@runtime_checkable
class ObjectReader(Protocol):
    """Generic decode-on-read capability."""

    async def read_object(self, object_id: str, cls: type[T]) -> T:
        """Fetch an object and decode its content as ``cls``."""
        ...


@runtime_checkable
class LedgerClient(ObjectReader, Protocol):
    """Interface for ledger operations used by selection and settlement."""

    async def list_coins(self, address: str, token_type: str) -> list[Coin]:
        """All coins of ``token_type`` owned by ``address``.

        Order is unspecified; callers must not depend on it.
        """
        ...

    async def build_split_transaction(
        self,
        sender: str,
        coin_id: str,
        amounts: Sequence[int],
        gas_object: str | None,
        gas_budget: int,
    ) -> PreparedTransaction:
        """Build an unsigned transaction splitting ``coin_id`` into ``amounts``."""
        ...

    async def execute(
        self,
        signed: SignedTransaction,
        options: TransactionOptions,
        request_type: ExecuteRequestType = ExecuteRequestType.WAIT_FOR_LOCAL_EXECUTION,
    ) -> ExecutionResult:
        """Submit a signed transaction and return the execution result.

        Raises on transport or node errors. Never retries.
        """
        ...


@runtime_checkable
class MoveCallClient(LedgerClient, Protocol):
    """A ledger client that can also build Move call transactions."""

    async def build_move_call(
        self,
        sender: str,
        args: MoveCallArgs,
        gas: GasInfo,
    ) -> PreparedTransaction:
        """Build an unsigned Move call transaction."""
        ...

"""
Data model — boring frozen dataclasses.

Snapshots produced by the ledger (Coin, ExecutionResult, ObjectChange)
are read-only on the client side. PreparedTransaction/SignedTransaction
are single-use: created per call, consumed by one submission.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from sui_settle.type_tag import StructTag

U64_MAX = 2**64 - 1

# Default gas budget in MIST.
DEFAULT_GAS_BUDGET = 1_000_000_000


def _validate_u64(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got: {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must fit in u64, got: {value}")


# =========================================================================
# Coins and payment inputs
# =========================================================================


@dataclass(frozen=True)
class Coin:
    """A coin owned by an address, as listed by the ledger.

    Attributes:
        object_id: Coin object id.
        balance: Balance in the token's smallest unit.
        token_type: Token type (e.g. ``0x2::sui::SUI``), the ``T`` of ``Coin<T>``.
        version: Object version at listing time.
        digest: Object digest at listing time.
    """

    object_id: str
    balance: int
    token_type: str
    version: str | None = None
    digest: str | None = None

    def __post_init__(self) -> None:
        _validate_u64("balance", self.balance)


@dataclass(frozen=True)
class Balance:
    """Aggregate balance of one token type for an address."""

    token_type: str
    coin_object_count: int
    total_balance: int


@dataclass(frozen=True)
class PaymentRequest:
    """Pay ``amount`` of ``token_type``."""

    amount: int
    token_type: str

    def __post_init__(self) -> None:
        _validate_u64("amount", self.amount)
        if not self.token_type:
            raise ValueError("token_type must be non-empty")


@dataclass(frozen=True)
class GasInfo:
    """Gas payment for a transaction.

    Attributes:
        object_id: Coin reserved for gas. If None, the node selects one
            with at least ``budget`` value.
        budget: Maximum gas (MIST) the transaction may use. Must be > 0.
    """

    object_id: str | None = None
    budget: int = DEFAULT_GAS_BUDGET

    def __post_init__(self) -> None:
        _validate_u64("budget", self.budget)
        if self.budget == 0:
            raise ValueError("budget must be > 0")


@dataclass(frozen=True)
class CoinObject:
    """A coin decoded from on-chain object content (``Coin<T>`` fields)."""

    object_id: str
    balance: int

    @classmethod
    def from_move_fields(cls, fields: dict[str, Any]) -> CoinObject:
        uid = fields["id"]
        object_id = uid["id"] if isinstance(uid, dict) else uid
        return cls(object_id=object_id, balance=int(fields["balance"]))

    def value(self) -> int:
        return self.balance


@dataclass(frozen=True)
class ObjectInfo:
    """An owned object reference, as listed by the ledger."""

    object_id: str
    version: str | None = None
    digest: str | None = None
    object_type: str | None = None


# =========================================================================
# Transactions
# =========================================================================


@dataclass(frozen=True)
class MoveCallArgs:
    """Target and arguments of a Move function call."""

    package: str
    module: str
    function: str
    type_args: tuple[str, ...] = ()
    call_args: tuple[Any, ...] = ()


@dataclass(frozen=True)
class PreparedTransaction:
    """Unsigned transaction bytes plus metadata.

    Attributes:
        tx_bytes: Base64-encoded BCS transaction data, as returned by
            the node's transaction builder.
        sender: Address that must sign.
        gas: Gas info the transaction was built with (if known).
    """

    tx_bytes: str
    sender: str
    gas: GasInfo | None = None

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.tx_bytes)


@dataclass(frozen=True)
class SignedTransaction:
    """A prepared transaction plus its serialized signatures.

    Valid for a single submission; re-submission is the caller's call.
    """

    prepared: PreparedTransaction
    signatures: tuple[str, ...]


class ExecuteRequestType(StrEnum):
    """How long the node blocks before answering an execution request."""

    WAIT_FOR_EFFECTS_CERT = "WaitForEffectsCert"
    WAIT_FOR_LOCAL_EXECUTION = "WaitForLocalExecution"


@dataclass(frozen=True)
class TransactionOptions:
    """Which sections the node should include in an execution response."""

    show_input: bool = False
    show_raw_input: bool = False
    show_effects: bool = False
    show_events: bool = False
    show_object_changes: bool = False
    show_balance_changes: bool = False

    @classmethod
    def effects_only(cls) -> TransactionOptions:
        return cls(show_effects=True)

    @classmethod
    def full(cls) -> TransactionOptions:
        """Effects plus object changes."""
        return cls(show_effects=True, show_object_changes=True)

    def with_effects(self) -> TransactionOptions:
        return replace(self, show_effects=True)

    def with_object_changes(self) -> TransactionOptions:
        return replace(self, show_object_changes=True)

    def to_rpc(self) -> dict[str, bool]:
        return {
            "showInput": self.show_input,
            "showRawInput": self.show_raw_input,
            "showEffects": self.show_effects,
            "showEvents": self.show_events,
            "showObjectChanges": self.show_object_changes,
            "showBalanceChanges": self.show_balance_changes,
        }


# =========================================================================
# Execution results
# =========================================================================


@dataclass(frozen=True)
class Success:
    """The chain executed the transaction successfully."""

    @property
    def ok(self) -> bool:
        return True

    def __str__(self) -> str:
        return "success"


@dataclass(frozen=True)
class Failure:
    """The chain executed and rejected the transaction."""

    message: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"failure: {self.message}"


ExecutionStatus = Success | Failure


@dataclass(frozen=True)
class GasCostSummary:
    """Gas charged for a transaction (MIST)."""

    computation_cost: int
    storage_cost: int
    storage_rebate: int
    non_refundable_storage_fee: int = 0

    @property
    def net(self) -> int:
        """Net cost to the gas payer."""
        return self.computation_cost + self.storage_cost - self.storage_rebate


@dataclass(frozen=True)
class ObjectRef:
    """Reference to an object version touched by a transaction."""

    object_id: str
    version: int | None = None
    digest: str | None = None


@dataclass(frozen=True)
class TransactionEffects:
    """The effects section of an execution result."""

    status: ExecutionStatus
    gas_used: GasCostSummary
    created: tuple[ObjectRef, ...] = ()
    mutated: tuple[ObjectRef, ...] = ()
    deleted: tuple[ObjectRef, ...] = ()


@dataclass(frozen=True)
class CreatedChange:
    """An object created by the transaction."""

    object_id: str
    object_type: StructTag
    version: str | None = None
    digest: str | None = None


@dataclass(frozen=True)
class PublishedChange:
    """A package published by the transaction."""

    package_id: str
    modules: tuple[str, ...] = ()
    version: str | None = None


@dataclass(frozen=True)
class OtherChange:
    """Any other object change (mutated, deleted, transferred, wrapped)."""

    kind: str
    object_id: str | None = None


ObjectChange = CreatedChange | PublishedChange | OtherChange


@dataclass(frozen=True)
class ExecutionResult:
    """The ledger's answer to an execution request.

    Attributes:
        digest: Transaction digest.
        confirmed: Whether the node confirmed local execution.
            False covers both "not confirmed" and "not reported".
        effects: Effects section, None if not requested or not returned.
        object_changes: Object changes, None if not requested.
        raw: The raw response, kept for diagnostics only.
    """

    digest: str
    confirmed: bool = False
    effects: TransactionEffects | None = None
    object_changes: tuple[ObjectChange, ...] | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

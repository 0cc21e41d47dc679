"""
sui-settle — coin selection and transaction settlement for Sui.

Public API:

    Core (depends only on protocols):
        - ``CoinSelector.select_or_create()`` — find or split a coin of an
          exact value.
        - ``TransactionSettler.sign_and_submit()`` — sign, submit, wait
          for local execution.

    Pure layer (no I/O):
        - ``execution_status()``, ``gas_used()``, ``object_changes()``,
          ``published_objects()`` — typed views of an ExecutionResult.
        - ``StructTag``, ``normalize_type()`` — Move type strings.

    Protocols (for dependency injection):
        - ``LedgerClient`` — network boundary (coins, objects, execution).
        - ``Signer`` — secrets boundary.
        - ``JsonRpcTransport`` — HTTP seam under the JSON-RPC client.

    Concrete implementations:
        - ``SuiJsonRpcClient`` over ``HttpxTransport``.
        - ``Ed25519Keystore``.

    Wiring:
        - ``SettleConfig``, ``build_api()``, ``SignedTransactionApi``.

    Errors:
        - ``SelectionError``, ``SettlementError``, ``ResponseError``
          (all ``SettleError``).
"""

from sui_settle.api import (
    MoveCallable,
    SignedTransactionApi,
    SignedTransactionCaller,
    build_api,
)
from sui_settle.client import LedgerClient, MoveCallClient, MoveDecodable, ObjectReader
from sui_settle.config import SettleConfig
from sui_settle.errors import (
    InsufficientBalance,
    LedgerRpcError,
    MissingEffects,
    MissingObjectChanges,
    MissingPackageId,
    NotConfirmed,
    ResponseError,
    SelectionError,
    SettleError,
    SettleErrorCode,
    SettlementError,
    SigningFailed,
    SplitExecutionFailed,
    SplitReadFailed,
    SplitResultNotFound,
    SubmissionFailed,
    TransactionFailed,
)
from sui_settle.intent import SUI_TRANSACTION_INTENT, Intent
from sui_settle.jsonrpc_client import SuiJsonRpcClient
from sui_settle.response import (
    CreatedObject,
    PublishedObjects,
    PublishedResponse,
    ensure_transaction_success,
    execution_status,
    gas_used,
    object_changes,
    partition_object_changes,
    published_objects,
    published_response,
)
from sui_settle.selector import CoinSelector, scan_coins
from sui_settle.settler import TransactionSettler, ensure_confirmed
from sui_settle.signer import Ed25519Keystore, Signer, UnknownSignerAddress
from sui_settle.transport import HttpxTransport, JsonRpcTransport
from sui_settle.type_tag import StructTag, normalize_address, normalize_type
from sui_settle.types import (
    Coin,
    CoinObject,
    CreatedChange,
    ExecutionResult,
    ExecutionStatus,
    Failure,
    GasCostSummary,
    GasInfo,
    MoveCallArgs,
    ObjectChange,
    OtherChange,
    PaymentRequest,
    PreparedTransaction,
    PublishedChange,
    SignedTransaction,
    Success,
    TransactionOptions,
)

__version__ = "0.1.0"

__all__ = [
    "Coin",
    "CoinObject",
    "CoinSelector",
    "CreatedChange",
    "CreatedObject",
    "Ed25519Keystore",
    "ExecutionResult",
    "ExecutionStatus",
    "Failure",
    "GasCostSummary",
    "GasInfo",
    "HttpxTransport",
    "InsufficientBalance",
    "Intent",
    "JsonRpcTransport",
    "LedgerClient",
    "LedgerRpcError",
    "MissingEffects",
    "MissingObjectChanges",
    "MissingPackageId",
    "MoveCallArgs",
    "MoveCallClient",
    "MoveCallable",
    "MoveDecodable",
    "NotConfirmed",
    "ObjectChange",
    "ObjectReader",
    "OtherChange",
    "PaymentRequest",
    "PreparedTransaction",
    "PublishedChange",
    "PublishedObjects",
    "PublishedResponse",
    "ResponseError",
    "SUI_TRANSACTION_INTENT",
    "SelectionError",
    "SettleConfig",
    "SettleError",
    "SettleErrorCode",
    "SettlementError",
    "SignedTransaction",
    "SignedTransactionApi",
    "SignedTransactionCaller",
    "Signer",
    "SigningFailed",
    "SplitExecutionFailed",
    "SplitReadFailed",
    "SplitResultNotFound",
    "StructTag",
    "SubmissionFailed",
    "Success",
    "SuiJsonRpcClient",
    "TransactionFailed",
    "TransactionOptions",
    "TransactionSettler",
    "UnknownSignerAddress",
    "build_api",
    "ensure_confirmed",
    "ensure_transaction_success",
    "execution_status",
    "gas_used",
    "normalize_address",
    "normalize_type",
    "object_changes",
    "partition_object_changes",
    "published_objects",
    "published_response",
    "scan_coins",
]

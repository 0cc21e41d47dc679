"""
Error taxonomy for coin selection, settlement and response parsing.

Three families, one root:

    SettleError
    ├── SelectionError      — no usable coin, or a split result that can't be found
    ├── SettlementError     — signing, submission, confirmation
    └── ResponseError       — response shape incomplete for the requested view

Every error carries a machine-readable ``error_code`` and a ``details``
dict with the context needed for diagnosis (amounts, token types,
transaction digests). Never secrets.

An on-chain ``Failure`` status is NOT an error here. It is a normal,
typed outcome of ``execution_status()``; only the explicit
``ensure_transaction_success()`` helper turns it into ``TransactionFailed``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class SettleErrorCode(StrEnum):
    """Machine-readable error categories."""

    # Selection
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    SPLIT_RESULT_NOT_FOUND = "SPLIT_RESULT_NOT_FOUND"
    SPLIT_READ_FAILED = "SPLIT_READ_FAILED"

    # Settlement
    SIGNING_FAILED = "SIGNING_FAILED"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    NOT_CONFIRMED = "NOT_CONFIRMED"
    SPLIT_EXECUTION_FAILED = "SPLIT_EXECUTION_FAILED"

    # Response shape (caller configuration or incomplete response)
    MISSING_EFFECTS = "MISSING_EFFECTS"
    MISSING_OBJECT_CHANGES = "MISSING_OBJECT_CHANGES"
    MISSING_PACKAGE_ID = "MISSING_PACKAGE_ID"

    # Chain-reported failure, only via ensure_transaction_success()
    TRANSACTION_FAILED = "TRANSACTION_FAILED"


class SettleError(Exception):
    """Base class for all errors raised by this package."""

    default_code: SettleErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        error_code: SettleErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, error_code={self.error_code!s})"


# =========================================================================
# Selection
# =========================================================================


class SelectionError(SettleError):
    """Coin selection could not produce a coin of the requested value."""


class InsufficientBalance(SelectionError):
    """No coin of the token type has a balance >= the requested amount."""

    default_code = SettleErrorCode.INSUFFICIENT_BALANCE

    def __init__(self, address: str, token_type: str, amount: int) -> None:
        super().__init__(
            f"No Coin<{token_type}> with balance >= {amount} found for address {address}",
            details={"address": address, "token_type": token_type, "amount": amount},
        )
        self.address = address
        self.token_type = token_type
        self.amount = amount


class SplitResultNotFound(SelectionError):
    """Split confirmed, but no created coin of the requested value was reported."""

    default_code = SettleErrorCode.SPLIT_RESULT_NOT_FOUND

    def __init__(self, token_type: str, amount: int, digest: str | None) -> None:
        super().__init__(
            f"Failed to find Coin<{token_type}> of value {amount} "
            f"in split result (tx {digest})",
            details={"token_type": token_type, "amount": amount, "digest": digest},
        )
        self.token_type = token_type
        self.amount = amount
        self.digest = digest


class SplitReadFailed(SelectionError):
    """Split confirmed, but reading back one of its created coins failed.

    The split is on chain; ``digest`` identifies it. The read error is
    available as ``__cause__``.
    """

    default_code = SettleErrorCode.SPLIT_READ_FAILED

    def __init__(self, token_type: str, amount: int, digest: str | None, object_id: str) -> None:
        super().__init__(
            f"Failed to read created coin {object_id} of split result (tx {digest})",
            details={
                "token_type": token_type,
                "amount": amount,
                "digest": digest,
                "object_id": object_id,
            },
        )
        self.token_type = token_type
        self.amount = amount
        self.digest = digest
        self.object_id = object_id


# =========================================================================
# Settlement
# =========================================================================


class SettlementError(SettleError):
    """Signing, submitting or confirming a transaction failed."""


class SigningFailed(SettlementError):
    """The signer could not sign for the sender. Terminal, never retried."""

    default_code = SettleErrorCode.SIGNING_FAILED


class SubmissionFailed(SettlementError):
    """The ledger client failed to execute the transaction.

    Passthrough of the underlying failure (available as ``__cause__``).
    The caller may retry at its discretion; this layer never does.
    """

    default_code = SettleErrorCode.SUBMISSION_FAILED


class NotConfirmed(SettlementError):
    """The transaction was submitted but local execution was not confirmed."""

    default_code = SettleErrorCode.NOT_CONFIRMED


class SplitExecutionFailed(SettlementError):
    """The split transaction executed and the chain reported a Failure status."""

    default_code = SettleErrorCode.SPLIT_EXECUTION_FAILED


# =========================================================================
# Response shape
# =========================================================================


class ResponseError(SettleError):
    """An execution result lacks the section needed for the requested view."""


class MissingEffects(ResponseError):
    """The result carries no effects section at all."""

    default_code = SettleErrorCode.MISSING_EFFECTS


class MissingObjectChanges(ResponseError):
    """Object changes were not populated (not requested by the caller)."""

    default_code = SettleErrorCode.MISSING_OBJECT_CHANGES


class MissingPackageId(ResponseError):
    """Object changes contain no Published record."""

    default_code = SettleErrorCode.MISSING_PACKAGE_ID


class TransactionFailed(ResponseError):
    """The chain executed and rejected the transaction."""

    default_code = SettleErrorCode.TRANSACTION_FAILED


# =========================================================================
# Ledger client
# =========================================================================


class LedgerRpcError(Exception):
    """JSON-RPC error object returned by the ledger node.

    Raised by the JSON-RPC client; the settler wraps it in
    SubmissionFailed when it happens during execution.
    """

    def __init__(self, method: str, code: int | None, message: str) -> None:
        super().__init__(f"{method} failed ({code}): {message}")
        self.method = method
        self.code = code
        self.rpc_message = message

"""
Transaction settlement — sign, submit, wait for local execution.

    prepared tx → Signer.sign_secure(intent || bytes) → LedgerClient.execute(
        WaitForLocalExecution) → ExecutionResult

The settler returns the raw ExecutionResult with its ``confirmed``
flag. Callers that need a guarantee use ``sign_and_confirm()`` (or
check ``confirmed`` themselves); submission success alone is not
confirmation.

Failure mapping:
    - signer raised → SigningFailed (terminal)
    - client raised → SubmissionFailed, original exception chained
    - confirmed is not True (sign_and_confirm only) → NotConfirmed

Nothing here retries. Retry policy, if any, belongs to the ledger
client or the caller.
"""

from __future__ import annotations

import logging

from sui_settle.client import LedgerClient
from sui_settle.errors import NotConfirmed, SigningFailed, SubmissionFailed
from sui_settle.intent import SUI_TRANSACTION_INTENT, Intent
from sui_settle.signer import Signer
from sui_settle.types import (
    ExecuteRequestType,
    ExecutionResult,
    PreparedTransaction,
    SignedTransaction,
    TransactionOptions,
)

logger = logging.getLogger(__name__)


def ensure_confirmed(result: ExecutionResult) -> ExecutionResult:
    """Return ``result`` if local execution was confirmed.

    Raises:
        NotConfirmed: Otherwise.
    """
    if result.confirmed is not True:
        raise NotConfirmed(
            f"Transaction {result.digest} was submitted but local execution "
            "was not confirmed",
            details={"digest": result.digest},
        )
    return result


class TransactionSettler:
    """Signs and submits prepared transactions.

    Args:
        client: Ledger client used for execution.
        signer: Holds the sender's key material.
        intent: Signature scope. Defaults to SUI_TRANSACTION_INTENT.
        request_type: Execution wait mode. Defaults to local execution.
    """

    def __init__(
        self,
        client: LedgerClient,
        signer: Signer,
        *,
        intent: Intent = SUI_TRANSACTION_INTENT,
        request_type: ExecuteRequestType = ExecuteRequestType.WAIT_FOR_LOCAL_EXECUTION,
    ) -> None:
        self._client = client
        self._signer = signer
        self._intent = intent
        self._request_type = request_type

    @property
    def client(self) -> LedgerClient:
        return self._client

    @property
    def intent(self) -> Intent:
        return self._intent

    def sign(self, prepared: PreparedTransaction) -> SignedTransaction:
        """Sign ``prepared`` for its sender.

        Raises:
            SigningFailed: If the signer can't sign (unknown address,
                key unavailable, malformed bytes).
        """
        try:
            signature = self._signer.sign_secure(
                prepared.sender, prepared.raw_bytes(), self._intent
            )
        except Exception as exc:
            logger.error("Signing failed for %s: %s", prepared.sender, exc)
            raise SigningFailed(
                f"Failed to sign transaction for {prepared.sender}: {exc}",
                details={"sender": prepared.sender},
            ) from exc
        return SignedTransaction(prepared=prepared, signatures=(signature,))

    async def sign_and_submit(
        self,
        prepared: PreparedTransaction,
        options: TransactionOptions,
    ) -> ExecutionResult:
        """Sign, submit and wait for the node to answer.

        Returns:
            The raw ExecutionResult. Check ``confirmed`` before relying on it.

        Raises:
            SigningFailed: Signing failed.
            SubmissionFailed: The client failed (network, node rejection,
                consumed input object, ...).
        """
        signed = self.sign(prepared)
        try:
            result = await self._client.execute(signed, options, self._request_type)
        except Exception as exc:
            logger.error("Submission failed for %s: %s", prepared.sender, exc)
            raise SubmissionFailed(
                f"Failed to execute transaction: {exc}",
                details={"sender": prepared.sender},
            ) from exc

        if result.confirmed:
            logger.info("Transaction %s confirmed", result.digest)
        else:
            logger.warning("Transaction %s submitted without local confirmation", result.digest)
        return result

    async def sign_and_submit_with_effects(
        self, prepared: PreparedTransaction
    ) -> ExecutionResult:
        """Effects-only submission (cheaper response)."""
        return await self.sign_and_submit(prepared, TransactionOptions.effects_only())

    async def sign_and_submit_with_object_changes(
        self, prepared: PreparedTransaction
    ) -> ExecutionResult:
        """Submission reporting effects and object changes."""
        return await self.sign_and_submit(prepared, TransactionOptions.full())

    async def sign_and_confirm(
        self,
        prepared: PreparedTransaction,
        options: TransactionOptions,
    ) -> ExecutionResult:
        """As ``sign_and_submit``, then require local confirmation.

        Raises:
            NotConfirmed: If the node did not confirm local execution.
        """
        return ensure_confirmed(await self.sign_and_submit(prepared, options))

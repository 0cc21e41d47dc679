"""
Tests for TransactionSettler — signing, submission, confirmation.

All tests use fake client + fake signer — no network calls.

Test plan:
- Sign: signer receives sender, decoded tx bytes and intent; the
  signature lands in SignedTransaction; signer error → SigningFailed
  with the original chained
- Submit: options and request type forwarded, result returned as-is
  (confirmed or not), client error → SubmissionFailed chained, signing
  failure never reaches the client
- Confirm: confirmed → result, unconfirmed → NotConfirmed with digest
- Convenience: effects-only and object-changes variants pick options
- Logging: confirmation at INFO, missing confirmation at WARNING
"""

import base64
import logging

import pytest

from sui_settle.errors import (
    LedgerRpcError,
    NotConfirmed,
    SettleErrorCode,
    SettlementError,
    SigningFailed,
    SubmissionFailed,
)
from sui_settle.intent import SUI_TRANSACTION_INTENT, Intent
from sui_settle.settler import TransactionSettler, ensure_confirmed
from sui_settle.types import (
    ExecuteRequestType,
    ExecutionResult,
    PreparedTransaction,
    SignedTransaction,
    TransactionOptions,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SENDER = "0x" + "ab" * 32
RAW_TX = b"\x00\x01transaction-data"
PREPARED = PreparedTransaction(tx_bytes=base64.b64encode(RAW_TX).decode(), sender=SENDER)
SIGNATURE = "AAAA"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeSigner:
    """Minimal Signer implementation for testing."""

    def __init__(self, *, should_raise: Exception | None = None) -> None:
        self._should_raise = should_raise
        self.sign_calls: list[tuple[str, bytes, Intent]] = []

    def sign_secure(self, address: str, tx_bytes: bytes, intent: Intent) -> str:
        self.sign_calls.append((address, tx_bytes, intent))
        if self._should_raise is not None:
            raise self._should_raise
        return SIGNATURE


class FakeClient:
    """Records execute() calls and returns a canned result."""

    def __init__(
        self,
        *,
        result: ExecutionResult | None = None,
        should_raise: Exception | None = None,
    ) -> None:
        self._result = result or ExecutionResult(digest="Digest1", confirmed=True)
        self._should_raise = should_raise
        self.execute_calls: list[tuple[SignedTransaction, TransactionOptions, ExecuteRequestType]] = []

    async def execute(
        self,
        signed: SignedTransaction,
        options: TransactionOptions,
        request_type: ExecuteRequestType = ExecuteRequestType.WAIT_FOR_LOCAL_EXECUTION,
    ) -> ExecutionResult:
        self.execute_calls.append((signed, options, request_type))
        if self._should_raise is not None:
            raise self._should_raise
        return self._result


# ---------------------------------------------------------------------------
# Sign
# ---------------------------------------------------------------------------


class TestSign:
    def test_signer_receives_decoded_bytes(self) -> None:
        signer = FakeSigner()
        TransactionSettler(FakeClient(), signer).sign(PREPARED)  # type: ignore[arg-type]
        assert signer.sign_calls == [(SENDER, RAW_TX, SUI_TRANSACTION_INTENT)]

    def test_signature_attached(self) -> None:
        signed = TransactionSettler(FakeClient(), FakeSigner()).sign(PREPARED)  # type: ignore[arg-type]
        assert signed.prepared == PREPARED
        assert signed.signatures == (SIGNATURE,)

    def test_custom_intent_forwarded(self) -> None:
        signer = FakeSigner()
        intent = Intent(scope=3)
        settler = TransactionSettler(FakeClient(), signer, intent=intent)  # type: ignore[arg-type]
        settler.sign(PREPARED)
        assert signer.sign_calls[0][2] == intent
        assert settler.intent == intent

    def test_signer_error_raises_signing_failed(self) -> None:
        cause = LookupError("unknown address")
        settler = TransactionSettler(FakeClient(), FakeSigner(should_raise=cause))  # type: ignore[arg-type]
        with pytest.raises(SigningFailed) as exc_info:
            settler.sign(PREPARED)
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.error_code == SettleErrorCode.SIGNING_FAILED
        assert exc_info.value.details == {"sender": SENDER}


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


class TestSignAndSubmit:
    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        result = ExecutionResult(digest="Digest7", confirmed=True)
        settler = TransactionSettler(FakeClient(result=result), FakeSigner())  # type: ignore[arg-type]
        assert await settler.sign_and_submit(PREPARED, TransactionOptions.full()) == result

    @pytest.mark.asyncio
    async def test_unconfirmed_result_returned_as_is(self) -> None:
        result = ExecutionResult(digest="Digest7", confirmed=False)
        settler = TransactionSettler(FakeClient(result=result), FakeSigner())  # type: ignore[arg-type]
        returned = await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        assert returned.confirmed is False

    @pytest.mark.asyncio
    async def test_forwards_options_and_request_type(self) -> None:
        client = FakeClient()
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        options = TransactionOptions.full()
        await settler.sign_and_submit(PREPARED, options)
        signed, sent_options, request_type = client.execute_calls[0]
        assert signed.signatures == (SIGNATURE,)
        assert sent_options == options
        assert request_type == ExecuteRequestType.WAIT_FOR_LOCAL_EXECUTION

    @pytest.mark.asyncio
    async def test_custom_request_type(self) -> None:
        client = FakeClient()
        settler = TransactionSettler(
            client,  # type: ignore[arg-type]
            FakeSigner(),
            request_type=ExecuteRequestType.WAIT_FOR_EFFECTS_CERT,
        )
        await settler.sign_and_submit(PREPARED, TransactionOptions.effects_only())
        assert client.execute_calls[0][2] == ExecuteRequestType.WAIT_FOR_EFFECTS_CERT

    @pytest.mark.asyncio
    async def test_client_error_raises_submission_failed(self) -> None:
        cause = LedgerRpcError("sui_executeTransactionBlock", -32002, "object locked")
        settler = TransactionSettler(FakeClient(should_raise=cause), FakeSigner())  # type: ignore[arg-type]
        with pytest.raises(SubmissionFailed, match="object locked") as exc_info:
            await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        assert exc_info.value.__cause__ is cause
        assert isinstance(exc_info.value, SettlementError)

    @pytest.mark.asyncio
    async def test_connection_error_raises_submission_failed(self) -> None:
        client = FakeClient(should_raise=ConnectionError("refused"))
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        with pytest.raises(SubmissionFailed):
            await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        assert len(client.execute_calls) == 1

    @pytest.mark.asyncio
    async def test_signing_failure_skips_client(self) -> None:
        client = FakeClient()
        settler = TransactionSettler(client, FakeSigner(should_raise=ValueError("bad")))  # type: ignore[arg-type]
        with pytest.raises(SigningFailed):
            await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        assert client.execute_calls == []


# ---------------------------------------------------------------------------
# Confirm
# ---------------------------------------------------------------------------


class TestConfirm:
    def test_ensure_confirmed_passes_through(self) -> None:
        result = ExecutionResult(digest="D", confirmed=True)
        assert ensure_confirmed(result) is result

    def test_ensure_confirmed_raises(self) -> None:
        with pytest.raises(NotConfirmed) as exc_info:
            ensure_confirmed(ExecutionResult(digest="D", confirmed=False))
        assert exc_info.value.details == {"digest": "D"}
        assert exc_info.value.error_code == SettleErrorCode.NOT_CONFIRMED

    @pytest.mark.asyncio
    async def test_sign_and_confirm_unconfirmed(self) -> None:
        client = FakeClient(result=ExecutionResult(digest="D", confirmed=False))
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        with pytest.raises(NotConfirmed):
            await settler.sign_and_confirm(PREPARED, TransactionOptions.full())

    @pytest.mark.asyncio
    async def test_sign_and_confirm_confirmed(self) -> None:
        client = FakeClient(result=ExecutionResult(digest="D", confirmed=True))
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        result = await settler.sign_and_confirm(PREPARED, TransactionOptions.full())
        assert result.digest == "D"


# ---------------------------------------------------------------------------
# Convenience variants
# ---------------------------------------------------------------------------


class TestConvenienceVariants:
    @pytest.mark.asyncio
    async def test_with_effects(self) -> None:
        client = FakeClient()
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        await settler.sign_and_submit_with_effects(PREPARED)
        options = client.execute_calls[0][1]
        assert options.show_effects
        assert not options.show_object_changes

    @pytest.mark.asyncio
    async def test_with_object_changes(self) -> None:
        client = FakeClient()
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        await settler.sign_and_submit_with_object_changes(PREPARED)
        options = client.execute_calls[0][1]
        assert options.show_effects
        assert options.show_object_changes


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestLogging:
    @pytest.mark.asyncio
    async def test_confirmed_logged_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        settler = TransactionSettler(FakeClient(), FakeSigner())  # type: ignore[arg-type]
        with caplog.at_level(logging.INFO, logger="sui_settle.settler"):
            await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        assert "Transaction Digest1 confirmed" in caplog.text

    @pytest.mark.asyncio
    async def test_unconfirmed_logged_at_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        client = FakeClient(result=ExecutionResult(digest="Digest2", confirmed=False))
        settler = TransactionSettler(client, FakeSigner())  # type: ignore[arg-type]
        with caplog.at_level(logging.INFO, logger="sui_settle.settler"):
            await settler.sign_and_submit(PREPARED, TransactionOptions.full())
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Digest2" in warnings[0].getMessage()

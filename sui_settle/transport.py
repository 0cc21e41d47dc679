"""
Transport protocol for JSON-RPC calls.

Defines the seam where concrete HTTP implementations plug in. The
JSON-RPC client depends on this protocol, not on httpx directly, so the
transport can be swapped without editing client logic.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)

Timeouts live here. No retries: a transport failure propagates to the
caller as the httpx exception.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from sui_settle.errors import LedgerRpcError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Async transport for JSON-RPC POST requests."""

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a JSON-RPC request and return the parsed response.

        Args:
            url: The JSON-RPC endpoint URL.
            payload: The JSON-RPC request body (jsonrpc, method, params, id).

        Returns:
            Parsed JSON response as a dict.

        Raises:
            Exception: On transport-level failures (connection refused,
                timeout, TLS error, HTTP status >= 400).
        """
        ...


class HttpxTransport:
    """Posts JSON-RPC envelopes to a Sui full node with httpx.

    One ``httpx.AsyncClient`` per request: the node URL comes with each
    call, and selection/settlement issue few enough calls that pooling
    is not worth holding a client open across them.

    Args:
        timeout: Seconds before httpx gives up on connect or read.
        headers: Sent on every request on top of the JSON content type
            (API keys for hosted nodes, for instance).
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._request_headers = {"Content-Type": "application/json", **(headers or {})}

    @property
    def timeout(self) -> float:
        return self._timeout

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST ``payload`` to the node and return the decoded envelope.

        Raises:
            httpx.HTTPError: Connection failure, timeout or HTTP status >= 400.
            LedgerRpcError: The node answered with something other than a
                JSON object.
        """
        method = payload.get("method", "?")
        logger.debug("%s -> %s (id=%s)", method, url, payload.get("id"))
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(url, json=payload, headers=self._request_headers)
        response.raise_for_status()

        envelope = response.json()
        if not isinstance(envelope, dict):
            raise LedgerRpcError(
                str(method), None, f"response body is a JSON {type(envelope).__name__}, not an object"
            )
        logger.debug("%s <- HTTP %d", method, response.status_code)
        return envelope

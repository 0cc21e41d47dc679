"""Tests for HttpxTransport, mocked at the httpx layer."""

from __future__ import annotations

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from sui_settle.errors import LedgerRpcError
from sui_settle.jsonrpc_client import SuiJsonRpcClient
from sui_settle.transport import DEFAULT_TIMEOUT, HttpxTransport, JsonRpcTransport

URL = "http://127.0.0.1:9000"
PAYLOAD = {"jsonrpc": "2.0", "id": 1, "method": "suix_getBalance", "params": ["0x1", "0x2::sui::SUI"]}


class TestHttpxTransport:
    """Test HttpxTransport.post_json()."""

    @pytest.mark.asyncio
    async def test_posts_json_body(self, httpx_mock: HTTPXMock) -> None:
        """Payload is sent as the JSON body."""
        httpx_mock.add_response(method="POST", url=URL, json={"jsonrpc": "2.0", "id": 1, "result": {}})

        await HttpxTransport().post_json(URL, PAYLOAD)

        requests = httpx_mock.get_requests()
        assert len(requests) == 1
        assert json.loads(requests[0].content) == PAYLOAD
        assert requests[0].headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_returns_parsed_response(self, httpx_mock: HTTPXMock) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "result": {"totalBalance": "5"}}
        httpx_mock.add_response(method="POST", url=URL, json=body)

        assert await HttpxTransport().post_json(URL, PAYLOAD) == body

    @pytest.mark.asyncio
    async def test_custom_headers(self, httpx_mock: HTTPXMock) -> None:
        """Extra headers are sent with every request."""
        httpx_mock.add_response(method="POST", url=URL, json={"result": {}})

        await HttpxTransport(headers={"Authorization": "Bearer token"}).post_json(URL, PAYLOAD)

        sent = httpx_mock.get_requests()[0].headers
        assert sent["Authorization"] == "Bearer token"
        assert sent["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self, httpx_mock: HTTPXMock) -> None:
        """A JSON array from the node is not a JSON-RPC envelope."""
        httpx_mock.add_response(method="POST", url=URL, json=[1, 2])

        with pytest.raises(LedgerRpcError, match="not an object") as exc:
            await HttpxTransport().post_json(URL, PAYLOAD)

        assert exc.value.method == "suix_getBalance"
        assert exc.value.code is None

    @pytest.mark.asyncio
    async def test_http_error_raises(self, httpx_mock: HTTPXMock) -> None:
        """HTTP 4xx/5xx raises httpx.HTTPStatusError."""
        httpx_mock.add_response(method="POST", url=URL, status_code=503, text="Service Unavailable")

        with pytest.raises(httpx.HTTPStatusError) as exc:
            await HttpxTransport().post_json(URL, PAYLOAD)

        assert exc.value.response.status_code == 503

    @pytest.mark.asyncio
    async def test_connection_error_propagates(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), method="POST", url=URL)

        with pytest.raises(httpx.ConnectError):
            await HttpxTransport().post_json(URL, PAYLOAD)

    @pytest.mark.asyncio
    async def test_timeout_propagates(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("Request timed out"), method="POST", url=URL)

        with pytest.raises(httpx.TimeoutException):
            await HttpxTransport(timeout=0.5).post_json(URL, PAYLOAD)

    def test_timeout_default(self) -> None:
        assert HttpxTransport().timeout == DEFAULT_TIMEOUT

    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpxTransport(), JsonRpcTransport)


class TestClientOverHttpx:
    """SuiJsonRpcClient with the real transport, mocked at the HTTP layer."""

    @pytest.mark.asyncio
    async def test_balance_round_trip(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={
                "jsonrpc": "2.0",
                "id": 1,
                "result": {"coinType": "0x2::sui::SUI", "coinObjectCount": 2, "totalBalance": "900"},
            },
        )

        balance = await SuiJsonRpcClient(URL, transport=HttpxTransport()).get_balance("0x1", "0x2::sui::SUI")

        assert balance.total_balance == 900
        sent = json.loads(httpx_mock.get_requests()[0].content)
        assert sent["method"] == "suix_getBalance"

    @pytest.mark.asyncio
    async def test_rpc_error_surfaces(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}},
        )

        with pytest.raises(LedgerRpcError, match="Method not found"):
            await SuiJsonRpcClient(URL, transport=HttpxTransport()).get_balance("0x1", "0x2::sui::SUI")

"""RPC channel: envelope building, transport and error classification."""

from __future__ import annotations

import json

import httpx
import pytest

from conftest import FakeNode, NodeFault
from ethfetch.errors import ProtocolError, RpcError, TransportError
from ethfetch.rpc.channel import HttpxFetch, RpcChannel
from ethfetch.rpc.methods import EthMethods, make_request
from ethfetch.tx.models import CallRequest
from ethfetch.utils import from_quantity

URL = "http://node.test:8545"


def _fetch_returning(response: httpx.Response):
    def fetch(url, body, headers):
        return response

    return fetch


class TestRequestEnvelope:
    def test_request_shape_and_headers(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["host"] = (request.url.host, request.url.port)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1"})

        fetch = HttpxFetch(httpx.Client(transport=httpx.MockTransport(handler)))
        channel = RpcChannel(URL, fetch)

        assert channel.call("eth_chainId") == "0x1"
        assert seen["method"] == "POST"
        assert seen["host"] == ("node.test", 8545)
        assert seen["content_type"] == "application/json"
        assert seen["body"] == {"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []}

    def test_ids_increase(self) -> None:
        node = FakeNode({"eth_blockNumber": "0x10"})
        channel = RpcChannel(URL, node)
        channel.call("eth_blockNumber")
        channel.call("eth_blockNumber")
        assert [r["id"] for r in node.requests] == [1, 2]

    def test_single_exchange_per_call(self) -> None:
        def fail(params):
            raise NodeFault(-32000, "boom")

        node = FakeNode({"eth_gasPrice": fail})
        channel = RpcChannel(URL, node)
        with pytest.raises(RpcError):
            channel.call("eth_gasPrice")
        assert len(node.requests) == 1


class TestTransportErrors:
    def test_non_success_status(self) -> None:
        channel = RpcChannel(URL, _fetch_returning(httpx.Response(503, text="upstream down")))
        with pytest.raises(TransportError) as exc_info:
            channel.call("eth_chainId")
        err = exc_info.value
        assert err.status_code == 503
        assert err.status_text == "Service Unavailable"
        assert err.body == "upstream down"
        assert err.request["method"] == "eth_chainId"
        assert "503: Service Unavailable" in str(err)

    def test_connection_failure_is_transport_error(self) -> None:
        def refuse(url, body, headers):
            raise httpx.ConnectError("Connection refused")

        channel = RpcChannel(URL, refuse)
        with pytest.raises(TransportError) as exc_info:
            channel.call("eth_chainId")
        err = exc_info.value
        assert err.status_code == 0
        assert err.status_text == "ConnectError"
        assert "Connection refused" in err.body
        assert isinstance(err.__cause__, httpx.ConnectError)

    def test_timeout_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        fetch = HttpxFetch(httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError) as exc_info:
            RpcChannel(URL, fetch).call("eth_chainId")
        assert exc_info.value.status_text == "ReadTimeout"


class TestProtocolErrors:
    @pytest.mark.parametrize(
        "body",
        [
            [1, 2, 3],
            {"id": 1, "result": "0x1"},
            {"jsonrpc": "1.0", "id": 1, "result": "0x1"},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "result": "0x1", "error": {"code": 1, "message": "x"}},
            {"jsonrpc": "2.0", "id": 1, "error": "bad"},
            {"jsonrpc": "2.0", "id": 1, "error": {"code": "x", "message": "m"}},
            {"jsonrpc": "2.0", "id": 1, "error": {"code": 1}},
            {"jsonrpc": "2.0", "id": [1], "result": "0x1"},
        ],
    )
    def test_invalid_envelopes(self, body) -> None:
        channel = RpcChannel(URL, _fetch_returning(httpx.Response(200, json=body)))
        with pytest.raises(ProtocolError):
            channel.call("eth_chainId")

    def test_non_json_body(self) -> None:
        channel = RpcChannel(URL, _fetch_returning(httpx.Response(200, text="<html>")))
        with pytest.raises(ProtocolError) as exc_info:
            channel.call("eth_chainId")
        assert exc_info.value.request["method"] == "eth_chainId"

    def test_null_result_is_valid(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "result": None}
        channel = RpcChannel(URL, _fetch_returning(httpx.Response(200, json=body)))
        assert channel.call("eth_getTransactionReceipt", ["0x00"]) is None


class TestRpcErrors:
    def test_error_carries_context(self) -> None:
        def fail(params):
            raise NodeFault(-32000, "execution reverted", "revert: not owner")

        node = FakeNode({"eth_call": fail})
        channel = RpcChannel(URL, node)
        with pytest.raises(RpcError) as exc_info:
            channel.call("eth_call", [{"to": "0x00"}, "latest"])

        err = exc_info.value
        assert str(err) == "Contract Error: not owner"
        assert err.raw_message == "execution reverted"
        assert err.code == -32000
        assert err.data == "revert: not owner"
        assert err.request["method"] == "eth_call"
        assert err.request["params"] == [{"to": "0x00"}, "latest"]

    def test_malformed_revert_payload_keeps_raw_message(self) -> None:
        data = "0x08c379a0" + (32).to_bytes(32, "big").hex() + (2**255).to_bytes(32, "big").hex()

        def fail(params):
            raise NodeFault(3, "execution reverted", data)

        channel = RpcChannel(URL, FakeNode({"eth_call": fail}))
        with pytest.raises(RpcError) as exc_info:
            channel.call("eth_call", [{"to": "0x00"}, "latest"])
        assert str(exc_info.value) == "execution reverted"
        assert exc_info.value.data == data

    def test_plain_error_message_kept(self) -> None:
        node = FakeNode()
        channel = RpcChannel(URL, node)
        with pytest.raises(RpcError) as exc_info:
            channel.call("eth_unknown")
        assert exc_info.value.code == -32601
        assert "does not exist" in str(exc_info.value)


class TestMakeRequest:
    def test_typed_caller(self) -> None:
        node = FakeNode({"eth_getBalance": lambda params: hex(len(params) * 1000)})
        channel = RpcChannel(URL, node)
        get_balance = make_request(
            channel, "eth_getBalance", lambda addr, block="latest": [addr, block], from_quantity
        )

        assert get_balance("0x" + "00" * 20) == 2000
        assert node.calls("eth_getBalance") == [["0x" + "00" * 20, "latest"]]

    def test_receipt_without_block_is_none(self) -> None:
        partial = {"transactionHash": "0x01", "blockNumber": "0x5", "blockHash": None, "status": "0x1"}
        node = FakeNode({"eth_getTransactionReceipt": partial})
        methods = EthMethods(RpcChannel(URL, node))
        assert methods.get_transaction_receipt("0x01") is None

    def test_send_transaction_passes_call_object(self) -> None:
        node = FakeNode({"eth_sendTransaction": "0x" + "ab" * 32})
        methods = EthMethods(RpcChannel(URL, node))
        request = CallRequest(
            from_="0x" + "11" * 20, to="0x" + "22" * 20, value=5, data=b"", gas_limit=21000, gas_price=1
        )

        assert methods.send_transaction(request) == "0x" + "ab" * 32
        ((params,),) = node.calls("eth_sendTransaction")
        assert params["value"] == "0x5"
        assert params["gas"] == hex(21000)

    def test_coinbase_checksummed(self) -> None:
        node = FakeNode({"eth_coinbase": "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"})
        methods = EthMethods(RpcChannel(URL, node))
        assert methods.coinbase() == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional

import httpx
import pytest

# EIP-155 reference vector (chain id 1).
EIP155_KEY = "0x" + "46" * 32
EIP155_TO = "0x" + "35" * 20
EIP155_SIGNING_PAYLOAD = (
    "ec098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a764000080018080"
)
EIP155_SIGNED = (
    "f86c098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c71"
    "ff63e1590620aa636276a067cbe9d8997f761aecb703304b3800ccf555c9f3dc6421"
    "4b297fb1966a3b6d83"
)

SENDER = "0x" + "11" * 20
TX_HASH = "0x" + "ab" * 32
BLOCK_HASH = "0x" + "cd" * 32


class NodeFault(Exception):
    """Raised by a handler to produce a JSON-RPC error envelope."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class FakeNode:
    """
    In-memory stand-in for the ``fetch`` transport.

    Handlers are keyed by RPC method and receive the params list. A
    handler may be a plain value, a callable, or a list of values served
    in order (the last one repeats).
    """

    def __init__(self, handlers: Optional[Mapping[str, Any]] = None) -> None:
        self.handlers: dict[str, Any] = dict(handlers or {})
        self.requests: list[dict[str, Any]] = []

    def on(self, method: str, handler: Any) -> "FakeNode":
        self.handlers[method] = handler
        return self

    def calls(self, method: str) -> list[list[Any]]:
        return [r["params"] for r in self.requests if r["method"] == method]

    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def _resolve(self, method: str, params: list[Any]) -> Any:
        if method not in self.handlers:
            raise NodeFault(-32601, f"the method {method} does not exist/is not available")
        handler = self.handlers[method]
        if callable(handler):
            return handler(params)
        if isinstance(handler, list):
            return handler.pop(0) if len(handler) > 1 else handler[0]
        return handler

    def __call__(self, url: str, body: str, headers: Mapping[str, str]) -> httpx.Response:
        request = json.loads(body)
        self.requests.append(request)
        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": request["id"]}
        try:
            envelope["result"] = self._resolve(request["method"], request["params"])
        except NodeFault as fault:
            error: dict[str, Any] = {"code": fault.code, "message": fault.message}
            if fault.data is not None:
                error["data"] = fault.data
            envelope["error"] = error
        return httpx.Response(200, json=envelope)


def mined_receipt(**overrides: Any) -> dict[str, Any]:
    receipt = {
        "transactionHash": TX_HASH,
        "blockNumber": "0x5",
        "blockHash": BLOCK_HASH,
        "status": "0x1",
        "contractAddress": None,
        "gasUsed": "0x5208",
        "cumulativeGasUsed": "0x5208",
        "logs": [],
    }
    receipt.update(overrides)
    return receipt


@pytest.fixture()
def node() -> FakeNode:
    """Fake node answering the calls a plain transfer needs."""
    return FakeNode(
        {
            "eth_coinbase": SENDER,
            "eth_gasPrice": "0x4a817c800",
            "eth_estimateGas": "0x5208",
            "eth_getTransactionCount": "0x9",
            "eth_chainId": "0x1",
            "eth_sendRawTransaction": TX_HASH,
            "eth_getTransactionReceipt": mined_receipt(),
        }
    )


@pytest.fixture()
def no_sleep() -> Callable[[float], None]:
    def sleep(seconds: float) -> None:
        sleep.calls.append(seconds)

    sleep.calls = []
    return sleep

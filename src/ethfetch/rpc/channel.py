"""
JSON-RPC channel.

One request in, one typed result out. The HTTP exchange is performed by
an injectable ``fetch`` callable so tests (or alternative HTTP stacks)
can replace httpx without touching envelope handling.

No retries happen here; retry policy belongs to the caller.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional

import httpx

from ..config import get_rpc_timeout, get_rpc_url
from ..errors import ProtocolError, RpcError, TransportError
from .revert import normalize_error

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

Fetch = Callable[[str, str, Mapping[str, str]], httpx.Response]


class HttpxFetch:
    """
    Default transport: a single HTTP POST through httpx.

    Args:
        client: Pre-built httpx.Client (e.g. one using httpx.MockTransport).
                If None, a client is created with the configured timeout.
        timeout: Request timeout in seconds (ignored when client is given).
    """

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None) -> None:
        self._client = client or httpx.Client(
            timeout=timeout if timeout is not None else get_rpc_timeout()
        )

    def __call__(self, url: str, body: str, headers: Mapping[str, str]) -> httpx.Response:
        return self._client.post(url, content=body.encode("utf-8"), headers=dict(headers))

    def close(self) -> None:
        self._client.close()


def validate_envelope(body: Any, request: dict[str, Any]) -> None:
    """
    Check that a decoded body is a JSON-RPC 2.0 response envelope.

    Raises:
        ProtocolError: If the shape is wrong
    """
    if not isinstance(body, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(body).__name__}", request)
    if body.get("jsonrpc") != "2.0":
        raise ProtocolError(f"Expected jsonrpc '2.0', got {body.get('jsonrpc')!r}", request)
    if not isinstance(body.get("id"), (str, int, type(None))):
        raise ProtocolError(f"Invalid response id: {body.get('id')!r}", request)

    has_result = "result" in body
    has_error = "error" in body
    if has_result == has_error:
        raise ProtocolError("Response must contain exactly one of 'result' or 'error'", request)

    if has_error:
        error = body["error"]
        if not isinstance(error, dict):
            raise ProtocolError("'error' must be an object", request)
        if not isinstance(error.get("code"), int) or isinstance(error.get("code"), bool):
            raise ProtocolError(f"Invalid error code: {error.get('code')!r}", request)
        if not isinstance(error.get("message"), str):
            raise ProtocolError(f"Invalid error message: {error.get('message')!r}", request)


class RpcChannel:
    """
    JSON-RPC 2.0 channel over HTTP POST.

    Args:
        url: Node endpoint (default: configured ETH_RPC_URL)
        fetch: Transport callable (default: HttpxFetch)
    """

    def __init__(self, url: Optional[str] = None, fetch: Optional[Fetch] = None) -> None:
        self.url = url or get_rpc_url()
        self._fetch = fetch or HttpxFetch()
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def build_request(self, method: str, params: list[Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": self._next_id(),
            "method": method,
            "params": params,
        }

    def call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_chainId")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            TransportError: Non-success HTTP status, or no response at all
                (status_code 0, e.g. connection refused or timeout)
            ProtocolError: Body is not a valid JSON-RPC envelope
            RpcError: Node returned a JSON-RPC error object
        """
        request = self.build_request(method, params or [])
        return self.send(request)

    def send(self, request: dict[str, Any]) -> Any:
        body = json.dumps(request)

        started = time.monotonic()
        try:
            response = self._fetch(self.url, body, JSON_HEADERS)
        except httpx.HTTPError as exc:
            logger.debug("rpc %s id=%s transport failure: %r", request["method"], request["id"], exc)
            raise TransportError(0, type(exc).__name__, str(exc), request) from exc
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(
            "rpc %s id=%s status=%s %.1fms",
            request["method"], request["id"], response.status_code, elapsed_ms,
        )

        if not response.is_success:
            raise TransportError(response.status_code, response.reason_phrase, response.text, request)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(f"Response body is not valid JSON: {exc}", request) from exc

        validate_envelope(payload, request)

        if "error" in payload:
            error = payload["error"]
            message = normalize_error(error)
            logger.debug("rpc %s id=%s error %s: %s", request["method"], request["id"], error["code"], message)
            raise RpcError(
                message,
                code=error["code"],
                data=error.get("data"),
                request=request,
                raw_message=error["message"],
            )

        return payload["result"]

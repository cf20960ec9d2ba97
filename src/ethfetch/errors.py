"""
Error taxonomy for ethfetch.

Every error raised by the client derives from ``EthFetchError`` and
carries an ``exit_code`` used by the CLI.
"""

from __future__ import annotations

from typing import Any, Optional


class EthFetchError(RuntimeError):
    exit_code: int = 1


class TransportError(EthFetchError):
    """
    The HTTP exchange did not return a success status.

    ``status_code`` is 0 when no response arrived (connection refused,
    timeout); ``status_text`` then names the httpx exception.
    """

    exit_code = 3

    def __init__(
        self,
        status_code: int,
        status_text: str,
        body: str = "",
        request: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"{status_code}: {status_text}\n{body}")
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        self.request = request


class ProtocolError(EthFetchError):
    """The response body is not a valid JSON-RPC 2.0 envelope."""

    exit_code = 4

    def __init__(self, message: str, request: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.request = request


class RpcError(EthFetchError):
    """
    A well-formed JSON-RPC error response.

    ``str(error)`` is the normalized message (a decoded revert reason when
    one is available); ``raw_message`` is what the node actually sent.
    """

    exit_code = 5

    def __init__(
        self,
        message: str,
        code: int,
        data: Any = None,
        request: Optional[dict[str, Any]] = None,
        raw_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data
        self.request = request
        self.raw_message = raw_message if raw_message is not None else message


class TransactionFailure(EthFetchError):
    exit_code = 6

    def __init__(self, message: str, receipt: Any = None) -> None:
        super().__init__(message)
        self.receipt = receipt


class MiningFailure(TransactionFailure):
    """Transaction was mined but its status is false (reverted)."""


class DeploymentFailure(TransactionFailure):
    """Contract creation was mined without producing a contract address."""

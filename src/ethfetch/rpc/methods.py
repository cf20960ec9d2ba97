"""
Typed RPC method bindings.

``make_request`` pairs a method name with a params encoder and a result
decoder and returns a plain callable. ``EthMethods`` binds the eth_*
methods the transaction pipeline and CLI rely on.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from ..tx.models import TransactionReceipt
from ..utils import from_data, from_quantity, to_checksum_address, to_data
from .channel import RpcChannel

T = TypeVar("T")


def _no_params() -> list[Any]:
    return []


def _identity(value: Any) -> Any:
    return value


def _optional_address(value: Any) -> Optional[str]:
    if not value:
        return None
    return to_checksum_address(value)


def make_request(
    channel: RpcChannel,
    method: str,
    encode_params: Callable[..., list[Any]],
    decode_result: Callable[[Any], T],
) -> Callable[..., T]:
    """
    Build a typed caller for one JSON-RPC method.

    Args:
        channel: Channel used for the exchange
        method: RPC method name
        encode_params: Maps call arguments to the JSON params list
        decode_result: Maps the JSON result to the return type

    Returns:
        Callable taking the same arguments as ``encode_params``
    """

    def request(*args: Any, **kwargs: Any) -> T:
        return decode_result(channel.call(method, encode_params(*args, **kwargs)))

    request.__name__ = method
    return request


def _decode_receipt(raw: Any) -> Optional[TransactionReceipt]:
    # Some nodes hand back a receipt before the transaction is in a block.
    if raw is None or raw.get("blockNumber") is None or raw.get("blockHash") is None:
        return None
    return TransactionReceipt.from_rpc(raw)


def _decode_signed(raw: Any) -> dict[str, Any]:
    return {"raw": from_data(raw["raw"]), "tx": raw.get("tx")}


class EthMethods:
    """eth_* methods bound to a channel."""

    def __init__(self, channel: RpcChannel) -> None:
        self.channel = channel

        self.coinbase = make_request(channel, "eth_coinbase", _no_params, _optional_address)
        self.accounts = make_request(
            channel, "eth_accounts", _no_params, lambda r: [to_checksum_address(a) for a in r]
        )
        self.gas_price = make_request(channel, "eth_gasPrice", _no_params, from_quantity)
        self.chain_id = make_request(channel, "eth_chainId", _no_params, from_quantity)
        self.block_number = make_request(channel, "eth_blockNumber", _no_params, from_quantity)
        self.get_balance = make_request(
            channel, "eth_getBalance",
            lambda address, block="latest": [address, block],
            from_quantity,
        )
        self.get_code = make_request(
            channel, "eth_getCode",
            lambda address, block="latest": [address, block],
            from_data,
        )
        self.get_transaction_count = make_request(
            channel, "eth_getTransactionCount",
            lambda address, block="pending": [address, block],
            from_quantity,
        )
        self.estimate_gas = make_request(
            channel, "eth_estimateGas",
            lambda tx: [tx.to_rpc()],
            from_quantity,
        )
        self.call = make_request(
            channel, "eth_call",
            lambda tx, block="latest": [tx.to_rpc(), block],
            from_data,
        )
        self.send_transaction = make_request(
            channel, "eth_sendTransaction",
            lambda tx: [tx.to_rpc()],
            _identity,
        )
        self.send_raw_transaction = make_request(
            channel, "eth_sendRawTransaction",
            lambda raw: [to_data(raw)],
            _identity,
        )
        self.sign_transaction = make_request(
            channel, "eth_signTransaction",
            lambda tx: [tx.to_rpc()],
            _decode_signed,
        )
        self.sign = make_request(
            channel, "eth_sign",
            lambda address, message: [address, to_data(message)],
            from_data,
        )
        self.get_transaction_receipt = make_request(
            channel, "eth_getTransactionReceipt",
            lambda tx_hash: [tx_hash],
            _decode_receipt,
        )

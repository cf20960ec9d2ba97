"""
Transaction data model.

Addresses are 0x-prefixed hex strings, payloads are raw bytes and all
numeric fields are Python ints. Wire conversion (hex quantities, hex
data) happens at the RPC boundary, never in these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..utils import from_data, from_quantity, optional_quantity, to_data, to_quantity

UINT256_MAX = 2**256 - 1


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class TransactionRequest:
    """
    Partially specified transaction, as supplied by a caller.

    ``to`` is required; None means contract creation. Every other field
    left as None is filled in by the assembler.
    """
    to: Optional[str]
    from_: Optional[str] = None
    value: Optional[int] = None
    data: Optional[bytes] = None
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None
    nonce: Optional[int] = None


@dataclass(frozen=True)
class CallRequest:
    """Fully resolved off-chain call / gas-estimation object."""
    from_: str
    to: Optional[str]
    value: int
    data: bytes
    gas_limit: int
    gas_price: int

    def to_rpc(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "from": self.from_,
            "value": to_quantity(self.value),
            "data": to_data(self.data),
            "gas": to_quantity(self.gas_limit),
            "gasPrice": to_quantity(self.gas_price),
        }
        if self.to is not None:
            result["to"] = self.to
        return result


@dataclass(frozen=True)
class UnsignedTransaction:
    from_: str
    to: Optional[str]
    value: int
    data: bytes
    gas_limit: int
    gas_price: int
    nonce: int
    chain_id: int

    def __post_init__(self) -> None:
        for name in ("value", "gas_limit", "gas_price", "nonce"):
            _require_non_negative(name, getattr(self, name))
        if self.chain_id <= 0:
            raise ValueError(f"chain_id must be positive, got {self.chain_id}")

    @property
    def is_contract_creation(self) -> bool:
        return self.to is None

    def to_rpc(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "from": self.from_,
            "value": to_quantity(self.value),
            "data": to_data(self.data),
            "gas": to_quantity(self.gas_limit),
            "gasPrice": to_quantity(self.gas_price),
            "nonce": to_quantity(self.nonce),
            "chainId": to_quantity(self.chain_id),
        }
        if self.to is not None:
            result["to"] = self.to
        return result


@dataclass(frozen=True)
class Signature:
    r: int
    s: int
    y_parity: int

    def __post_init__(self) -> None:
        if self.y_parity not in (0, 1):
            raise ValueError(f"y_parity must be 0 or 1, got {self.y_parity}")
        for name in ("r", "s"):
            value = getattr(self, name)
            if not 0 <= value <= UINT256_MAX:
                raise ValueError(f"{name} is not a 256-bit unsigned integer")


@dataclass(frozen=True)
class SignedTransaction(UnsignedTransaction):
    r: int = 0
    s: int = 0
    v: int = 0

    @classmethod
    def from_unsigned(cls, tx: UnsignedTransaction, r: int, s: int, v: int) -> "SignedTransaction":
        return cls(
            from_=tx.from_,
            to=tx.to,
            value=tx.value,
            data=tx.data,
            gas_limit=tx.gas_limit,
            gas_price=tx.gas_price,
            nonce=tx.nonce,
            chain_id=tx.chain_id,
            r=r,
            s=s,
            v=v,
        )


@dataclass(frozen=True)
class TransactionReceipt:
    transaction_hash: str
    status: bool
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    contract_address: Optional[str] = None
    gas_used: Optional[int] = None
    cumulative_gas_used: Optional[int] = None
    logs: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_mined(self) -> bool:
        return self.block_number is not None and self.block_hash is not None

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> "TransactionReceipt":
        status = raw.get("status")
        return cls(
            transaction_hash=raw.get("transactionHash", ""),
            status=bool(from_quantity(status)) if status is not None else False,
            block_number=optional_quantity(raw.get("blockNumber")),
            block_hash=raw.get("blockHash"),
            contract_address=raw.get("contractAddress"),
            gas_used=optional_quantity(raw.get("gasUsed")),
            cumulative_gas_used=optional_quantity(raw.get("cumulativeGasUsed")),
            logs=list(raw.get("logs") or []),
        )


def call_data(value: Any) -> bytes:
    """Accept bytes or hex string payloads from callers."""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return from_data(value)

from __future__ import annotations

from typing import Any, Optional

from eth_hash.auto import keccak

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
UINT256_LIMIT = 2**256


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def strip_leading_zeros(data: bytes) -> bytes:
    index = 0
    while index < len(data) and data[index] == 0:
        index += 1
    return bytes(data[index:])


def int_to_big_endian(value: int) -> bytes:
    """Encode a uint256 as big-endian bytes with leading zeros stripped (0 -> b"")."""
    if value < 0:
        raise ValueError(f"Cannot encode negative integer: {value}")
    if value >= UINT256_LIMIT:
        raise ValueError(f"Integer does not fit in 256 bits: {value}")
    return strip_leading_zeros(value.to_bytes(32, "big"))


def to_quantity(value: int) -> str:
    """Encode an integer as a JSON-RPC hex quantity (no leading zeros)."""
    if value < 0:
        raise ValueError(f"Quantity must be non-negative: {value}")
    return hex(value)


def from_quantity(value: Any) -> int:
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected hex quantity, got {value!r}")
    return int(value, 16)


def optional_quantity(value: Any) -> Optional[int]:
    return None if value is None else from_quantity(value)


def to_data(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def from_data(value: str) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"Expected hex data, got {value!r}")
    raw = value[2:] if value[:2] in ("0x", "0X") else value
    return bytes.fromhex(raw)


def address_to_bytes(address: str) -> bytes:
    raw = from_data(address)
    if len(raw) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(raw)}: {address}")
    return raw


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address_to_bytes(address).hex()
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result

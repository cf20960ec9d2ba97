"""
Revert reason decoding for JSON-RPC error objects.

Nodes report contract reverts in ``error.data`` using one of two
conventions:

- ABI-encoded ``Error(string)``: selector ``0x08c379a0`` followed by the
  encoded string. Some nodes put it behind a ``"Reverted "`` prefix.
- Plain text: ``"revert: <reason>"``.

Anything else (or anything that fails to decode) leaves the node's
message untouched.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError

ERROR_STRING_SELECTOR = "08c379a0"
CONTRACT_ERROR_PREFIX = "Contract Error: "

_SELECTOR_PREFIXES = (
    "Reverted 0x" + ERROR_STRING_SELECTOR,
    "0x" + ERROR_STRING_SELECTOR,
    ERROR_STRING_SELECTOR,
)
_TEXT_REVERT_PREFIX = "revert: "


def decode_error_string(payload_hex: str) -> Optional[str]:
    """
    Decode the ABI ``(string)`` payload that follows the Error selector.

    Returns None when the payload is not valid hex or not a valid
    ABI-encoded string. Oversized offset or length words from a hostile
    node surface as OverflowError inside eth-abi and also yield None.
    """
    try:
        payload = bytes.fromhex(payload_hex)
        (reason,) = decode(["string"], payload)
    except (DecodingError, ValueError, OverflowError):
        return None
    return reason


def normalize_error_message(message: str, data: Any) -> str:
    if not isinstance(data, str):
        return message

    for prefix in _SELECTOR_PREFIXES:
        if data.startswith(prefix):
            reason = decode_error_string(data[len(prefix):])
            if reason is None:
                return message
            return CONTRACT_ERROR_PREFIX + reason

    if data.startswith(_TEXT_REVERT_PREFIX):
        return CONTRACT_ERROR_PREFIX + data[len(_TEXT_REVERT_PREFIX):]

    return message


def normalize_error(error: Mapping[str, Any]) -> str:
    """Normalize a JSON-RPC ``error`` object to a caller-facing message."""
    return normalize_error_message(error.get("message", ""), error.get("data"))

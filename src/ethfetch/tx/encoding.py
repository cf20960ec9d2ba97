"""
Canonical legacy transaction encoding (EIP-155).

Field order is ``nonce, gasPrice, gasLimit, to, value, data`` followed by
either ``chainId, 0, 0`` (unsigned signing payload) or ``v, r, s``
(signed broadcast payload). Integers are minimal big-endian byte strings
with no leading zeros; ``to`` is the 20 address bytes, or empty for
contract creation. The list is serialized with RLP.
"""

from __future__ import annotations

import rlp

from ..utils import address_to_bytes, int_to_big_endian, keccak256
from .models import SignedTransaction, UnsignedTransaction


def transaction_fields(tx: UnsignedTransaction) -> list[bytes]:
    fields = [
        int_to_big_endian(tx.nonce),
        int_to_big_endian(tx.gas_price),
        int_to_big_endian(tx.gas_limit),
        address_to_bytes(tx.to) if tx.to is not None else b"",
        int_to_big_endian(tx.value),
        bytes(tx.data),
    ]
    if isinstance(tx, SignedTransaction):
        fields += [
            int_to_big_endian(tx.v),
            int_to_big_endian(tx.r),
            int_to_big_endian(tx.s),
        ]
    else:
        fields += [int_to_big_endian(tx.chain_id), b"", b""]
    return fields


def encode_transaction(tx: UnsignedTransaction) -> bytes:
    """RLP-encode a transaction in its unsigned or signed layout."""
    return rlp.encode(transaction_fields(tx))


def signing_hash(tx: UnsignedTransaction) -> bytes:
    if isinstance(tx, SignedTransaction):
        raise TypeError("signing_hash expects an unsigned transaction")
    return keccak256(encode_transaction(tx))


def transaction_hash(raw: bytes) -> str:
    return "0x" + keccak256(raw).hex()

"""
Signer strategies.

``REMOTE`` lets the node sign (eth_signTransaction) and only relays the
raw bytes it returns. ``LOCAL`` encodes the unsigned transaction, hands
the exact bytes to a caller-supplied signature function and builds the
EIP-155 signed encoding itself.

The strategy is picked once, when the client is constructed.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional, Union

from ..rpc.methods import EthMethods
from .encoding import encode_transaction
from .models import Signature, SignedTransaction, UnsignedTransaction

logger = logging.getLogger(__name__)

SignatureFn = Callable[[bytes], Signature]

EIP155_OFFSET = 35
MESSAGE_V_OFFSET = 27
MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


class SignerKind(enum.Enum):
    REMOTE = "remote"
    LOCAL = "local"


def derive_v(y_parity: int, chain_id: int) -> int:
    """EIP-155 ``v``: recovery parity bound to the chain id."""
    return (1 if y_parity else 0) + EIP155_OFFSET + 2 * chain_id


class RemoteSigner:
    kind = SignerKind.REMOTE

    def __init__(self, methods: EthMethods) -> None:
        self.methods = methods

    def sign(self, tx: UnsignedTransaction) -> bytes:
        signed = self.methods.sign_transaction(tx)
        return signed["raw"]


class LocalSigner:
    kind = SignerKind.LOCAL

    def __init__(self, signature_fn: SignatureFn) -> None:
        self.signature_fn = signature_fn

    def sign(self, tx: UnsignedTransaction) -> bytes:
        payload = encode_transaction(tx)
        signature = self.signature_fn(payload)
        signed = SignedTransaction.from_unsigned(
            tx,
            r=signature.r,
            s=signature.s,
            v=derive_v(signature.y_parity, tx.chain_id),
        )
        return encode_transaction(signed)


Signer = Union[RemoteSigner, LocalSigner]


def make_signer(methods: EthMethods, signature_fn: Optional[SignatureFn] = None) -> Signer:
    if signature_fn is None:
        return RemoteSigner(methods)
    return LocalSigner(signature_fn)


def prefix_message(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        message = message.encode("utf-8")
    return MESSAGE_PREFIX + str(len(message)).encode("ascii") + message


def sign_message(message: Union[str, bytes], signature_fn: SignatureFn) -> bytes:
    """
    Sign a message using the personal_sign prefix.

    Args:
        message: The message to sign (str is UTF-8 encoded)
        signature_fn: Signature callback receiving the prefixed bytes

    Returns:
        Signature as bytes (65 bytes: r + s + v)
    """
    signature = signature_fn(prefix_message(message))
    return (
        signature.r.to_bytes(32, "big")
        + signature.s.to_bytes(32, "big")
        + bytes([signature.y_parity + MESSAGE_V_OFFSET])
    )

"""
ECDSA / secp256k1 local signing.

Turns a private key into the signature callback used by the local
signer strategy. Keys are only read (see ``config.load_private_key``),
never generated or persisted here.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import load_private_key
from .tx.models import Signature
from .tx.signer import SignatureFn
from .utils import keccak256


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from the environment / .env.

    Returns:
        LocalAccount instance for signing
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    """0x-prefixed checksummed address for a private key."""
    return get_account(private_key).address


def private_key_signer(private_key: Optional[str] = None) -> SignatureFn:
    """
    Build a signature callback backed by a local key.

    The callback hashes the payload with Keccak-256 and signs the digest;
    eth-account reports ``v`` as 27/28, which maps to y-parity 0/1.
    """
    account = get_account(private_key)

    def sign(payload: bytes) -> Signature:
        signed = account.unsafe_sign_hash(keccak256(payload))
        return Signature(r=signed.r, s=signed.s, y_parity=signed.v - 27)

    return sign

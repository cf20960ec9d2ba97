__all__ = [
    # Client
    "EthClient",
    # RPC
    "RpcChannel",
    "HttpxFetch",
    "EthMethods",
    "make_request",
    "normalize_error_message",
    # Models
    "TransactionRequest",
    "UnsignedTransaction",
    "SignedTransaction",
    "Signature",
    "TransactionReceipt",
    # Encoding
    "encode_transaction",
    "transaction_fields",
    "strip_leading_zeros",
    # Signing
    "SignerKind",
    "derive_v",
    "sign_message",
    "private_key_signer",
    # Confirmation
    "TxState",
    "wait_for_receipt",
    # Errors
    "EthFetchError",
    "TransportError",
    "ProtocolError",
    "RpcError",
    "TransactionFailure",
    "MiningFailure",
    "DeploymentFailure",
]

from .client import EthClient
from .errors import (
    DeploymentFailure,
    EthFetchError,
    MiningFailure,
    ProtocolError,
    RpcError,
    TransactionFailure,
    TransportError,
)
from .keys import private_key_signer
from .rpc.channel import HttpxFetch, RpcChannel
from .rpc.methods import EthMethods, make_request
from .rpc.revert import normalize_error_message
from .tx.confirm import TxState, wait_for_receipt
from .tx.encoding import encode_transaction, transaction_fields
from .tx.models import (
    Signature,
    SignedTransaction,
    TransactionReceipt,
    TransactionRequest,
    UnsignedTransaction,
)
from .tx.signer import SignerKind, derive_v, sign_message
from .utils import strip_leading_zeros

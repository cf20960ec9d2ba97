"""
Transaction assembly - fill unset fields from providers or the node.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..rpc.methods import EthMethods
from ..utils import ZERO_ADDRESS, to_checksum_address
from .models import CallRequest, TransactionRequest, UnsignedTransaction

logger = logging.getLogger(__name__)

# Upper bound used only for the estimate call; never broadcast.
PROVISIONAL_GAS_LIMIT = 1_000_000_000

AddressProvider = Callable[[], Optional[str]]
GasPriceProvider = Callable[[], int]
GasEstimator = Callable[[CallRequest], int]
GasLimitProvider = Callable[[CallRequest, GasEstimator], int]


def default_gas_limit_provider(tx: CallRequest, estimator: GasEstimator) -> int:
    return estimator(tx)


class ChainIdCache:
    """
    Chain id resolved at most once per client.

    A fixed value short-circuits the lookup. Otherwise the first caller
    queries the node while concurrent callers wait for that result.
    Failed lookups are not cached.
    """

    def __init__(self, resolve: Callable[[], int], fixed: Optional[int] = None) -> None:
        self._resolve = resolve
        self._value = fixed
        self._lock = threading.Lock()

    def get(self) -> int:
        if self._value is not None:
            return self._value
        with self._lock:
            if self._value is None:
                self._value = self._resolve()
                logger.debug("resolved chain id %d", self._value)
            return self._value


class TransactionAssembler:
    """
    Resolves a TransactionRequest into a complete UnsignedTransaction.

    Args:
        methods: Bound eth_* methods
        chain_id: Chain id cache shared for the client's lifetime
        address_provider: Sender address source (default: eth_coinbase)
        gas_price_provider: Gas price source (default: eth_gasPrice)
        gas_limit_provider: Gas limit source given the provisional call
            and an estimator (default: eth_estimateGas)
    """

    def __init__(
        self,
        methods: EthMethods,
        chain_id: ChainIdCache,
        address_provider: Optional[AddressProvider] = None,
        gas_price_provider: Optional[GasPriceProvider] = None,
        gas_limit_provider: Optional[GasLimitProvider] = None,
    ) -> None:
        self.methods = methods
        self.chain_id = chain_id
        self.address_provider = address_provider or methods.coinbase
        self.gas_price_provider = gas_price_provider or methods.gas_price
        self.gas_limit_provider = gas_limit_provider or default_gas_limit_provider

    def sender(self, from_: Optional[str]) -> str:
        address = from_ if from_ is not None else self.address_provider()
        if not address:
            return ZERO_ADDRESS
        return to_checksum_address(address)

    def call_request(self, request: TransactionRequest) -> CallRequest:
        """Build the provisional transaction used for eth_call / estimation."""
        return CallRequest(
            from_=self.sender(request.from_),
            to=to_checksum_address(request.to) if request.to is not None else None,
            value=request.value if request.value is not None else 0,
            data=request.data if request.data is not None else b"",
            gas_limit=request.gas_limit if request.gas_limit is not None else PROVISIONAL_GAS_LIMIT,
            gas_price=request.gas_price if request.gas_price is not None else self.gas_price_provider(),
        )

    def assemble(self, request: TransactionRequest) -> UnsignedTransaction:
        candidate = self.call_request(request)

        if request.gas_limit is not None:
            gas_limit = request.gas_limit
        else:
            gas_limit = self.gas_limit_provider(candidate, self.methods.estimate_gas)

        if request.nonce is not None:
            nonce = request.nonce
        else:
            nonce = self.methods.get_transaction_count(candidate.from_, "pending")

        tx = UnsignedTransaction(
            from_=candidate.from_,
            to=candidate.to,
            value=candidate.value,
            data=candidate.data,
            gas_limit=gas_limit,
            gas_price=candidate.gas_price,
            nonce=nonce,
            chain_id=self.chain_id.get(),
        )
        logger.debug(
            "assembled tx from=%s to=%s nonce=%d gas=%d gasPrice=%d chainId=%d",
            tx.from_, tx.to, tx.nonce, tx.gas_limit, tx.gas_price, tx.chain_id,
        )
        return tx

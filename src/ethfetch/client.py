"""
EthClient - JSON-RPC client facade.

Wires the channel, method bindings, assembler, signer strategy and
confirmation pipeline together and exposes the operations applications
use: sending ETH, deploying contracts, on-chain and off-chain contract
calls, and message signing.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Union

from .config import get_poll_interval
from .rpc.channel import Fetch, RpcChannel
from .rpc.methods import EthMethods
from .tx.assembler import (
    AddressProvider,
    ChainIdCache,
    GasLimitProvider,
    GasPriceProvider,
    TransactionAssembler,
)
from .tx.confirm import TransactionPipeline
from .tx.models import TransactionReceipt, TransactionRequest, call_data
from .tx.signer import SignatureFn, SignerKind, make_signer, sign_message

logger = logging.getLogger(__name__)


class EthClient:
    """
    Ethereum JSON-RPC client.

    Args:
        url: Node endpoint (default: ETH_RPC_URL)
        fetch: Transport callable (default: httpx-backed)
        gas_price_provider: Overrides eth_gasPrice
        address_provider: Overrides eth_coinbase as the sender source
        signature_fn: Local signature callback; selects local signing.
                      Without it the node signs (eth_signTransaction).
        chain_id: Fixed chain id; otherwise queried once and cached
        gas_limit_provider: Overrides plain eth_estimateGas
        poll_interval: Receipt poll delay in seconds
        sleep: Delay function used while polling
    """

    def __init__(
        self,
        url: Optional[str] = None,
        fetch: Optional[Fetch] = None,
        gas_price_provider: Optional[GasPriceProvider] = None,
        address_provider: Optional[AddressProvider] = None,
        signature_fn: Optional[SignatureFn] = None,
        chain_id: Optional[int] = None,
        gas_limit_provider: Optional[GasLimitProvider] = None,
        poll_interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.channel = RpcChannel(url, fetch)
        self.methods = EthMethods(self.channel)
        self._chain_id = ChainIdCache(self.methods.chain_id, chain_id)
        self.assembler = TransactionAssembler(
            self.methods,
            self._chain_id,
            address_provider=address_provider,
            gas_price_provider=gas_price_provider,
            gas_limit_provider=gas_limit_provider,
        )
        self.signature_fn = signature_fn
        self.signer = make_signer(self.methods, signature_fn)
        self.poll_interval = poll_interval if poll_interval is not None else get_poll_interval()
        self.sleep = sleep

    @property
    def signer_kind(self) -> SignerKind:
        return self.signer.kind

    def get_chain_id(self) -> int:
        return self._chain_id.get()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def execute_transaction(self, request: TransactionRequest) -> TransactionReceipt:
        pipeline = TransactionPipeline(
            self.methods, self.assembler, self.signer, self.poll_interval, self.sleep
        )
        return pipeline.execute(request)

    def send_eth(self, destination: str, amount: int) -> TransactionReceipt:
        return self.execute_transaction(TransactionRequest(to=destination, value=amount))

    def deploy_contract(self, bytecode: Union[bytes, str], value: Optional[int] = None) -> str:
        """
        Deploy a contract and return its address.

        Raises:
            DeploymentFailure: Creation mined without a contract address
        """
        receipt = self.execute_transaction(
            TransactionRequest(to=None, data=call_data(bytecode), value=value)
        )
        logger.info("deployed contract at %s", receipt.contract_address)
        return receipt.contract_address

    def on_chain_contract_call(
        self,
        to: str,
        data: Union[bytes, str],
        value: Optional[int] = None,
        gas_limit: Optional[int] = None,
        gas_price: Optional[int] = None,
        nonce: Optional[int] = None,
        from_: Optional[str] = None,
    ) -> TransactionReceipt:
        return self.execute_transaction(
            TransactionRequest(
                to=to,
                from_=from_,
                data=call_data(data),
                value=value,
                gas_limit=gas_limit,
                gas_price=gas_price,
                nonce=nonce,
            )
        )

    def off_chain_contract_call(
        self,
        to: str,
        data: Union[bytes, str],
        value: Optional[int] = None,
        gas_limit: Optional[int] = None,
        gas_price: Optional[int] = None,
        from_: Optional[str] = None,
    ) -> bytes:
        """Execute an eth_call against the latest block and return raw output."""
        request = self.assembler.call_request(
            TransactionRequest(
                to=to,
                from_=from_,
                data=call_data(data),
                value=value,
                gas_limit=gas_limit,
                gas_price=gas_price,
            )
        )
        return self.methods.call(request)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def sign_message(self, message: Union[str, bytes], address: Optional[str] = None) -> bytes:
        """
        Sign a message with the personal_sign prefix.

        Uses the local signature callback when configured, otherwise asks
        the node (eth_sign) to sign for ``address`` (default: sender).
        """
        if self.signature_fn is not None:
            return sign_message(message, self.signature_fn)
        if isinstance(message, str):
            message = message.encode("utf-8")
        return self.methods.sign(self.assembler.sender(address), message)

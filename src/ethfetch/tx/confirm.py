"""
Submission and confirmation.

A transaction moves through BUILT -> ENCODED -> SUBMITTED -> PENDING ->
MINED and ends CONFIRMED or FAILED. Receipt polling has no retry limit
and no timeout: it returns once a receipt carries both a block number and
a block hash. Callers that need a deadline must impose it themselves.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Optional

from ..errors import DeploymentFailure, MiningFailure
from ..rpc.methods import EthMethods
from .assembler import TransactionAssembler
from .models import TransactionReceipt, TransactionRequest
from .signer import Signer

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0

ReceiptFetcher = Callable[[str], Optional[TransactionReceipt]]


class TxState(enum.Enum):
    BUILT = "built"
    ENCODED = "encoded"
    SUBMITTED = "submitted"
    PENDING = "pending"
    MINED = "mined"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def wait_for_receipt(
    fetch_receipt: ReceiptFetcher,
    tx_hash: str,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> TransactionReceipt:
    """
    Poll until the transaction is included in a block.

    Args:
        fetch_receipt: Receipt lookup by transaction hash
        tx_hash: Transaction hash
        poll_interval: Delay between polls in seconds
        sleep: Delay function

    Returns:
        Receipt with non-null block number and block hash
    """
    receipt = fetch_receipt(tx_hash)
    while receipt is None or not receipt.is_mined:
        logger.debug("tx %s pending, next poll in %.1fs", tx_hash, poll_interval)
        sleep(poll_interval)
        receipt = fetch_receipt(tx_hash)
    return receipt


def check_outcome(receipt: TransactionReceipt, creation: bool) -> TxState:
    """
    Classify a mined receipt.

    Raises:
        MiningFailure: Receipt status is false
        DeploymentFailure: Contract creation mined without an address
    """
    if not receipt.status:
        raise MiningFailure(
            f"Transaction {receipt.transaction_hash} mined in block "
            f"{receipt.block_number}, but failed.",
            receipt,
        )
    if creation and not receipt.contract_address:
        raise DeploymentFailure(
            f"Contract deployment {receipt.transaction_hash} failed. "
            "Contract address was null.",
            receipt,
        )
    return TxState.CONFIRMED


class TransactionPipeline:
    """
    Drives one transaction from request to terminal outcome.

    ``state`` reflects the last transition reached, including FAILED when
    ``execute`` raises a mining or deployment failure. ``history`` lists
    every state entered; PENDING appears only if a poll found the
    transaction not yet mined.
    """

    def __init__(
        self,
        methods: EthMethods,
        assembler: TransactionAssembler,
        signer: Signer,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.methods = methods
        self.assembler = assembler
        self.signer = signer
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.state: Optional[TxState] = None
        self.history: list[TxState] = []
        self.tx_hash: Optional[str] = None

    def _transition(self, state: TxState) -> None:
        logger.debug("tx %s: %s -> %s", self.tx_hash or "-", self.state and self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _fetch_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        receipt = self.methods.get_transaction_receipt(tx_hash)
        if (receipt is None or not receipt.is_mined) and self.state is not TxState.PENDING:
            self._transition(TxState.PENDING)
        return receipt

    def execute(self, request: TransactionRequest) -> TransactionReceipt:
        tx = self.assembler.assemble(request)
        self._transition(TxState.BUILT)

        raw = self.signer.sign(tx)
        self._transition(TxState.ENCODED)

        self.tx_hash = self.methods.send_raw_transaction(raw)
        self._transition(TxState.SUBMITTED)
        logger.info("submitted tx %s (nonce %d)", self.tx_hash, tx.nonce)

        receipt = wait_for_receipt(self._fetch_receipt, self.tx_hash, self.poll_interval, self.sleep)
        self._transition(TxState.MINED)

        try:
            outcome = check_outcome(receipt, tx.is_contract_creation)
        except (MiningFailure, DeploymentFailure):
            self._transition(TxState.FAILED)
            logger.warning("tx %s failed in block %s", self.tx_hash, receipt.block_number)
            raise
        self._transition(outcome)
        logger.info("tx %s confirmed in block %d", self.tx_hash, receipt.block_number)
        return receipt

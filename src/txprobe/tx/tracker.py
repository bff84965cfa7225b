"""
Confirmation Tracker - waits for submitted transactions to be mined.
"""

import asyncio
from typing import Optional

import structlog

from txprobe.core.outcome import Outcome
from txprobe.errors import AwaitError
from txprobe.node.interface import NodeError, NodeInterface, Receipt
from txprobe.tx.client import SubmissionHandle

logger = structlog.get_logger(__name__)


class ConfirmationTracker:
    """
    Polls the node for a receipt until it appears, the transaction drops out
    of the node, or the poll horizon elapses.
    """

    def __init__(
        self,
        node: NodeInterface,
        timeout_seconds: float = 120.0,
        poll_interval_seconds: float = 2.0,
    ):
        self.node = node
        self.timeout_seconds = timeout_seconds
        self.poll_interval_seconds = poll_interval_seconds

    async def await_confirmation(self, handle: SubmissionHandle) -> Optional[Receipt]:
        """
        Wait for the receipt of a submitted transaction.

        Args:
            handle: Handle returned by the submission client

        Returns:
            The receipt, or None if the transaction is not mined (dropped from
            the node or still unmined when the horizon elapsed)

        Raises:
            AwaitError: If a node call fails while waiting
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds

        try:
            while True:
                receipt = await self.node.get_transaction_receipt(handle.tx_hash)
                if receipt is not None:
                    logger.info(
                        "tx_mined",
                        tx_hash=handle.tx_hash,
                        block_number=receipt.block_number,
                        status=receipt.status,
                    )
                    return receipt

                if await self.node.get_transaction(handle.tx_hash) is None:
                    logger.warning("tx_dropped", tx_hash=handle.tx_hash)
                    return None

                if loop.time() >= deadline:
                    logger.warning(
                        "receipt_poll_timeout",
                        tx_hash=handle.tx_hash,
                        timeout_seconds=self.timeout_seconds,
                    )
                    return None

                await asyncio.sleep(self.poll_interval_seconds)

        except NodeError as e:
            logger.warning("receipt_await_failed", tx_hash=handle.tx_hash, error=str(e))
            raise AwaitError(str(e)) from e


def classify_receipt(receipt: Optional[Receipt]) -> Outcome:
    """Classify a receipt (or its absence) into an outcome."""
    if receipt is None:
        return Outcome.pending()
    if receipt.status is None:
        return Outcome.unknown()
    if receipt.status == 1:
        return Outcome.success()
    return Outcome.failed()

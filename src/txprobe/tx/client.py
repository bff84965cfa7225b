"""
Submission Client - signs and submits probe transactions.

Fills the fields a signing middleware would fill (nonce, gas limit, chain ID,
missing gas price), signs the result and hands it to the node.
"""

from dataclasses import dataclass

import structlog

from txprobe.core.types import TxType
from txprobe.errors import SubmitError
from txprobe.node.interface import NodeError, NodeInterface
from txprobe.tx.builder import TransactionSpec
from txprobe.tx.signer import TransactionSigner

logger = structlog.get_logger(__name__)

DEFAULT_GAS_LIMIT = 21_000


@dataclass(frozen=True)
class SubmissionHandle:
    """Reference to a transaction the node accepted."""
    tx_hash: str
    tx_type: TxType
    nonce: int


class SubmissionClient:
    """
    Signs transaction specs and submits them to the node.

    Every failure surfaces as SubmitError carrying the underlying message.
    There is no retry.
    """

    def __init__(
        self,
        node: NodeInterface,
        signer: TransactionSigner,
        chain_id: int,
        gas_limit: int = DEFAULT_GAS_LIMIT,
    ):
        """
        Initialize the submission client.

        Args:
            node: Node interface used for nonce, gas price and submission
            signer: Loaded signer for the sending account
            chain_id: Chain ID to sign for
            gas_limit: Gas limit attached to every transaction
        """
        self.node = node
        self.signer = signer
        self.chain_id = chain_id
        self.gas_limit = gas_limit

    async def submit(self, spec: TransactionSpec) -> SubmissionHandle:
        """
        Sign and submit a transaction.

        Args:
            spec: Transaction to submit

        Returns:
            Handle for tracking the transaction

        Raises:
            SubmitError: If filling, signing or submission fails
        """
        if not self.signer.is_loaded:
            raise SubmitError("No signing key loaded")

        if spec.sender.lower() != self.signer.address.lower():
            raise SubmitError(
                f"sender {spec.sender} does not match signing account {self.signer.address}"
            )

        try:
            nonce = await self.node.get_transaction_count(spec.sender, "pending")

            tx = spec.to_tx_dict()
            tx["nonce"] = nonce
            tx["gas"] = self.gas_limit
            tx["chainId"] = self.chain_id
            if spec.needs_gas_price:
                tx["gasPrice"] = await self.node.get_gas_price()

            signed = self.signer.sign_transaction(tx)
            tx_hash = await self.node.send_raw_transaction(signed.raw_transaction)

        except NodeError as e:
            logger.warning("tx_submit_failed", tx_type=int(spec.tx_type), error=str(e))
            raise SubmitError(str(e)) from e
        except (ValueError, TypeError) as e:
            # eth-account rejects fields it cannot encode
            logger.warning("tx_sign_failed", tx_type=int(spec.tx_type), error=str(e))
            raise SubmitError(str(e)) from e

        logger.info("tx_accepted", tx_type=int(spec.tx_type), tx_hash=tx_hash, nonce=nonce)
        return SubmissionHandle(tx_hash=tx_hash, tx_type=spec.tx_type, nonce=nonce)

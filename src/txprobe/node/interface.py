"""
Abstract interface for Ethereum JSON-RPC node access.

Defines the contract that the submission client and confirmation tracker use
to talk to the node under test.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


def _quantity(value: Any) -> Optional[int]:
    """Decode a JSON-RPC hex quantity; None stays None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


@dataclass(frozen=True)
class Receipt:
    """The parts of a transaction receipt the probe looks at."""
    transaction_hash: str
    block_number: Optional[int]   # None while the node has not indexed the block
    status: Optional[int]         # None on pre-Byzantium style receipts

    @classmethod
    def from_rpc(cls, data: dict) -> "Receipt":
        """Parse an eth_getTransactionReceipt result."""
        return cls(
            transaction_hash=data.get("transactionHash", ""),
            block_number=_quantity(data.get("blockNumber")),
            status=_quantity(data.get("status")),
        )


class NodeInterface(ABC):
    """
    Abstract interface for node access.

    This interface defines all node operations needed by the probe:
    - Account nonce and gas price queries
    - Raw transaction submission
    - Receipt and transaction lookups
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the connection to the node.

        Raises:
            NodeConnectionError: If the connection cannot be set up
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection to the node."""
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        """Get the chain ID reported by the node."""
        pass

    @abstractmethod
    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        """
        Get the nonce for an account.

        Args:
            address: Account address
            block: Block tag; "pending" includes pool transactions

        Returns:
            Number of transactions sent from the address
        """
        pass

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Get the node's suggested legacy gas price in wei."""
        pass

    @abstractmethod
    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        """
        Submit a signed, encoded transaction.

        Args:
            raw_tx: Signed transaction bytes

        Returns:
            Transaction hash as 0x-prefixed hex

        Raises:
            RpcError: If the node rejects the transaction
        """
        pass

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """
        Get the receipt of a mined transaction.

        Returns:
            The receipt, or None if the transaction is not mined yet
        """
        pass

    @abstractmethod
    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        """
        Get transaction details by hash.

        Returns:
            Transaction details if the node knows the transaction, None otherwise
        """
        pass


class NodeError(Exception):
    """Base class for node access errors."""
    pass


class NodeConnectionError(NodeError):
    """Raised when the node cannot be reached or answers with a non-JSON-RPC reply."""
    pass


class RpcError(NodeError):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data

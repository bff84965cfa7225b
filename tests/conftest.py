"""
Pytest configuration and shared fixtures for the test suite.
"""

import hashlib
from typing import Dict, List, Optional

import pytest

from txprobe.config import ProbeConfig, set_config
from txprobe.node.interface import NodeInterface, Receipt, RpcError
from txprobe.tx.signer import TransactionSigner


# Well-known development key (first Hardhat/Anvil account)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TEST_CHAIN_ID = 11155111


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> ProbeConfig:
    """Create a test configuration that ignores any .env file."""
    return ProbeConfig(
        _env_file=None,
        rpc_url="http://localhost:8545",
        private_key=TEST_PRIVATE_KEY,
        to_address=TEST_RECIPIENT,
        chain_id=TEST_CHAIN_ID,
        receipt_timeout_seconds=0,
        poll_interval_seconds=0.01,
        log_level="DEBUG",
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove probe variables from the environment and leave no .env in reach."""
    for name in (
        "RPC_URL", "PRIVATE_KEY", "TO_ADDRESS", "AMOUNT_ETH", "CHAIN_ID",
        "PRIORITY_GWEI", "FEE_MULTIPLIER", "GAS_LIMIT", "RECEIPT_TIMEOUT_SECONDS",
        "POLL_INTERVAL_SECONDS", "RPC_TIMEOUT_SECONDS", "LOG_LEVEL", "LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield monkeypatch
    set_config(None)


# ============================================================================
# Mock Node Interface
# ============================================================================

def tx_type_of(raw_tx: bytes) -> int:
    """EIP-2718: typed envelopes start with the type byte, legacy RLP with >= 0xc0."""
    return raw_tx[0] if raw_tx[0] < 0x7f else 0


class MockNodeInterface(NodeInterface):
    """
    Mock node interface for testing.

    Receipts are configured per transaction type through ``statuses``: a type
    mapped to a status (or to None for a status-less receipt) is mined; a type
    missing from the mapping stays unmined.
    """

    def __init__(self):
        self.chain_id = TEST_CHAIN_ID
        self.nonce = 0
        self.gas_price = 7
        self.statuses: Dict[int, Optional[int]] = {}
        self.dropped_types: set = set()
        self.submit_error: Optional[str] = None
        self.receipt_error: Optional[str] = None
        self.sent: List[bytes] = []
        self.sent_types: List[int] = []
        self.nonce_queries: List[tuple] = []
        self.gas_price_queries = 0
        self.receipt_queries = 0
        self._txs: Dict[str, int] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        self.nonce_queries.append((address, block))
        return self.nonce

    async def get_gas_price(self) -> int:
        self.gas_price_queries += 1
        return self.gas_price

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        if self.submit_error:
            raise RpcError(self.submit_error, code=-32000)
        tx_hash = "0x" + hashlib.sha256(raw_tx).hexdigest()
        tx_type = tx_type_of(raw_tx)
        self.sent.append(raw_tx)
        self.sent_types.append(tx_type)
        self._txs[tx_hash] = tx_type
        self.nonce += 1
        return tx_hash

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        self.receipt_queries += 1
        if self.receipt_error:
            raise RpcError(self.receipt_error)
        tx_type = self._txs[tx_hash]
        if tx_type not in self.statuses:
            return None
        return Receipt(
            transaction_hash=tx_hash,
            block_number=100 + len(self.sent),
            status=self.statuses[tx_type],
        )

    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        tx_type = self._txs.get(tx_hash)
        if tx_type is None or tx_type in self.dropped_types:
            return None
        return {"hash": tx_hash, "blockNumber": None}


@pytest.fixture
def mock_node() -> MockNodeInterface:
    """Create a mock node interface."""
    return MockNodeInterface()


# ============================================================================
# Test Signer
# ============================================================================

@pytest.fixture
def test_signer(test_config) -> TransactionSigner:
    """Create a signer loaded with the development key."""
    signer = TransactionSigner(test_config)
    signer.load_from_config()
    return signer

"""
Transaction Signer - handles transaction signing.

Holds the probe account's key and signs typed transactions with it.
"""

from typing import Any, Dict, Optional

import structlog
from eth_account import Account
from eth_account.datastructures import SignedTransaction
from eth_account.signers.local import LocalAccount

from txprobe.codec import format_address_short
from txprobe.config import ProbeConfig, get_config
from txprobe.errors import ConfigError

logger = structlog.get_logger(__name__)


class TransactionSigner:
    """
    Handles transaction signing with the probe account's key.

    The key comes from PRIVATE_KEY (hex, with or without 0x prefix).
    """

    def __init__(self, config: Optional[ProbeConfig] = None):
        """
        Initialize the transaction signer.

        Args:
            config: Probe configuration, only needed by load_from_config
        """
        self.config = config
        self._account: Optional[LocalAccount] = None

    def load_key(self, private_key_hex: str) -> None:
        """
        Load the signing key from a hex string.

        Raises:
            ConfigError: If the key is not a valid secp256k1 private key
        """
        key = private_key_hex.strip()
        if not key.startswith("0x"):
            key = "0x" + key
        try:
            self._account = Account.from_key(key)
        except Exception as e:
            raise ConfigError(f"invalid PRIVATE_KEY: {e}") from e

        logger.info("signing_key_loaded", address=format_address_short(self._account.address))

    def load_from_config(self) -> None:
        """Load signing key from configuration."""
        config = self.config or get_config()
        self.load_key(config.private_key)

    @property
    def address(self) -> Optional[str]:
        """Get the probe account's checksummed address."""
        return self._account.address if self._account else None

    @property
    def is_loaded(self) -> bool:
        """Check if a signing key is loaded."""
        return self._account is not None

    def sign_transaction(self, tx: Dict[str, Any]) -> SignedTransaction:
        """
        Sign a complete transaction dict.

        Args:
            tx: Transaction fields including nonce, gas and chainId

        Returns:
            Signed transaction with raw bytes and hash
        """
        if not self._account:
            raise RuntimeError("No signing key loaded")

        signed = self._account.sign_transaction(tx)
        logger.debug("transaction_signed", tx_hash=signed.hash.hex()[:16] + "...")
        return signed


def generate_test_key(config: Optional[ProbeConfig] = None) -> TransactionSigner:
    """
    Generate a new random signing key for testing.

    WARNING: Do not use for real funds. The key is not persisted.
    """
    account = Account.create()
    signer = TransactionSigner(config)
    signer._account = account

    logger.warning("test_key_generated", address=format_address_short(account.address))

    return signer

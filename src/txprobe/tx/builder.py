"""
Transaction Builder - constructs probe transactions.

Turns a selector and a fee profile into the logical transaction that the
submission client signs. The builder is pure: no I/O, inputs are not modified.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from txprobe.core.types import FeeProfile, TxType
from txprobe.errors import ProbeError


class TransactionBuildError(ProbeError):
    """Raised when a transaction cannot be constructed for a selector."""

    def __init__(self, message: str, tx_type: int):
        super().__init__(message)
        self.tx_type = tx_type


class UnsupportedTypeError(TransactionBuildError):
    """Raised for known transaction types the builder does not encode."""

    def __init__(self, tx_type: int):
        super().__init__(f"unsupported tx type {tx_type} (no encoder for this format)", tx_type)


class UnknownTypeError(TransactionBuildError):
    """Raised for selector values outside the known type codes."""

    def __init__(self, tx_type: int):
        super().__init__(f"unknown tx type {tx_type}", tx_type)


@dataclass(frozen=True)
class TransactionSpec:
    """
    A logical transaction before nonce, gas limit and signature are attached.

    Fee fields that do not apply to the type are None.
    """

    tx_type: TxType
    sender: str
    recipient: str
    value: int
    gas_price: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    access_list: Optional[Tuple[Dict[str, Any], ...]] = None

    @property
    def needs_gas_price(self) -> bool:
        """Legacy-shaped types without a gas price take the node's suggestion."""
        return self.tx_type in (TxType.LEGACY, TxType.ACCESS_LIST) and self.gas_price is None

    def to_tx_dict(self) -> Dict[str, Any]:
        """
        Render the fields this spec carries as an eth-account transaction dict.

        Nonce, gas and chainId are added by the submission client.
        """
        tx: Dict[str, Any] = {
            "to": self.recipient,
            "value": self.value,
            "data": "0x",
        }
        if self.tx_type != TxType.LEGACY:
            tx["type"] = int(self.tx_type)
        if self.gas_price is not None:
            tx["gasPrice"] = self.gas_price
        if self.max_priority_fee_per_gas is not None:
            tx["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas
        if self.max_fee_per_gas is not None:
            tx["maxFeePerGas"] = self.max_fee_per_gas
        if self.access_list is not None:
            tx["accessList"] = [dict(entry) for entry in self.access_list]
        return tx


def build(
    selector: int,
    sender: str,
    recipient: str,
    value: int,
    fee_profile: FeeProfile,
) -> TransactionSpec:
    """
    Build the transaction for a selector under a fee profile.

    Args:
        selector: Transaction type code
        sender: Sending account (checksummed)
        recipient: Receiving account (checksummed)
        value: Amount in wei
        fee_profile: Fee fields to draw from

    Returns:
        The transaction spec

    Raises:
        UnsupportedTypeError: For types 3, 4 and 5
        UnknownTypeError: For any selector outside 0-5
    """
    try:
        tx_type = TxType(selector)
    except ValueError:
        raise UnknownTypeError(selector)

    if not tx_type.is_supported:
        raise UnsupportedTypeError(int(tx_type))

    if tx_type == TxType.LEGACY:
        return TransactionSpec(
            tx_type=tx_type,
            sender=sender,
            recipient=recipient,
            value=value,
            gas_price=fee_profile.suggested_gas_price,
        )

    if tx_type == TxType.ACCESS_LIST:
        return TransactionSpec(
            tx_type=tx_type,
            sender=sender,
            recipient=recipient,
            value=value,
            gas_price=fee_profile.suggested_gas_price,
            access_list=(),
        )

    # TxType.DYNAMIC_FEE
    return TransactionSpec(
        tx_type=tx_type,
        sender=sender,
        recipient=recipient,
        value=value,
        max_priority_fee_per_gas=fee_profile.max_priority_fee_per_gas,
        max_fee_per_gas=fee_profile.max_fee_per_gas,
    )

"""
Transaction type selectors and fee profiles.

Both are fixed constants for a probe run.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import FrozenSet, Optional, Tuple


class TxType(IntEnum):
    """EIP-2718 transaction type codes probed by a run."""
    LEGACY = 0          # Pre-typed transaction with a single gas price
    ACCESS_LIST = 1     # EIP-2930
    DYNAMIC_FEE = 2     # EIP-1559 priority fee + max fee
    BLOB = 3            # EIP-4844, not encoded
    SET_CODE = 4        # EIP-7702, not encoded
    RESERVED = 5        # No assigned format, not encoded

    @property
    def is_supported(self) -> bool:
        """Whether the builder encodes this type."""
        return self in SUPPORTED_TX_TYPES

    @property
    def label(self) -> str:
        return f"type-{int(self)}"


SUPPORTED_TX_TYPES: FrozenSet[TxType] = frozenset({
    TxType.LEGACY,
    TxType.ACCESS_LIST,
    TxType.DYNAMIC_FEE,
})


@dataclass(frozen=True)
class FeeProfile:
    """
    Gas-price fields attached to every attempt of a fee series.

    Attributes:
        label: Short name used in progress text ("fees=<label>")
        suggested_gas_price: Gas price for legacy-shaped types, omitted if None
        max_priority_fee_per_gas: Priority fee for dynamic-fee types
        max_fee_per_gas: Fee cap for dynamic-fee types
    """

    label: str
    suggested_gas_price: Optional[int]
    max_priority_fee_per_gas: int
    max_fee_per_gas: int

    def __post_init__(self):
        """Reject negative fee values."""
        fees = (
            ("suggested_gas_price", self.suggested_gas_price),
            ("max_priority_fee_per_gas", self.max_priority_fee_per_gas),
            ("max_fee_per_gas", self.max_fee_per_gas),
        )
        for name, value in fees:
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


ZERO_FEES = FeeProfile(
    label="0",
    suggested_gas_price=0,
    max_priority_fee_per_gas=0,
    max_fee_per_gas=0,
)

MINIMAL_FEES = FeeProfile(
    label="1",
    suggested_gas_price=1,
    max_priority_fee_per_gas=1,
    max_fee_per_gas=1,
)

# Series are probed in this order
DEFAULT_FEE_SERIES: Tuple[FeeProfile, ...] = (ZERO_FEES, MINIMAL_FEES)

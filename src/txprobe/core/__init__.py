"""
Core probe models and orchestrator.
"""

from txprobe.core.types import (
    DEFAULT_FEE_SERIES,
    MINIMAL_FEES,
    SUPPORTED_TX_TYPES,
    ZERO_FEES,
    FeeProfile,
    TxType,
)
from txprobe.core.outcome import AttemptState, Outcome, OutcomeKind, ProbeAttempt, ProbeResult

__all__ = [
    "DEFAULT_FEE_SERIES",
    "MINIMAL_FEES",
    "SUPPORTED_TX_TYPES",
    "ZERO_FEES",
    "FeeProfile",
    "TxType",
    "AttemptState",
    "Outcome",
    "OutcomeKind",
    "ProbeAttempt",
    "ProbeResult",
]

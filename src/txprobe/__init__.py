"""
Transaction Type Probe

Probes which Ethereum typed-transaction formats a JSON-RPC node accepts and mines,
under a zero-fee and a minimal-fee regime, and reports the outcome per type.
"""

__version__ = "0.1.0"

from txprobe.core.types import FeeProfile, TxType, DEFAULT_FEE_SERIES
from txprobe.core.outcome import Outcome, OutcomeKind, ProbeResult
from txprobe.core.prober import Prober

__all__ = [
    "Prober",
    "FeeProfile",
    "TxType",
    "DEFAULT_FEE_SERIES",
    "Outcome",
    "OutcomeKind",
    "ProbeResult",
]

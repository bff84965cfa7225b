"""
Attempt outcomes and per-series probe results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from txprobe.core.types import FeeProfile


class OutcomeKind(str, Enum):
    """Final classification of a single attempt."""
    SUCCESS = "success"             # Mined with status 1
    FAILED = "failed"               # Mined with any other status
    UNKNOWN = "unknown"             # Mined, receipt has no status
    PENDING = "pending"             # No receipt yet
    AWAIT_ERROR = "await error"     # Waiting for the receipt failed
    SUBMIT_ERROR = "submit error"   # Node rejected or transport failed
    UNSUPPORTED = "unsupported"     # Builder does not encode the type


@dataclass(frozen=True)
class Outcome:
    """An outcome kind plus the error message for the error kinds."""

    kind: OutcomeKind
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def failed(cls) -> "Outcome":
        return cls(OutcomeKind.FAILED)

    @classmethod
    def unknown(cls) -> "Outcome":
        return cls(OutcomeKind.UNKNOWN)

    @classmethod
    def pending(cls) -> "Outcome":
        return cls(OutcomeKind.PENDING)

    @classmethod
    def unsupported(cls) -> "Outcome":
        return cls(OutcomeKind.UNSUPPORTED)

    @classmethod
    def await_error(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.AWAIT_ERROR, message)

    @classmethod
    def submit_error(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.SUBMIT_ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.kind in (OutcomeKind.AWAIT_ERROR, OutcomeKind.SUBMIT_ERROR)

    def __str__(self) -> str:
        if self.is_error:
            return f"{self.kind.value}: {self.message}"
        return self.kind.value


class AttemptState(str, Enum):
    """Progress of a single (fee series, selector) attempt."""
    NOT_ATTEMPTED = "not_attempted"
    BUILT = "built"
    SUBMITTED = "submitted"
    RESOLVED = "resolved"


_TRANSITIONS = {
    AttemptState.NOT_ATTEMPTED: (AttemptState.BUILT, AttemptState.RESOLVED),
    AttemptState.BUILT: (AttemptState.SUBMITTED, AttemptState.RESOLVED),
    AttemptState.SUBMITTED: (AttemptState.RESOLVED,),
    AttemptState.RESOLVED: (),
}


@dataclass
class ProbeAttempt:
    """
    Tracks one attempt from construction to its resolved outcome.

    Attributes:
        tx_type: Selector code being attempted
        fee_profile: Fee series the attempt belongs to
        state: Current state; RESOLVED is terminal
        tx_hash: Hash returned on submission
        block_number: Block the transaction was mined in, if known
        outcome: Final outcome, set when resolved
    """

    tx_type: int
    fee_profile: FeeProfile
    state: AttemptState = AttemptState.NOT_ATTEMPTED
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    outcome: Optional[Outcome] = None

    def _advance(self, state: AttemptState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(
                f"invalid attempt transition {self.state.value} -> {state.value}"
            )
        self.state = state

    def mark_built(self) -> None:
        """Mark the transaction as constructed."""
        self._advance(AttemptState.BUILT)

    def mark_submitted(self, tx_hash: str) -> None:
        """Mark the transaction as accepted by the node."""
        self._advance(AttemptState.SUBMITTED)
        self.tx_hash = tx_hash

    def resolve(self, outcome: Outcome, block_number: Optional[int] = None) -> None:
        """Record the final outcome."""
        self._advance(AttemptState.RESOLVED)
        self.outcome = outcome
        self.block_number = block_number

    @property
    def is_resolved(self) -> bool:
        return self.state == AttemptState.RESOLVED


@dataclass
class ProbeResult:
    """
    Ordered outcomes of one fee series, one entry per selector.

    Entries are append-only.
    """

    fee_profile: FeeProfile
    _entries: List[Tuple[int, Outcome]] = field(default_factory=list, repr=False)

    def append(self, tx_type: int, outcome: Outcome) -> None:
        """
        Record the outcome for a selector.

        Raises:
            ValueError: If the selector already has an entry
        """
        if any(existing == tx_type for existing, _ in self._entries):
            raise ValueError(f"type-{tx_type} already recorded for fees={self.fee_profile.label}")
        self._entries.append((int(tx_type), outcome))

    @property
    def entries(self) -> Tuple[Tuple[int, Outcome], ...]:
        return tuple(self._entries)

    def outcome_for(self, tx_type: int) -> Optional[Outcome]:
        for existing, outcome in self._entries:
            if existing == tx_type:
                return outcome
        return None

    def __iter__(self) -> Iterator[Tuple[int, Outcome]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "fees": self.fee_profile.label,
            "results": {f"type-{tx_type}": str(outcome) for tx_type, outcome in self._entries},
        }

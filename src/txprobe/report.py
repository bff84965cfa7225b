"""
Reporter - progress and summary text for a probe run.

Pure string templating; nothing here decides anything.
"""

from typing import List

from txprobe.codec import format_address_short
from txprobe.core.outcome import Outcome, ProbeResult
from txprobe.core.types import FeeProfile
from txprobe.node.interface import Receipt
from txprobe.tx.client import SubmissionHandle


def format_gwei(wei: int) -> str:
    """Whole gwei in a wei amount, truncated. Display only."""
    return str(wei // 10**9)


class Reporter:
    """Formats the lines the prober prints."""

    def header(self, sender: str, recipient: str, amount_text: str) -> str:
        return (
            f"From={format_address_short(sender)} "
            f"To={format_address_short(recipient)} "
            f"Amount={amount_text} ETH"
        )

    def fee_details(self, profile: FeeProfile) -> str:
        gas_price = profile.suggested_gas_price
        return (
            f"  gasPrice={'auto' if gas_price is None else gas_price} wei, "
            f"maxPriorityFeePerGas={profile.max_priority_fee_per_gas} wei "
            f"({format_gwei(profile.max_priority_fee_per_gas)} gwei), "
            f"maxFeePerGas={profile.max_fee_per_gas} wei "
            f"({format_gwei(profile.max_fee_per_gas)} gwei)"
        )

    def series_header(self, profile: FeeProfile) -> str:
        return f"\nSeries: fees={profile.label}"

    def attempting(self, tx_type: int, profile: FeeProfile) -> str:
        return f"Attempting type-{tx_type} (fees={profile.label})…"

    def skipping(self, tx_type: int, error: Exception) -> str:
        return f"Skipping type-{tx_type}: {error}"

    def submitted(self, handle: SubmissionHandle) -> str:
        return f"  submitted: {handle.tx_hash}"

    def mined(self, receipt: Receipt, outcome: Outcome) -> str:
        block = "?" if receipt.block_number is None else str(receipt.block_number)
        return f"  mined in block {block} (status: {outcome})"

    def pending(self) -> str:
        return "  pending (no receipt yet)"

    def await_failed(self, error: Exception) -> str:
        return f"  error awaiting receipt: {error}"

    def submit_failed(self, error: Exception) -> str:
        return f"  submission failed: {error}"

    def summary_lines(self, result: ProbeResult) -> List[str]:
        lines = [f"\nSummary (fees={result.fee_profile.label}):"]
        for tx_type, outcome in result:
            lines.append(f"  type-{tx_type}: {outcome}")
        return lines

    def summary(self, result: ProbeResult) -> str:
        return "\n".join(self.summary_lines(result))

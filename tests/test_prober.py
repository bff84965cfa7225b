"""
Test suite for the probe orchestrator.

Covers the per-attempt state machine, the one-entry-per-selector invariant
and end-to-end runs against a mock node.
"""

import json

import httpx
import pytest

from txprobe.core.outcome import AttemptState, Outcome, OutcomeKind, ProbeAttempt, ProbeResult
from txprobe.core.prober import Prober
from txprobe.core.types import DEFAULT_FEE_SERIES, MINIMAL_FEES, ZERO_FEES
from txprobe.errors import AwaitError, SubmitError
from txprobe.node.jsonrpc import JsonRpcAdapter
from txprobe.tx.client import SubmissionClient
from txprobe.tx.tracker import ConfirmationTracker

from tests.conftest import TEST_CHAIN_ID, TEST_RECIPIENT, TEST_SENDER


def make_prober(mock_node, signer, lines=None, **kwargs):
    """Build a prober wired to the mock node, collecting emitted lines."""
    sink = lines if lines is not None else []
    return Prober(
        client=SubmissionClient(mock_node, signer, TEST_CHAIN_ID),
        tracker=ConfirmationTracker(mock_node, timeout_seconds=0),
        sender=TEST_SENDER,
        recipient=TEST_RECIPIENT,
        value=10**15,
        emit=sink.append,
        **kwargs,
    )


def summary_block(lines, label):
    """The emitted summary text for one fee series."""
    header = f"\nSummary (fees={label}):"
    block = next(line for line in lines if line.startswith(header))
    return block.lstrip("\n")


# ============================================================================
# Test Attempt State Machine
# ============================================================================

class TestProbeAttempt:
    """Tests for attempt state transitions."""

    def test_full_path(self):
        attempt = ProbeAttempt(tx_type=2, fee_profile=ZERO_FEES)
        assert attempt.state == AttemptState.NOT_ATTEMPTED

        attempt.mark_built()
        attempt.mark_submitted("0xabc")
        attempt.resolve(Outcome.success(), block_number=7)

        assert attempt.is_resolved
        assert attempt.tx_hash == "0xabc"
        assert attempt.block_number == 7

    def test_short_circuit_from_not_attempted(self):
        attempt = ProbeAttempt(tx_type=3, fee_profile=ZERO_FEES)

        attempt.resolve(Outcome.unsupported())

        assert attempt.outcome.kind == OutcomeKind.UNSUPPORTED

    def test_resolved_is_terminal(self):
        attempt = ProbeAttempt(tx_type=0, fee_profile=ZERO_FEES)
        attempt.resolve(Outcome.pending())

        with pytest.raises(ValueError, match="invalid attempt transition"):
            attempt.resolve(Outcome.success())

    def test_cannot_submit_before_build(self):
        attempt = ProbeAttempt(tx_type=0, fee_profile=ZERO_FEES)

        with pytest.raises(ValueError):
            attempt.mark_submitted("0xabc")


class TestProbeResult:
    """Tests for the per-series result sequence."""

    def test_append_preserves_order(self):
        result = ProbeResult(fee_profile=ZERO_FEES)
        result.append(0, Outcome.success())
        result.append(1, Outcome.submit_error("boom"))

        assert [tx_type for tx_type, _ in result] == [0, 1]
        assert result.outcome_for(1) == Outcome.submit_error("boom")
        assert result.outcome_for(5) is None

    def test_duplicate_selector_rejected(self):
        result = ProbeResult(fee_profile=ZERO_FEES)
        result.append(0, Outcome.success())

        with pytest.raises(ValueError, match="already recorded"):
            result.append(0, Outcome.failed())

    def test_outcome_rendering(self):
        assert str(Outcome.success()) == "success"
        assert str(Outcome.unsupported()) == "unsupported"
        assert str(Outcome.submit_error("nonce too low")) == "submit error: nonce too low"
        assert str(Outcome.await_error("timeout")) == "await error: timeout"

    def test_to_dict(self):
        result = ProbeResult(fee_profile=MINIMAL_FEES)
        result.append(2, Outcome.pending())

        assert result.to_dict() == {"fees": "1", "results": {"type-2": "pending"}}


# ============================================================================
# Test Prober
# ============================================================================

class TestProber:
    """Tests for the orchestrator."""

    @pytest.mark.asyncio
    async def test_every_series_has_six_entries(self, mock_node, test_signer):
        mock_node.statuses = {0: 1, 1: 0}
        prober = make_prober(mock_node, test_signer)

        results = await prober.run()

        assert [r.fee_profile for r in results] == list(DEFAULT_FEE_SERIES)
        for result in results:
            assert [tx_type for tx_type, _ in result] == [0, 1, 2, 3, 4, 5]
            assert all(str(outcome) for _, outcome in result)

    @pytest.mark.asyncio
    async def test_outcomes_follow_receipts(self, mock_node, test_signer):
        mock_node.statuses = {0: 1, 1: 0}
        prober = make_prober(mock_node, test_signer)

        result = await prober.run_series(ZERO_FEES)

        assert result.outcome_for(0) == Outcome.success()
        assert result.outcome_for(1) == Outcome.failed()
        assert result.outcome_for(2) == Outcome.pending()
        for selector in (3, 4, 5):
            assert result.outcome_for(selector) == Outcome.unsupported()

    @pytest.mark.asyncio
    async def test_submissions_are_sequential_and_ordered(self, mock_node, test_signer):
        prober = make_prober(mock_node, test_signer)

        await prober.run()

        assert mock_node.sent_types == [0, 1, 2, 0, 1, 2]
        assert mock_node.nonce == 6

    @pytest.mark.asyncio
    async def test_progress_lines_per_attempt(self, mock_node, test_signer):
        mock_node.statuses = {2: 1}
        lines = []
        prober = make_prober(mock_node, test_signer, lines=lines)

        await prober.run_series(ZERO_FEES)

        assert lines[0] == "\nSeries: fees=0"
        assert lines[1] == "Attempting type-0 (fees=0)…"
        assert lines[2].startswith("  submitted: 0x")
        assert lines[3] == "  pending (no receipt yet)"
        assert "Attempting type-2 (fees=0)…" in lines
        assert any(line.startswith("  mined in block ") and "(status: success)" in line for line in lines)
        assert lines[-1].startswith("Skipping type-5: unsupported tx type 5")

    @pytest.mark.asyncio
    async def test_unknown_selector_recorded_as_unsupported(self, mock_node, test_signer):
        lines = []
        prober = make_prober(mock_node, test_signer, lines=lines, selectors=[9, 0])

        result = await prober.run_series(MINIMAL_FEES)

        assert [tx_type for tx_type, _ in result] == [0, 9]
        assert result.outcome_for(9) == Outcome.unsupported()
        assert "Skipping type-9: unknown tx type 9" in lines

    @pytest.mark.asyncio
    async def test_await_error_does_not_abort(self, mock_node, test_signer):
        mock_node.receipt_error = "receipt lookup failed"
        lines = []
        prober = make_prober(mock_node, test_signer, lines=lines)

        results = await prober.run()

        for result in results:
            for selector in (0, 1, 2):
                assert str(result.outcome_for(selector)) == "await error: receipt lookup failed"
        assert "  error awaiting receipt: receipt lookup failed" in lines

    @pytest.mark.asyncio
    async def test_works_with_any_client_and_tracker(self):
        """The prober only needs submit() and await_confirmation()."""

        class RejectingClient:
            async def submit(self, spec):
                raise SubmitError(f"type {int(spec.tx_type)} rejected")

        class NeverCalledTracker:
            async def await_confirmation(self, handle):
                raise AwaitError("should not be reached")

        prober = Prober(
            client=RejectingClient(),
            tracker=NeverCalledTracker(),
            sender=TEST_SENDER,
            recipient=TEST_RECIPIENT,
            value=1,
            fee_profiles=[ZERO_FEES],
            emit=lambda line: None,
        )

        (result,) = await prober.run()

        assert str(result.outcome_for(1)) == "submit error: type 1 rejected"


# ============================================================================
# End-to-End Scenarios
# ============================================================================

class TestEndToEnd:
    """Full runs against a mock node."""

    @pytest.mark.asyncio
    async def test_all_submissions_rejected(self, mock_node, test_signer):
        mock_node.submit_error = "nonce too low"
        lines = []
        prober = make_prober(mock_node, test_signer, lines=lines)

        results = await prober.run()

        assert len(results) == 2
        for label in ("0", "1"):
            summary = summary_block(lines, label)
            assert summary.splitlines()[1:] == [
                "  type-0: submit error: nonce too low",
                "  type-1: submit error: nonce too low",
                "  type-2: submit error: nonce too low",
                "  type-3: unsupported",
                "  type-4: unsupported",
                "  type-5: unsupported",
            ]

    @pytest.mark.asyncio
    async def test_mixed_receipts(self, mock_node, test_signer):
        mock_node.statuses = {0: None, 2: 1}
        lines = []
        prober = make_prober(mock_node, test_signer, lines=lines)

        await prober.run()

        for label in ("0", "1"):
            summary = summary_block(lines, label).splitlines()
            assert "  type-0: unknown" in summary
            assert "  type-2: success" in summary
            assert "  type-1: pending" in summary

    @pytest.mark.asyncio
    async def test_malformed_receipt_from_http_node(self, test_config, test_signer):
        """A garbled receipt resolves each attempt instead of ending the run."""

        def node(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            results = {
                "eth_getTransactionCount": "0x0",
                "eth_gasPrice": "0x1",
                "eth_sendRawTransaction": "0x" + "cd" * 32,
                "eth_getTransactionReceipt": "0x1",
            }
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": body["id"], "result": results[body["method"]]}
            )

        adapter = JsonRpcAdapter(test_config, transport=httpx.MockTransport(node))
        lines = []
        prober = make_prober(adapter, test_signer, lines=lines, fee_profiles=[ZERO_FEES])

        (result,) = await prober.run()
        await adapter.disconnect()

        assert len(result) == 6
        for selector in (0, 1, 2):
            outcome = result.outcome_for(selector)
            assert outcome.kind == OutcomeKind.AWAIT_ERROR
            assert "Malformed receipt" in outcome.message
        assert summary_block(lines, "0").startswith("Summary (fees=0):")

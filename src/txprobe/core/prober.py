"""
Main Prober orchestrator.

Runs every transaction type under every fee profile and collects the outcomes.
"""

from typing import Callable, Iterable, List, Optional, Sequence

import structlog

from txprobe.core.outcome import Outcome, ProbeAttempt, ProbeResult
from txprobe.core.types import DEFAULT_FEE_SERIES, FeeProfile, TxType
from txprobe.errors import AwaitError, SubmitError
from txprobe.report import Reporter
from txprobe.tx.builder import UnknownTypeError, UnsupportedTypeError, build
from txprobe.tx.client import SubmissionClient
from txprobe.tx.tracker import ConfirmationTracker, classify_receipt

logger = structlog.get_logger(__name__)


class Prober:
    """
    Main probe orchestrator.

    For each fee profile, in order, attempts every selector in ascending order:
    build, submit, await the receipt, record the outcome. Attempts run one at
    a time so the node assigns nonces in submission order. No attempt failure
    stops the run; each series always records one outcome per selector.

    Usage:
        ```python
        prober = Prober(client, tracker, sender, recipient, value)
        results = await prober.run()
        ```
    """

    def __init__(
        self,
        client: SubmissionClient,
        tracker: ConfirmationTracker,
        sender: str,
        recipient: str,
        value: int,
        fee_profiles: Sequence[FeeProfile] = DEFAULT_FEE_SERIES,
        selectors: Optional[Iterable[int]] = None,
        reporter: Optional[Reporter] = None,
        emit: Callable[[str], None] = print,
    ):
        """
        Initialize the prober.

        Args:
            client: Signs and submits built transactions
            tracker: Waits for receipts
            sender: Sending account
            recipient: Receiving account
            value: Amount sent by every attempt, in wei
            fee_profiles: Fee series to run, in order
            selectors: Type codes to attempt; all TxType codes by default
            reporter: Progress text formatter
            emit: Sink for progress lines
        """
        self.client = client
        self.tracker = tracker
        self.sender = sender
        self.recipient = recipient
        self.value = value
        self.fee_profiles = tuple(fee_profiles)
        self.selectors = sorted(int(s) for s in (selectors if selectors is not None else TxType))
        self.reporter = reporter or Reporter()
        self._emit = emit

    async def run(self) -> List[ProbeResult]:
        """
        Run all fee series.

        Returns:
            One result per fee profile, in run order
        """
        results = []
        for profile in self.fee_profiles:
            result = await self.run_series(profile)
            self._emit(self.reporter.summary(result))
            results.append(result)
        return results

    async def run_series(self, profile: FeeProfile) -> ProbeResult:
        """Attempt every selector under one fee profile."""
        logger.info("series_started", fees=profile.label, selectors=self.selectors)
        self._emit(self.reporter.series_header(profile))

        result = ProbeResult(fee_profile=profile)
        for selector in self.selectors:
            attempt = await self.attempt(selector, profile)
            result.append(selector, attempt.outcome)

        logger.info("series_completed", fees=profile.label, results=result.to_dict()["results"])
        return result

    async def attempt(self, selector: int, profile: FeeProfile) -> ProbeAttempt:
        """
        Run one attempt to its resolved outcome.

        Builder failures resolve to unsupported, submission failures to a
        submit error, and everything else to the receipt classification.
        """
        attempt = ProbeAttempt(tx_type=selector, fee_profile=profile)

        try:
            spec = build(selector, self.sender, self.recipient, self.value, profile)
        except UnknownTypeError as e:
            logger.warning("unknown_tx_type", tx_type=selector, error=str(e))
            self._emit(self.reporter.skipping(selector, e))
            attempt.resolve(Outcome.unsupported())
            return attempt
        except UnsupportedTypeError as e:
            logger.info("unsupported_tx_type", tx_type=selector)
            self._emit(self.reporter.skipping(selector, e))
            attempt.resolve(Outcome.unsupported())
            return attempt

        attempt.mark_built()
        self._emit(self.reporter.attempting(selector, profile))

        try:
            handle = await self.client.submit(spec)
        except SubmitError as e:
            self._emit(self.reporter.submit_failed(e))
            attempt.resolve(Outcome.submit_error(str(e)))
            return attempt

        attempt.mark_submitted(handle.tx_hash)
        self._emit(self.reporter.submitted(handle))

        try:
            receipt = await self.tracker.await_confirmation(handle)
        except AwaitError as e:
            self._emit(self.reporter.await_failed(e))
            attempt.resolve(Outcome.await_error(str(e)))
            return attempt

        outcome = classify_receipt(receipt)
        if receipt is None:
            self._emit(self.reporter.pending())
            attempt.resolve(outcome)
        else:
            self._emit(self.reporter.mined(receipt, outcome))
            attempt.resolve(outcome, block_number=receipt.block_number)

        logger.info(
            "attempt_resolved",
            tx_type=selector,
            fees=profile.label,
            tx_hash=attempt.tx_hash,
            outcome=str(outcome),
        )
        return attempt

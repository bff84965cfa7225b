"""
Command-line interface for the transaction type probe.

Provides commands for running a probe and listing the probed types.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from txprobe import __version__
from txprobe.codec import parse_address, parse_amount
from txprobe.config import ProbeConfig, load_config, set_config
from txprobe.core.outcome import ProbeResult
from txprobe.core.prober import Prober
from txprobe.core.types import DEFAULT_FEE_SERIES, TxType
from txprobe.errors import ConfigError, ParseError
from txprobe.node.interface import NodeError, NodeInterface
from txprobe.node.jsonrpc import JsonRpcAdapter
from txprobe.report import Reporter
from txprobe.tx.client import SubmissionClient
from txprobe.tx.signer import TransactionSigner
from txprobe.tx.tracker import ConfirmationTracker

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="txprobe",
        description="Probe which Ethereum transaction types a node accepts and mines",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the probe (settings come from the environment / .env)",
    )
    run_parser.add_argument(
        "--rpc-url",
        help="Node JSON-RPC endpoint (overrides RPC_URL)",
    )
    run_parser.add_argument(
        "--to",
        dest="to_address",
        help="Recipient address (overrides TO_ADDRESS)",
    )
    run_parser.add_argument(
        "--amount",
        dest="amount_eth",
        help="Amount in ether per transaction (overrides AMOUNT_ETH)",
    )
    run_parser.add_argument(
        "--chain-id",
        type=int,
        help="Chain ID to sign for (overrides CHAIN_ID)",
    )
    run_parser.add_argument(
        "--receipt-timeout",
        dest="receipt_timeout_seconds",
        type=float,
        help="Seconds to wait for each receipt (overrides RECEIPT_TIMEOUT_SECONDS)",
    )
    run_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides LOG_LEVEL)",
    )
    run_parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Output logs in JSON format",
    )

    # Types command
    subparsers.add_parser("types", help="List the probed transaction types")

    return parser


async def run_probe(
    config: ProbeConfig,
    node: Optional[NodeInterface] = None,
    signer: Optional[TransactionSigner] = None,
) -> List[ProbeResult]:
    """
    Run the probe against the configured node.

    Addresses, amount and key are validated before the node is contacted.

    Raises:
        ConfigError: If the signing key is invalid
        ParseError: If TO_ADDRESS or AMOUNT_ETH cannot be parsed
    """
    recipient = parse_address(config.to_address)
    value = parse_amount(config.amount_eth, "ether")

    if signer is None:
        signer = TransactionSigner(config)
        signer.load_from_config()

    node = node or JsonRpcAdapter(config)
    reporter = Reporter()

    print(reporter.header(signer.address, recipient, config.amount_eth))
    for profile in DEFAULT_FEE_SERIES:
        logger.debug("fee_profile", fees=profile.label, details=reporter.fee_details(profile))

    await node.connect()
    try:
        await _check_chain_id(node, config.chain_id)

        prober = Prober(
            client=SubmissionClient(node, signer, config.chain_id, config.gas_limit),
            tracker=ConfirmationTracker(
                node,
                timeout_seconds=config.receipt_timeout_seconds,
                poll_interval_seconds=config.poll_interval_seconds,
            ),
            sender=signer.address,
            recipient=recipient,
            value=value,
            reporter=reporter,
        )
        return await prober.run()
    finally:
        await node.disconnect()


async def _check_chain_id(node: NodeInterface, expected: int) -> None:
    """Warn when the node reports a different chain than the one we sign for."""
    try:
        actual = await node.get_chain_id()
    except NodeError as e:
        logger.warning("chain_id_unavailable", error=str(e))
        return
    if actual != expected:
        logger.warning("chain_id_mismatch", configured=expected, node=actual)


def list_types() -> None:
    """Print every probed type and whether it is encoded."""
    for tx_type in TxType:
        support = "supported" if tx_type.is_supported else "unsupported"
        print(f"  {tx_type.label}: {tx_type.name.lower()} ({support})")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "types":
        list_types()
        return

    try:
        config = load_config(
            rpc_url=args.rpc_url,
            to_address=args.to_address,
            amount_eth=args.amount_eth,
            chain_id=args.chain_id,
            receipt_timeout_seconds=args.receipt_timeout_seconds,
            log_level=args.log_level,
            log_json=args.log_json,
        )
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    set_config(config)
    setup_logging(config.log_level, config.log_json)

    try:
        asyncio.run(run_probe(config))
    except (ConfigError, ParseError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

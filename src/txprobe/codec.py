"""
Address and amount codec.

Parses account addresses and decimal amounts into the values used to build
transactions, and renders addresses for display.
"""

import re
from decimal import Decimal, InvalidOperation, localcontext

from eth_typing import ChecksumAddress
from eth_utils import is_checksum_address, is_hex_address, to_checksum_address

from txprobe.errors import ParseError


UNIT_DECIMALS = {
    "wei": 0,
    "gwei": 9,
    "ether": 18,
}

_DECIMAL_RE = re.compile(r"^(\d+\.?\d*|\.\d+)$")


def parse_address(text: str) -> ChecksumAddress:
    """
    Parse a 20-byte hex account address.

    Lowercase, uppercase and EIP-55 checksummed forms are accepted. A mixed-case
    address whose checksum does not verify is rejected.

    Args:
        text: Address text, with or without the 0x prefix

    Returns:
        The checksummed address

    Raises:
        ParseError: If the text is not a valid address
    """
    if not isinstance(text, str):
        raise ParseError(f"invalid address: {text!r}")

    candidate = text.strip()
    if not candidate.lower().startswith("0x"):
        candidate = "0x" + candidate

    if not is_hex_address(candidate):
        raise ParseError(f"invalid address: {text!r}")

    body = candidate[2:]
    if body != body.lower() and body != body.upper() and not is_checksum_address(candidate):
        raise ParseError(f"invalid address checksum: {text!r}")

    return to_checksum_address(candidate)


def parse_amount(text: str, unit: str = "ether") -> int:
    """
    Convert a human decimal amount into integer base units.

    Args:
        text: Decimal amount, e.g. "0.001"
        unit: One of "wei", "gwei", "ether"

    Returns:
        Exact amount in the smallest unit (wei)

    Raises:
        ParseError: If the text is not a plain non-negative decimal, the unit is
            unknown, or the amount has more fractional digits than the unit allows
    """
    if unit not in UNIT_DECIMALS:
        raise ParseError(f"unknown unit: {unit!r}")

    if not isinstance(text, str) or not _DECIMAL_RE.match(text.strip()):
        raise ParseError(f"invalid amount: {text!r}")

    try:
        amount = Decimal(text.strip())
    except InvalidOperation as e:
        raise ParseError(f"invalid amount: {text!r}") from e

    decimals = UNIT_DECIMALS[unit]
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(decimals)
        whole = scaled == scaled.to_integral_value()
    if not whole:
        raise ParseError(
            f"invalid amount: {text!r} has more than {decimals} fractional digits"
        )

    return int(scaled)


def format_address_short(addr: str) -> str:
    """Render an address as 0x + 8 hex chars + ellipsis + last 4 hex chars."""
    rendered = str(addr).lower()
    if not rendered.startswith("0x"):
        rendered = "0x" + rendered
    if len(rendered) <= 12:
        return rendered
    return f"{rendered[:10]}…{rendered[-4:]}"

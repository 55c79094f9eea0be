"""
Amount sanitization and unit conversion.

Amounts arrive as free text from the router ("5", "10 SHM", "$2.5").
Everything except digits and dots is stripped before parsing; a missing
or zero amount is an error for value-moving tools, never a default.
"""

from __future__ import annotations

import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

from agentchain.errors import MissingAmountError

NATIVE_DECIMALS = 18
GWEI_DECIMALS = 9

_NON_NUMERIC = re.compile(r"[^0-9.]")


def sanitize_amount(raw: Any) -> Decimal:
    """
    Parse a free-text amount.

    Raises:
        MissingAmountError: If nothing numeric remains or the amount is zero
    """
    if raw is None or isinstance(raw, bool):
        raise MissingAmountError()

    text = _NON_NUMERIC.sub("", str(raw))
    if text.count(".") > 1:
        head, _, tail = text.partition(".")
        text = f"{head}.{tail.replace('.', '')}"

    if not text or text == ".":
        raise MissingAmountError(f"Missing amount: could not read a number from {raw!r}")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise MissingAmountError(f"Missing amount: could not read a number from {raw!r}") from e

    if amount <= 0:
        raise MissingAmountError("Missing amount: the amount to transfer must be greater than zero")
    return amount


def to_base_units(amount: Decimal, decimals: int = NATIVE_DECIMALS) -> int:
    """Convert a token amount to integer base units (wei), truncating dust."""
    scaled = (amount * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_DOWN)
    return int(scaled)


def require_base_units(amount: Decimal, decimals: int = NATIVE_DECIMALS) -> int:
    """
    Convert a transfer amount to base units, rejecting dust.

    Raises:
        MissingAmountError: If the amount truncates to zero base units
    """
    value = to_base_units(amount, decimals)
    if value <= 0:
        raise MissingAmountError(
            f"Missing amount: {amount} is smaller than the smallest unit (1e-{decimals})"
        )
    return value


def format_units(value: int, decimals: int = NATIVE_DECIMALS) -> str:
    """
    Render base units as a decimal string.

    Always keeps at least one fractional digit: 10**18 wei -> "1.0".
    """
    amount = Decimal(value) / (Decimal(10) ** decimals)
    text = format(amount.normalize(), "f")
    if "." not in text:
        text = f"{text}.0"
    return text


def format_gwei(value: int) -> str:
    return format_units(value, GWEI_DECIMALS)


def display_amount(raw: Any) -> str:
    """Amount label for log entries ("N/A" when absent)."""
    if raw is None or raw == "":
        return "N/A"
    return str(raw)


__all__ = [
    "NATIVE_DECIMALS",
    "GWEI_DECIMALS",
    "sanitize_amount",
    "to_base_units",
    "require_base_units",
    "format_units",
    "format_gwei",
    "display_amount",
]

"""Decimal amount parsing and base-unit conversion.

On-chain amounts are plain ``int``; human amounts are ``Decimal`` parsed from
the caller's string so no float ever touches a value that gets signed.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from fairkit.errors import InvalidAmount, MissingAmount, NegativeAmount, ZeroAmount


def parse_amount(amount: Optional[str]) -> Decimal:
    """Parse a decimal amount string and reject zero or negative values.

    Raises:
        MissingAmount: amount is None or blank
        InvalidAmount: amount is not a finite decimal
        ZeroAmount: amount == 0
        NegativeAmount: amount < 0
    """
    if amount is None or not str(amount).strip():
        raise MissingAmount()

    text = str(amount).strip()
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise InvalidAmount(text) from e

    if not value.is_finite():
        raise InvalidAmount(text)
    if value == 0:
        raise ZeroAmount()
    if value < 0:
        raise NegativeAmount()
    return value


def to_base_units(amount: Optional[str], decimals: int) -> int:
    """Scale a decimal amount string to integer base units.

    Digits beyond ``decimals`` are rounded half-up.

    Raises:
        ZeroAmount: the amount rounds to zero base units
    """
    value = parse_amount(amount)
    scaled = value.scaleb(decimals)
    units = int(scaled.to_integral_value(rounding=ROUND_HALF_UP))
    if units == 0:
        raise ZeroAmount(f"Amount {amount} is below the smallest unit of a {decimals}-decimal token")
    return units


def format_units(raw: int, decimals: int) -> str:
    """Format integer base units as a decimal string.

    Trailing fractional zeros are dropped, and whole values carry no
    fraction: ``format_units(500000000000000000, 18) == "0.5"``,
    ``format_units(100000000, 6) == "100"``.
    """
    raw = int(raw)
    negative = raw < 0
    digits = str(abs(raw)).rjust(decimals + 1, "0")

    if decimals:
        whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    else:
        whole, fraction = digits, ""

    text = f"{whole}.{fraction}" if fraction else whole
    return f"-{text}" if negative else text


def echo_amount(amount: str) -> str:
    """Echo a caller amount back with at least one decimal place."""
    text = str(amount).strip()
    return text if "." in text else f"{text}.0"

# src/finfeed/shared/converters.py
"""
Value Converters - Locale and Unit Normalization

Small helpers shared by the adapters to turn upstream representations into
the domain types: comma decimals, DD.MM.YYYY dates, epoch timestamps and
atomic coin units.

Files that USE this module:
- finfeed.adapters.providers.cbr (comma decimals, Russian dates)
- finfeed.adapters.providers.mexc (decimal strings, ms epochs)
- finfeed.adapters.providers.mexc_trade (decimal and integer fields)
- finfeed.adapters.providers.hashvault (atomic units, second epochs)
- tests.test_converters (unit tests)

Files that this module USES:
- None (pure utility functions)
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# Monero uses 12 decimal places: 1 XMR = 10**12 piconero
ATOMIC_UNITS_PER_COIN = 10 ** 12


def parse_comma_decimal(value: str) -> Decimal:
    """
    Convert a number written with a comma separator to Decimal.

    Args:
        value: String such as '91,5125' (spaces are ignored)

    Returns:
        Decimal('91.5125')

    Raises:
        ValueError: If the string is not a number
    """
    cleaned = str(value).strip().replace("\xa0", "").replace(" ", "").replace(",", ".")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Not a decimal number: {value!r}") from e


def parse_ru_date(value: str) -> date:
    """
    Convert a DD.MM.YYYY date to a date object.

    Raises:
        ValueError: If the string is not in DD.MM.YYYY form
    """
    return datetime.strptime(value.strip(), "%d.%m.%Y").date()


def format_request_date(value: date) -> str:
    """Render a date as DD/MM/YYYY, the form the central bank expects in queries."""
    return value.strftime("%d/%m/%Y")


def format_display_date(value: date) -> str:
    """Render a date as DD.MM.YYYY for display."""
    return value.strftime("%d.%m.%Y")


def to_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """
    Convert a JSON number or numeric string to Decimal.

    Floats go through str() so 0.1 stays Decimal('0.1').
    Returns `default` for None, booleans, empty strings and garbage.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        text = str(value).strip()
        if not text:
            return default
        result = Decimal(text)
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """Convert a JSON number or numeric string to int, truncating decimals."""
    dec = to_decimal(value)
    if dec is None:
        return default
    return int(dec)


def ms_to_date(timestamp_ms: int) -> date:
    """UTC calendar day of a millisecond epoch."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).date()


def seconds_to_date(timestamp_s: int) -> date:
    """UTC calendar day of a second epoch."""
    return datetime.fromtimestamp(timestamp_s, tz=timezone.utc).date()


def atomic_to_coin(atomic: Any) -> Decimal:
    """
    Convert atomic units to whole coins.

    Example: 500000000000 -> Decimal('0.5'). Missing values count as zero.
    """
    amount = to_decimal(atomic, Decimal(0))
    return amount / ATOMIC_UNITS_PER_COIN


def now_ms() -> int:
    """Current local clock as a millisecond epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)

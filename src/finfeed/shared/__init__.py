"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Value conversion
- Logging configuration
"""

from finfeed.shared.validators import (
    is_numeric_order_id,
    normalize_symbol,
    parse_recv_window,
    validate_api_key,
    validate_bot_token,
    validate_order_id,
    validate_symbol,
)
from finfeed.shared.converters import (
    atomic_to_coin,
    parse_comma_decimal,
    parse_ru_date,
    to_decimal,
)

__all__ = [
    "validate_bot_token",
    "validate_api_key",
    "validate_symbol",
    "validate_order_id",
    "is_numeric_order_id",
    "normalize_symbol",
    "parse_recv_window",
    "atomic_to_coin",
    "parse_comma_decimal",
    "parse_ru_date",
    "to_decimal",
]

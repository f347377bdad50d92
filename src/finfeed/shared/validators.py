# src/finfeed/shared/validators.py
"""
Input Validation Utilities - Request and Configuration Validation

This module provides validation functions for configuration values and for
the parameters accepted by the exchange endpoints (symbols, order ids,
recvWindow). Shape checks happen before any request is signed.

Files that USE this module:
- finfeed.config.settings (uses validation functions in Settings field validators)
- finfeed.adapters.providers.mexc_trade (symbol and order id checks before signing)
- finfeed.adapters.telegram.handlers (parses command arguments)

Files that this module USES:
- None (pure utility functions)
"""
import re
from typing import Optional

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{4,20}$")
ORDER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{2,128}$")
NUMERIC_ORDER_ID_PATTERN = re.compile(r"^\d+$")

RECV_WINDOW_MIN = 1000
RECV_WINDOW_MAX = 60000
DEFAULT_RECV_WINDOW = 60000


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace()


def validate_symbol(symbol: str) -> bool:
    """Check a trading pair symbol such as XMRUSDT (upper-case, 4-20 chars)."""
    return bool(symbol) and bool(SYMBOL_PATTERN.match(symbol))


def validate_order_id(order_id: str) -> bool:
    """Check an exchange or client order id (2-128 chars of [A-Za-z0-9_-])."""
    return bool(order_id) and bool(ORDER_ID_PATTERN.match(order_id))


def is_numeric_order_id(order_id: str) -> bool:
    """
    Tell exchange-assigned ids from client-assigned ones.

    Returns:
        True for all-digit ids (looked up as orderId), False otherwise
        (looked up as origClientOrderId)
    """
    return bool(NUMERIC_ORDER_ID_PATTERN.match(order_id))


def normalize_symbol(symbol: Optional[str]) -> str:
    """Strip and upper-case a user-supplied symbol."""
    return (symbol or "").strip().upper()


def parse_recv_window(value: Optional[str]) -> Optional[int]:
    """
    Parse a user-supplied recvWindow.

    Args:
        value: Raw value from the caller (may be None or empty)

    Returns:
        The window in milliseconds, or None when it is missing, not an
        integer, or outside [RECV_WINDOW_MIN, RECV_WINDOW_MAX]. None means
        "use the default".
    """
    if not value:
        return None

    try:
        parsed = int(str(value).strip(), 10)
    except ValueError:
        return None

    if parsed < RECV_WINDOW_MIN or parsed > RECV_WINDOW_MAX:
        return None
    return parsed

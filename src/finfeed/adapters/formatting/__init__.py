"""
Formatting Adapters - Output Formatting

This package contains formatters for Telegram message output.
"""

from finfeed.adapters.formatting.formatter import (
    escape_markdown,
    format_order,
    format_orders,
    format_summary,
    pair_label,
)

__all__ = [
    "escape_markdown",
    "format_summary",
    "pair_label",
    "format_order",
    "format_orders",
]

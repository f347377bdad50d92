# src/finfeed/adapters/formatting/formatter.py
"""
Message Formatter - Text Formatting and Presentation

This module renders the normalized records as Telegram MarkdownV2 text:
the financial summary (/stats) and spot order listings (/order, /orders).
Missing data is shown as "no data" instead of failing the whole message.

Files that USE this module:
- finfeed.adapters.telegram.handlers (all replies)
- tests.test_formatter (unit tests)

Files that this module USES:
- finfeed.domain.models (FinancialSummary, SpotOrder)
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Union

from finfeed.domain.models import FinancialSummary, SpotOrder

NO_DATA_TEXT = "no data"

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def escape_markdown(text: Union[str, int, float, Decimal]) -> str:
    """Escape Telegram MarkdownV2 special characters."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", str(text))


def _fmt(value: Decimal, decimals: int = 2) -> str:
    return escape_markdown(f"{value:.{decimals}f}")


def _signed_pct(value: Decimal) -> str:
    """
    Format a percentage change with direction arrow.

    Returns:
        e.g. '▲ +2.50%' or '▼ -1.20%', already escaped
    """
    arrow = "▲" if value >= 0 else "▼"
    sign = "+" if value >= 0 else ""
    return f"{arrow} {escape_markdown(f'{sign}{value:.2f}')}%"


QUOTE_ASSETS = ("USDT", "USDC", "BTC", "ETH")


def pair_label(symbol: str) -> str:
    """Split an exchange symbol for display: 'XMRUSDT' -> 'XMR/USDT'."""
    symbol = symbol.upper()
    for quote in QUOTE_ASSETS:
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return f"{symbol[:-len(quote)]}/{quote}"
    return symbol


def format_summary(
    summary: FinancialSummary,
    title: str = "Financial summary",
    symbol: str = "XMRUSDT",
    currency_code: str = "USD",
) -> str:
    """
    Format the combined snapshot for the /stats command.

    Args:
        summary: FinancialSummary (members may be None)
        title: Heading line
        symbol: Exchange pair the crypto price belongs to
        currency_code: Fiat currency of the central-bank rate

    Returns:
        MarkdownV2 text
    """
    lines = [f"📊 *{escape_markdown(title)}*", ""]
    fiat = f"{escape_markdown(currency_code.upper())}/RUB"
    pair = escape_markdown(pair_label(symbol))

    if summary.usd_rate:
        lines.append(f"💵 *{fiat}:* {_fmt(summary.usd_rate.value)}")
    else:
        lines.append(f"💵 *{fiat}:* {NO_DATA_TEXT}")

    if summary.crypto_rate:
        rate = summary.crypto_rate
        lines.append(f"🪙 *{pair}:* {_fmt(rate.price)} \\({_signed_pct(rate.change_percent_24h)}\\)")
    else:
        lines.append(f"🪙 *{pair}:* {NO_DATA_TEXT}")

    if summary.key_rate:
        lines.append(f"🏦 *Key rate:* {_fmt(summary.key_rate.rate, 1)}%")
    else:
        lines.append(f"🏦 *Key rate:* {NO_DATA_TEXT}")

    if summary.mining:
        revenue = summary.mining.revenue
        lines.append("")
        # the pool adapter reads HashVault's Monero API, so amounts are always XMR
        lines.append("⛏ *XMR mining*")
        lines.append(f"Last payout: {escape_markdown(revenue.last_withdrawal)}")
        lines.append(f"Balance: {_fmt(revenue.confirmed_balance, 6)} XMR")
        lines.append(f"To next payout: {_fmt(revenue.payout_progress, 1)}%")
        lines.append(f"Hashrate \\(24h\\): {_fmt(summary.mining.hashrate.avg_24h, 0)} H/s")

    return "\n".join(lines)


def _fmt_time(timestamp_ms: int) -> str:
    if not timestamp_ms:
        return "-"
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M UTC")


def format_order(order: SpotOrder) -> str:
    """Format one spot order as a short MarkdownV2 block."""
    filled = Decimal(0)
    if order.orig_qty > 0:
        filled = order.executed_qty / order.orig_qty * 100
    return "\n".join(
        [
            f"*{escape_markdown(order.symbol)}* {escape_markdown(order.side)} {escape_markdown(order.type)}",
            f"ID: `{escape_markdown(order.order_id)}`",
            f"Status: {escape_markdown(order.status)}",
            f"Price: {escape_markdown(str(order.price))}",
            f"Filled: {escape_markdown(str(order.executed_qty))} / {escape_markdown(str(order.orig_qty))} "
            f"\\({_fmt(filled, 1)}%\\)",
            f"Updated: {escape_markdown(_fmt_time(order.update_time))}",
        ]
    )


def format_orders(orders: Iterable[SpotOrder], symbol: Optional[str] = None) -> str:
    """Format a list of open orders, most recently updated first as given."""
    orders = list(orders)
    scope = f" {escape_markdown(symbol)}" if symbol else ""
    if not orders:
        return f"No open orders{scope}\\."
    header = f"📋 *Open orders{scope}:* {len(orders)}"
    return "\n\n".join([header] + [format_order(o) for o in orders])

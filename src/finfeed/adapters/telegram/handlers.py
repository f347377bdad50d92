# src/finfeed/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing

This module contains the bot's command handlers:
- /start: short help
- /stats: financial summary (USD/RUB, XMR/USDT, key rate, mining)
- /order SYMBOL ORDER_ID [recvWindow]: one spot order
- /orders [SYMBOL] [recvWindow]: open spot orders

Handlers validate their arguments the way an HTTP boundary would
(symbol/order id shape, recvWindow range) before calling the adapters.
Signed exchange errors are reported to the user with their message; the
summary shows "no data" for any source that failed.

Files that USE this module:
- finfeed.app (build_handlers function creates handler instances)

Files that this module USES:
- finfeed.application.summary_service (SummaryService)
- finfeed.adapters.providers.mexc_trade (MexcTradeClient)
- finfeed.adapters.formatting.formatter (message formatting)
- finfeed.domain.errors (ExchangeError hierarchy)
- finfeed.shared.validators (argument parsing)
- finfeed.config (settings for wallet address and default symbol)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import CommandHandler, ContextTypes

from finfeed.adapters.formatting.formatter import (
    escape_markdown,
    format_order,
    format_orders,
    format_summary,
)
from finfeed.adapters.providers.mexc_trade import MexcTradeClient
from finfeed.application.summary_service import SummaryService
from finfeed.config import settings
from finfeed.domain.errors import ConfigurationError, ExchangeError, InvalidParameterError
from finfeed.shared.validators import normalize_symbol, parse_recv_window, validate_order_id, validate_symbol

logger = logging.getLogger(__name__)

START_TEXT = (
    "📊 *Financial summary bot*\n\n"
    "/stats \\- USD/RUB, XMR/USDT, key rate and mining stats\n"
    "/order SYMBOL ORDER\\_ID \\- one MEXC spot order\n"
    "/orders \\[SYMBOL\\] \\- open MEXC spot orders"
)

_summary_service: Optional[SummaryService] = None


def _get_summary_service() -> SummaryService:
    global _summary_service
    if _summary_service is None:
        _summary_service = SummaryService()
    return _summary_service


def parse_order_args(args: List[str]) -> Tuple[str, str, Optional[int]]:
    """
    Parse `/order SYMBOL ORDER_ID [recvWindow]`.

    Raises:
        InvalidParameterError: With a user-facing message
    """
    if len(args) < 2:
        raise InvalidParameterError("Usage: /order SYMBOL ORDER_ID [recvWindow]")
    symbol = normalize_symbol(args[0])
    order_id = args[1].strip()
    if not validate_symbol(symbol):
        raise InvalidParameterError("Invalid symbol format (example: XMRUSDT)")
    if not validate_order_id(order_id):
        raise InvalidParameterError("Order id contains invalid characters")
    recv_window = parse_recv_window(args[2]) if len(args) > 2 else None
    return symbol, order_id, recv_window


def parse_orders_args(args: List[str]) -> Tuple[Optional[str], Optional[int]]:
    """
    Parse `/orders [SYMBOL] [recvWindow]`.

    A single all-digit argument is taken as recvWindow.
    """
    symbol: Optional[str] = None
    recv_window: Optional[int] = None
    for arg in args[:2]:
        if arg.strip().isdigit():
            recv_window = parse_recv_window(arg)
        else:
            symbol = normalize_symbol(arg)
            if not validate_symbol(symbol):
                raise InvalidParameterError("Invalid symbol format (example: XMRUSDT)")
    return symbol, recv_window


# --- /start ---
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(START_TEXT, parse_mode=ParseMode.MARKDOWN_V2)


# --- /stats: financial summary ---
async def stats(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /stats - fetch every source concurrently and reply with the summary.

    Sources that fail show "no data"; the reply is sent regardless.
    """
    await update.message.reply_text("⏳ Loading data\\.\\.\\.", parse_mode=ParseMode.MARKDOWN_V2)
    try:
        summary = await _get_summary_service().build_summary(settings.hashvault_wallet_address or None)
        text = format_summary(summary, symbol=settings.mexc_symbol)
        await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN_V2)
    except Exception:
        logger.exception("/stats failed")
        await update.message.reply_text("Could not build the summary right now.")


async def _reply_exchange_error(update: Update, command: str, error: ExchangeError) -> None:
    if isinstance(error, ConfigurationError):
        logger.error("%s: %s", command, error)
    else:
        logger.warning("%s failed: %s (%s)", command, error, type(error).__name__)
    await update.message.reply_text(f"⚠️ {escape_markdown(str(error))}", parse_mode=ParseMode.MARKDOWN_V2)


# --- /order SYMBOL ORDER_ID [recvWindow] ---
async def order_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    try:
        symbol, order_id, recv_window = parse_order_args(context.args or [])
        client = MexcTradeClient()
        order = await asyncio.to_thread(client.get_order, symbol, order_id, recv_window)
    except ExchangeError as e:
        await _reply_exchange_error(update, "/order", e)
        return
    except Exception:
        logger.exception("/order failed")
        await update.message.reply_text("Could not fetch the order right now.")
        return

    await update.message.reply_text(format_order(order), parse_mode=ParseMode.MARKDOWN_V2)


# --- /orders [SYMBOL] [recvWindow] ---
async def orders_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    try:
        symbol, recv_window = parse_orders_args(context.args or [])
        client = MexcTradeClient()
        orders = await asyncio.to_thread(client.get_open_orders, symbol, recv_window)
    except ExchangeError as e:
        await _reply_exchange_error(update, "/orders", e)
        return
    except Exception:
        logger.exception("/orders failed")
        await update.message.reply_text("Could not fetch open orders right now.")
        return

    await update.message.reply_text(format_orders(orders, symbol), parse_mode=ParseMode.MARKDOWN_V2)


def build_handlers():
    """
    Build and return list of Telegram bot handlers.

    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler("start", start),
        CommandHandler("stats", stats),
        CommandHandler("order", order_cmd),
        CommandHandler("orders", orders_cmd),
    ]

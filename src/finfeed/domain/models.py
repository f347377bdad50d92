# src/finfeed/domain/models.py
"""
Domain Models - Normalized Financial Values

This module contains the value records every adapter produces:
- Fiat currency rates and policy (key) rates
- Crypto ticker snapshots
- Mining pool statistics
- Spot orders from the exchange's private API

Records are immutable and created fresh on each call. Monetary values are
Decimal, calendar days are datetime.date, instants are millisecond epochs.
`as_dict()` gives the JSON shape consumed by HTTP handlers and dashboards.

Files that USE this module:
- finfeed.adapters.providers.* (adapters create these records)
- finfeed.application.summary_service (composes them into FinancialSummary)
- finfeed.adapters.formatting.formatter (renders them as text)
- tests.* (tests assert on these records)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass  # Decorator for creating data classes
from datetime import date  # Calendar day type
from decimal import Decimal  # Exact decimal arithmetic for money and rates
from typing import Any, Dict, Optional, Tuple  # Type hints

# Sentinel shown instead of a date when the pool has no payment history
NO_DATA = "no data"

ORDER_STATUSES = frozenset(
    {"NEW", "PARTIALLY_FILLED", "FILLED", "CANCELED", "REJECTED", "EXPIRED"}
)
UNKNOWN_STATUS = "UNKNOWN"


def _num(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class CurrencyRate:
    """
    Price of one unit of a currency (or asset) on a calendar day.

    Attributes:
        value: Unit price, never negative
        date: Calendar day the price applies to
        change: Absolute change over the period (series from candles only)
        change_percent: Percentage change over the period (series from candles only)
    """
    value: Decimal
    date: date
    change: Optional[Decimal] = None
    change_percent: Optional[Decimal] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"value": float(self.value), "date": self.date.isoformat()}
        if self.change is not None:
            out["change"] = float(self.change)
        if self.change_percent is not None:
            out["changePercent"] = float(self.change_percent)
        return out


@dataclass(frozen=True)
class CryptoRate:
    """Last traded price of a crypto pair with its 24h change."""
    price: Decimal
    timestamp: int  # fetch time, ms epoch
    change_24h: Decimal
    change_percent_24h: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "price": float(self.price),
            "timestamp": self.timestamp,
            "change24h": float(self.change_24h),
            "changePercent24h": float(self.change_percent_24h),
        }


@dataclass(frozen=True)
class KeyRate:
    """Central-bank policy rate (percent) effective from `date`."""
    rate: Decimal
    date: date

    def as_dict(self) -> Dict[str, Any]:
        return {"rate": float(self.rate), "date": self.date.isoformat()}


@dataclass(frozen=True)
class MiningRevenue:
    """
    Revenue block of the mining dashboard, in whole coins.

    Attributes:
        last_withdrawal: Display date (DD.MM.YYYY) of the newest payout, or NO_DATA
        confirmed_balance: Balance confirmed on the pool
        payout_threshold: Balance at which the pool pays out automatically
        today: Amount credited today
    """
    last_withdrawal: str
    confirmed_balance: Decimal
    payout_threshold: Decimal
    today: Decimal

    @property
    def payout_progress(self) -> Decimal:
        """Percent of the payout threshold already reached, capped at 100."""
        if self.payout_threshold <= 0:
            return Decimal(0)
        return min(self.confirmed_balance / self.payout_threshold * 100, Decimal(100))


@dataclass(frozen=True)
class Hashrate:
    avg_24h: Decimal  # H/s


@dataclass(frozen=True)
class MiningStats:
    """Composite view over the pool's stats and payments endpoints."""
    revenue: MiningRevenue
    hashrate: Hashrate
    payout_dates: Tuple[date, ...]  # newest first, no duplicates

    def as_dict(self) -> Dict[str, Any]:
        return {
            "revenue": {
                "lastWithdrawal": self.revenue.last_withdrawal,
                "confirmedBalance": float(self.revenue.confirmed_balance),
                "payoutThreshold": float(self.revenue.payout_threshold),
                "today": float(self.revenue.today),
            },
            "hashrate": {"avg24h": float(self.hashrate.avg_24h)},
            "payoutDates": [d.isoformat() for d in self.payout_dates],
        }


@dataclass(frozen=True)
class SpotOrder:
    """
    Spot order as reported by the exchange's private API.

    `executed_qty` never exceeds `orig_qty`, and `status` is one of
    ORDER_STATUSES or UNKNOWN_STATUS.
    """
    symbol: str
    order_id: str
    client_order_id: str
    price: Decimal
    orig_qty: Decimal
    executed_qty: Decimal
    cummulative_quote_qty: Decimal
    status: str
    type: str
    side: str
    time_in_force: str
    is_working: bool
    time: int  # ms epoch
    update_time: int  # ms epoch

    def as_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "orderId": self.order_id,
            "clientOrderId": self.client_order_id,
            "price": float(self.price),
            "origQty": float(self.orig_qty),
            "executedQty": float(self.executed_qty),
            "cummulativeQuoteQty": float(self.cummulative_quote_qty),
            "status": self.status,
            "type": self.type,
            "side": self.side,
            "timeInForce": self.time_in_force,
            "isWorking": self.is_working,
            "time": self.time,
            "updateTime": self.update_time,
        }


@dataclass(frozen=True)
class FinancialSummary:
    """
    Combined snapshot used by the chat summary.

    Every member is optional: a source that failed leaves its slot None
    without affecting the others.
    """
    usd_rate: Optional[CurrencyRate] = None
    crypto_rate: Optional[CryptoRate] = None
    key_rate: Optional[KeyRate] = None
    mining: Optional[MiningStats] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "usdRate": self.usd_rate.as_dict() if self.usd_rate else None,
            "cryptoRate": self.crypto_rate.as_dict() if self.crypto_rate else None,
            "keyRate": self.key_rate.as_dict() if self.key_rate else None,
            "mining": self.mining.as_dict() if self.mining else None,
        }

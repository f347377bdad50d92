# src/finfeed/adapters/providers/mexc.py
"""
MEXC Market Data Provider (public endpoints)

This module implements the unauthenticated part of the MEXC spot v3 API for
one trading pair:
- /api/v3/ticker/24hr: last price and 24h change
- /api/v3/klines: daily candles for the price chart

Candle layout: [openTime, open, high, low, close, volume, closeTime, quoteVolume, ...]
All prices arrive as strings.

Files that USE this module:
- finfeed.application.summary_service (current crypto price)
- tests.test_mexc (unit tests)

Files that this module USES:
- finfeed.adapters.providers.base (HttpProvider)
- finfeed.config (settings for URL, symbol and timeout)
- finfeed.domain.models (CryptoRate, CurrencyRate)
- finfeed.shared.converters (decimal parsing, ms epochs)
"""
import logging
from decimal import Decimal
from typing import List, Optional

from finfeed.adapters.providers.base import HttpProvider
from finfeed.config import settings
from finfeed.domain.models import CryptoRate, CurrencyRate
from finfeed.shared.converters import ms_to_date, now_ms, to_decimal, to_int

log = logging.getLogger(__name__)

# Candle field positions
OPEN_TIME, OPEN, HIGH, LOW, CLOSE, VOLUME = range(6)


class MexcMarketProvider(HttpProvider):
    """Public MEXC market data for a single trading pair."""

    name = "MEXC"

    def __init__(self, symbol: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize MEXC market data provider.

        Args:
            symbol: Trading pair (defaults to settings.mexc_symbol, e.g. XMRUSDT)
            base_url: Optional API root (defaults to settings.mexc_base_url)
            timeout: Optional HTTP timeout in seconds
        """
        super().__init__(base_url or settings.mexc_base_url, timeout)
        self.symbol = (symbol or settings.mexc_symbol).upper()

    def get_current_price(self) -> Optional[CryptoRate]:
        """
        Get the last price and 24h change of the pair.

        The ticker carries no timestamp, so `timestamp` is the moment this
        adapter fetched it.

        Returns:
            CryptoRate, or None on any failure
        """
        try:
            data = self._get_json(f"{self.base_url}/api/v3/ticker/24hr", params={"symbol": self.symbol})
            if isinstance(data, list):
                data = data[0] if data else {}
            if not isinstance(data, dict):
                log.error("MEXC ticker unexpected response type: %r", type(data))
                return None

            price = to_decimal(data.get("lastPrice"))
            if price is None:
                log.warning("MEXC ticker for %s has no lastPrice: %s", self.symbol, data)
                return None

            rate = CryptoRate(
                price=price,
                timestamp=now_ms(),
                change_24h=to_decimal(data.get("priceChange"), Decimal(0)),
                change_percent_24h=to_decimal(data.get("priceChangePercent"), Decimal(0)),
            )
            log.info("MEXC %s: price=%s change=%s%%", self.symbol, rate.price, rate.change_percent_24h)
            return rate
        except Exception as e:
            log.error("Failed to get MEXC %s price: %s", self.symbol, e)
            return None

    def get_price_history(self, days: int = 30) -> List[CurrencyRate]:
        """
        Get one record per daily candle, oldest first.

        `value` is the close; `change` is close - open and `change_percent`
        is change / open * 100 (0 when open is 0). The exchange already
        returns candles in chronological order, which is kept as is.

        Returns:
            List of CurrencyRate, empty on failure or on an error payload
        """
        try:
            data = self._get_json(
                f"{self.base_url}/api/v3/klines",
                params={"symbol": self.symbol, "interval": "1d", "limit": days},
            )
            if not isinstance(data, list):
                log.error("MEXC klines returned non-list payload: %s", data)
                return []

            records: List[CurrencyRate] = []
            for candle in data:
                if not isinstance(candle, (list, tuple)) or len(candle) <= CLOSE:
                    log.warning("Skipping malformed MEXC candle: %r", candle)
                    continue
                open_price = to_decimal(candle[OPEN], Decimal(0))
                close_price = to_decimal(candle[CLOSE], Decimal(0))
                change = close_price - open_price
                change_percent = change / open_price * 100 if open_price > 0 else Decimal(0)
                records.append(
                    CurrencyRate(
                        value=close_price,
                        date=ms_to_date(to_int(candle[OPEN_TIME])),
                        change=change,
                        change_percent=change_percent,
                    )
                )
            return records
        except Exception as e:
            log.error("Failed to get MEXC %s history: %s", self.symbol, e)
            return []

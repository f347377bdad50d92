# src/finfeed/adapters/providers/hashvault.py
"""
HashVault Provider for Monero Mining Statistics

This module implements the public HashVault v3 API (only the wallet address
is needed, no API key). Two endpoints are combined into one MiningStats:
- /wallet/{address}/stats: 24h hashrate, balance, payout threshold, daily credit
- /wallet/{address}/payments: payout history, newest first

All amounts arrive in atomic units (piconero, 1 XMR = 10**12) and are
converted to XMR. Payment timestamps are Unix seconds and are turned into
UTC calendar days.

Files that USE this module:
- finfeed.application.summary_service (mining block of the summary)
- tests.test_hashvault (unit tests)

Files that this module USES:
- finfeed.adapters.providers.base (HttpProvider)
- finfeed.config (settings for URL and timeout)
- finfeed.domain.models (MiningStats and its parts)
- finfeed.shared.converters (atomic units, second epochs)
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from finfeed.adapters.providers.base import HttpProvider
from finfeed.config import settings
from finfeed.domain.models import NO_DATA, Hashrate, MiningRevenue, MiningStats
from finfeed.shared.converters import atomic_to_coin, format_display_date, seconds_to_date, to_decimal, to_int

log = logging.getLogger(__name__)


class HashVaultProvider(HttpProvider):
    """Read-only client for a wallet's HashVault statistics."""

    name = "HashVault"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize HashVault provider.

        Args:
            base_url: Optional API root (defaults to settings.hashvault_base_url)
            timeout: Optional HTTP timeout in seconds
        """
        super().__init__(base_url or settings.hashvault_base_url, timeout)

    def _wallet_url(self, wallet_address: str, endpoint: str) -> str:
        return f"{self.base_url}/wallet/{wallet_address}/{endpoint}"

    def get_stats(self, wallet_address: str) -> Optional[MiningStats]:
        """
        Get the mining dashboard for a wallet.

        The result is all-or-nothing: if either endpoint fails the whole
        call returns None rather than a half-filled view.

        Args:
            wallet_address: Monero wallet address (public, not a secret)

        Returns:
            MiningStats in XMR, or None on any failure
        """
        if not wallet_address:
            log.error("HashVault wallet address not provided")
            return None

        try:
            stats = self._get_json(self._wallet_url(wallet_address, "stats"), params={"poolType": "false"})
            payments = self._get_json(self._wallet_url(wallet_address, "payments"), params={"poolType": "false"})
        except Exception as e:
            log.error("Failed to get HashVault stats: %s", e)
            return None

        try:
            return self._build_stats(stats, payments)
        except Exception as e:
            log.error("Failed to parse HashVault stats: %s", e)
            return None

    @staticmethod
    def _build_stats(stats: Any, payments: Any) -> MiningStats:
        if not isinstance(stats, dict):
            raise RuntimeError(f"HashVault stats payload is {type(stats).__name__}, not an object")

        collective: Dict[str, Any] = stats.get("collective") or {}
        revenue: Dict[str, Any] = stats.get("revenue") or {}
        payment_list: List[Dict[str, Any]] = (
            [p for p in payments if isinstance(p, dict)] if isinstance(payments, list) else []
        )

        last_withdrawal = NO_DATA
        if payment_list and payment_list[0].get("ts"):
            last_withdrawal = format_display_date(seconds_to_date(to_int(payment_list[0]["ts"])))

        payout_dates = []
        for payment in payment_list:
            if not payment.get("ts"):
                continue
            day = seconds_to_date(to_int(payment["ts"]))
            if day not in payout_dates:
                payout_dates.append(day)

        result = MiningStats(
            revenue=MiningRevenue(
                last_withdrawal=last_withdrawal,
                confirmed_balance=atomic_to_coin(revenue.get("confirmedBalance")),
                payout_threshold=atomic_to_coin(revenue.get("payoutThreshold")),
                today=atomic_to_coin(revenue.get("dailyCredited")),
            ),
            hashrate=Hashrate(avg_24h=to_decimal(collective.get("avg24hashRate"), Decimal(0))),
            payout_dates=tuple(payout_dates),
        )
        log.info(
            "HashVault: hashrate=%s H/s balance=%s XMR payouts=%d",
            result.hashrate.avg_24h, result.revenue.confirmed_balance, len(payout_dates),
        )
        return result

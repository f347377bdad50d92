# src/finfeed/application/summary_service.py
"""
Summary Service - Concurrent Composition of the Public Sources

This module builds the combined snapshot behind the chat /stats command:
USD/RUB rate, crypto price, key rate and, when a wallet is configured,
mining statistics. The four calls are independent and run concurrently;
a failure in one source only blanks its own slot in the result.

Files that USE this module:
- finfeed.adapters.telegram.handlers (/stats command)
- tests.test_summary_service (unit tests)

Files that this module USES:
- finfeed.adapters.providers.cbr (CBRProvider)
- finfeed.adapters.providers.mexc (MexcMarketProvider)
- finfeed.adapters.providers.hashvault (HashVaultProvider)
- finfeed.domain.models (FinancialSummary)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio  # Concurrent execution of the blocking provider calls
import logging
from typing import Any, Callable, Optional

from finfeed.adapters.providers.cbr import CBRProvider
from finfeed.adapters.providers.hashvault import HashVaultProvider
from finfeed.adapters.providers.mexc import MexcMarketProvider
from finfeed.domain.models import FinancialSummary

log = logging.getLogger(__name__)


async def _run(name: str, func: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking provider call in a worker thread, logging failures."""
    try:
        return await asyncio.to_thread(func, *args)
    except Exception as e:
        log.warning("Summary source %s failed: %s", name, e)
        raise


def _settled(name: str, outcome: Any) -> Any:
    """Turn an exception from gather(return_exceptions=True) into None."""
    if isinstance(outcome, BaseException):
        return None
    if outcome is None:
        log.info("Summary source %s returned no data", name)
    return outcome


class SummaryService:
    """
    Builds FinancialSummary snapshots.

    Providers are injected so tests (and other front-ends) can swap them.
    """

    def __init__(
        self,
        cbr: Optional[CBRProvider] = None,
        market: Optional[MexcMarketProvider] = None,
        pool: Optional[HashVaultProvider] = None,
        currency_code: str = "USD",
    ):
        self.cbr = cbr or CBRProvider()
        self.market = market or MexcMarketProvider()
        self.pool = pool or HashVaultProvider()
        self.currency_code = currency_code

    async def build_summary(self, wallet_address: Optional[str] = None) -> FinancialSummary:
        """
        Fetch all sources concurrently and combine whatever succeeded.

        Args:
            wallet_address: Mining wallet; the mining slot stays None without it

        Returns:
            FinancialSummary whose members are None for failed sources
        """
        async def _no_wallet() -> None:
            return None

        outcomes = await asyncio.gather(
            _run("cbr_rate", self.cbr.get_current_rate, self.currency_code),
            _run("crypto_rate", self.market.get_current_price),
            _run("key_rate", self.cbr.get_current_key_rate),
            _run("mining", self.pool.get_stats, wallet_address) if wallet_address else _no_wallet(),
            return_exceptions=True,
        )
        usd_rate, crypto_rate, key_rate, mining = outcomes

        summary = FinancialSummary(
            usd_rate=_settled("cbr_rate", usd_rate),
            crypto_rate=_settled("crypto_rate", crypto_rate),
            key_rate=_settled("key_rate", key_rate),
            mining=_settled("mining", mining) if wallet_address else None,
        )
        log.info(
            "Summary built: usd=%s crypto=%s key_rate=%s mining=%s",
            summary.usd_rate is not None,
            summary.crypto_rate is not None,
            summary.key_rate is not None,
            summary.mining is not None,
        )
        return summary

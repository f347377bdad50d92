# tests/test_summary_service.py
"""
Summary Service Tests

Tests that the concurrent summary keeps each source isolated: one failing
provider leaves only its own slot empty.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- finfeed.application.summary_service (SummaryService)
"""
import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

from finfeed.application.summary_service import SummaryService
from finfeed.domain.models import CryptoRate, CurrencyRate, KeyRate


def _providers():
    cbr = Mock()
    cbr.get_current_rate.return_value = CurrencyRate(value=Decimal("91.5125"), date=date(2024, 1, 15))
    cbr.get_current_key_rate.return_value = KeyRate(rate=Decimal("16.00"), date=date(2023, 12, 18))
    market = Mock()
    market.get_current_price.return_value = CryptoRate(
        price=Decimal("152.37"),
        timestamp=1705000000000,
        change_24h=Decimal("0"),
        change_percent_24h=Decimal("0"),
    )
    pool = Mock()
    pool.get_stats.return_value = Mock(name="MiningStats")
    return cbr, market, pool


class TestBuildSummary:
    def test_all_sources(self):
        cbr, market, pool = _providers()
        service = SummaryService(cbr=cbr, market=market, pool=pool)

        summary = asyncio.run(service.build_summary("wallet"))

        assert summary.usd_rate.value == Decimal("91.5125")
        assert summary.crypto_rate.price == Decimal("152.37")
        assert summary.key_rate.rate == Decimal("16.00")
        assert summary.mining is pool.get_stats.return_value
        cbr.get_current_rate.assert_called_once_with("USD")
        pool.get_stats.assert_called_once_with("wallet")

    def test_failing_source_is_isolated(self):
        cbr, market, pool = _providers()
        market.get_current_price.side_effect = RuntimeError("boom")
        cbr.get_current_key_rate.return_value = None
        service = SummaryService(cbr=cbr, market=market, pool=pool)

        summary = asyncio.run(service.build_summary("wallet"))

        assert summary.crypto_rate is None
        assert summary.key_rate is None
        assert summary.usd_rate is not None
        assert summary.mining is not None

    def test_no_wallet_skips_mining(self):
        cbr, market, pool = _providers()
        service = SummaryService(cbr=cbr, market=market, pool=pool)

        summary = asyncio.run(service.build_summary(None))

        assert summary.mining is None
        pool.get_stats.assert_not_called()
        assert summary.as_dict()["mining"] is None

    def test_currency_code(self):
        cbr, market, pool = _providers()
        service = SummaryService(cbr=cbr, market=market, pool=pool, currency_code="EUR")

        asyncio.run(service.build_summary())

        cbr.get_current_rate.assert_called_once_with("EUR")

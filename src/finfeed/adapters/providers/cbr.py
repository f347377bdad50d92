# src/finfeed/adapters/providers/cbr.py
"""
Bank of Russia Provider for Fiat Rates and the Key Rate

This module reads the central bank's public endpoints:
- XML_daily.asp: official rates of all currencies for one day
- XML_dynamic.asp: one currency's rates over a date range
- hd_base/KeyRate: HTML table of key (policy) rate decisions

Quirks of the source:
1. XML is served in windows-1251 and must be decoded before parsing
2. Numbers use a comma as the decimal separator (91,5 -> 91.5)
3. Dates are DD.MM.YYYY in responses and DD/MM/YYYY in queries
4. The key rate has no structured API; rows are matched in raw HTML
5. Value is quoted per Nominal units (JPY and KZT per 100) and is
   returned as published

Every operation is best-effort: failures are logged and reported as None
or an empty list, never raised.

Files that USE this module:
- finfeed.application.summary_service (current USD rate and key rate)
- tests.test_cbr (unit tests)

Files that this module USES:
- finfeed.adapters.providers.base (HttpProvider)
- finfeed.config (settings for URLs and timeout)
- finfeed.domain.models (CurrencyRate, KeyRate)
- finfeed.shared.converters (comma decimals and dates)
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from finfeed.adapters.providers.base import HttpProvider
from finfeed.config import settings
from finfeed.domain.models import CurrencyRate, KeyRate
from finfeed.shared.converters import format_request_date, parse_comma_decimal, parse_ru_date

log = logging.getLogger(__name__)

CBR_ENCODING = "windows-1251"
MOSCOW_TZ = ZoneInfo("Europe/Moscow")

# Internal ids used by XML_dynamic.asp (VAL_NM_RQ). Codes missing here are
# resolved from the ID attribute of the daily snapshot.
CURRENCY_IDS: Dict[str, str] = {
    "USD": "R01235",
    "EUR": "R01239",
    "CNY": "R01375",
    "GBP": "R01035",
    "JPY": "R01820",
    "CHF": "R01775",
    "KZT": "R01335",
    "BYN": "R01090B",
    "TRY": "R01700J",
}

# <tr><td>DD.MM.YYYY</td><td>NN,NN</td></tr>, newest row first on the page
KEY_RATE_ROW = re.compile(
    r"<tr[^>]*>\s*<td[^>]*>(\d{2}\.\d{2}\.\d{4})</td>\s*<td[^>]*>([\d,]+)</td>\s*</tr>",
    re.IGNORECASE,
)

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _moscow_today() -> date:
    return datetime.now(MOSCOW_TZ).date()


class CBRProvider(HttpProvider):
    """
    Client for the Bank of Russia's public rate endpoints.

    Stateless: every call fetches fresh data.
    """

    name = "CBR"

    def __init__(
        self,
        base_url: Optional[str] = None,
        dynamic_url: Optional[str] = None,
        key_rate_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize Bank of Russia provider.

        Args:
            base_url: Optional scripts root (defaults to settings.cbr_base_url)
            dynamic_url: Optional XML_dynamic.asp URL (defaults to settings.cbr_dynamic_url)
            key_rate_url: Optional key rate page URL (defaults to settings.cbr_key_rate_url)
            timeout: Optional HTTP timeout in seconds
        """
        super().__init__(base_url or settings.cbr_base_url, timeout)
        self.daily_url = f"{self.base_url}/XML_daily.asp"
        self.dynamic_url = dynamic_url or settings.cbr_dynamic_url
        self.key_rate_url = key_rate_url or settings.cbr_key_rate_url

    # ------------------------------------------------------------------
    # fetching and decoding
    # ------------------------------------------------------------------

    def _fetch_xml(self, url: str, params: Optional[Dict[str, str]] = None) -> ET.Element:
        """
        Fetch a windows-1251 XML document and return its root element.

        Raises:
            RuntimeError: On transport errors
            UnicodeDecodeError: If the body is not valid windows-1251
            xml.etree.ElementTree.ParseError: If the decoded text is not XML
        """
        resp = self._get(url, params=params)
        text = resp.content.decode(CBR_ENCODING)
        # The declaration names windows-1251; the text is already decoded.
        text = _XML_DECLARATION.sub("", text, count=1)
        return ET.fromstring(text)

    def _fetch_daily(self, on_date: Optional[date] = None) -> ET.Element:
        params = {"date_req": format_request_date(on_date)} if on_date else None
        root = self._fetch_xml(self.daily_url, params=params)
        if root.tag != "ValCurs":
            raise RuntimeError(f"CBR daily XML has unexpected root <{root.tag}>")
        return root

    @staticmethod
    def _find_valute(root: ET.Element, currency_code: str) -> Optional[ET.Element]:
        code = currency_code.strip().upper()
        for valute in root.findall("Valute"):
            if (valute.findtext("CharCode") or "").strip().upper() == code:
                return valute
        return None

    def _parse_key_rate_rows(self, html: str, limit: Optional[int] = None) -> List[KeyRate]:
        records: List[KeyRate] = []
        for match in KEY_RATE_ROW.finditer(html):
            if limit is not None and len(records) >= limit:
                break
            date_str, rate_str = match.groups()
            records.append(KeyRate(rate=parse_comma_decimal(rate_str), date=parse_ru_date(date_str)))
        if not records:
            log.warning("CBR key rate page matched no table rows (layout change or empty page)")
        return records

    def _resolve_internal_id(self, currency_code: str) -> Optional[str]:
        """Map a currency code to the bank's internal id used by XML_dynamic.asp."""
        code = currency_code.strip().upper()
        if code in CURRENCY_IDS:
            return CURRENCY_IDS[code]
        valute = self._find_valute(self._fetch_daily(), code)
        if valute is None:
            return None
        return valute.get("ID")

    # ------------------------------------------------------------------
    # public operations
    # ------------------------------------------------------------------

    def get_current_rate(self, currency_code: str = "USD") -> Optional[CurrencyRate]:
        """
        Get today's official rate of a currency in roubles.

        Args:
            currency_code: ISO letter code, e.g. 'USD'

        Returns:
            CurrencyRate with the published Value (per Nominal units) and the publication date, or None
            if the code is absent or anything fails. None means "retry later".
        """
        try:
            root = self._fetch_daily()
            valute = self._find_valute(root, currency_code)
            if valute is None:
                log.warning("CBR daily XML has no %s entry", currency_code)
                return None

            value_text = valute.findtext("Value")
            if not value_text:
                log.warning("CBR %s entry has no Value", currency_code)
                return None

            date_attr = root.get("Date")
            rate_date = parse_ru_date(date_attr) if date_attr else _moscow_today()
            rate = CurrencyRate(
                value=parse_comma_decimal(value_text),
                date=rate_date,
            )
            log.info("CBR %s rate: %s on %s", currency_code, rate.value, rate.date)
            return rate
        except Exception as e:
            log.error("Failed to get CBR %s rate: %s", currency_code, e)
            return None

    def get_rate_on_date(self, currency_code: str, on_date: date) -> Optional[Decimal]:
        """
        Get the official rate of a currency for a given day.

        When no rate was published for `on_date` (weekend, holiday) the bank
        silently answers with the nearest previous business day's rate. That
        substitution is passed through unchanged: the returned value may
        belong to an earlier day than the one requested.

        Returns:
            Unit price as Decimal, or None on any failure
        """
        try:
            root = self._fetch_daily(on_date)
            valute = self._find_valute(root, currency_code)
            if valute is None:
                log.warning("CBR XML for %s has no %s entry", on_date, currency_code)
                return None
            value_text = valute.findtext("Value")
            if not value_text:
                return None
            return parse_comma_decimal(value_text)
        except Exception as e:
            log.error("Failed to get CBR %s rate on %s: %s", currency_code, on_date, e)
            return None

    def get_historical_series(self, currency_code: str = "USD", days: int = 30) -> List[CurrencyRate]:
        """
        Get a currency's official rates for the last `days` days.

        Only business days appear in the result. Records are sorted oldest
        first; the upstream does not guarantee an order.

        Returns:
            List of CurrencyRate, empty on any failure
        """
        try:
            internal_id = self._resolve_internal_id(currency_code)
            if not internal_id:
                log.warning("No CBR internal id for %s", currency_code)
                return []

            end = _moscow_today()
            start = end - timedelta(days=days)
            root = self._fetch_xml(
                self.dynamic_url,
                params={
                    "date_req1": format_request_date(start),
                    "date_req2": format_request_date(end),
                    "VAL_NM_RQ": internal_id,
                },
            )

            records: List[CurrencyRate] = []
            for record in root.findall("Record"):
                date_attr = record.get("Date")
                value_text = record.findtext("Value")
                if not date_attr or not value_text:
                    continue
                records.append(
                    CurrencyRate(
                        value=parse_comma_decimal(value_text),
                        date=parse_ru_date(date_attr),
                    )
                )

            records.sort(key=lambda r: r.date)
            log.info("CBR %s history: %d records (%s..%s)", currency_code, len(records), start, end)
            return records
        except Exception as e:
            log.error("Failed to get CBR %s history: %s", currency_code, e)
            return []

    def get_current_key_rate(self) -> Optional[KeyRate]:
        """
        Get the key rate currently in force.

        The page lists decisions newest first, so the first matching row is
        the current rate. A page whose layout no longer matches yields None,
        same as "no data".
        """
        try:
            html = self._get(self.key_rate_url).text
            rows = self._parse_key_rate_rows(html, limit=1)
            if not rows:
                return None
            log.info("CBR key rate: %s%% since %s", rows[0].rate, rows[0].date)
            return rows[0]
        except Exception as e:
            log.error("Failed to get CBR key rate: %s", e)
            return None

    def get_key_rate_history(self, max_records: int = 90) -> List[KeyRate]:
        """
        Get up to `max_records` key rate decisions in chronological order.

        `max_records` counts table rows, not days: the rate changes only on
        board decision dates.
        """
        try:
            if max_records <= 0:
                return []
            html = self._get(self.key_rate_url).text
            records = self._parse_key_rate_rows(html, limit=max_records)
            records.reverse()
            return records
        except Exception as e:
            log.error("Failed to get CBR key rate history: %s", e)
            return []

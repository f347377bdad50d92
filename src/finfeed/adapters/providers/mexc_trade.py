# src/finfeed/adapters/providers/mexc_trade.py
"""
MEXC Signed Client for Spot Orders

This module reads the private order endpoints of the MEXC spot v3 API:
- /api/v3/order: one order, by exchange id or client id
- /api/v3/openOrders: open orders, optionally for one symbol

Signing:
1. Parameters are kept in construction order and extended with
   recvWindow and timestamp (ms)
2. The URL-encoded query string is signed with HMAC-SHA256 using the API
   secret; the hex digest is appended as `signature`
3. The API key travels in the X-MEXC-APIKEY header, never in the query

Unlike the public sources this client raises: a missing key, a rejected
signature and an unknown order must stay distinguishable for the caller.

If the exchange rejects the first attempt because the timestamp fell
outside recvWindow, the client asks the exchange for its clock and retries
once with that time.

Files that USE this module:
- finfeed.adapters.telegram.handlers (/order and /orders commands)
- tests.test_mexc_trade (unit tests)

Files that this module USES:
- finfeed.config (settings for URL, credentials, recvWindow and timeout)
- finfeed.domain.errors (hard-fail error taxonomy)
- finfeed.domain.models (SpotOrder)
- finfeed.shared.converters (decimal and integer fields)
- finfeed.shared.validators (symbol and order id shape checks)
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import urllib.parse
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from finfeed.config import settings
from finfeed.domain.errors import (
    ConfigurationError,
    InvalidParameterError,
    PayloadShapeError,
    TransportError,
    UpstreamRejectedError,
)
from finfeed.domain.models import ORDER_STATUSES, UNKNOWN_STATUS, SpotOrder
from finfeed.shared.converters import now_ms, to_decimal, to_int
from finfeed.shared.validators import (
    is_numeric_order_id,
    normalize_symbol,
    validate_order_id,
    validate_symbol,
)

log = logging.getLogger(__name__)

API_KEY_HEADER = "X-MEXC-APIKEY"

# Lower-cased fragments of the exchange's "timestamp outside recvWindow" messages
CLOCK_SKEW_MARKERS = ("recvwindow", "timestamp")

# Candidate keys per logical field, first present wins. Covers the v3 API,
# older v2 payloads and a few snake_case variants seen in proxies.
ORDER_ID_KEYS = ("orderId", "id", "order_id", "orderNo")
CLIENT_ORDER_ID_KEYS = ("clientOrderId", "origClientOrderId", "client_order_id", "clientOid")
SYMBOL_KEYS = ("symbol", "pair", "market")
PRICE_KEYS = ("price", "orderPrice")
ORIG_QTY_KEYS = ("origQty", "orig_qty", "quantity", "qty", "vol")
EXECUTED_QTY_KEYS = ("executedQty", "executed_qty", "dealQuantity", "filledQty", "deal_vol")
QUOTE_QTY_KEYS = ("cummulativeQuoteQty", "cumulativeQuoteQty", "cummulative_quote_qty", "dealAmount", "deal_amount")
STATUS_KEYS = ("status", "state", "orderStatus")
TYPE_KEYS = ("type", "orderType", "order_type")
SIDE_KEYS = ("side", "tradeType", "trade_type")
TIME_IN_FORCE_KEYS = ("timeInForce", "time_in_force")
IS_WORKING_KEYS = ("isWorking", "is_working")
TIME_KEYS = ("time", "createTime", "create_time", "transactTime")
UPDATE_TIME_KEYS = ("updateTime", "update_time")

WORKING_STATUSES = ("NEW", "PARTIALLY_FILLED")
_SUCCESS_CODES = ("0", "200")


# ----------------------------------------------------------------------
# signing
# ----------------------------------------------------------------------

def build_query(params: Mapping[str, Any]) -> str:
    """URL-encode parameters in insertion order (no alphabetical re-sort)."""
    return urllib.parse.urlencode(list(params.items()))


def sign(secret: str, query: str) -> str:
    """HMAC-SHA256 of the exact query string, hex encoded."""
    return hmac.new(secret.encode("utf-8"), query.encode("utf-8"), hashlib.sha256).hexdigest()


def is_clock_skew_error(message: str) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in CLOCK_SKEW_MARKERS)


# ----------------------------------------------------------------------
# payload normalization
# ----------------------------------------------------------------------

def _first_present(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _error_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("msg", "message", "error", "errorMessage"):
            value = body.get(key)
            if value:
                return str(value)
    return None


def unwrap_record(payload: Any) -> Dict[str, Any]:
    """
    Extract the order object from a bare object, `{"data": {...}}` or `[{...}]`.

    Raises:
        PayloadShapeError: If no object can be found
    """
    record = payload
    if isinstance(record, dict) and isinstance(record.get("data"), (dict, list)):
        record = record["data"]
    if isinstance(record, list):
        if not record:
            raise PayloadShapeError("MEXC returned an empty order list")
        record = record[0]
    if not isinstance(record, dict):
        raise PayloadShapeError(f"MEXC returned {type(record).__name__} instead of an order object")
    return record


def unwrap_list(payload: Any) -> List[Dict[str, Any]]:
    """Extract the order list from `[...]` or `{"data": [...]}`."""
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if payload is None:
        return []
    if not isinstance(payload, list):
        keys = payload.keys() if isinstance(payload, dict) else ()
        raise PayloadShapeError("MEXC open orders payload is not a list", keys)
    return [item for item in payload if isinstance(item, dict)]


def map_status(raw: Any) -> str:
    status = str(raw or "").strip().upper()
    if status in ORDER_STATUSES:
        return status
    if status:
        log.warning("Unknown MEXC order status %r", raw)
    return UNKNOWN_STATUS


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def map_order(record: Mapping[str, Any], fallback_symbol: str = "") -> SpotOrder:
    """
    Map a raw order object to SpotOrder using the alias lists above.

    Raises:
        PayloadShapeError: If the object carries no order id of any known name
    """
    if not isinstance(record, Mapping):
        raise PayloadShapeError(f"Order record is {type(record).__name__}, not an object")

    client_order_id = _first_present(record, CLIENT_ORDER_ID_KEYS)
    order_id = _first_present(record, ORDER_ID_KEYS)
    if order_id is None:
        order_id = client_order_id
    if order_id is None:
        raise PayloadShapeError("MEXC order payload has no order id", record.keys())

    status = map_status(_first_present(record, STATUS_KEYS))
    orig_qty = to_decimal(_first_present(record, ORIG_QTY_KEYS), to_decimal(0))
    executed_qty = to_decimal(_first_present(record, EXECUTED_QTY_KEYS), to_decimal(0))
    if executed_qty > orig_qty:
        log.warning(
            "MEXC order %s reports executedQty %s above origQty %s, clamping",
            order_id, executed_qty, orig_qty,
        )
        executed_qty = orig_qty

    is_working_raw = _first_present(record, IS_WORKING_KEYS)
    created = to_int(_first_present(record, TIME_KEYS))

    return SpotOrder(
        symbol=str(_first_present(record, SYMBOL_KEYS) or fallback_symbol).upper(),
        order_id=str(order_id),
        client_order_id=str(client_order_id or ""),
        price=to_decimal(_first_present(record, PRICE_KEYS), to_decimal(0)),
        orig_qty=orig_qty,
        executed_qty=executed_qty,
        cummulative_quote_qty=to_decimal(_first_present(record, QUOTE_QTY_KEYS), to_decimal(0)),
        status=status,
        type=str(_first_present(record, TYPE_KEYS) or "").upper(),
        side=str(_first_present(record, SIDE_KEYS) or "").upper(),
        time_in_force=str(_first_present(record, TIME_IN_FORCE_KEYS) or "").upper(),
        is_working=_to_bool(is_working_raw) if is_working_raw is not None else status in WORKING_STATUSES,
        time=created,
        update_time=to_int(_first_present(record, UPDATE_TIME_KEYS), created),
    )


# ----------------------------------------------------------------------
# client
# ----------------------------------------------------------------------

class MexcTradeClient:
    """
    Read-only client for MEXC private order endpoints.

    Holds credentials and defaults only; every call is independent.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        recv_window: Optional[int] = None,
        timeout: Optional[int] = None,
    ):
        """
        Args:
            api_key: MEXC API key (defaults to settings.mexc_api_key)
            api_secret: MEXC API secret (defaults to settings.mexc_api_secret)
            base_url: Optional API root (defaults to settings.mexc_base_url)
            recv_window: Default validity window in ms (defaults to settings.mexc_recv_window)
            timeout: Optional HTTP timeout in seconds
        """
        self.api_key = api_key if api_key is not None else settings.mexc_api_key
        self._api_secret = (
            api_secret if api_secret is not None else settings.mexc_api_secret.get_secret_value()
        )
        self.base_url = (base_url or settings.mexc_base_url).rstrip("/")
        self.recv_window = recv_window or settings.mexc_recv_window
        self.timeout = timeout or settings.http_timeout_seconds

    # -- low level -------------------------------------------------------

    def _require_credentials(self) -> None:
        if not self.api_key or not self._api_secret:
            raise ConfigurationError("MEXC API key and secret are not configured")

    def _http_get(self, url: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        try:
            return requests.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            log.error("MEXC API timeout after %d seconds", self.timeout)
            raise TransportError(f"MEXC API timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            log.error("MEXC API request failed: %s", e)
            raise TransportError(f"MEXC API request failed: {e}") from e

    @staticmethod
    def _read_body(resp: requests.Response) -> Any:
        """Return the decoded JSON body, raising UpstreamRejectedError for error answers."""
        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            message = _error_message(body) or f"MEXC API HTTP {resp.status_code}"
            code = body.get("code") if isinstance(body, dict) else None
            raise UpstreamRejectedError(message, status=resp.status_code, code=code)

        if body is None:
            raise PayloadShapeError("MEXC API returned a non-JSON body")

        # Some gateways answer 200 with {"code": ..., "msg": ...}
        if isinstance(body, dict) and "code" in body and str(body["code"]) not in _SUCCESS_CODES:
            message = _error_message(body)
            if message:
                raise UpstreamRejectedError(message, status=resp.status_code, code=body["code"])
        return body

    def _send_signed(self, path: str, params: Mapping[str, Any], timestamp: int, recv_window: int) -> Any:
        signed: Dict[str, Any] = dict(params)
        signed["recvWindow"] = recv_window
        signed["timestamp"] = timestamp
        query = build_query(signed)
        url = f"{self.base_url}{path}?{query}&signature={sign(self._api_secret, query)}"
        log.debug("Signed GET %s (params=%s)", path, list(signed))
        resp = self._http_get(
            url, headers={API_KEY_HEADER: self.api_key, "Content-Type": "application/json"}
        )
        return self._read_body(resp)

    def get_server_time(self) -> int:
        """
        Get the exchange clock (unauthenticated).

        Raises:
            TransportError, UpstreamRejectedError, PayloadShapeError
        """
        body = self._read_body(self._http_get(f"{self.base_url}/api/v3/time"))
        server_time = body.get("serverTime") if isinstance(body, dict) else None
        if server_time is None:
            keys = body.keys() if isinstance(body, dict) else ()
            raise PayloadShapeError("MEXC time payload has no serverTime", keys)
        return to_int(server_time)

    def _signed_get(self, path: str, params: Mapping[str, Any], recv_window: Optional[int] = None) -> Any:
        """
        Send a signed GET with one clock-skew retry.

        attempt 1 (local clock) -> rejected for timestamp/recvWindow?
            no  -> raise
            yes -> fetch server time -> attempt 2 (server clock) -> result or raise
        """
        window = recv_window or self.recv_window
        try:
            return self._send_signed(path, params, now_ms(), window)
        except UpstreamRejectedError as e:
            if not is_clock_skew_error(e.message):
                raise
            log.warning("MEXC rejected timestamp (%s), retrying with server time", e.message)

        server_time = self.get_server_time()
        return self._send_signed(path, params, server_time, window)

    # -- operations -----------------------------------------------------

    def get_order(self, symbol: str, order_id: str, recv_window: Optional[int] = None) -> SpotOrder:
        """
        Get one spot order.

        All-digit ids are looked up as exchange order ids, anything else as
        client order ids.

        Raises:
            ConfigurationError: Credentials missing
            InvalidParameterError: Malformed symbol or order id
            UpstreamRejectedError: The exchange refused the request
            TransportError: The exchange could not be reached
            PayloadShapeError: The answer is not a recognizable order
        """
        self._require_credentials()
        symbol = normalize_symbol(symbol)
        order_id = (order_id or "").strip()
        if not validate_symbol(symbol):
            raise InvalidParameterError(f"Invalid symbol {symbol!r} (expected e.g. XMRUSDT)")
        if not validate_order_id(order_id):
            raise InvalidParameterError(f"Invalid order id {order_id!r}")

        params: Dict[str, Any] = {"symbol": symbol}
        if is_numeric_order_id(order_id):
            params["orderId"] = order_id
        else:
            params["origClientOrderId"] = order_id

        payload = self._signed_get("/api/v3/order", params, recv_window)
        order = map_order(unwrap_record(payload), fallback_symbol=symbol)
        log.info("MEXC order %s %s: %s", symbol, order.order_id, order.status)
        return order

    def get_open_orders(self, symbol: Optional[str] = None, recv_window: Optional[int] = None) -> List[SpotOrder]:
        """
        Get open orders for one symbol, or for all pairs when `symbol` is empty.

        Returns:
            Orders sorted by update time, most recent first

        Raises:
            Same as get_order
        """
        self._require_credentials()
        params: Dict[str, Any] = {}
        symbol = normalize_symbol(symbol)
        if symbol:
            if not validate_symbol(symbol):
                raise InvalidParameterError(f"Invalid symbol {symbol!r} (expected e.g. XMRUSDT)")
            params["symbol"] = symbol

        payload = self._signed_get("/api/v3/openOrders", params, recv_window)
        orders = [map_order(record, fallback_symbol=symbol) for record in unwrap_list(payload)]
        orders.sort(key=lambda o: o.update_time, reverse=True)
        log.info("MEXC open orders%s: %d", f" for {symbol}" if symbol else "", len(orders))
        return orders

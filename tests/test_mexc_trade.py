# tests/test_mexc_trade.py
"""
MEXC Signed Client Tests

Unit tests for MexcTradeClient and its helpers: query signing, payload
unwrapping, field aliases, status mapping, the clock-skew retry and the
error taxonomy.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- finfeed.adapters.providers.mexc_trade (MexcTradeClient, sign, build_query, map_order)
- finfeed.domain.errors (expected exceptions)
"""
from decimal import Decimal
from unittest.mock import Mock, patch
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests

from finfeed.adapters.providers.mexc_trade import (
    API_KEY_HEADER,
    MexcTradeClient,
    build_query,
    is_clock_skew_error,
    map_order,
    sign,
)
from finfeed.domain.errors import (
    ConfigurationError,
    InvalidParameterError,
    PayloadShapeError,
    TransportError,
    UpstreamRejectedError,
)

GET = "finfeed.adapters.providers.mexc_trade.requests.get"
NOW = "finfeed.adapters.providers.mexc_trade.now_ms"

SECRET = "NhqPtmdSJYdKjVHjA7PZj4Mge3R5YNiP1e3UZjInClVN65XAbvqqM6A7H5fATj0j"

ORDER = {
    "symbol": "XMRUSDT",
    "orderId": "123456789",
    "clientOrderId": "my-order-1",
    "price": "150.5",
    "origQty": "2",
    "executedQty": "0.5",
    "cummulativeQuoteQty": "75.25",
    "status": "PARTIALLY_FILLED",
    "type": "LIMIT",
    "side": "BUY",
    "timeInForce": "GTC",
    "isWorking": True,
    "time": 1700000000000,
    "updateTime": 1700000100000,
}

SKEW_REJECTION = {"code": 700003, "msg": "Timestamp for this request is outside of the recvWindow."}


def _response(payload, status: int = 200) -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.ok = status < 400
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def _client(**kwargs) -> MexcTradeClient:
    options = {"api_key": "mx0vglTestKey", "api_secret": SECRET, "base_url": "https://api.mexc.com", "recv_window": 5000}
    options.update(kwargs)
    return MexcTradeClient(**options)


def _query(url: str) -> dict:
    return dict(parse_qsl(urlsplit(url).query))


class TestSigning:
    def test_known_vector(self):
        query = "symbol=LTCBTC&side=BUY&type=LIMIT&timeInForce=GTC&quantity=1&price=0.1&recvWindow=5000&timestamp=1499827319559"

        assert sign(SECRET, query) == "c8db56825ae71d6d79447849e617115f4a920fa2acdcab2b053c4b2838bd6b71"

    def test_query_keeps_insertion_order(self):
        params = {
            "symbol": "LTCBTC",
            "side": "BUY",
            "type": "LIMIT",
            "timeInForce": "GTC",
            "quantity": 1,
            "price": 0.1,
            "recvWindow": 5000,
            "timestamp": 1499827319559,
        }

        assert build_query(params) == (
            "symbol=LTCBTC&side=BUY&type=LIMIT&timeInForce=GTC&quantity=1&price=0.1&recvWindow=5000&timestamp=1499827319559"
        )

    def test_clock_skew_detection(self):
        assert is_clock_skew_error(SKEW_REJECTION["msg"])
        assert is_clock_skew_error("Invalid TIMESTAMP")
        assert not is_clock_skew_error("Order does not exist.")
        assert not is_clock_skew_error("")

    @patch(NOW, return_value=1700000000000)
    @patch(GET)
    def test_signed_request_layout(self, mock_get, _now):
        mock_get.return_value = _response(ORDER)

        _client().get_order("XMRUSDT", "123456789")

        url = mock_get.call_args.args[0]
        base, _, rest = url.partition("?")
        unsigned, _, signature = rest.rpartition("&signature=")
        assert base == "https://api.mexc.com/api/v3/order"
        assert unsigned == "symbol=XMRUSDT&orderId=123456789&recvWindow=5000&timestamp=1700000000000"
        assert signature == sign(SECRET, unsigned)
        headers = mock_get.call_args.kwargs["headers"]
        assert headers[API_KEY_HEADER] == "mx0vglTestKey"
        assert "mx0vglTestKey" not in url


class TestGetOrder:
    @patch(GET)
    def test_maps_all_fields(self, mock_get):
        mock_get.return_value = _response(ORDER)

        order = _client().get_order("xmrusdt", "123456789")

        assert order.symbol == "XMRUSDT"
        assert order.order_id == "123456789"
        assert order.client_order_id == "my-order-1"
        assert order.price == Decimal("150.5")
        assert order.orig_qty == Decimal("2")
        assert order.executed_qty == Decimal("0.5")
        assert order.cummulative_quote_qty == Decimal("75.25")
        assert order.status == "PARTIALLY_FILLED"
        assert order.type == "LIMIT"
        assert order.side == "BUY"
        assert order.time_in_force == "GTC"
        assert order.is_working is True
        assert order.time == 1700000000000
        assert order.update_time == 1700000100000

    @patch(GET)
    def test_payload_shapes_are_equivalent(self, mock_get):
        results = []
        for payload in (ORDER, {"code": 0, "data": ORDER}, [ORDER]):
            mock_get.return_value = _response(payload)
            results.append(_client().get_order("XMRUSDT", "123456789"))

        assert results[0] == results[1] == results[2]

    @patch(GET)
    def test_client_id_uses_orig_client_order_id(self, mock_get):
        mock_get.return_value = _response(ORDER)

        _client().get_order("XMRUSDT", "my-order-1")

        query = _query(mock_get.call_args.args[0])
        assert query["origClientOrderId"] == "my-order-1"
        assert "orderId" not in query

    @patch(GET)
    def test_missing_credentials_fail_before_network(self, mock_get):
        with pytest.raises(ConfigurationError):
            _client(api_key="", api_secret="").get_order("XMRUSDT", "123456789")

        mock_get.assert_not_called()

    @pytest.mark.parametrize("symbol,order_id", [
        ("XMR-USDT", "123456789"),
        ("XM", "123456789"),
        ("XMRUSDT", "1"),
        ("XMRUSDT", "bad id!"),
        ("XMRUSDT", ""),
    ])
    @patch(GET)
    def test_malformed_input_fails_before_network(self, mock_get, symbol, order_id):
        with pytest.raises(InvalidParameterError):
            _client().get_order(symbol, order_id)

        mock_get.assert_not_called()

    @patch(GET)
    def test_non_skew_rejection_is_not_retried(self, mock_get):
        mock_get.return_value = _response({"code": -2013, "msg": "Order does not exist."}, status=400)

        with pytest.raises(UpstreamRejectedError) as exc_info:
            _client().get_order("XMRUSDT", "123456789")

        assert mock_get.call_count == 1
        assert exc_info.value.message == "Order does not exist."
        assert exc_info.value.status == 400
        assert exc_info.value.code == -2013

    @patch(GET)
    def test_unparseable_error_body_uses_status(self, mock_get):
        mock_get.return_value = _response(ValueError("not json"), status=502)

        with pytest.raises(UpstreamRejectedError) as exc_info:
            _client().get_order("XMRUSDT", "123456789")

        assert exc_info.value.message == "MEXC API HTTP 502"

    @patch(GET)
    def test_ok_status_with_error_code_is_rejection(self, mock_get):
        mock_get.return_value = _response({"code": 10072, "msg": "Api key info invalid"})

        with pytest.raises(UpstreamRejectedError, match="Api key info invalid"):
            _client().get_order("XMRUSDT", "123456789")

    @patch(GET)
    def test_missing_ids_name_present_keys(self, mock_get):
        mock_get.return_value = _response({"symbol": "XMRUSDT", "status": "NEW"})

        with pytest.raises(PayloadShapeError) as exc_info:
            _client().get_order("XMRUSDT", "123456789")

        assert exc_info.value.keys == ["status", "symbol"]
        assert "status" in str(exc_info.value)

    @patch(GET)
    def test_transport_failure(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(TransportError):
            _client().get_order("XMRUSDT", "123456789")

    @patch(GET)
    def test_timeout_is_transport_failure(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(TransportError):
            _client().get_order("XMRUSDT", "123456789")


class TestClockSkewRetry:
    @patch(NOW, return_value=1700000000000)
    @patch(GET)
    def test_retries_once_with_server_time(self, mock_get, _now):
        mock_get.side_effect = [
            _response(SKEW_REJECTION, status=400),
            _response({"serverTime": 1700000003500}),
            _response(ORDER),
        ]

        order = _client().get_order("XMRUSDT", "123456789")

        assert order.order_id == "123456789"
        assert mock_get.call_count == 3
        first, time_call, retry = (c.args[0] for c in mock_get.call_args_list)
        assert _query(first)["timestamp"] == "1700000000000"
        assert time_call == "https://api.mexc.com/api/v3/time"
        assert _query(retry)["timestamp"] == "1700000003500"

    @patch(NOW, return_value=1700000000000)
    @patch(GET)
    def test_second_skew_rejection_is_raised(self, mock_get, _now):
        mock_get.side_effect = [
            _response(SKEW_REJECTION, status=400),
            _response({"serverTime": 1700000003500}),
            _response(SKEW_REJECTION, status=400),
        ]

        with pytest.raises(UpstreamRejectedError, match="recvWindow"):
            _client().get_order("XMRUSDT", "123456789")

        assert mock_get.call_count == 3

    @patch(GET)
    def test_server_time_without_field(self, mock_get):
        mock_get.side_effect = [_response(SKEW_REJECTION, status=400), _response({})]

        with pytest.raises(PayloadShapeError):
            _client().get_order("XMRUSDT", "123456789")


class TestOpenOrders:
    @patch(GET)
    def test_sorted_most_recent_first(self, mock_get):
        older = dict(ORDER, orderId="1", updateTime=1700000000000)
        newer = dict(ORDER, orderId="2", updateTime=1700000500000)
        middle = dict(ORDER, orderId="3", updateTime=1700000200000)
        mock_get.return_value = _response([older, newer, middle])

        orders = _client().get_open_orders("XMRUSDT")

        assert [o.order_id for o in orders] == ["2", "3", "1"]

    @patch(GET)
    def test_without_symbol_sends_no_symbol(self, mock_get):
        mock_get.return_value = _response({"data": []})

        assert _client().get_open_orders() == []
        query = _query(mock_get.call_args.args[0])
        assert "symbol" not in query
        assert mock_get.call_args.args[0].startswith("https://api.mexc.com/api/v3/openOrders?")

    @patch(GET)
    def test_invalid_symbol(self, mock_get):
        with pytest.raises(InvalidParameterError):
            _client().get_open_orders("bad symbol")

        mock_get.assert_not_called()

    @patch(GET)
    def test_object_payload_is_shape_error(self, mock_get):
        mock_get.return_value = _response({"orders": []})

        with pytest.raises(PayloadShapeError):
            _client().get_open_orders("XMRUSDT")


class TestMapOrder:
    def test_unknown_status(self):
        order = map_order(dict(ORDER, status="SUSPENDED"))

        assert order.status == "UNKNOWN"

    @pytest.mark.parametrize("raw", ["PARTIALLY_CANCELED", "CANCELLED", ""])
    def test_statuses_outside_fixed_set_are_unknown(self, raw):
        assert map_order(dict(ORDER, status=raw)).status == "UNKNOWN"

    def test_lower_case_status_is_recognized(self):
        assert map_order(dict(ORDER, status="canceled")).status == "CANCELED"

    def test_executed_qty_is_clamped(self):
        order = map_order(dict(ORDER, origQty="1", executedQty="1.5"))

        assert order.executed_qty == Decimal("1")

    def test_alternate_field_names(self):
        record = {
            "id": 42,
            "clientOid": "c-42",
            "state": "filled",
            "vol": "3",
            "deal_vol": "3",
            "orderPrice": "149.9",
            "dealAmount": "449.7",
            "orderType": "limit",
            "tradeType": "sell",
            "createTime": 1700000000000,
        }

        order = map_order(record, fallback_symbol="XMRUSDT")

        assert order.order_id == "42"
        assert order.client_order_id == "c-42"
        assert order.symbol == "XMRUSDT"
        assert order.status == "FILLED"
        assert order.orig_qty == Decimal("3")
        assert order.executed_qty == Decimal("3")
        assert order.price == Decimal("149.9")
        assert order.cummulative_quote_qty == Decimal("449.7")
        assert order.type == "LIMIT"
        assert order.side == "SELL"
        assert order.is_working is False
        assert order.update_time == 1700000000000

    def test_client_id_stands_in_for_missing_order_id(self):
        record = {k: v for k, v in ORDER.items() if k != "orderId"}

        assert map_order(record).order_id == "my-order-1"

    def test_as_dict_uses_wire_names(self):
        data = map_order(ORDER).as_dict()

        assert data["orderId"] == "123456789"
        assert data["cummulativeQuoteQty"] == 75.25
        assert data["isWorking"] is True

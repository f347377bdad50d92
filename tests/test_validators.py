# tests/test_validators.py
"""
Validator Tests

Unit tests for configuration and request parameter validation.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- finfeed.shared.validators
"""
import pytest

from finfeed.shared.validators import (
    DEFAULT_RECV_WINDOW,
    is_numeric_order_id,
    normalize_symbol,
    parse_recv_window,
    validate_api_key,
    validate_bot_token,
    validate_order_id,
    validate_symbol,
)


class TestSymbolsAndIds:
    @pytest.mark.parametrize("symbol,valid", [
        ("XMRUSDT", True),
        ("BTCUSDC", True),
        ("xmrusdt", False),
        ("XMR_USDT", False),
        ("XMR", False),
        ("", False),
    ])
    def test_symbol(self, symbol, valid):
        assert validate_symbol(symbol) is valid

    def test_normalize_symbol(self):
        assert normalize_symbol("  xmrusdt ") == "XMRUSDT"
        assert normalize_symbol(None) == ""

    @pytest.mark.parametrize("order_id,valid", [
        ("123456789", True),
        ("my-order_1", True),
        ("x", False),
        ("has space", False),
        ("a" * 129, False),
    ])
    def test_order_id(self, order_id, valid):
        assert validate_order_id(order_id) is valid

    def test_numeric_order_id(self):
        assert is_numeric_order_id("123456789")
        assert not is_numeric_order_id("C02__123")


class TestRecvWindow:
    @pytest.mark.parametrize("raw,expected", [
        ("5000", 5000),
        ("1000", 1000),
        ("60000", 60000),
        ("999", None),
        ("60001", None),
        ("abc", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, raw, expected):
        assert parse_recv_window(raw) == expected

    def test_default_is_maximum(self):
        assert DEFAULT_RECV_WINDOW == 60000


class TestCredentials:
    def test_bot_token(self):
        assert validate_bot_token("123456789:" + "A" * 35)
        assert not validate_bot_token("not-a-token")
        assert not validate_bot_token("")

    def test_api_key(self):
        assert validate_api_key("mx0vglTestKey")
        assert not validate_api_key("short")
        assert not validate_api_key("           ")

"""Unit tests for alert message formatting."""

import pytest

from volatility_monitor.core.enums import AlertCategory, Direction
from volatility_monitor.notify.formatting import (
    BEARISH_COLOR,
    BULLISH_COLOR,
    build_alert_message,
    display_symbol,
    format_count,
    format_price,
    format_signed_pct,
    format_volume,
    scan_log_line,
)

from conftest import make_analysis


@pytest.mark.parametrize("price, expected", [
    (0.001234567, "$0.001235"),
    (0.5, "$0.5000"),
    (0.01, "$0.0100"),
    (1.0, "$1.00"),
    (64250.456, "$64250.46"),
])
def test_format_price(price, expected):
    assert format_price(price) == expected


@pytest.mark.parametrize("symbol, expected", [
    ("BTCUSDT", "BTC/USDT"),
    ("1000PEPEUSDT", "1000PEPE/USDT"),
    ("ETHPERP", "ETH/USDT"),
])
def test_display_symbol(symbol, expected):
    assert display_symbol(symbol) == expected


def test_signed_pct():
    assert format_signed_pct(3.14159, 4) == "+3.1416%"
    assert format_signed_pct(-2.5, 2) == "-2.50%"
    assert format_signed_pct(0.0, 2) == "+0.00%"
    assert format_signed_pct(-0.0, 2) == "+0.00%"


def test_grouped_numbers():
    assert format_count(1234567) == "1,234,567"
    assert format_volume(60123.99) == "60,123$"


class TestBuildAlertMessage:
    def test_fast_move_fields(self):
        analysis = make_analysis(
            symbol="SOLUSDT", price=142.5, ticks_5m=12345, price_change_5m=3.5,
            volume_spike=80.0, volume_15m=100_000.9,
        )
        message = build_alert_message(analysis, AlertCategory.FAST_MOVE, Direction.BULLISH)

        assert message.title == "SOL/USDT - (Fast Move Alert)"
        assert message.color == BULLISH_COLOR
        assert [(f.name, f.value) for f in message.fields] == [
            ("Price", "$142.50"),
            ("Change 5m", "+3.5000%"),
            ("Ticks 5m", "12,345"),
            ("Volume Increase", "+80.00%"),
            ("Volume 15m", "100,000$"),
        ]
        assert all(f.inline for f in message.fields)

    def test_big_move_fields(self):
        analysis = make_analysis(
            symbol="DOGEUSDT", price=0.0812, price_change_15m=-6.25, volatility_15m=1.23456,
        )
        message = build_alert_message(analysis, AlertCategory.BIG_MOVE, Direction.BEARISH)

        assert message.title == "DOGE/USDT - (Big Move Alert)"
        assert message.color == BEARISH_COLOR
        names = [f.name for f in message.fields]
        assert names == ["Price", "Change 15m", "Ticks 5m", "Volatility 15m", "Volume 15m"]
        assert message.fields[0].value == "$0.0812"
        assert message.fields[1].value == "-6.2500%"
        assert message.fields[3].value == "1.2346"

    def test_defaults_leave_optional_parts_empty(self):
        message = build_alert_message(make_analysis(), AlertCategory.BIG_MOVE, Direction.BULLISH)
        assert message.footer == "Volatility Monitor"
        assert message.image_url is None
        assert message.mention is None
        assert message.toggle_direction is None


def test_scan_log_line():
    analysis = make_analysis(price_change_5m=1.234, price_change_15m=-5.5, volume_spike=120.4)
    line = scan_log_line(analysis, AlertCategory.BIG_MOVE)
    assert line == "BTCUSDT | 5m: +1.23% | 15m: -5.50% | vol: 120% | big_move"

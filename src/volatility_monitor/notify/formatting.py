"""Alert message formatting."""

import math
from typing import List

from ..core.models import AnalysisResult, AlertMessage, EmbedField
from ..core.enums import AlertCategory, Direction

BULLISH_COLOR = 0x00FF00
BEARISH_COLOR = 0xFF0000
DEFAULT_FOOTER = "Volatility Monitor"


def display_symbol(symbol: str) -> str:
    """'BTCUSDT' -> 'BTC/USDT'; a trailing PERP marker is dropped."""
    base = symbol.replace("USDT", "", 1)
    if base.endswith("PERP"):
        base = base[:-4]
    return f"{base}/USDT"


def format_price(price: float) -> str:
    """Dollar price, with more decimals for cheaper instruments."""
    if price < 0.01:
        return f"${price:.6f}"
    if price < 1:
        return f"${price:.4f}"
    return f"${price:.2f}"


def format_signed_pct(value: float, decimals: int) -> str:
    # normalise -0.0 so zero always renders as '+'
    if value == 0:
        value = 0.0
    return f"{value:+.{decimals}f}%"


def format_count(value: int) -> str:
    return f"{value:,}"


def format_volume(value: float) -> str:
    return f"{math.floor(value):,}$"


def _fast_move_fields(analysis: AnalysisResult) -> List[EmbedField]:
    return [
        EmbedField("Price", format_price(analysis.price)),
        EmbedField("Change 5m", format_signed_pct(analysis.price_change_5m, 4)),
        EmbedField("Ticks 5m", format_count(analysis.ticks_5m)),
        EmbedField("Volume Increase", format_signed_pct(analysis.volume_spike, 2)),
        EmbedField("Volume 15m", format_volume(analysis.volume_15m)),
    ]


def _big_move_fields(analysis: AnalysisResult) -> List[EmbedField]:
    return [
        EmbedField("Price", format_price(analysis.price)),
        EmbedField("Change 15m", format_signed_pct(analysis.price_change_15m, 4)),
        EmbedField("Ticks 5m", format_count(analysis.ticks_5m)),
        EmbedField("Volatility 15m", f"{analysis.volatility_15m:.4f}"),
        EmbedField("Volume 15m", format_volume(analysis.volume_15m)),
    ]


def build_alert_message(
    analysis: AnalysisResult,
    category: AlertCategory,
    direction: Direction,
    footer: str = DEFAULT_FOOTER,
) -> AlertMessage:
    """Title, colour and category-specific fields; no image, mention or control yet."""
    if category == AlertCategory.FAST_MOVE:
        fields = _fast_move_fields(analysis)
    else:
        fields = _big_move_fields(analysis)

    return AlertMessage(
        title=f"{display_symbol(analysis.symbol)} - ({category.label})",
        color=BULLISH_COLOR if direction == Direction.BULLISH else BEARISH_COLOR,
        fields=fields,
        footer=footer,
    )


def scan_log_line(analysis: AnalysisResult, category: AlertCategory) -> str:
    """One-line summary written to the log for every live alert."""
    change_5m = format_signed_pct(analysis.price_change_5m, 2)
    change_15m = format_signed_pct(analysis.price_change_15m, 2)
    return (
        f"{analysis.symbol} | 5m: {change_5m} | 15m: {change_15m} "
        f"| vol: {analysis.volume_spike:.0f}% | {category.value}"
    )

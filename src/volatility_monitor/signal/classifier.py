"""Maps an analysis to at most one alert category."""

from typing import Dict, Optional

from ..core.models import AnalysisResult
from ..core.enums import AlertCategory, Direction


class AlertClassifier:
    """Threshold classifier; BigMove is checked before FastMove and the first match wins."""

    def __init__(self, config: Optional[Dict] = None):
        defaults = self._default_config()
        if config:
            defaults.update({k: v for k, v in config.items() if v is not None})
        self.config = defaults

    @staticmethod
    def _default_config() -> Dict:
        return {
            # quote-currency notional over the last 15 minutes
            "min_volume_15m": 50_000,
            "big_move_pct": 5.0,
            "fast_move_pct": 3.0,
            "volume_spike_pct": 50.0,
        }

    def classify(self, analysis: AnalysisResult) -> Optional[AlertCategory]:
        """Return the alert category for *analysis*, or None."""
        if analysis.volume_15m < self.config["min_volume_15m"]:
            return None

        if abs(analysis.price_change_15m) >= self.config["big_move_pct"]:
            return AlertCategory.BIG_MOVE

        if (
            abs(analysis.price_change_5m) >= self.config["fast_move_pct"]
            and analysis.volume_spike > self.config["volume_spike_pct"]
        ):
            return AlertCategory.FAST_MOVE

        return None


def triggering_change(analysis: AnalysisResult, category: AlertCategory) -> float:
    """The price-change field that fired *category*."""
    if category == AlertCategory.FAST_MOVE:
        return analysis.price_change_5m
    return analysis.price_change_15m


def direction_of(analysis: AnalysisResult, category: AlertCategory) -> Direction:
    """Bullish when the triggering change is zero or positive."""
    if triggering_change(analysis, category) >= 0:
        return Direction.BULLISH
    return Direction.BEARISH

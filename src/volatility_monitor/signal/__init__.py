"""Signal computation and alert classification."""

from .analyzer import SignalAnalyzer, calculate_volatility, candles_to_frame
from .classifier import AlertClassifier, direction_of, triggering_change

__all__ = [
    "SignalAnalyzer",
    "calculate_volatility",
    "candles_to_frame",
    "AlertClassifier",
    "direction_of",
    "triggering_change",
]

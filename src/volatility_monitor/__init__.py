"""
Volatility Monitor

Samples a perpetual-futures market feed, computes short-horizon volatility
and momentum signals per symbol, and posts rate-limited chat alerts when
they cross configured thresholds.
"""

__version__ = "0.1.0"
__author__ = "Volatility Monitor Team"

from .core.models import TickerSnapshot, Candle, AnalysisResult
from .core.enums import AlertCategory, Direction, EngineState
from .signal.analyzer import SignalAnalyzer
from .signal.classifier import AlertClassifier
from .scanner.cooldown import CooldownTracker
from .scanner.scheduler import ScanScheduler
from .notify.dispatcher import NotificationDispatcher

__all__ = [
    "TickerSnapshot",
    "Candle",
    "AnalysisResult",
    "AlertCategory",
    "Direction",
    "EngineState",
    "SignalAnalyzer",
    "AlertClassifier",
    "CooldownTracker",
    "ScanScheduler",
    "NotificationDispatcher",
]

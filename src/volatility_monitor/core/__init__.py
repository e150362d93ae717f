"""Core types for the volatility monitor."""

from .models import (
    TickerSnapshot, Candle, AnalysisResult,
    FetchResult, DispatchResult, EmbedField, AlertMessage,
)
from .enums import (
    AlertCategory, Direction, EngineState, FetchErrorKind, DispatchStatus
)

__all__ = [
    "TickerSnapshot",
    "Candle",
    "AnalysisResult",
    "FetchResult",
    "DispatchResult",
    "EmbedField",
    "AlertMessage",
    "AlertCategory",
    "Direction",
    "EngineState",
    "FetchErrorKind",
    "DispatchStatus",
]

"""Core enumerations for the volatility monitor."""

from enum import Enum


class AlertCategory(str, Enum):
    """Alert categories, in classification priority order."""
    BIG_MOVE = "big_move"
    FAST_MOVE = "fast_move"

    @property
    def label(self) -> str:
        return "Big Move Alert" if self is AlertCategory.BIG_MOVE else "Fast Move Alert"


class Direction(str, Enum):
    """Direction of the move that triggered an alert."""
    BULLISH = "bullish"
    BEARISH = "bearish"


class EngineState(str, Enum):
    """Scan scheduler states."""
    WARMUP = "warmup"
    LIVE = "live"


class FetchErrorKind(str, Enum):
    """Why a market-data fetch produced no data."""
    NETWORK = "network"
    API_ERROR = "api_error"
    INVALID_DATA = "invalid_data"


class DispatchStatus(str, Enum):
    """Outcome of a notification dispatch."""
    SENT = "sent"
    SEND_FAILED = "send_failed"
    NO_DESTINATION = "no_destination"

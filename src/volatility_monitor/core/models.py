"""Core data models for the volatility monitor."""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .enums import Direction, DispatchStatus, FetchErrorKind

T = TypeVar("T")


class TickerSnapshot(BaseModel):
    """One symbol's 24h ticker, valid for a single scan pass."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Instrument identifier, e.g. BTCUSDT")
    price: float = Field(description="Last traded price")
    volume_24h: float = Field(default=0.0, description="24h turnover in quote currency")
    price_change_24h: float = Field(default=0.0, description="24h price change %")
    high_24h: float = Field(default=0.0, description="24h high")
    low_24h: float = Field(default=0.0, description="24h low")


class Candle(BaseModel):
    """OHLCV aggregate over one time bucket."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(description="Bucket start, epoch milliseconds")
    open: float
    high: float
    low: float
    close: float
    volume: float


class AnalysisResult(BaseModel):
    """Per-symbol signal metrics computed during one scan."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float = Field(description="Close of the most recent 5m candle")
    ticks_5m: int = Field(description="Floored volume of the most recent 5m candle")
    volatility_15m: float = Field(ge=0.0, description="Population std of 15m returns, %")
    price_change_5m: float = Field(description="Change over the most recent 5m candle, %")
    price_change_15m: float = Field(description="Change over the last three 5m candles, %")
    volume_5m: float
    volume_15m: float = Field(description="Summed volume of the last three 5m candles")
    volume_spike: float = Field(description="Deviation of volume_5m from the trailing average, %")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Either fetched data or the kind of failure that prevented it."""

    value: Optional[T] = None
    error: Optional[FetchErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchErrorKind, message: str = "") -> "FetchResult[T]":
        return cls(error=error, message=message)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of sending one alert."""

    status: DispatchStatus
    direction: Optional[Direction] = None
    destination: Optional[int] = None
    chart_attached: bool = False
    message: str = ""

    @property
    def sent(self) -> bool:
        return self.status == DispatchStatus.SENT


@dataclass
class EmbedField:
    """A named field in an alert message."""

    name: str
    value: str
    inline: bool = True


@dataclass
class AlertMessage:
    """Transport-neutral alert message."""

    title: str
    color: int
    fields: List[EmbedField]
    footer: str
    image_url: Optional[str] = None
    mention: Optional[str] = None
    toggle_direction: Optional[Direction] = None

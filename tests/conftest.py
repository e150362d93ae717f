"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional

import pytest

from volatility_monitor.core.models import (
    AnalysisResult, AlertMessage, Candle, FetchResult, TickerSnapshot
)
from volatility_monitor.core.enums import FetchErrorKind
from volatility_monitor.notify.transport import (
    DestinationUnavailableError, NotificationTransport
)

BASE_TS = 1_700_000_000_000
FIVE_MIN_MS = 5 * 60 * 1000


def make_candle(open_=100.0, close=100.0, volume=1000.0, ts=BASE_TS, high=None, low=None) -> Candle:
    return Candle(
        timestamp=ts,
        open=open_,
        high=high if high is not None else max(open_, close),
        low=low if low is not None else min(open_, close),
        close=close,
        volume=volume,
    )


def flat_candles(n=30, price=100.0, volume=1000.0, step_ms=FIVE_MIN_MS) -> List[Candle]:
    """*n* identical candles, most-recent-first."""
    return [
        make_candle(price, price, volume, ts=BASE_TS - i * step_ms)
        for i in range(n)
    ]


def make_analysis(**overrides) -> AnalysisResult:
    values = dict(
        symbol="BTCUSDT",
        price=100.0,
        ticks_5m=1000,
        volatility_15m=0.5,
        price_change_5m=0.0,
        price_change_15m=0.0,
        volume_5m=1000.0,
        volume_15m=100_000.0,
        volume_spike=0.0,
    )
    values.update(overrides)
    return AnalysisResult(**values)


def moving_candles(change_15m_pct: float, volume_5m: float = 30_000.0, baseline: float = 10_000.0) -> List[Candle]:
    """5m series whose last three candles move price by *change_15m_pct*."""
    candles = flat_candles(30, price=100.0, volume=baseline)
    target = 100.0 * (1 + change_15m_pct / 100)
    step = (target - 100.0) / 3
    candles[2] = make_candle(100.0, 100.0 + step, baseline, ts=candles[2].timestamp)
    candles[1] = make_candle(100.0 + step, 100.0 + 2 * step, baseline, ts=candles[1].timestamp)
    candles[0] = make_candle(100.0 + 2 * step, target, volume_5m, ts=candles[0].timestamp)
    return candles


class MockMarketDataClient:
    """In-memory market data source."""

    def __init__(self, symbols: Optional[List[str]] = None):
        self.symbols = list(symbols or [])
        self.candles: Dict[tuple, List[Candle]] = {}
        self.default_candles: Dict[str, List[Candle]] = {
            "5": flat_candles(30),
            "15": flat_candles(5, step_ms=3 * FIVE_MIN_MS),
            "1": flat_candles(120, step_ms=60_000),
        }
        self.ticker_error: Optional[FetchErrorKind] = None
        self.failing_symbols = set()
        self.calls: List[tuple] = []
        self.closed = False

    def set_candles(self, symbol: str, interval: str, candles: List[Candle]):
        self.candles[(symbol, interval)] = candles

    async def get_tickers(self):
        self.calls.append(("tickers",))
        if self.ticker_error is not None:
            return FetchResult.failure(self.ticker_error, "tickers unavailable")
        return FetchResult.success([
            TickerSnapshot(symbol=s, price=100.0, volume_24h=1_000_000.0)
            for s in self.symbols
        ])

    async def get_candles(self, symbol, interval, limit):
        self.calls.append(("candles", symbol, interval, limit))
        if symbol in self.failing_symbols:
            return FetchResult.failure(FetchErrorKind.NETWORK, "timeout")
        candles = self.candles.get((symbol, interval), self.default_candles[interval])
        return FetchResult.success(candles[:limit])

    async def close(self):
        self.closed = True


class MockTransport(NotificationTransport):
    """Records sent messages instead of delivering them."""

    def __init__(self, channel_names: Optional[Dict[int, str]] = None):
        self.channel_names = channel_names or {}
        self.sent: List[tuple] = []
        self.fail_sends = False
        self.closed = False

    async def resolve_channel(self, channel_id: int) -> str:
        if channel_id not in self.channel_names:
            raise DestinationUnavailableError(f"Cannot find channel {channel_id}")
        return self.channel_names[channel_id]

    async def send(self, channel_id: int, message: AlertMessage):
        if self.fail_sends:
            raise ConnectionError("transport down")
        self.sent.append((channel_id, message))

    async def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class SleepRecorder:
    """Stand-in for asyncio.sleep that returns immediately."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)


@pytest.fixture
def market_client():
    return MockMarketDataClient(["BTCUSDT", "ETHUSDT"])


@pytest.fixture
def transport():
    return MockTransport({111: "alerts", 222: "bullish-alerts", 333: "bearish-alerts"})


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()

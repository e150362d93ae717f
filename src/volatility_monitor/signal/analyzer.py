"""Short-horizon volatility, momentum and volume-spike metrics."""

from typing import Dict, List, Optional
import logging
import math

import pandas as pd

from ..core.models import AnalysisResult, Candle
from ..data.connector import MarketDataClient

logger = logging.getLogger(__name__)


def candles_to_frame(candles: List[Candle]) -> pd.DataFrame:
    """Candles as a DataFrame, keeping the feed's most-recent-first order."""
    return pd.DataFrame(
        [c.model_dump() for c in candles],
        columns=['timestamp', 'open', 'high', 'low', 'close', 'volume'],
    )


def calculate_volatility(df: pd.DataFrame) -> float:
    """Population std of consecutive close-to-close returns, in percent.

    Returns are taken in the order the candles are given.
    """
    if len(df) < 2:
        return 0.0

    returns = df['close'].pct_change().dropna()
    return float(returns.std(ddof=0) * 100)


def pct_change(old: float, new: float) -> float:
    return (new - old) / old * 100


class SignalAnalyzer:
    """Builds an AnalysisResult for one symbol from two candle series.

    The 5-minute series drives price change and volume metrics; the
    15-minute series only feeds ``volatility_15m``.
    """

    def __init__(self, client: MarketDataClient, config: Optional[Dict] = None):
        defaults = self._default_config()
        if config:
            defaults.update(config)
        self.config = defaults
        self.client = client

    @staticmethod
    def _default_config() -> Dict:
        return {
            "short_interval": "5",
            "short_limit": 30,
            "long_interval": "15",
            "long_limit": 5,
            "min_short_candles": 10,
            # 5m candles covering the last 15 minutes
            "recent_window": 3,
            # trailing baseline excludes the recent window
            "baseline_start": 3,
            "baseline_end": 10,
        }

    async def analyze(self, symbol: str) -> Optional[AnalysisResult]:
        """Fetch both series and compute metrics, or None when data is unusable."""
        short = await self.client.get_candles(
            symbol, self.config["short_interval"], self.config["short_limit"]
        )
        if not short.ok:
            logger.debug(f"No 5m candles for {symbol}: {short.error.value} {short.message}")
            return None

        long = await self.client.get_candles(
            symbol, self.config["long_interval"], self.config["long_limit"]
        )
        if not long.ok:
            logger.debug(f"No 15m candles for {symbol}: {long.error.value} {long.message}")
            return None

        return self.compute(symbol, short.value, long.value)

    def compute(
        self,
        symbol: str,
        candles_5m: List[Candle],
        candles_15m: List[Candle],
    ) -> Optional[AnalysisResult]:
        """Pure metric computation over already-fetched candles (most-recent-first)."""
        if len(candles_5m) < self.config["min_short_candles"]:
            logger.debug(f"Insufficient history for {symbol}: {len(candles_5m)} candles")
            return None

        short = candles_to_frame(candles_5m)
        long = candles_to_frame(candles_15m)
        window = self.config["recent_window"]

        latest = short.iloc[0]
        current_price = float(latest['close'])
        open_5m = float(latest['open'])
        open_15m = float(short['open'].iloc[window - 1])
        if open_5m <= 0 or open_15m <= 0:
            return None

        volume_5m = float(latest['volume'])
        volume_15m = float(short['volume'].iloc[:window].sum())

        baseline = short['volume'].iloc[self.config["baseline_start"]:self.config["baseline_end"]]
        avg_volume = float(baseline.mean())

        volume_spike = 0.0
        if avg_volume > 0:
            volume_spike = pct_change(avg_volume, volume_5m)

        return AnalysisResult(
            symbol=symbol,
            price=current_price,
            ticks_5m=int(math.floor(volume_5m)),
            volatility_15m=calculate_volatility(long),
            price_change_5m=pct_change(open_5m, current_price),
            price_change_15m=pct_change(open_15m, current_price),
            volume_5m=volume_5m,
            volume_15m=volume_15m,
            volume_spike=volume_spike,
        )

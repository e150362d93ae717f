"""Market data connector interface and implementations."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import logging

import numpy as np
import ccxt.async_support as ccxt

from ..core.models import TickerSnapshot, Candle, FetchResult
from ..core.enums import FetchErrorKind

logger = logging.getLogger(__name__)


class MarketDataClient(ABC):
    """Abstract base class for market data sources.

    Implementations never raise for I/O problems; failures are reported
    through ``FetchResult.error`` so callers can branch on them explicitly.
    """

    @abstractmethod
    async def get_tickers(self) -> FetchResult[List[TickerSnapshot]]:
        """Fetch the ticker snapshot for every listed symbol."""
        pass

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        interval: str,
        limit: int
    ) -> FetchResult[List[Candle]]:
        """Fetch candles, most-recent-first."""
        pass

    @abstractmethod
    async def close(self):
        """Close connection."""
        pass


class BybitConnector(MarketDataClient):
    """Bybit v5 public market data through ccxt's raw endpoint methods.

    The raw endpoints keep Bybit's native symbols (``BTCUSDT``) and its
    most-recent-first candle ordering.
    """

    def __init__(self, config: Optional[Dict] = None):
        defaults = self._default_config()
        if config:
            defaults.update({k: v for k, v in config.items() if v is not None})
        self.config = defaults
        self.category = self.config["category"]

        self.exchange = ccxt.bybit({
            'enableRateLimit': True,
            'timeout': self.config["timeout_ms"],
        })
        base_url = self.config.get("base_url")
        if base_url:
            api_urls = self.exchange.urls['api']
            self.exchange.urls['api'] = {key: base_url for key in api_urls}

        logger.info(f"Initialized Bybit connector (category={self.category})")

    @staticmethod
    def _default_config() -> Dict:
        return {
            "category": "linear",
            "base_url": None,
            "timeout_ms": 30000,
        }

    async def get_tickers(self) -> FetchResult[List[TickerSnapshot]]:
        """GET /v5/market/tickers for the configured category."""
        result = await self._request(
            self.exchange.public_get_v5_market_tickers,
            {'category': self.category},
            "tickers",
        )
        if not result.ok:
            return result

        try:
            tickers = self._parse_tickers(result.value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed ticker payload: {e}")
            return FetchResult.failure(FetchErrorKind.INVALID_DATA, str(e))

        logger.debug(f"Fetched {len(tickers)} tickers")
        return FetchResult.success(tickers)

    async def get_candles(
        self,
        symbol: str,
        interval: str,
        limit: int
    ) -> FetchResult[List[Candle]]:
        """GET /v5/market/kline; *interval* is Bybit's minute count ('1', '5', '15')."""
        result = await self._request(
            self.exchange.public_get_v5_market_kline,
            {
                'category': self.category,
                'symbol': symbol,
                'interval': interval,
                'limit': limit,
            },
            f"{interval}m candles for {symbol}",
        )
        if not result.ok:
            return result

        try:
            candles = self._parse_candles(result.value)
        except (TypeError, ValueError, IndexError) as e:
            logger.debug(f"Malformed candles for {symbol}: {e}")
            return FetchResult.failure(FetchErrorKind.INVALID_DATA, str(e))

        if not self._validate_candles(candles):
            return FetchResult.failure(
                FetchErrorKind.INVALID_DATA,
                f"non-finite or non-positive prices for {symbol}",
            )

        return FetchResult.success(candles)

    async def close(self):
        """Close exchange connection."""
        await self.exchange.close()
        logger.info("Closed Bybit connection")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _request(self, method, params: Dict, what: str) -> FetchResult[List]:
        """Call a raw endpoint and unwrap ``result.list``."""
        try:
            response = await method(params)
        except ccxt.NetworkError as e:
            logger.debug(f"Network error fetching {what}: {e}")
            return FetchResult.failure(FetchErrorKind.NETWORK, str(e))
        except ccxt.BaseError as e:
            logger.debug(f"Exchange error fetching {what}: {e}")
            return FetchResult.failure(FetchErrorKind.API_ERROR, str(e))

        if not isinstance(response, dict):
            return FetchResult.failure(FetchErrorKind.INVALID_DATA, f"unexpected response for {what}")

        if str(response.get('retCode', 0)) != '0':
            message = f"bybit api error: {response.get('retMsg', '')}"
            return FetchResult.failure(FetchErrorKind.API_ERROR, message)

        rows = (response.get('result') or {}).get('list')
        if rows is None:
            return FetchResult.failure(FetchErrorKind.INVALID_DATA, f"no list in {what} response")

        return FetchResult.success(rows)

    @staticmethod
    def _parse_tickers(rows: List[Dict]) -> List[TickerSnapshot]:
        tickers: List[TickerSnapshot] = []
        for item in rows:
            if not isinstance(item, dict):
                continue
            if not item.get('symbol') or not item.get('lastPrice'):
                continue
            tickers.append(TickerSnapshot(
                symbol=item['symbol'],
                price=float(item['lastPrice']),
                volume_24h=float(item.get('turnover24h') or 0),
                # price24hPcnt is a fraction
                price_change_24h=float(item.get('price24hPcnt') or 0) * 100,
                high_24h=float(item.get('highPrice24h') or 0),
                low_24h=float(item.get('lowPrice24h') or 0),
            ))
        return tickers

    @staticmethod
    def _parse_candles(rows: List[List]) -> List[Candle]:
        return [
            Candle(
                timestamp=int(row[0]),
                open=float(row[1]),
                high=float(row[2]),
                low=float(row[3]),
                close=float(row[4]),
                volume=float(row[5]),
            )
            for row in rows
        ]

    @staticmethod
    def _validate_candles(candles: List[Candle]) -> bool:
        """Reject NaN/inf values and zero or negative prices."""
        if not candles:
            return True

        values = np.array(
            [[c.open, c.high, c.low, c.close, c.volume] for c in candles],
            dtype=float,
        )
        if not np.isfinite(values).all():
            return False
        if (values[:, :4] <= 0).any():
            return False
        return True

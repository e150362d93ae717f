"""Candlestick chart images from an external rendering service."""

from typing import Any, Dict, List, Optional
import logging

import aiohttp

from ..core.models import Candle
from ..data.connector import MarketDataClient
from .formatting import display_symbol

logger = logging.getLogger(__name__)

UP_COLOR = '#25e621'
DOWN_COLOR = '#d31602'
UNCHANGED_COLOR = '#999'
AXIS_COLOR = '#999999'
LABEL_COLOR = '#484848'


def build_chart_config(symbol: str, candles: List[Candle]) -> Dict[str, Any]:
    """Chart.js candlestick config; *candles* must be oldest-first."""
    colors = {'up': UP_COLOR, 'down': DOWN_COLOR, 'unchanged': UNCHANGED_COLOR}
    hidden_grid = {'display': False, 'drawBorder': False}

    return {
        'type': 'candlestick',
        'data': {
            'datasets': [{
                'data': [
                    {'x': c.timestamp, 'o': c.open, 'h': c.high, 'l': c.low, 'c': c.close}
                    for c in candles
                ],
                'color': dict(colors),
                'border': dict(colors),
            }],
        },
        'options': {
            'title': {'display': False},
            'plugins': {
                'legend': {'display': False},
                'annotation': {
                    'annotations': {
                        'symbolLabel': {
                            'type': 'label',
                            'content': display_symbol(symbol),
                            'drawTime': 'beforeDatasetsDraw',
                            'x': '50%',
                            'y': 50,
                            'font': {'size': 72, 'color': LABEL_COLOR, 'weight': 'bold'},
                        },
                    },
                },
            },
            'scales': {
                'x': {
                    'type': 'time',
                    'time': {'unit': 'minute', 'displayFormats': {'minute': 'HH:mm'}},
                    'grid': dict(hidden_grid),
                    'ticks': {
                        'font': {'color': AXIS_COLOR},
                        'maxRotation': 0,
                        'autoSkip': True,
                        'maxTicksLimit': 6,
                    },
                },
                'y': {
                    'grid': dict(hidden_grid),
                    'ticks': {'font': {'color': AXIS_COLOR}},
                },
            },
        },
    }


class ChartRenderer:
    """Requests a hosted chart image URL for a symbol's recent 1m candles.

    Best-effort: every failure is logged and reported as ``None`` so the
    textual alert can still go out.
    """

    def __init__(self, client: MarketDataClient, config: Optional[Dict[str, Any]] = None):
        defaults = self._default_config()
        if config:
            defaults.update({k: v for k, v in config.items() if v is not None})
        self.config = defaults
        self.client = client
        self._session: Optional[aiohttp.ClientSession] = None

    @staticmethod
    def _default_config() -> Dict[str, Any]:
        return {
            'url': 'https://quickchart.io/chart/create',
            'interval': '1',
            'limit': 120,
            'width': 800,
            'height': 400,
            'background_color': '#111111',
            'version': '3',
            'timeout': 15,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config['timeout'])
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def render(self, symbol: str) -> Optional[str]:
        """Return an image URL for *symbol*, or None."""
        logger.debug(f"Fetching chart for {symbol}")
        candles = await self.client.get_candles(
            symbol, self.config['interval'], self.config['limit']
        )
        if not candles.ok:
            logger.warning(f"Chart generation failed for {symbol}: {candles.message}")
            return None

        body = {
            'chart': build_chart_config(symbol, list(reversed(candles.value))),
            'width': self.config['width'],
            'height': self.config['height'],
            'backgroundColor': self.config['background_color'],
            'version': self.config['version'],
        }

        try:
            return await self._post_chart(body)
        except Exception as e:
            logger.warning(f"Chart generation failed for {symbol}: {e}")
            return None

    async def _post_chart(self, body: Dict[str, Any]) -> str:
        session = await self._get_session()
        async with session.post(self.config['url'], json=body) as response:
            if response.status != 200:
                error_text = await response.text()
                raise RuntimeError(f"Chart service error {response.status}: {error_text}")

            data = await response.json()
            if not data or not data.get('success') or not data.get('url'):
                raise RuntimeError("Chart service did not return a url")
            return data['url']

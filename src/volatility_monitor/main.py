"""Volatility monitor application."""

import asyncio
import logging
import os
import signal
import sys
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

from .data.connector import BybitConnector, MarketDataClient
from .notify.chart import ChartRenderer
from .notify.dispatcher import NotificationDispatcher
from .notify.roles import RoleToggleHandler
from .notify.routing import routing_from_config
from .notify.transport import DestinationUnavailableError, NotificationTransport
from .scanner.cooldown import CooldownTracker
from .scanner.scheduler import ScanScheduler
from .signal.analyzer import SignalAnalyzer
from .signal.classifier import AlertClassifier

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('volatility_monitor.log'),
            logging.StreamHandler(sys.stdout)
        ]
    )


class VolatilityMonitorApp:
    """Wires the surveillance engine to the market feed and chat transport."""

    def __init__(
        self,
        config: Optional[Dict] = None,
        client: Optional[MarketDataClient] = None,
        transport: Optional[NotificationTransport] = None,
    ):
        """Initialize the application.

        *client* and *transport* default to Bybit and Discord; pass others
        to run the engine against different collaborators.
        """
        defaults = self._default_config()
        if config:
            for key, val in config.items():
                if isinstance(val, dict) and key in defaults and isinstance(defaults[key], dict):
                    defaults[key].update(val)
                else:
                    defaults[key] = val
        self.config = defaults
        self._stopping = False

        self._init_components(client, transport)
        logger.info("Volatility monitor initialized")

    def _default_config(self) -> Dict:
        """Default configuration."""
        return {
            'discord': {
                'token': os.getenv('DISCORD_TOKEN'),
            },
            'market': {
                'category': 'linear',
                'base_url': None,
            },
            'notify': {
                'mode': None,
                'channel_id': None,
                'role_id': None,
                'bullish_channel_id': None,
                'bearish_channel_id': None,
                'bullish_role_id': None,
                'bearish_role_id': None,
                'footer': 'Volatility Monitor',
            },
            'chart': {
                'enabled': True,
            },
            'classifier': {},
            'cooldown': {
                'minutes': 60,
            },
            'scanner': {},
        }

    def _init_components(
        self,
        client: Optional[MarketDataClient],
        transport: Optional[NotificationTransport],
    ):
        """Initialize all engine components."""
        self.routing = routing_from_config(self.config['notify'])
        self.role_handler = RoleToggleHandler(self.routing)

        self.client = client or BybitConnector(self.config['market'])

        if transport is None:
            from .notify.discord_transport import DiscordTransport
            transport = DiscordTransport(self.config['discord']['token'], self.role_handler)
        self.transport = transport

        chart_cfg = dict(self.config['chart'])
        self.chart_renderer = (
            ChartRenderer(self.client, chart_cfg) if chart_cfg.pop('enabled', True) else None
        )

        self.dispatcher = NotificationDispatcher(
            self.transport,
            self.routing,
            self.chart_renderer,
            {'footer': self.config['notify'].get('footer')},
        )
        self.analyzer = SignalAnalyzer(self.client)
        self.classifier = AlertClassifier(self.config['classifier'])
        self.cooldown = CooldownTracker(cooldown_seconds=self.config['cooldown']['minutes'] * 60)
        self.scheduler = ScanScheduler(
            self.client,
            self.analyzer,
            self.classifier,
            self.dispatcher,
            cooldown=self.cooldown,
            config=self.config['scanner'],
        )

    def log_triggers(self):
        """Log the active trigger thresholds."""
        cls = self.classifier.config
        logger.info("Triggers:")
        logger.info(f"  big move: {cls['big_move_pct']:g}%+ in 15m")
        logger.info(f"  fast move: {cls['fast_move_pct']:g}%+ in 5m with volume spike over {cls['volume_spike_pct']:g}%")
        logger.info(f"  min volume: ${cls['min_volume_15m']:,.0f} in 15m")
        logger.info(f"  cooldown: {self.cooldown.cooldown_seconds / 60:g} min per coin")
        logger.info(
            f"  scan cycle: continuous with {self.scheduler.config['scan_interval_seconds']:g}s rest"
        )

    async def start(self):
        """Connect, verify destinations, then scan until stopped.

        Raises DestinationUnavailableError if a channel cannot be resolved.
        """
        logger.info("Starting volatility monitor...")
        start_transport = getattr(self.transport, 'start', None)
        if start_transport is not None:
            await start_transport()

        await self.dispatcher.verify_destinations()
        self.log_triggers()

        await self.scheduler.run_forever()

    def request_stop(self):
        """Finish the current scan cycle, then stop."""
        if not self._stopping:
            logger.info("Shutdown requested")
        self._stopping = True
        self.scheduler.stop()

    async def stop(self):
        """Release network resources."""
        self.scheduler.stop()
        for name, closer in (
            ('chart renderer', self.chart_renderer.close if self.chart_renderer else None),
            ('market data client', self.client.close),
            ('transport', self.transport.close),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.error(f"Error closing {name}: {e}")
        logger.info("Volatility monitor stopped")

    def install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self.request_stop)
            except NotImplementedError:
                signal.signal(signum, lambda *_: self.request_stop())


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name, '').strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def config_from_env() -> Dict:
    """Build config dict from environment variables."""
    config: Dict = {}

    token = os.getenv('DISCORD_TOKEN', '').strip()
    if token:
        config['discord'] = {'token': token}

    # Routing
    notify = {
        'mode': os.getenv('ROUTING_MODE', '').strip() or None,
        'channel_id': os.getenv('ALERT_CHANNEL_ID', '').strip() or None,
        'role_id': os.getenv('ALERT_ROLE_ID', '').strip() or None,
        'bullish_channel_id': os.getenv('BULLISH_ALERT_CHANNEL_ID', '').strip() or None,
        'bearish_channel_id': os.getenv('BEARISH_ALERT_CHANNEL_ID', '').strip() or None,
        'bullish_role_id': os.getenv('BULLISH_ALERT_ROLE_ID', '').strip() or None,
        'bearish_role_id': os.getenv('BEARISH_ALERT_ROLE_ID', '').strip() or None,
    }
    footer = os.getenv('ALERT_FOOTER', '').strip()
    if footer:
        notify['footer'] = footer
    config['notify'] = notify

    # Market data
    market = {}
    base_url = os.getenv('BYBIT_BASE_URL', '').strip()
    category = os.getenv('MARKET_CATEGORY', '').strip()
    if base_url:
        market['base_url'] = base_url
    if category:
        market['category'] = category
    if market:
        config['market'] = market

    # Thresholds
    classifier = {
        'min_volume_15m': _env_float('MIN_VOLUME_15M'),
        'big_move_pct': _env_float('BIG_MOVE_PCT'),
        'fast_move_pct': _env_float('FAST_MOVE_PCT'),
        'volume_spike_pct': _env_float('VOLUME_SPIKE_PCT'),
    }
    classifier = {k: v for k, v in classifier.items() if v is not None}
    if classifier:
        config['classifier'] = classifier

    cooldown = _env_float('ALERT_COOLDOWN_MINUTES')
    if cooldown is not None:
        config['cooldown'] = {'minutes': cooldown}

    interval = _env_float('SCAN_INTERVAL_SECONDS')
    if interval is not None:
        config['scanner'] = {'scan_interval_seconds': interval}

    chart_enabled = os.getenv('CHART_ENABLED', '').strip().lower()
    if chart_enabled in ('0', 'false', 'no'):
        config['chart'] = {'enabled': False}
    elif chart_enabled in ('1', 'true', 'yes'):
        config['chart'] = {'enabled': True}

    return config


async def main():
    """Main entry point."""
    configure_logging(os.getenv('LOG_LEVEL', 'INFO'))

    try:
        app = VolatilityMonitorApp(config_from_env())
    except ValueError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    app.install_signal_handlers()
    exit_code = 0
    try:
        await app.start()
    except DestinationUnavailableError as e:
        logger.critical(f"{e}, check .env")
        exit_code = 1
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.critical(f"Fatal error: {e}")
        exit_code = 1
    finally:
        await app.stop()

    if exit_code:
        sys.exit(exit_code)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()

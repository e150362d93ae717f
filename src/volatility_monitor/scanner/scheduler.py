"""Repeating scan cycle with warmup suppression and per-symbol cooldown."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from ..core.enums import EngineState
from ..data.connector import MarketDataClient
from ..notify.dispatcher import NotificationDispatcher
from ..notify.formatting import scan_log_line
from ..signal.analyzer import SignalAnalyzer
from ..signal.classifier import AlertClassifier
from .cooldown import CooldownTracker

logger = logging.getLogger(__name__)


@dataclass
class ScanSummary:
    """What one scan cycle did."""
    state: EngineState
    started_at: datetime = field(default_factory=datetime.now)
    symbols: int = 0
    on_cooldown: int = 0
    analyzed: int = 0
    matches: int = 0
    suppressed: int = 0
    alerts_sent: int = 0
    send_failures: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.error is None


class ScanScheduler:
    """Drives sequential scan cycles over the whole ticker set.

    Owns the warmup state and the cooldown tracker. The first full pass
    runs in WARMUP: matches are counted but never dispatched, so conditions
    that already existed at boot do not flood the channels. Once a pass
    completes the scheduler is LIVE for the rest of its life.

    Every suspension point is either network I/O or one of the pacing
    sleeps, so cycles never overlap and no locking is needed.
    """

    def __init__(
        self,
        client: MarketDataClient,
        analyzer: SignalAnalyzer,
        classifier: AlertClassifier,
        dispatcher: NotificationDispatcher,
        cooldown: Optional[CooldownTracker] = None,
        config: Optional[Dict] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        defaults = self._default_config()
        if config:
            defaults.update({k: v for k, v in config.items() if v is not None})
        self.config = defaults

        self.client = client
        self.analyzer = analyzer
        self.classifier = classifier
        self.dispatcher = dispatcher
        self.cooldown = cooldown if cooldown is not None else CooldownTracker()

        self._sleep = sleep
        self._clock = clock
        self._state = EngineState.WARMUP
        self._running = False
        self._stop_event = asyncio.Event()
        self._cycles = 0

    @staticmethod
    def _default_config() -> Dict:
        return {
            "batch_size": 20,
            "batch_delay_seconds": 0.1,
            "dispatch_delay_seconds": 2.0,
            "scan_interval_seconds": 60.0,
        }

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_warmed_up(self) -> bool:
        return self._state == EngineState.LIVE

    @property
    def cycles(self) -> int:
        return self._cycles

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> ScanSummary:
        """Run one full pass; never raises."""
        summary = ScanSummary(state=self._state)
        start = self._clock()
        self._cycles += 1
        logger.info(f"Scanning {summary.started_at:%H:%M:%S}")

        try:
            tickers = await self.client.get_tickers()
            if not tickers.ok:
                summary.error = f"ticker fetch failed ({tickers.error.value}): {tickers.message}"
            else:
                await self._scan_symbols([t.symbol for t in tickers.value], summary)
        except Exception as e:
            summary.error = str(e) or type(e).__name__

        summary.duration_seconds = self._clock() - start

        if summary.error is not None:
            logger.error(f"Scan failed: {summary.error}")
            return summary

        if self._state == EngineState.WARMUP:
            self._state = EngineState.LIVE
            logger.info(f"Warmup done, skipped {summary.suppressed} alerts")
            logger.info("Now monitoring live")
        else:
            logger.info(
                f"Done - sent {summary.alerts_sent} alerts in {summary.duration_seconds:.1f}s"
            )
            if summary.send_failures:
                logger.warning(f"{summary.send_failures} alerts failed to send")

        return summary

    async def _scan_symbols(self, symbols, summary: ScanSummary):
        summary.symbols = len(symbols)
        logger.info(f"Checking {len(symbols)} symbols")

        batch_size = self.config["batch_size"]
        for i in range(0, len(symbols), batch_size):
            for symbol in symbols[i:i + batch_size]:
                await self._process_symbol(symbol, summary)
            await self._sleep(self.config["batch_delay_seconds"])

    async def _process_symbol(self, symbol: str, summary: ScanSummary):
        if not self.cooldown.can_alert(symbol):
            summary.on_cooldown += 1
            return

        analysis = await self.analyzer.analyze(symbol)
        if analysis is None:
            return
        summary.analyzed += 1

        category = self.classifier.classify(analysis)
        if category is None:
            return
        summary.matches += 1

        if self._state == EngineState.WARMUP:
            summary.suppressed += 1
            return

        logger.info(f"  {scan_log_line(analysis, category)}")
        result = await self.dispatcher.dispatch(analysis, category)
        if result.sent:
            self.cooldown.record_alert(symbol)
            summary.alerts_sent += 1
        else:
            summary.send_failures += 1

        await self._sleep(self.config["dispatch_delay_seconds"])

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run_forever(self, max_cycles: Optional[int] = None):
        """Scan, rest, repeat until stop() is called or *max_cycles* ran."""
        # a stop requested before the loop started still applies
        self._running = not self._stop_event.is_set()
        completed = 0

        while self._running:
            await self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            if not self._running:
                break

            interval = self.config["scan_interval_seconds"]
            logger.info(f"Waiting {interval:g}s before next scan...")
            await self._rest(interval)

        self._running = False
        logger.info("Scan loop stopped")

    async def _rest(self, seconds: float):
        """Sleep between cycles, waking early if stop() is called."""
        sleep_task = asyncio.ensure_future(self._sleep(seconds))
        stop_task = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait({sleep_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            pending = [t for t in (sleep_task, stop_task) if not t.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    def stop(self):
        """Let the current cycle finish, then leave run_forever."""
        if self._running:
            logger.info("Stop requested, finishing current cycle")
        self._running = False
        self._stop_event.set()

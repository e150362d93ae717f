"""Per-symbol alert cooldown."""

import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class CooldownTracker:
    """Remembers when each symbol last alerted.

    Entries are never evicted; the key space is bounded by the exchange's
    listed instruments.
    """

    def __init__(
        self,
        cooldown_seconds: float = 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._last_alert: Dict[str, float] = {}

    def can_alert(self, symbol: str) -> bool:
        """True if *symbol* never alerted or its cooldown has fully elapsed."""
        last = self._last_alert.get(symbol)
        if last is None:
            return True
        return self._clock() - last >= self.cooldown_seconds

    def record_alert(self, symbol: str):
        """Start a fresh cooldown for *symbol*; call only after a confirmed send."""
        self._last_alert[symbol] = self._clock()
        logger.debug(f"Cooldown started for {symbol}")

    def last_alert(self, symbol: str) -> Optional[float]:
        return self._last_alert.get(symbol)

    def __len__(self) -> int:
        return len(self._last_alert)

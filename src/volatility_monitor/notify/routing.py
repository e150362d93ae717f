"""Destination routing strategies."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.enums import Direction


@dataclass(frozen=True)
class Destination:
    """A channel plus the role mentioned when posting to it."""

    channel_id: int
    role_id: Optional[int] = None

    @property
    def mention(self) -> Optional[str]:
        if self.role_id:
            return f"<@&{self.role_id}>"
        return None


class RoutingStrategy(ABC):
    """Chooses where an alert of a given direction is posted."""

    # whether messages carry the per-direction opt-in control
    offers_toggle: bool = False

    @abstractmethod
    def route(self, direction: Direction) -> Optional[Destination]:
        pass

    @abstractmethod
    def destinations(self) -> List[Destination]:
        """Every configured destination, for startup verification."""
        pass

    def role_for(self, direction: Direction) -> Optional[int]:
        destination = self.route(direction)
        return destination.role_id if destination else None


class SingleDestination(RoutingStrategy):
    """All alerts go to one channel."""

    def __init__(self, destination: Destination):
        self.destination = destination

    def route(self, direction: Direction) -> Optional[Destination]:
        return self.destination

    def destinations(self) -> List[Destination]:
        return [self.destination]


class DirectionalDestination(RoutingStrategy):
    """Bullish and bearish alerts go to separate channels with opt-in roles."""

    offers_toggle = True

    def __init__(self, bullish: Destination, bearish: Destination):
        self._routes: Dict[Direction, Destination] = {
            Direction.BULLISH: bullish,
            Direction.BEARISH: bearish,
        }

    def route(self, direction: Direction) -> Optional[Destination]:
        return self._routes.get(direction)

    def destinations(self) -> List[Destination]:
        return [self._routes[Direction.BULLISH], self._routes[Direction.BEARISH]]


def _parse_id(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid channel or role id: {value!r}")


def routing_from_config(config: Dict) -> RoutingStrategy:
    """Build a strategy from the ``notify`` config section.

    ``mode`` may be 'single' or 'directional'; when absent, directional is
    chosen if both directional channels are configured.
    """
    mode = (config.get("mode") or "").strip().lower()
    bullish_channel = _parse_id(config.get("bullish_channel_id"))
    bearish_channel = _parse_id(config.get("bearish_channel_id"))

    if not mode:
        mode = "directional" if bullish_channel and bearish_channel else "single"

    if mode == "directional":
        if not bullish_channel or not bearish_channel:
            raise ValueError("Directional routing needs both bullish and bearish channel ids")
        return DirectionalDestination(
            bullish=Destination(bullish_channel, _parse_id(config.get("bullish_role_id"))),
            bearish=Destination(bearish_channel, _parse_id(config.get("bearish_role_id"))),
        )

    if mode == "single":
        channel = _parse_id(config.get("channel_id"))
        if not channel:
            raise ValueError("Single routing needs a channel id")
        return SingleDestination(Destination(channel, _parse_id(config.get("role_id"))))

    raise ValueError(f"Unknown routing mode: {mode}")

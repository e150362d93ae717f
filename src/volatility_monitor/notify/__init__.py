"""Alert formatting, chart rendering, routing and delivery.

The Discord transport lives in ``notify.discord_transport`` and is imported
only by the application entry point.
"""

from .chart import ChartRenderer, build_chart_config
from .dispatcher import NotificationDispatcher
from .formatting import build_alert_message, display_symbol, format_price
from .roles import RoleToggleHandler
from .routing import (
    Destination, RoutingStrategy, SingleDestination, DirectionalDestination,
    routing_from_config,
)
from .transport import NotificationTransport, DestinationUnavailableError

__all__ = [
    "ChartRenderer",
    "build_chart_config",
    "NotificationDispatcher",
    "build_alert_message",
    "display_symbol",
    "format_price",
    "RoleToggleHandler",
    "Destination",
    "RoutingStrategy",
    "SingleDestination",
    "DirectionalDestination",
    "routing_from_config",
    "NotificationTransport",
    "DestinationUnavailableError",
]

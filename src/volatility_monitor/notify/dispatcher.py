"""Formats alerts and routes them to the configured destination."""

from typing import Any, Dict, Optional
import logging

from ..core.models import AnalysisResult, DispatchResult
from ..core.enums import AlertCategory, DispatchStatus
from ..signal.classifier import direction_of
from .chart import ChartRenderer
from .formatting import DEFAULT_FOOTER, build_alert_message, display_symbol
from .routing import RoutingStrategy
from .transport import NotificationTransport

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Single dispatch path for both single-channel and directional deployments.

    The routing strategy decides the destination and whether the opt-in
    control is attached. Transport failures are returned as
    ``DispatchStatus.SEND_FAILED`` rather than raised.
    """

    def __init__(
        self,
        transport: NotificationTransport,
        routing: RoutingStrategy,
        chart_renderer: Optional[ChartRenderer] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.transport = transport
        self.routing = routing
        self.chart_renderer = chart_renderer
        self.config = {"footer": DEFAULT_FOOTER}
        if config:
            self.config.update({k: v for k, v in config.items() if v is not None})

    async def verify_destinations(self) -> Dict[int, str]:
        """Resolve every configured channel; propagates DestinationUnavailableError."""
        names: Dict[int, str] = {}
        for destination in self.routing.destinations():
            names[destination.channel_id] = await self.transport.resolve_channel(
                destination.channel_id
            )
            logger.info(f"Monitoring channel #{names[destination.channel_id]}")
            if destination.role_id:
                logger.info(f"Role ping for #{names[destination.channel_id]}: {destination.role_id}")
        return names

    async def dispatch(self, analysis: AnalysisResult, category: AlertCategory) -> DispatchResult:
        """Send one alert and report what happened."""
        direction = direction_of(analysis, category)
        name = display_symbol(analysis.symbol)

        destination = self.routing.route(direction)
        if destination is None:
            logger.warning(f"No destination for {direction.value} alert on {name}")
            return DispatchResult(status=DispatchStatus.NO_DESTINATION, direction=direction)

        message = build_alert_message(analysis, category, direction, self.config["footer"])
        message.mention = destination.mention
        if self.routing.offers_toggle:
            message.toggle_direction = direction

        if self.chart_renderer is not None:
            message.image_url = await self.chart_renderer.render(analysis.symbol)

        try:
            await self.transport.send(destination.channel_id, message)
        except Exception as e:
            logger.warning(f"Failed to send alert for {name}: {e}")
            return DispatchResult(
                status=DispatchStatus.SEND_FAILED,
                direction=direction,
                destination=destination.channel_id,
                chart_attached=message.image_url is not None,
                message=str(e),
            )

        logger.info(f"Sent {direction.value} alert for {name} ({category.value})")
        return DispatchResult(
            status=DispatchStatus.SENT,
            direction=direction,
            destination=destination.channel_id,
            chart_attached=message.image_url is not None,
        )

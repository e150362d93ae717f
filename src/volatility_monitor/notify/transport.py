"""Notification transport interface."""

from abc import ABC, abstractmethod

from ..core.models import AlertMessage


class DestinationUnavailableError(RuntimeError):
    """A configured destination channel could not be resolved."""


class NotificationTransport(ABC):
    """Delivers formatted alert messages to chat channels."""

    @abstractmethod
    async def resolve_channel(self, channel_id: int) -> str:
        """Return the channel's display name.

        Raises DestinationUnavailableError if it cannot be found.
        """
        pass

    @abstractmethod
    async def send(self, channel_id: int, message: AlertMessage):
        """Deliver *message*; raises on failure."""
        pass

    @abstractmethod
    async def close(self):
        pass

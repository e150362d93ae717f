"""Discord delivery of alert messages."""

import asyncio
import logging
from typing import Dict, Optional

import discord

from ..core.models import AlertMessage
from ..core.enums import Direction
from .roles import RoleToggleHandler, toggle_control_id
from .transport import DestinationUnavailableError, NotificationTransport

logger = logging.getLogger(__name__)


class RoleToggleView(discord.ui.View):
    """Persistent 'Get Alerts' button for one direction."""

    def __init__(self, handler: RoleToggleHandler, direction: Direction):
        super().__init__(timeout=None)
        self.handler = handler
        button = discord.ui.Button(
            label="Get Alerts",
            style=discord.ButtonStyle.secondary,
            custom_id=toggle_control_id(direction),
        )
        button.callback = self._on_click
        self.add_item(button)

    async def _on_click(self, interaction: discord.Interaction):
        control_id = (interaction.data or {}).get("custom_id", "")
        reply = await self.handler.handle(control_id, interaction.user, interaction.guild)
        if reply:
            await interaction.response.send_message(reply, ephemeral=True)


class AlertClient(discord.Client):
    """Discord client that re-registers the toggle buttons on every start."""

    def __init__(self, role_handler: Optional[RoleToggleHandler] = None):
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True
        super().__init__(intents=intents)
        self.role_handler = role_handler

    async def setup_hook(self):
        if self.role_handler is not None:
            for direction in Direction:
                self.add_view(RoleToggleView(self.role_handler, direction))

    async def on_error(self, event_method: str, *args, **kwargs):
        logger.exception(f"Discord client error in {event_method}")


def build_embed(message: AlertMessage) -> discord.Embed:
    embed = discord.Embed(
        title=message.title,
        color=message.color,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=message.footer)
    for field in message.fields:
        embed.add_field(name=field.name, value=field.value, inline=field.inline)
    if message.image_url:
        embed.set_image(url=message.image_url)
    return embed


class DiscordTransport(NotificationTransport):
    """NotificationTransport backed by a logged-in Discord bot."""

    def __init__(self, token: str, role_handler: Optional[RoleToggleHandler] = None):
        if not token:
            raise ValueError("DISCORD_TOKEN is required")
        self.token = token
        self.role_handler = role_handler
        self.client = AlertClient(role_handler)
        self._channels: Dict[int, discord.abc.Messageable] = {}
        self._connect_task: Optional[asyncio.Task] = None

    async def start(self):
        """Log in and wait until the gateway session is ready."""
        await self.client.login(self.token)
        self._connect_task = asyncio.create_task(self.client.connect())
        ready_task = asyncio.create_task(self.client.wait_until_ready())

        done, _ = await asyncio.wait(
            {self._connect_task, ready_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
        if self._connect_task in done:
            ready_task.cancel()
            # connect() only returns early when the session failed
            self._connect_task.result()
            raise RuntimeError("Discord connection closed before ready")

        logger.info(
            f"Logged in as {self.client.user}, connected to {len(self.client.guilds)} servers"
        )

    async def resolve_channel(self, channel_id: int) -> str:
        channel = self.client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(channel_id)
            except discord.DiscordException as e:
                raise DestinationUnavailableError(
                    f"Cannot find channel {channel_id}: {e}"
                ) from e

        self._channels[channel_id] = channel
        return getattr(channel, "name", str(channel_id))

    async def send(self, channel_id: int, message: AlertMessage):
        channel = self._channels.get(channel_id)
        if channel is None:
            await self.resolve_channel(channel_id)
            channel = self._channels[channel_id]

        kwargs = {"embed": build_embed(message)}
        if message.mention:
            kwargs["content"] = message.mention
        if message.toggle_direction is not None and self.role_handler is not None:
            kwargs["view"] = RoleToggleView(self.role_handler, message.toggle_direction)

        await channel.send(**kwargs)

    async def close(self):
        if not self.client.is_closed():
            await self.client.close()
        if self._connect_task is not None:
            try:
                await self._connect_task
            except (asyncio.CancelledError, discord.DiscordException) as e:
                logger.debug(f"Discord connection ended: {e!r}")
        logger.info("Discord transport closed")

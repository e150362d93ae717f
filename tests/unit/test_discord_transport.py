"""Unit tests for the Discord transport."""

import pytest
from unittest.mock import AsyncMock, MagicMock

import discord

from volatility_monitor.core.enums import Direction
from volatility_monitor.core.models import AlertMessage, EmbedField
from volatility_monitor.notify.discord_transport import (
    DiscordTransport, RoleToggleView, build_embed
)
from volatility_monitor.notify.transport import DestinationUnavailableError


def _message(**overrides):
    values = dict(
        title="SOL/USDT - (Big Move Alert)",
        color=0x00FF00,
        fields=[
            EmbedField("Price", "$142.50"),
            EmbedField("Change 15m", "+6.0000%"),
        ],
        footer="Volatility Monitor",
    )
    values.update(overrides)
    return AlertMessage(**values)


def _handler(reply="✅ Added role <@&8>"):
    handler = MagicMock()
    handler.handle = AsyncMock(return_value=reply)
    return handler


class TestBuildEmbed:
    def test_fields_and_footer(self):
        embed = build_embed(_message())

        assert embed.title == "SOL/USDT - (Big Move Alert)"
        assert embed.color.value == 0x00FF00
        assert embed.footer.text == "Volatility Monitor"
        assert embed.timestamp is not None
        assert [(f.name, f.value, f.inline) for f in embed.fields] == [
            ("Price", "$142.50", True),
            ("Change 15m", "+6.0000%", True),
        ]
        assert embed.image.url is None

    def test_image(self):
        embed = build_embed(_message(image_url="https://quickchart.io/chart/render/x"))
        assert embed.image.url == "https://quickchart.io/chart/render/x"


class TestDiscordTransport:
    def test_token_required(self):
        with pytest.raises(ValueError):
            DiscordTransport("")

    @pytest.mark.asyncio
    async def test_send_with_mention_and_toggle(self):
        transport = DiscordTransport("token", _handler())
        channel = MagicMock()
        channel.send = AsyncMock()
        transport._channels[222] = channel

        await transport.send(222, _message(mention="<@&8>", toggle_direction=Direction.BULLISH))

        kwargs = channel.send.await_args.kwargs
        assert kwargs["content"] == "<@&8>"
        assert kwargs["embed"].title == "SOL/USDT - (Big Move Alert)"
        view = kwargs["view"]
        assert isinstance(view, RoleToggleView)
        assert view.children[0].custom_id == "toggle_role_bullish"

    @pytest.mark.asyncio
    async def test_send_plain(self):
        transport = DiscordTransport("token", _handler())
        channel = MagicMock()
        channel.send = AsyncMock()
        transport._channels[111] = channel

        await transport.send(111, _message())

        kwargs = channel.send.await_args.kwargs
        assert "content" not in kwargs
        assert "view" not in kwargs

    @pytest.mark.asyncio
    async def test_resolve_channel_fetches_when_not_cached(self):
        transport = DiscordTransport("token")
        channel = MagicMock()
        channel.name = "bearish-alerts"
        transport.client.get_channel = MagicMock(return_value=None)
        transport.client.fetch_channel = AsyncMock(return_value=channel)

        assert await transport.resolve_channel(333) == "bearish-alerts"
        assert transport._channels[333] is channel

    @pytest.mark.asyncio
    async def test_unknown_channel(self):
        transport = DiscordTransport("token")
        transport.client.get_channel = MagicMock(return_value=None)
        transport.client.fetch_channel = AsyncMock(side_effect=discord.DiscordException("Unknown Channel"))

        with pytest.raises(DestinationUnavailableError):
            await transport.resolve_channel(999)


class TestRoleToggleView:
    @pytest.mark.asyncio
    async def test_button(self):
        view = RoleToggleView(_handler(), Direction.BEARISH)

        assert view.timeout is None
        button = view.children[0]
        assert button.label == "Get Alerts"
        assert button.custom_id == "toggle_role_bearish"

    @pytest.mark.asyncio
    async def test_click_replies_ephemerally(self):
        handler = _handler()
        view = RoleToggleView(handler, Direction.BULLISH)
        interaction = MagicMock()
        interaction.data = {"custom_id": "toggle_role_bullish"}
        interaction.response.send_message = AsyncMock()

        await view._on_click(interaction)

        handler.handle.assert_awaited_once_with(
            "toggle_role_bullish", interaction.user, interaction.guild
        )
        interaction.response.send_message.assert_awaited_once_with(
            "✅ Added role <@&8>", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_click_without_reply(self):
        view = RoleToggleView(_handler(reply=None), Direction.BULLISH)
        interaction = MagicMock()
        interaction.data = {"custom_id": "other"}
        interaction.response.send_message = AsyncMock()

        await view._on_click(interaction)

        interaction.response.send_message.assert_not_called()

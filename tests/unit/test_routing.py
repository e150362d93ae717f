"""Unit tests for routing strategies."""

import pytest

from volatility_monitor.core.enums import Direction
from volatility_monitor.notify.routing import (
    Destination,
    DirectionalDestination,
    SingleDestination,
    routing_from_config,
)


class TestSingleDestination:
    def test_routes_both_directions_to_same_channel(self):
        routing = SingleDestination(Destination(111, role_id=9))
        assert routing.route(Direction.BULLISH).channel_id == 111
        assert routing.route(Direction.BEARISH).channel_id == 111
        assert routing.offers_toggle is False
        assert routing.destinations() == [Destination(111, 9)]

    def test_mention(self):
        assert Destination(111, role_id=9).mention == "<@&9>"
        assert Destination(111).mention is None


class TestDirectionalDestination:
    def test_routes_by_direction(self):
        routing = DirectionalDestination(Destination(222, 8), Destination(333))
        assert routing.route(Direction.BULLISH) == Destination(222, 8)
        assert routing.route(Direction.BEARISH) == Destination(333)
        assert routing.role_for(Direction.BULLISH) == 8
        assert routing.role_for(Direction.BEARISH) is None
        assert routing.offers_toggle is True


class TestRoutingFromConfig:
    def test_single(self):
        routing = routing_from_config({"channel_id": "111", "role_id": "9"})
        assert isinstance(routing, SingleDestination)
        assert routing.destination == Destination(111, 9)

    def test_directional_inferred(self):
        routing = routing_from_config({
            "bullish_channel_id": "222", "bearish_channel_id": "333",
            "bullish_role_id": "8", "bearish_role_id": None,
        })
        assert isinstance(routing, DirectionalDestination)
        assert routing.destinations() == [Destination(222, 8), Destination(333)]

    def test_explicit_single_ignores_directional_ids(self):
        routing = routing_from_config({
            "mode": "single", "channel_id": "111",
            "bullish_channel_id": "222", "bearish_channel_id": "333",
        })
        assert isinstance(routing, SingleDestination)

    def test_directional_missing_channel(self):
        with pytest.raises(ValueError):
            routing_from_config({"mode": "directional", "bullish_channel_id": "222"})

    def test_no_channel(self):
        with pytest.raises(ValueError):
            routing_from_config({})

    def test_bad_id(self):
        with pytest.raises(ValueError):
            routing_from_config({"channel_id": "alerts"})

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            routing_from_config({"mode": "broadcast", "channel_id": "111"})

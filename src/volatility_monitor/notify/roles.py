"""Opt-in role toggling for directional alert channels."""

from typing import Optional
import logging

from ..core.enums import Direction
from .routing import RoutingStrategy

logger = logging.getLogger(__name__)

TOGGLE_PREFIX = "toggle_role_"

ROLE_NOT_CONFIGURED = "Error: Alert role is not configured."
ROLE_NOT_FOUND = "Error: Could not find the alert role."
TOGGLE_FAILED = "There was an error trying to update your roles. Please try again."


def toggle_control_id(direction: Direction) -> str:
    return f"{TOGGLE_PREFIX}{direction.value}"


class RoleToggleHandler:
    """Grants or revokes a direction's alert role for the member who clicked.

    *member* and *guild* follow discord.py's ``Member``/``Guild`` interface.
    The returned text is meant to be shown only to that member.
    """

    def __init__(self, routing: RoutingStrategy):
        self.routing = routing

    async def handle(self, control_id: str, member, guild) -> Optional[str]:
        """Return the reply for *control_id*, or None if it is not a toggle control."""
        if not control_id or not control_id.startswith(TOGGLE_PREFIX):
            return None

        try:
            direction = Direction(control_id[len(TOGGLE_PREFIX):])
            role_id = self.routing.role_for(direction)
            if not role_id:
                return ROLE_NOT_CONFIGURED

            role = guild.get_role(role_id)
            if role is None:
                role = next((r for r in await guild.fetch_roles() if r.id == role_id), None)
            if role is None:
                return ROLE_NOT_FOUND

            if any(r.id == role_id for r in member.roles):
                await member.remove_roles(role)
                logger.info(f"Removed {direction.value} alert role from {member}")
                return f"❌ Removed role <@&{role.id}>"

            await member.add_roles(role)
            logger.info(f"Added {direction.value} alert role to {member}")
            return f"✅ Added role <@&{role.id}>"

        except Exception as e:
            logger.error(f"Failed to toggle role: {e}")
            return TOGGLE_FAILED

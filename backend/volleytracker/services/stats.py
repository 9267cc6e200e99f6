from __future__ import annotations

import logging

from ..exceptions import InvalidArgument, PlayerNotFound
from ..models import Player
from ..storage import Storage
from .summary import STAT_FIELDS

logger = logging.getLogger(__name__)


def adjusted_value(current: int, increment: bool) -> int:
    """Return the counter after one step; decrements floor at zero."""
    current = int(current or 0)
    if increment:
        return current + 1
    return max(0, current - 1)


async def adjust_stat(
    storage: Storage, player_id: str, stat_type: str, increment: bool
) -> Player:
    """Increment or decrement one of a player's stat counters."""

    if stat_type not in STAT_FIELDS:
        raise InvalidArgument(
            f"statType must be one of: {', '.join(STAT_FIELDS)}"
        )
    player = await storage.get_player(player_id)
    if player is None:
        raise PlayerNotFound(player_id)

    current = getattr(player, stat_type)
    value = adjusted_value(current, increment)
    if value == current:
        # Decrement at zero
        return player

    setattr(player, stat_type, value)
    await storage.save(player)
    logger.debug("Player %s: %s %d -> %d", player_id, stat_type, current, value)
    return player

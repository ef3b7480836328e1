"""Movement helper utilities.

This module exposes small helper functions for moving entities around the
game map.  The helpers centralise the occupancy rules (tile walkability plus
blocking entities) before delegating to the :class:`EntityRegistry` to update
the entity's position.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from game.entities.components import Position

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from game.entities.registry import EntityRegistry
    from game.game_state import GameState
    from game.world.game_map import GameMap

log = structlog.get_logger(__name__)


def is_traversable(x: int, y: int, game_map: GameMap, entity_reg: EntityRegistry) -> bool:
    """``False`` if the tile is a wall or holds a blocking entity.

    Raises :class:`~game.world.game_map.MapBoundsError` for coordinates off
    the map.
    """
    if not game_map.is_walkable(x, y):
        return False
    return not entity_reg.is_occupied(x, y)


def move_by(entity_id: int, dx: int, dy: int, gs: GameState) -> bool:
    """Attempt to move an entity by ``(dx, dy)``.

    Returns
    -------
    bool
        ``True`` if the entity moved.  A blocked destination is silently
        ignored and reported as ``False``.
    """
    entity_reg = gs.entity_registry
    x, y = entity_reg.get_position(entity_id)
    dest_x, dest_y = x + dx, y + dy

    if not is_traversable(dest_x, dest_y, gs.game_map, entity_reg):
        log.debug("Move blocked", entity_id=entity_id, target=(dest_x, dest_y))
        return False

    entity_reg.set_position(entity_id, Position(dest_x, dest_y))
    log.debug("Entity moved", entity_id=entity_id, pos=(dest_x, dest_y))
    return True


def round_half_away(value: float) -> int:
    """Rounds to the nearest integer, halves away from zero (``0.5 -> 1``)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def step_towards(from_x: int, from_y: int, to_x: int, to_y: int) -> tuple[int, int]:
    """Unit step along the normalised vector to the target.

    Each component is rounded independently, so the step may be diagonal,
    orthogonal or ``(0, 0)`` when already on the target.
    """
    dx = to_x - from_x
    dy = to_y - from_y
    distance = math.hypot(dx, dy)
    if distance == 0:
        return 0, 0
    return round_half_away(dx / distance), round_half_away(dy / distance)


def move_towards(entity_id: int, target_x: int, target_y: int, gs: GameState) -> bool:
    """Straight-line pursuit of ``(target_x, target_y)``; no pathfinding."""
    x, y = gs.entity_registry.get_position(entity_id)
    dx, dy = step_towards(x, y, target_x, target_y)
    if dx == 0 and dy == 0:
        return False
    return move_by(entity_id, dx, dy, gs)

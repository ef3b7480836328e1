"""Basic pursue-and-strike AI adapter.

A monster acts only while it stands on a tile the player can currently see
(sight is treated as symmetric).  Far from the player it steps straight
towards them; adjacent (distance below 2.0) it attacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import structlog

from game.systems import combat_system, movement_system

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game.game_state import GameState

log = structlog.get_logger()

ATTACK_RANGE = 2.0


def take_turn(
    monster_id: int,
    game_state: "GameState",
    is_visible: Callable[[int, int], bool],
) -> None:
    """Execute one turn for ``monster_id``."""
    monster, player = game_state.entity_registry.split_pair(
        monster_id, game_state.player_id
    )
    mx, my = monster.position
    if not is_visible(mx, my):
        return

    distance = monster.distance_to(player)
    if distance >= ATTACK_RANGE:
        px, py = player.position
        moved = movement_system.move_towards(monster_id, px, py, game_state)
        log.debug("Basic AI pursued", entity_id=monster_id, distance=distance, moved=moved)
        return

    player_fighter = player.fighter
    if player_fighter is not None and player_fighter.hp > 0:
        log.debug("Basic AI attacks", entity_id=monster_id)
        combat_system.attack(monster_id, game_state.player_id, game_state)

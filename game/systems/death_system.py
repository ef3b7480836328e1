# game/systems/death_system.py
"""Death transitions.

Each fighter carries a :class:`DeathKind` tag; :func:`handle_entity_death`
matches on it and turns the entity into an inert corpse.  The transition
clears the fighter columns, so it can only ever run once per entity.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.constants import (
    COLOR_CORPSE,
    COLOR_MONSTER_DEATH_MSG,
    COLOR_PLAYER_DEATH_MSG,
    GLYPH_CORPSE,
)
from game.entities.components import DeathKind
from game.entities.registry import FIGHTER_COMPONENTS

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger(__name__)

_NO_FIGHTER = {name: None for name in FIGHTER_COMPONENTS}


def _corpse_appearance() -> dict:
    return {
        "glyph": GLYPH_CORPSE,
        "color_fg_r": COLOR_CORPSE[0],
        "color_fg_g": COLOR_CORPSE[1],
        "color_fg_b": COLOR_CORPSE[2],
    }


def player_death(entity_id: int, gs: GameState) -> None:
    """The player stays at its index and keeps blocking, but is inert."""
    gs.message_log.add("You died!", COLOR_PLAYER_DEATH_MSG)
    gs.entity_registry.set_components(
        entity_id, alive=False, **_corpse_appearance(), **_NO_FIGHTER
    )
    log.info("Player died", entity_id=entity_id)


def monster_death(entity_id: int, gs: GameState) -> None:
    entity_reg = gs.entity_registry
    name = entity_reg.get_entity_component(entity_id, "name")
    gs.message_log.add(f"{name} is dead!", COLOR_MONSTER_DEATH_MSG)
    entity_reg.set_components(
        entity_id,
        alive=False,
        blocks_movement=False,
        ai_type=None,
        name=f"remains of {name}",
        **_corpse_appearance(),
        **_NO_FIGHTER,
    )
    log.info("Monster died", entity_id=entity_id, name=name)


def handle_entity_death(entity_id: int, gs: GameState) -> None:
    """Runs the death transition bound to the entity's fighter.

    An entity without a fighter is already a corpse; nothing happens.
    """
    fighter = gs.entity_registry.get_fighter(entity_id)
    if fighter is None:
        log.debug("Death ignored, no fighter", entity_id=entity_id)
        return

    match fighter.on_death:
        case DeathKind.PLAYER:
            player_death(entity_id, gs)
        case DeathKind.MONSTER:
            monster_death(entity_id, gs)

"""Central AI dispatch system.

This module exposes :func:`dispatch_ai` which runs one turn for every entity
carrying an AI marker.  Entities act one at a time in ascending id order, each
seeing the effects of the ones before it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import structlog

from game.ai import get_adapter

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game.game_state import GameState

log = structlog.get_logger()


def dispatch_ai(
    game_state: "GameState",
    is_visible: Callable[[int, int], bool] | None = None,
) -> int:
    """Execute AI adapters for every active entity; returns how many acted."""
    if is_visible is None:
        is_visible = game_state.is_visible
    entity_reg = game_state.entity_registry

    acted = 0
    for entity_id in entity_reg.ai_entity_ids():
        if entity_id == game_state.player_id:
            continue
        # An earlier monster's turn may have changed this one.
        ai_type = entity_reg.get_entity_component(entity_id, "ai_type")
        if ai_type is None or not entity_reg.get_entity_component(entity_id, "alive"):
            continue
        adapter = get_adapter(ai_type)
        if adapter is None:
            continue
        log.debug("Dispatching AI", ai_type=ai_type, entity_id=entity_id)
        adapter(entity_id, game_state, is_visible)
        acted += 1
    return acted

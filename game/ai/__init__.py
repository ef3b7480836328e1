"""AI package providing adapters for monster decision routines.

Each adapter has the signature ``take_turn(entity_id, game_state, is_visible)``
and is looked up by the entity's ``ai_type`` column.
"""

from __future__ import annotations

from typing import Callable, Dict

import structlog

from game.entities.components import AIType

from . import basic

log = structlog.get_logger()

# Mapping from ai_type string to the adapter function that will
# execute a turn for entities of that type.
ADAPTERS: Dict[str, Callable] = {
    AIType.BASIC.value: basic.take_turn,
}


def get_adapter(ai_type: str) -> Callable | None:
    """Return the adapter function for the given ai_type, or ``None``."""
    adapter = ADAPTERS.get(ai_type)
    if adapter is None:
        log.warning("Unknown ai_type, entity skipped", ai_type=ai_type)
    return adapter

# engine/action_handler.py
"""
Handles processing of player actions: classifies an intent dictionary and
performs the movement or bump attack it asks for.
"""
from enum import Enum
from typing import Any, Dict

import structlog

from game.game_state import GameState
from game.systems import combat_system

log = structlog.get_logger(__name__)


class TurnOutcome(Enum):
    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


def _handle_player_move(dx: int, dy: int, gs: GameState) -> TurnOutcome:
    """
    Bump-to-attack for the player.

    A move into a wall still spends the turn, so monsters get to act.
    """
    if not gs.player_alive:
        log.debug("Move ignored, player is dead", player_id=gs.player_id)
        return TurnOutcome.DIDNT_TAKE_TURN
    acted = combat_system.move_or_attack(gs.player_id, dx, dy, gs)
    log.debug("Player move resolved", dx=dx, dy=dy, acted=acted)
    return TurnOutcome.TOOK_TURN


def process_player_action(action: Dict[str, Any] | None, gs: GameState) -> TurnOutcome:
    """
    Processes a player action dictionary and reports whether it spent a turn.

    ``None`` (an unmapped key) and any action type other than ``move`` or
    ``exit`` are non-turn actions.
    """
    if action is None:
        return TurnOutcome.DIDNT_TAKE_TURN

    action_type = action.get("type")
    log.debug(
        "ActionHandler: Processing action type",
        action_type=action_type,
        player_id=gs.player_id,
        action_details=action,
    )

    match action_type:
        case "move":
            dx, dy = int(action.get("dx", 0)), int(action.get("dy", 0))
            if dx == 0 and dy == 0:
                return TurnOutcome.DIDNT_TAKE_TURN
            return _handle_player_move(dx, dy, gs)

        case "exit":
            return TurnOutcome.EXIT

        case _:
            log.debug("Non-turn action", action_type=action_type)
            return TurnOutcome.DIDNT_TAKE_TURN

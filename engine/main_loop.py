# engine/main_loop.py
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Self, Tuple

import numpy as np
import structlog

from game.game_state import GameState
from game.message_log import Message
from game.systems.ai_system import dispatch_ai

from . import action_handler
from .action_handler import TurnOutcome

log = structlog.get_logger()

EntityRenderRow = Tuple[int, int, int, Tuple[int, int, int]]


class TurnPhase(Enum):
    AWAITING_INPUT = auto()
    PLAYER_ACTING = auto()
    MONSTERS_ACTING = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only copy of everything a front end needs to draw one frame.

    Grids are ``[y, x]`` numpy copies.  ``entities`` holds only entities on
    visible tiles, non-blocking ones (corpses) first.
    """

    tiles: np.ndarray
    explored: np.ndarray
    visible: np.ndarray
    entities: List[EntityRenderRow]
    messages: List[Message]
    player_hp: int
    player_max_hp: int
    turn_count: int
    game_over: bool


class MainLoop:
    """
    Coordinates one game tick: resolves the player's intent, refreshes the
    field of view when the player moved, then lets every monster act.
    """

    def __init__(self: Self, game_state: GameState):
        self.game_state: GameState = game_state
        self._phase: TurnPhase = TurnPhase.AWAITING_INPUT
        log.info("MainLoop initialized successfully")

    @property
    def phase(self: Self) -> TurnPhase:
        return self._phase

    @property
    def turn_count(self: Self) -> int:
        return self.game_state.turn_count

    def submit_intent(self: Self, action: Dict[str, Any] | None) -> TurnOutcome:
        """
        Receives an action, processes it via the action_handler, and runs the
        monsters' turns if the action consumed a turn.
        """
        if self._phase is TurnPhase.GAME_OVER:
            raise RuntimeError("Game is over; no further intents are accepted")

        gs = self.game_state
        previous_pos = gs.player_position
        self._phase = TurnPhase.PLAYER_ACTING
        try:
            outcome = action_handler.process_player_action(action, gs)
        except Exception as e:
            log.error(
                "Exception during action processing",
                action=action,
                error=str(e),
                exc_info=True,
            )
            self._phase = TurnPhase.AWAITING_INPUT
            raise

        if outcome is TurnOutcome.EXIT:
            log.info("Exit requested", turn_count=gs.turn_count)
            self._phase = TurnPhase.GAME_OVER
            return outcome

        if outcome is TurnOutcome.DIDNT_TAKE_TURN:
            log.debug("Player action did not result in turn", action=action)
            self._phase = TurnPhase.AWAITING_INPUT
            return outcome

        gs.turn_count += 1
        if gs.player_position != previous_pos:
            gs.update_fov()

        self._phase = TurnPhase.MONSTERS_ACTING
        try:
            acted = dispatch_ai(gs, gs.is_visible)
        except Exception as e:
            log.error(
                "Exception during monster turns",
                turn_count=gs.turn_count,
                error=str(e),
                exc_info=True,
            )
            self._phase = TurnPhase.AWAITING_INPUT
            raise
        log.debug("Turn complete", turn_count=gs.turn_count, monsters_acted=acted)
        self._phase = TurnPhase.AWAITING_INPUT
        return outcome

    def render_state(self: Self) -> RenderSnapshot:
        gs = self.game_state
        game_map = gs.game_map
        fighter = gs.entity_registry.get_fighter(gs.player_id)
        return RenderSnapshot(
            tiles=game_map.tiles.copy(),
            explored=game_map.explored.copy(),
            visible=game_map.visible.copy(),
            entities=gs.entity_registry.render_rows(game_map.visible),
            messages=list(gs.message_log),
            player_hp=max(fighter.hp, 0) if fighter else 0,
            player_max_hp=fighter.max_hp if fighter else gs.config.player.hp,
            turn_count=gs.turn_count,
            game_over=self._phase is TurnPhase.GAME_OVER,
        )

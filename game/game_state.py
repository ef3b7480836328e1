# game/game_state.py
from typing import Tuple

import numpy as np
import structlog

from game_rng import GameRNG

from game.config import GameConfig
from game.constants import COLOR_WELCOME_MSG
from game.entities.components import DeathKind, Fighter, Position
from game.entities.registry import EntityRegistry
from game.message_log import MessageLog
from game.world.fov import FovProvider, compute_fov
from game.world.game_map import GameMap
from game.world.procgen import generate_dungeon

log = structlog.get_logger()

WELCOME_MESSAGE = "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings."


class GameState:
    """Central container for mutable game data.

    Holds the map, the entity arena (player at ``player_id``) and the message log.
    Visibility is delegated to ``fov_provider``, any callable
    ``(transparent, (x, y), radius) -> bool ndarray``; the result is only ever
    consumed through :meth:`is_visible` and the map's ``visible`` grid.
    """

    def __init__(
        self,
        config: GameConfig,
        game_map: GameMap,
        entity_registry: EntityRegistry,
        player_id: int,
        message_log: MessageLog | None = None,
        fov_provider: FovProvider | None = None,
    ):
        log.info("Initializing GameState...")
        if (game_map.width, game_map.height) != (config.map_width, config.map_height):
            log.warning(
                "Map size differs from config",
                map_size=(game_map.width, game_map.height),
                config_size=(config.map_width, config.map_height),
            )
        self.config: GameConfig = config
        self.game_map: GameMap = game_map
        self.entity_registry: EntityRegistry = entity_registry
        self.player_id: int = player_id
        self.message_log: MessageLog = message_log or MessageLog(config.message_capacity)
        self.fov_provider: FovProvider = fov_provider or compute_fov
        self.fov_radius: int = config.fov_radius
        self.turn_count: int = 0

    @classmethod
    def new_game(
        cls,
        config: GameConfig | None = None,
        seed: int | None = None,
        fov_provider: FovProvider | None = None,
    ) -> "GameState":
        """Builds a fresh session: player, dungeon, initial FOV, welcome text."""
        config = config or GameConfig()
        rng = GameRNG(seed=seed if seed is not None else config.dungeon_seed)
        log.debug("GameRNG initialized", seed=rng.initial_seed)

        entity_registry = EntityRegistry()
        archetype = config.player
        # The player takes index 0 before any monster is appended.
        player_id = entity_registry.create_entity(
            x=0,
            y=0,
            glyph=archetype.glyph,
            color_fg=archetype.color,
            name=archetype.name,
            blocks_movement=True,
            fighter=Fighter(
                max_hp=archetype.hp,
                hp=archetype.hp,
                defense=archetype.defense,
                power=archetype.power,
                on_death=DeathKind.PLAYER,
            ),
        )

        layout = generate_dungeon(config, rng, entity_registry)
        entity_registry.set_position(player_id, Position(*layout.player_start))

        gs = cls(
            config=config,
            game_map=layout.game_map,
            entity_registry=entity_registry,
            player_id=player_id,
            fov_provider=fov_provider,
        )
        gs.update_fov()
        gs.add_message(WELCOME_MESSAGE, COLOR_WELCOME_MSG)
        log.info(
            "New game started",
            seed=rng.initial_seed,
            player_start=layout.player_start,
            rooms=len(layout.rooms),
            entities=len(entity_registry),
        )
        return gs

    def update_fov(self) -> None:
        """Recomputes visibility from the player; explored only ever grows."""
        px, py = self.player_position
        visible = np.asarray(
            self.fov_provider(self.game_map.transparent, (px, py), self.fov_radius),
            dtype=bool,
        )
        self.game_map.update_visibility(visible)

    def is_visible(self, x: int, y: int) -> bool:
        """Visibility oracle handed to AI; ``False`` off the map."""
        if not self.game_map.in_bounds(x, y):
            return False
        return bool(self.game_map.visible[y, x])

    @property
    def map_width(self) -> int:
        return self.game_map.width

    @property
    def map_height(self) -> int:
        return self.game_map.height

    @property
    def player_position(self) -> Position:
        """Gets the current player position from the EntityRegistry."""
        return self.entity_registry.get_position(self.player_id)

    @property
    def player_alive(self) -> bool:
        return bool(self.entity_registry.get_entity_component(self.player_id, "alive"))

    def add_message(
        self, text: str, color: Tuple[int, int, int] = (255, 255, 255)
    ) -> None:
        """Adds a message to the game log."""
        self.message_log.add(text, color)

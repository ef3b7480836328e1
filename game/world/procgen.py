# game/world/procgen.py
"""
Room-and-tunnel dungeon generation.

Rooms are placed by rejection sampling: each of ``max_rooms`` attempts draws a
random rectangle and discards it if it touches an accepted room.  Each new room
is joined to the previous one by an L-shaped tunnel and populated with
monsters.  The first room holds the start position and never gets monsters.
Output is a pure function of the :class:`GameRNG` stream.
"""
from typing import TYPE_CHECKING, List, NamedTuple, Tuple

import structlog

from game.entities.components import AIType, DeathKind, Fighter
from game.world.game_map import TILE_ID_FLOOR, GameMap

if TYPE_CHECKING:
    from game.config import EntityArchetype, GameConfig
    from game.entities.registry import EntityRegistry
    from game_rng import GameRNG

log = structlog.get_logger()


class Rect(NamedTuple):
    """A room rectangle; ``x2``/``y2`` are one past the interior."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x, y, x + w, y + h)

    @property
    def center(self) -> Tuple[int, int]:
        """Center coordinates of the rectangle."""
        center_x = (self.x1 + self.x2) // 2
        center_y = (self.y1 + self.y2) // 2
        return center_x, center_y

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    def intersects(self, other: "Rect") -> bool:
        """True if the rectangles overlap or merely share an edge."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Tuple[int, int, int, int]:
        """Half-open interior box ``(x1 + 1, y1 + 1, x2, y2)``; the border stays wall."""
        return self.x1 + 1, self.y1 + 1, self.x2, self.y2

    def carve(self, game_map: GameMap) -> None:
        x1, y1, x2, y2 = self.interior()
        game_map.set_region(x1, y1, x2, y2, TILE_ID_FLOOR)
        log.debug("Carved room", rect=self)


class DungeonLayout(NamedTuple):
    game_map: GameMap
    player_start: Tuple[int, int]
    rooms: List[Rect]
    monster_ids: List[int]


def create_h_tunnel(game_map: GameMap, x1: int, x2: int, y: int) -> None:
    """Carves a horizontal tunnel covering both end columns."""
    game_map.set_region(min(x1, x2), y, max(x1, x2) + 1, y + 1, TILE_ID_FLOOR)


def create_v_tunnel(game_map: GameMap, y1: int, y2: int, x: int) -> None:
    """Carves a vertical tunnel covering both end rows."""
    game_map.set_region(x, min(y1, y2), x + 1, max(y1, y2) + 1, TILE_ID_FLOOR)


def connect_rooms(game_map: GameMap, prev: Rect, new: Rect, rng: "GameRNG") -> None:
    """Joins two room centers with an L-shaped tunnel.

    Which leg is carved first is a fair coin; both shapes share end points.
    """
    prev_x, prev_y = prev.center
    new_x, new_y = new.center
    if rng.chance(0.5):
        create_h_tunnel(game_map, prev_x, new_x, prev_y)
        create_v_tunnel(game_map, prev_y, new_y, new_x)
        shape = "horizontal_first"
    else:
        create_v_tunnel(game_map, prev_y, new_y, prev_x)
        create_h_tunnel(game_map, prev_x, new_x, new_y)
        shape = "vertical_first"
    log.debug("Connected rooms", start=(prev_x, prev_y), end=(new_x, new_y), shape=shape)


def spawn_monster(
    archetype: "EntityArchetype", x: int, y: int, entity_registry: "EntityRegistry"
) -> int:
    fighter = Fighter(
        max_hp=archetype.hp,
        hp=archetype.hp,
        defense=archetype.defense,
        power=archetype.power,
        on_death=DeathKind.MONSTER,
    )
    return entity_registry.create_entity(
        x=x,
        y=y,
        glyph=archetype.glyph,
        color_fg=archetype.color,
        name=archetype.name,
        blocks_movement=True,
        fighter=fighter,
        ai_type=AIType.BASIC,
    )


def place_objects(
    room: Rect,
    game_map: GameMap,
    entity_registry: "EntityRegistry",
    config: "GameConfig",
    rng: "GameRNG",
) -> List[int]:
    """Spawns up to ``max_room_monsters`` monsters inside ``room``.

    A sampled spot that is not walkable or already holds a blocking entity is
    skipped, not retried.
    """
    spawned: List[int] = []
    num_monsters = rng.get_int(0, config.max_room_monsters)
    if num_monsters == 0:
        return spawned

    weights = [m.weight for m in config.monsters]
    for _ in range(num_monsters):
        x = rng.get_int(room.x1 + 1, room.x2 - 1)
        y = rng.get_int(room.y1 + 1, room.y2 - 1)
        if not game_map.is_walkable(x, y) or entity_registry.is_occupied(x, y):
            log.debug("Spawn spot rejected", pos=(x, y), room=room)
            continue
        archetype = rng.weighted_choice(config.monsters, weights)
        spawned.append(spawn_monster(archetype, x, y, entity_registry))
    return spawned


def generate_dungeon(
    config: "GameConfig",
    rng: "GameRNG",
    entity_registry: "EntityRegistry",
) -> DungeonLayout:
    """Builds a fresh map, appending any monsters to ``entity_registry``."""
    log.info(
        "Starting dungeon generation",
        width=config.map_width,
        height=config.map_height,
        max_rooms=config.max_rooms,
        seed=rng.initial_seed,
    )
    game_map = GameMap(config.map_width, config.map_height)
    rooms: List[Rect] = []
    monster_ids: List[int] = []
    player_start = (0, 0)

    for _ in range(config.max_rooms):
        w = rng.get_int(config.room_min_size, config.room_max_size)
        h = rng.get_int(config.room_min_size, config.room_max_size)
        x = rng.get_int(0, config.map_width - w - 1)
        y = rng.get_int(0, config.map_height - h - 1)
        new_room = Rect.from_size(x, y, w, h)

        if any(new_room.intersects(other) for other in rooms):
            log.debug("Room rejected: overlap", rect=new_room)
            continue

        new_room.carve(game_map)
        if not rooms:
            player_start = new_room.center
        else:
            connect_rooms(game_map, rooms[-1], new_room, rng)
            monster_ids.extend(
                place_objects(new_room, game_map, entity_registry, config, rng)
            )
        rooms.append(new_room)

    if not rooms:
        # max_rooms == 0; carve a lone start tile inside the outer walls.
        player_start = (config.map_width // 2, config.map_height // 2)
        game_map.set_tile(*player_start, TILE_ID_FLOOR)

    log.info(
        "Dungeon generation complete",
        rooms=len(rooms),
        monsters=len(monster_ids),
        player_start=player_start,
        floor_tiles=game_map.walkable_count(),
    )
    return DungeonLayout(game_map, player_start, rooms, monster_ids)

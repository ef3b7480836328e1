# game/world/game_map.py
from typing import Final, NamedTuple

import numpy as np
import structlog

log = structlog.get_logger()

TILE_ID_FLOOR: Final[int] = 0
TILE_ID_WALL: Final[int] = 1


class MapBoundsError(IndexError):
    """Raised when a tile outside the map is queried or modified."""


class TileType(NamedTuple):
    walkable: bool
    transparent: bool
    color_bg_dark: tuple[int, int, int]
    color_bg_light: tuple[int, int, int]


TILE_TYPES: Final[dict[int, TileType]] = {
    TILE_ID_FLOOR: TileType(
        walkable=True,
        transparent=True,
        color_bg_dark=(50, 50, 150),
        color_bg_light=(200, 180, 50),
    ),
    TILE_ID_WALL: TileType(
        walkable=False,
        transparent=False,
        color_bg_dark=(0, 0, 100),
        color_bg_light=(130, 110, 50),
    ),
}


class Tile(NamedTuple):
    """Snapshot of a single tile's state."""

    walkable: bool
    transparent: bool
    explored: bool


class GameMap:
    def __init__(self, width: int, height: int):
        """
        Initializes a map of the given size with every tile a wall.

        Arrays are indexed ``[y, x]``; every public method takes ``(x, y)``.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid map dimensions", width=width, height=height)
            raise ValueError("Map width and height must be positive integers.")
        self._width = width
        self._height = height
        log.debug("Initializing GameMap", width=self._width, height=self._height)

        self.tiles: np.ndarray = np.full(
            (height, width), fill_value=TILE_ID_WALL, dtype=np.uint8, order="C"
        )
        # Movement and sight are tracked separately so a tile type may block one
        # without the other.
        self.walkable: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        self.transparent: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        # Visibility/Exploration state
        self.explored: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        self.visible: np.ndarray = np.zeros((height, width), dtype=bool, order="C")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the map boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def _require_in_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            log.error(
                "Tile access out of bounds",
                pos=(x, y),
                size=(self._width, self._height),
            )
            raise MapBoundsError(
                f"({x}, {y}) is outside the {self._width}x{self._height} map"
            )

    def is_walkable(self, x: int, y: int) -> bool:
        self._require_in_bounds(x, y)
        return bool(self.walkable[y, x])

    def is_transparent(self, x: int, y: int) -> bool:
        self._require_in_bounds(x, y)
        return bool(self.transparent[y, x])

    def is_explored(self, x: int, y: int) -> bool:
        self._require_in_bounds(x, y)
        return bool(self.explored[y, x])

    def is_visible(self, x: int, y: int) -> bool:
        self._require_in_bounds(x, y)
        return bool(self.visible[y, x])

    def tile_at(self, x: int, y: int) -> Tile:
        self._require_in_bounds(x, y)
        return Tile(
            walkable=bool(self.walkable[y, x]),
            transparent=bool(self.transparent[y, x]),
            explored=bool(self.explored[y, x]),
        )

    def set_tile(self, x: int, y: int, tile_id: int) -> None:
        self._require_in_bounds(x, y)
        self.set_region(x, y, x + 1, y + 1, tile_id)

    def set_region(self, x1: int, y1: int, x2: int, y2: int, tile_id: int) -> None:
        """Sets every tile in the half-open box ``[x1, x2) x [y1, y2)``."""
        tile_type = TILE_TYPES.get(tile_id)
        if tile_type is None:
            raise ValueError(f"Unknown tile id {tile_id}")
        if x1 >= x2 or y1 >= y2:
            log.debug("Ignoring empty region", region=(x1, y1, x2, y2))
            return
        self._require_in_bounds(x1, y1)
        self._require_in_bounds(x2 - 1, y2 - 1)
        self.tiles[y1:y2, x1:x2] = tile_id
        self.walkable[y1:y2, x1:x2] = tile_type.walkable
        self.transparent[y1:y2, x1:x2] = tile_type.transparent

    def update_visibility(self, visible: np.ndarray) -> None:
        """Replaces the visible set and marks every visible tile explored.

        ``explored`` only ever gains tiles.
        """
        if visible.shape != self.visible.shape:
            raise ValueError(
                f"Visibility grid shape {visible.shape} does not match map {self.visible.shape}"
            )
        self.visible[:] = visible
        self.explored |= self.visible
        log.debug(
            "Visibility updated",
            visible_count=int(self.visible.sum()),
            explored_count=int(self.explored.sum()),
        )

    def walkable_count(self) -> int:
        return int(self.walkable.sum())

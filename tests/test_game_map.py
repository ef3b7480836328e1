import numpy as np
import pytest

from game.world.game_map import TILE_ID_FLOOR, TILE_ID_WALL, GameMap, MapBoundsError


def test_new_map_is_all_wall():
    gm = GameMap(8, 5)
    assert gm.tiles.shape == (5, 8)
    assert (gm.tiles == TILE_ID_WALL).all()
    assert not gm.walkable.any()
    assert not gm.transparent.any()
    assert not gm.explored.any()


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        GameMap(0, 5)


def test_set_region_is_half_open():
    gm = GameMap(6, 6)
    gm.set_region(1, 2, 4, 3, TILE_ID_FLOOR)
    assert gm.walkable_count() == 3
    assert gm.is_walkable(1, 2) and gm.is_walkable(3, 2)
    assert not gm.is_walkable(4, 2)
    assert gm.is_transparent(2, 2)
    tile = gm.tile_at(2, 2)
    assert tile.walkable and tile.transparent and not tile.explored


def test_empty_region_is_noop():
    gm = GameMap(6, 6)
    gm.set_region(3, 3, 3, 5, TILE_ID_FLOOR)
    assert gm.walkable_count() == 0


def test_unknown_tile_id():
    gm = GameMap(4, 4)
    with pytest.raises(ValueError):
        gm.set_tile(1, 1, 99)


def test_out_of_bounds_queries_raise():
    gm = GameMap(4, 4)
    assert not gm.in_bounds(4, 0)
    with pytest.raises(MapBoundsError):
        gm.is_walkable(4, 0)
    with pytest.raises(MapBoundsError):
        gm.tile_at(-1, 2)
    with pytest.raises(MapBoundsError):
        gm.set_region(2, 2, 6, 3, TILE_ID_FLOOR)


def test_explored_is_monotonic():
    gm = GameMap(4, 4)
    first = np.zeros((4, 4), dtype=bool)
    first[1, 1] = True
    gm.update_visibility(first)
    assert gm.is_visible(1, 1) and gm.is_explored(1, 1)

    gm.update_visibility(np.zeros((4, 4), dtype=bool))
    assert not gm.is_visible(1, 1)
    assert gm.is_explored(1, 1)


def test_visibility_shape_mismatch():
    gm = GameMap(4, 4)
    with pytest.raises(ValueError):
        gm.update_visibility(np.zeros((3, 4), dtype=bool))

import numpy as np

from game.config import GameConfig
from game.game_state import GameState
from game.world.fov import compute_fov, line_of_sight


def open_room(width=9, height=9):
    transparent = np.zeros((height, width), dtype=bool)
    transparent[1:-1, 1:-1] = True
    return transparent


def test_open_room_and_its_walls_are_lit():
    transparent = open_room()
    visible = compute_fov(transparent, (4, 4), radius=10)
    assert visible.all()


def test_pillar_casts_shadow():
    transparent = open_room()
    transparent[4, 5] = False
    visible = compute_fov(transparent, (4, 4), radius=10)
    assert visible[4, 5]  # the pillar itself
    assert not visible[4, 6]
    assert not visible[4, 7]


def test_radius_limits_view():
    transparent = np.ones((1, 20), dtype=bool)
    visible = compute_fov(transparent, (0, 0), radius=5)
    assert visible[0, :6].all()
    assert not visible[0, 6:].any()


def test_origin_outside_map_sees_nothing():
    visible = compute_fov(open_room(), (20, 20), radius=5)
    assert not visible.any()


def test_line_of_sight_ignores_endpoints():
    transparent = np.zeros((1, 5), dtype=bool)
    assert line_of_sight(0, 0, 1, 0, transparent)
    assert not line_of_sight(0, 0, 2, 0, transparent)


def test_new_game_uses_custom_fov_provider():
    calls = []

    def reveal_all(transparent, origin, radius):
        calls.append((origin, radius))
        return np.ones_like(transparent, dtype=bool)

    gs = GameState.new_game(GameConfig(), seed=3, fov_provider=reveal_all)
    assert calls == [(tuple(gs.player_position), 10)]
    assert gs.game_map.explored.all()
    assert gs.is_visible(0, 0)
    assert not gs.is_visible(-1, 0)

import pytest

from game.config import GameConfig
from game.constants import COLOR_WHITE, GLYPH_PLAYER
from game.entities.components import DeathKind, Fighter, Position
from game.entities.registry import EntityRegistry
from game.game_state import GameState
from game.systems import movement_system
from game.world.game_map import TILE_ID_FLOOR, GameMap, MapBoundsError


def make_gs(width=8, height=8, player_pos=(3, 3)):
    config = GameConfig(
        map_width=width, map_height=height, room_min_size=2, room_max_size=4
    )
    gm = GameMap(width, height)
    gm.set_region(1, 1, width - 1, height - 1, TILE_ID_FLOOR)
    er = EntityRegistry()
    player_id = er.create_entity(
        *player_pos,
        glyph=GLYPH_PLAYER,
        color_fg=COLOR_WHITE,
        name="player",
        fighter=Fighter(max_hp=30, hp=30, defense=2, power=5, on_death=DeathKind.PLAYER),
    )
    return GameState(config, gm, er, player_id)


def test_is_traversable_occupancy():
    gs = make_gs()
    er = gs.entity_registry
    assert movement_system.is_traversable(4, 4, gs.game_map, er)
    assert not movement_system.is_traversable(3, 3, gs.game_map, er)  # player
    assert not movement_system.is_traversable(0, 3, gs.game_map, er)  # wall

    er.create_entity(5, 5, ord("%"), (191, 0, 0), "remains", blocks_movement=False)
    assert movement_system.is_traversable(5, 5, gs.game_map, er)


def test_is_traversable_out_of_bounds_is_fatal():
    gs = make_gs()
    with pytest.raises(MapBoundsError):
        movement_system.is_traversable(8, 3, gs.game_map, gs.entity_registry)


def test_move_by_moves_and_blocks_silently():
    gs = make_gs(player_pos=(1, 1))
    assert movement_system.move_by(gs.player_id, 1, 0, gs)
    assert gs.player_position == Position(2, 1)

    assert not movement_system.move_by(gs.player_id, 0, -1, gs)
    assert gs.player_position == Position(2, 1)
    assert len(gs.message_log) == 0


@pytest.mark.parametrize(
    "origin,target,expected",
    [
        ((0, 0), (5, 0), (1, 0)),
        ((0, 0), (0, -4), (0, -1)),
        ((0, 0), (3, 3), (1, 1)),
        ((0, 0), (-4, 2), (-1, 0)),
        ((0, 0), (4, 3), (1, 1)),
        ((2, 2), (2, 2), (0, 0)),
    ],
)
def test_step_towards(origin, target, expected):
    assert movement_system.step_towards(*origin, *target) == expected


def test_round_half_away_from_zero():
    assert movement_system.round_half_away(0.5) == 1
    assert movement_system.round_half_away(-0.5) == -1
    assert movement_system.round_half_away(0.49) == 0
    assert movement_system.round_half_away(-0.7) == -1


def test_move_towards_steps_diagonally():
    gs = make_gs(player_pos=(1, 1))
    assert movement_system.move_towards(gs.player_id, 6, 6, gs)
    assert gs.player_position == Position(2, 2)
    assert not movement_system.move_towards(gs.player_id, 2, 2, gs)

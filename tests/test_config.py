from pathlib import Path

import pytest
import yaml

from game.config import (
    DEFAULT_MONSTERS,
    EntityArchetype,
    GameConfig,
    load_game_config,
    load_keybindings,
)

REPO_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def test_defaults():
    config = GameConfig()
    assert (config.map_width, config.map_height) == (80, 45)
    assert (config.room_min_size, config.room_max_size, config.max_rooms) == (6, 10, 30)
    assert config.max_room_monsters == 3
    assert config.fov_radius == 10
    assert config.message_capacity == 6
    assert config.player.hp == 30
    assert [m.name for m in config.monsters] == ["orc", "troll"]
    assert [m.weight for m in config.monsters] == [80, 20]


@pytest.mark.parametrize(
    "overrides",
    [
        {"map_width": 0},
        {"room_min_size": 8, "room_max_size": 6},
        {"map_width": 10, "room_max_size": 10},
        {"message_capacity": 0},
        {"max_rooms": -1},
        {"monsters": ()},
    ],
)
def test_invalid_config_rejected(overrides):
    with pytest.raises(ValueError):
        GameConfig(**overrides)


def test_no_monsters_needed_when_rooms_stay_empty():
    config = GameConfig(monsters=(), max_room_monsters=0)
    assert config.monsters == ()


def test_archetype_from_dict_converts_glyph():
    archetype = EntityArchetype.from_dict(
        {"name": "goblin", "glyph": "g", "color": [1, 2, 3], "hp": 4, "power": 2}
    )
    assert archetype.glyph == ord("g")
    assert archetype.color == (1, 2, 3)
    assert archetype.defense == 0


def test_archetype_requires_positive_hp():
    with pytest.raises(ValueError):
        EntityArchetype(name="ghost", glyph=1, color=(0, 0, 0), hp=0, defense=0, power=0)


def test_load_game_config_partial_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"map_width": 40, "map_height": 20, "bogus": 1}))
    config = load_game_config(path)
    assert (config.map_width, config.map_height) == (40, 20)
    assert config.fov_radius == 10
    assert config.monsters == DEFAULT_MONSTERS


def test_load_game_config_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_game_config(path) == GameConfig()


def test_load_game_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_game_config(tmp_path / "nope.yaml")


def test_shipped_config_matches_defaults():
    assert load_game_config(REPO_CONFIG_DIR / "config.yaml") == GameConfig()


def test_shipped_keybindings_load():
    bindings = load_keybindings(REPO_CONFIG_DIR / "keybindings.toml")
    assert bindings["bindings"]["common"]["exit"]["key"] == "escape"
    assert bindings["bindings"]["movement"]["move_left_vi"]["dx"] == -1


def test_missing_keybindings_file_is_empty(tmp_path):
    assert load_keybindings(tmp_path / "keybindings.toml") == {}


def test_partial_player_block_keeps_other_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("player:\n  hp: 50\n")
    player = load_game_config(path).player
    assert player.hp == 50
    assert player.glyph == ord("@")
    assert (player.defense, player.power) == (2, 5)


def test_player_block_without_hp_uses_default_hp(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("player:\n  power: 9\n")
    player = load_game_config(path).player
    assert (player.hp, player.power) == (30, 9)
    assert player.name == "player"


def test_monster_without_hp_is_a_value_error():
    with pytest.raises(ValueError, match="hp"):
        GameConfig.from_dict({"monsters": [{"name": "bat", "glyph": "b"}]})


def test_tiny_map_rejected():
    with pytest.raises(ValueError):
        GameConfig(map_width=2, map_height=12, room_min_size=1, room_max_size=1)

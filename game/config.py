# game/config.py
"""
Immutable game configuration.

A single :class:`GameConfig` is threaded through dungeon generation and turn
resolution instead of module-level constants, so tests can build small maps
and deterministic setups.  Values are read from ``config/config.yaml`` by
:func:`load_game_config`; any key missing from the file keeps its default.
"""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import structlog
import yaml

from game.constants import (
    COLOR_DARKER_GREEN,
    COLOR_DESATURATED_GREEN,
    COLOR_WHITE,
    GLYPH_PLAYER,
    Color,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class EntityArchetype:
    """Stat preset for the player or a monster kind."""

    name: str
    glyph: int
    color: Color
    hp: int
    defense: int
    power: int
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.hp <= 0:
            raise ValueError(f"Archetype '{self.name}' needs positive hp, got {self.hp}")
        if self.weight < 0:
            raise ValueError(f"Archetype '{self.name}' has negative weight")

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], base: "EntityArchetype | None" = None
    ) -> "EntityArchetype":
        """Builds an archetype; keys absent from ``data`` come from ``base``."""
        converters = {
            "name": str,
            "glyph": lambda g: ord(g[0]) if isinstance(g, str) else int(g),
            "color": lambda c: tuple(int(v) for v in c),
            "hp": int,
            "defense": int,
            "power": int,
            "weight": float,
        }
        values = {key: conv(data[key]) for key, conv in converters.items() if key in data}
        if base is not None:
            return replace(base, **values)
        missing = [key for key in ("name", "hp") if key not in values]
        if missing:
            raise ValueError(f"Archetype {dict(data)!r} is missing {', '.join(missing)}")
        values.setdefault("glyph", ord("?"))
        values.setdefault("color", COLOR_WHITE)
        values.setdefault("defense", 0)
        values.setdefault("power", 0)
        return cls(**values)


DEFAULT_PLAYER = EntityArchetype(
    name="player", glyph=GLYPH_PLAYER, color=COLOR_WHITE, hp=30, defense=2, power=5
)

DEFAULT_MONSTERS: tuple[EntityArchetype, ...] = (
    EntityArchetype(
        name="orc",
        glyph=ord("o"),
        color=COLOR_DESATURATED_GREEN,
        hp=10,
        defense=0,
        power=3,
        weight=80,
    ),
    EntityArchetype(
        name="troll",
        glyph=ord("T"),
        color=COLOR_DARKER_GREEN,
        hp=16,
        defense=1,
        power=4,
        weight=20,
    ),
)


@dataclass(frozen=True)
class GameConfig:
    map_width: int = 80
    map_height: int = 45
    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30
    max_room_monsters: int = 3
    fov_radius: int = 10
    message_capacity: int = 6
    dungeon_seed: int | None = None
    player: EntityArchetype = DEFAULT_PLAYER
    monsters: tuple[EntityArchetype, ...] = DEFAULT_MONSTERS

    def __post_init__(self) -> None:
        # The fallback start tile sits at the centre and needs a wall ring.
        if self.map_width < 3 or self.map_height < 3:
            raise ValueError("Map width and height must be at least 3.")
        if self.room_min_size <= 0 or self.room_min_size > self.room_max_size:
            raise ValueError(
                f"Invalid room size range [{self.room_min_size}, {self.room_max_size}]"
            )
        # A room's x is drawn from [0, map_width - w), which must not be empty.
        if self.room_max_size >= self.map_width or self.room_max_size >= self.map_height:
            raise ValueError(
                f"Rooms up to {self.room_max_size} tiles do not fit a "
                f"{self.map_width}x{self.map_height} map"
            )
        if self.max_rooms < 0 or self.max_room_monsters < 0:
            raise ValueError("max_rooms and max_room_monsters must not be negative")
        if self.message_capacity <= 0:
            raise ValueError("message_capacity must be positive")
        if self.max_room_monsters > 0:
            if not self.monsters:
                raise ValueError("At least one monster archetype is required")
            if sum(m.weight for m in self.monsters) <= 0:
                raise ValueError("Monster archetype weights must sum to a positive value")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameConfig":
        """Build a config from a parsed mapping, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                log.warning("Ignoring unknown config key", key=key)
                continue
            if key == "player":
                value = EntityArchetype.from_dict(value or {}, base=DEFAULT_PLAYER)
            elif key == "monsters":
                value = tuple(EntityArchetype.from_dict(m) for m in value)
            kwargs[key] = value
        return cls(**kwargs)


def load_game_config(config_path: Path) -> GameConfig:
    """Loads ``config.yaml`` into a :class:`GameConfig`."""
    if not config_path.is_file():
        log.error("Game config file not found", path=str(config_path))
        raise FileNotFoundError(f"Game configuration file not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)
    if config_data is None:
        log.warning("Game config file is empty, using defaults.", path=str(config_path))
        return GameConfig()
    config = GameConfig.from_dict(config_data)
    log.info(
        "Game config loaded",
        path=str(config_path),
        map_size=f"{config.map_width}x{config.map_height}",
        monsters=[m.name for m in config.monsters],
    )
    return config


def load_toml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a TOML configuration file (keybindings)."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.error(
            f"Error parsing TOML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_keybindings(config_path: Path) -> Dict[str, Any]:
    """Loads ``keybindings.toml``; an absent file yields ``{}``."""
    return load_toml_config(config_path, "Keybindings")

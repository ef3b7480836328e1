"""Shared glyphs and colours used by the simulation and the message log."""

from typing import Final

Color = tuple[int, int, int]

# Glyphs are stored as code points, as in the entity registry schema.
GLYPH_PLAYER: Final[int] = ord("@")
GLYPH_CORPSE: Final[int] = ord("%")

COLOR_WHITE: Final[Color] = (255, 255, 255)
COLOR_RED: Final[Color] = (255, 0, 0)
COLOR_ORANGE: Final[Color] = (255, 127, 0)
COLOR_DARK_RED: Final[Color] = (191, 0, 0)
COLOR_DESATURATED_GREEN: Final[Color] = (63, 127, 63)
COLOR_DARKER_GREEN: Final[Color] = (0, 127, 0)

# Message colours
COLOR_ATTACK_MSG: Final[Color] = COLOR_WHITE
COLOR_PLAYER_DEATH_MSG: Final[Color] = COLOR_RED
COLOR_MONSTER_DEATH_MSG: Final[Color] = COLOR_ORANGE
COLOR_WELCOME_MSG: Final[Color] = COLOR_RED

# Corpse appearance
COLOR_CORPSE: Final[Color] = COLOR_DARK_RED

__all__ = [
    "Color",
    "GLYPH_PLAYER",
    "GLYPH_CORPSE",
    "COLOR_WHITE",
    "COLOR_RED",
    "COLOR_ORANGE",
    "COLOR_DARK_RED",
    "COLOR_DESATURATED_GREEN",
    "COLOR_DARKER_GREEN",
    "COLOR_ATTACK_MSG",
    "COLOR_PLAYER_DEATH_MSG",
    "COLOR_MONSTER_DEATH_MSG",
    "COLOR_WELCOME_MSG",
    "COLOR_CORPSE",
]

"""game/world/fov.py

Default visibility collaborator.

The turn controller only consumes a boolean "visible" grid; any callable with
the :data:`FovProvider` signature can be plugged into
:class:`~game.game_state.GameState`.  The default below casts a Bresenham ray
from the origin to every tile within the radius.  A tile is lit when every
tile strictly between it and the origin is transparent, so walls bounding a
lit room are lit too.
"""

from __future__ import annotations

from typing import Callable, Tuple, TypeAlias

import numpy as np
import structlog

log = structlog.get_logger(__name__)

Point: TypeAlias = Tuple[int, int]
FovProvider: TypeAlias = Callable[[np.ndarray, Point, int], np.ndarray]


def line_of_sight(x0: int, y0: int, x1: int, y1: int, transparency_map: np.ndarray) -> bool:
    """Return ``True`` if nothing opaque lies strictly between two points.

    Coordinates are ``(x, y)``; ``transparency_map`` is indexed ``[y, x]``.
    The end points themselves are not tested.
    """
    height, width = transparency_map.shape
    if not (0 <= x0 < width and 0 <= y0 < height and 0 <= x1 < width and 0 <= y1 < height):
        return False

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    xi, yi = x0, y0
    while (xi, yi) != (x1, y1):
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            xi += sx
        if e2 <= dx:
            err += dx
            yi += sy
        if (xi, yi) == (x1, y1):
            break
        if not transparency_map[yi, xi]:
            return False
    return True


def compute_fov(transparent: np.ndarray, origin: Point, radius: int) -> np.ndarray:
    """Visible tiles from ``origin`` within a circular ``radius``.

    ``radius <= 0`` means unlimited.  The origin is always visible.
    """
    height, width = transparent.shape
    ox, oy = origin
    visible = np.zeros((height, width), dtype=bool)
    if not (0 <= ox < width and 0 <= oy < height):
        log.warning("FOV origin outside map", origin=origin, size=(width, height))
        return visible

    if radius > 0:
        x_min, x_max = max(0, ox - radius), min(width - 1, ox + radius)
        y_min, y_max = max(0, oy - radius), min(height - 1, oy + radius)
        radius_sq = radius * radius
    else:
        x_min, x_max, y_min, y_max = 0, width - 1, 0, height - 1
        radius_sq = None

    for y in range(y_min, y_max + 1):
        for x in range(x_min, x_max + 1):
            if radius_sq is not None and (x - ox) ** 2 + (y - oy) ** 2 > radius_sq:
                continue
            if line_of_sight(ox, oy, x, y, transparent):
                visible[y, x] = True

    visible[oy, ox] = True
    log.debug("FOV computed", origin=origin, radius=radius, visible_count=int(visible.sum()))
    return visible


__all__ = ["FovProvider", "compute_fov", "line_of_sight"]

# game/entities/registry.py
import math
from typing import Any, Dict, List, Self, Tuple

import numpy as np
import polars as pl
import structlog

from game.entities.components import AIType, DeathKind, Fighter, Position

log = structlog.get_logger()

Color = Tuple[int, int, int]

ENTITY_SCHEMA: dict[str, pl.DataType] = {
    "entity_id": pl.UInt32,
    "alive": pl.Boolean,
    "x": pl.Int16,
    "y": pl.Int16,
    "glyph": pl.UInt16,
    "color_fg_r": pl.UInt8,
    "color_fg_g": pl.UInt8,
    "color_fg_b": pl.UInt8,
    "name": pl.Utf8,
    "blocks_movement": pl.Boolean,
    # Fighter block: all null when the entity has no fighter.
    "hp": pl.Int16,
    "max_hp": pl.Int16,
    "defense": pl.Int16,
    "power": pl.Int16,
    "death_kind": pl.Utf8,
    # AI marker: null when the entity takes no autonomous turns.
    "ai_type": pl.Utf8,
}

FIGHTER_COMPONENTS: Tuple[str, ...] = ("hp", "max_hp", "defense", "power", "death_kind")
PROTECTED_COMPONENTS: Tuple[str, ...] = ("entity_id",)


class EntityNotFoundError(IndexError):
    """Raised for an entity id that was never issued by the registry."""


class AliasedEntityError(ValueError):
    """Raised when a two-entity operation is handed the same id twice."""


def _fighter_columns(fighter: Fighter | None) -> Dict[str, Any]:
    if fighter is None:
        return {name: None for name in FIGHTER_COMPONENTS}
    return {
        "hp": fighter.hp,
        "max_hp": fighter.max_hp,
        "defense": fighter.defense,
        "power": fighter.power,
        "death_kind": DeathKind(fighter.on_death).value,
    }


class EntityView:
    """Write-through view of a single registry row.

    Views hold only the registry and an id, never row data, so two views of
    different entities can be read and written in any order.
    """

    __slots__ = ("_registry", "entity_id")

    def __init__(self, registry: "EntityRegistry", entity_id: int):
        self._registry = registry
        self.entity_id = entity_id

    def get(self, component_name: str) -> Any:
        return self._registry.get_entity_component(self.entity_id, component_name)

    def set(self, **components: Any) -> None:
        self._registry.set_components(self.entity_id, **components)

    @property
    def name(self) -> str:
        return self.get("name")

    @property
    def x(self) -> int:
        return int(self.get("x"))

    @property
    def y(self) -> int:
        return int(self.get("y"))

    @property
    def position(self) -> Position:
        return self._registry.get_position(self.entity_id)

    @property
    def glyph(self) -> int:
        return int(self.get("glyph"))

    @property
    def color(self) -> Color:
        return self._registry.get_color(self.entity_id)

    @property
    def alive(self) -> bool:
        return bool(self.get("alive"))

    @property
    def blocks_movement(self) -> bool:
        return bool(self.get("blocks_movement"))

    @property
    def fighter(self) -> Fighter | None:
        return self._registry.get_fighter(self.entity_id)

    @property
    def ai_type(self) -> str | None:
        return self.get("ai_type")

    def distance_to(self, other: "EntityView") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def __repr__(self) -> str:
        return f"EntityView(entity_id={self.entity_id})"


class EntityRegistry:
    """Arena of every entity in the session.

    Each entity is one row of ``entities_df`` and its ``entity_id`` is its row
    index.  Rows are never removed: dead entities stay as corpses, so ids
    remain valid for the whole session.
    """

    def __init__(self: Self):
        self.entities_df: pl.DataFrame = pl.DataFrame(schema=ENTITY_SCHEMA)
        log.debug("EntityRegistry initialized", schema=list(ENTITY_SCHEMA.keys()))

    def __len__(self: Self) -> int:
        return self.entities_df.height

    def _require_entity(self: Self, entity_id: int) -> None:
        if not 0 <= entity_id < self.entities_df.height:
            log.error(
                "Unknown entity id", entity_id=entity_id, count=self.entities_df.height
            )
            raise EntityNotFoundError(
                f"Entity {entity_id} does not exist ({self.entities_df.height} entities)"
            )

    def _require_component(self: Self, component_name: str) -> None:
        if component_name not in ENTITY_SCHEMA:
            log.warning("Component does not exist", component=component_name)
            raise ValueError(
                f"Component '{component_name}' does not exist in ENTITY_SCHEMA."
            )

    def create_entity(
        self: Self,
        x: int,
        y: int,
        glyph: int,
        color_fg: Color,
        name: str,
        blocks_movement: bool = True,
        fighter: Fighter | None = None,
        ai_type: AIType | str | None = None,
    ) -> int:
        new_id = self.entities_df.height
        log_context = {"name": name, "pos": (x, y), "glyph": glyph}
        if ai_type is not None:
            ai_type = AIType(ai_type).value

        entity_data = {
            "entity_id": [new_id],
            "alive": [True],
            "x": [x],
            "y": [y],
            "glyph": [glyph],
            "color_fg_r": [color_fg[0]],
            "color_fg_g": [color_fg[1]],
            "color_fg_b": [color_fg[2]],
            "name": [name],
            "blocks_movement": [blocks_movement],
            **{key: [value] for key, value in _fighter_columns(fighter).items()},
            "ai_type": [ai_type],
        }
        new_entity_df = pl.DataFrame(entity_data, schema=ENTITY_SCHEMA)
        if self.entities_df.height == 0:
            self.entities_df = new_entity_df
        else:
            self.entities_df = pl.concat(
                [self.entities_df, new_entity_df], how="vertical"
            )
        log.debug(
            "Entity created",
            entity_id=new_id,
            fighter=fighter is not None,
            ai_type=ai_type,
            **log_context,
        )
        return new_id

    def get_entity_component(self: Self, entity_id: int, component_name: str) -> Any:
        """Returns one component value (``None`` for a null column)."""
        self._require_component(component_name)
        self._require_entity(entity_id)
        return self.entities_df.item(entity_id, component_name)

    def set_entity_component(
        self: Self, entity_id: int, component_name: str, value: Any
    ) -> None:
        self.set_components(entity_id, **{component_name: value})

    def set_components(self: Self, entity_id: int, /, **components: Any) -> None:
        """Updates several components of one entity in a single pass."""
        self._require_entity(entity_id)
        for component_name in components:
            self._require_component(component_name)
            if component_name in PROTECTED_COMPONENTS:
                log.warning(
                    "Attempted to set protected component",
                    entity_id=entity_id,
                    component=component_name,
                )
                raise ValueError(f"Cannot directly set '{component_name}' component.")

        mask = pl.col("entity_id") == entity_id
        updates = []
        for component_name, value in components.items():
            if isinstance(value, (DeathKind, AIType)):
                value = value.value
            target_dtype = ENTITY_SCHEMA[component_name]
            updates.append(
                pl.when(mask)
                .then(pl.lit(value, dtype=target_dtype))
                .otherwise(pl.col(component_name))
                .cast(target_dtype)
                .alias(component_name)
            )
        self.entities_df = self.entities_df.with_columns(updates)
        log.debug("Entity components set", entity_id=entity_id, **components)

    def entity(self: Self, entity_id: int) -> EntityView:
        self._require_entity(entity_id)
        return EntityView(self, entity_id)

    def split_pair(
        self: Self, first_id: int, second_id: int
    ) -> Tuple[EntityView, EntityView]:
        """Returns independent views of two *distinct* entities.

        Raises :class:`AliasedEntityError` when both ids are the same entity.
        """
        if first_id == second_id:
            log.error("Aliased entity pair requested", entity_id=first_id)
            raise AliasedEntityError(
                f"split_pair needs two distinct entities, got {first_id} twice"
            )
        self._require_entity(first_id)
        self._require_entity(second_id)
        return EntityView(self, first_id), EntityView(self, second_id)

    # --- Typed helpers ---
    def get_position(self: Self, entity_id: int) -> Position:
        self._require_entity(entity_id)
        row = self.entities_df.row(entity_id, named=True)
        return Position(int(row["x"]), int(row["y"]))

    def set_position(self: Self, entity_id: int, position: Position) -> None:
        self.set_components(entity_id, x=position.x, y=position.y)

    def get_color(self: Self, entity_id: int) -> Color:
        self._require_entity(entity_id)
        row = self.entities_df.row(entity_id, named=True)
        return (row["color_fg_r"], row["color_fg_g"], row["color_fg_b"])

    def get_fighter(self: Self, entity_id: int) -> Fighter | None:
        self._require_entity(entity_id)
        row = self.entities_df.row(entity_id, named=True)
        if row["death_kind"] is None:
            return None
        return Fighter(
            max_hp=row["max_hp"],
            hp=row["hp"],
            defense=row["defense"],
            power=row["power"],
            on_death=DeathKind(row["death_kind"]),
        )

    def set_fighter(self: Self, entity_id: int, fighter: Fighter | None) -> None:
        self.set_components(entity_id, **_fighter_columns(fighter))

    # --- Spatial queries ---
    def get_blocking_entity_at(self: Self, x: int, y: int) -> int | None:
        result = (
            self.entities_df.lazy()
            .filter((pl.col("x") == x) & (pl.col("y") == y) & pl.col("blocks_movement"))
            .select("entity_id")
            .head(1)
            .collect()
        )
        if result.height > 0:
            return int(result.item())
        return None

    def is_occupied(self: Self, x: int, y: int) -> bool:
        return self.get_blocking_entity_at(x, y) is not None

    def get_fighter_at(
        self: Self, x: int, y: int, exclude: int | None = None
    ) -> int | None:
        """Lowest id among entities with a fighter standing on ``(x, y)``."""
        condition = (
            (pl.col("x") == x)
            & (pl.col("y") == y)
            & pl.col("death_kind").is_not_null()
        )
        if exclude is not None:
            condition = condition & (pl.col("entity_id") != exclude)
        result = (
            self.entities_df.lazy()
            .filter(condition)
            .sort("entity_id")
            .select("entity_id")
            .head(1)
            .collect()
        )
        if result.height > 0:
            return int(result.item())
        return None

    def ai_entity_ids(self: Self) -> List[int]:
        """Ids of living entities carrying an AI marker, ascending."""
        return (
            self.entities_df.filter(pl.col("ai_type").is_not_null() & pl.col("alive"))
            .sort("entity_id")
            .get_column("entity_id")
            .to_list()
        )

    def render_rows(
        self: Self, visible: np.ndarray
    ) -> List[Tuple[int, int, int, Color]]:
        """Drawable ``(x, y, glyph, color)`` tuples for entities on visible tiles.

        Non-blocking entities (corpses) come first so living ones draw on top.
        """
        rows: List[Tuple[int, int, int, Color]] = []
        height, width = visible.shape
        ordered = self.entities_df.sort("blocks_movement", maintain_order=True)
        for row in ordered.iter_rows(named=True):
            x, y = row["x"], row["y"]
            if not (0 <= x < width and 0 <= y < height) or not visible[y, x]:
                continue
            rows.append(
                (
                    x,
                    y,
                    row["glyph"],
                    (row["color_fg_r"], row["color_fg_g"], row["color_fg_b"]),
                )
            )
        return rows

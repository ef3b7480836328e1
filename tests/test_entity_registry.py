import numpy as np
import pytest

from game.entities.components import AIType, DeathKind, Fighter, Position
from game.entities.registry import (
    AliasedEntityError,
    EntityNotFoundError,
    EntityRegistry,
)


def make_orc(er, x=1, y=1, **kwargs):
    return er.create_entity(
        x=x,
        y=y,
        glyph=ord("o"),
        color_fg=(63, 127, 63),
        name=kwargs.pop("name", "orc"),
        fighter=Fighter(max_hp=10, hp=10, defense=0, power=3, on_death=DeathKind.MONSTER),
        ai_type=AIType.BASIC,
        **kwargs,
    )


def test_ids_are_sequential_indices():
    er = EntityRegistry()
    ids = [make_orc(er, x=i) for i in range(3)]
    assert ids == [0, 1, 2]
    assert len(er) == 3


def test_components_read_and_write():
    er = EntityRegistry()
    orc = make_orc(er, x=2, y=3)
    assert er.get_position(orc) == Position(2, 3)
    assert er.get_entity_component(orc, "name") == "orc"
    assert er.get_entity_component(orc, "ai_type") == "basic"

    er.set_position(orc, Position(4, 5))
    er.set_components(orc, hp=7, name="angry orc")
    assert er.get_position(orc) == Position(4, 5)
    assert er.get_entity_component(orc, "hp") == 7
    assert er.get_entity_component(orc, "name") == "angry orc"


def test_fighter_round_trip_and_clear():
    er = EntityRegistry()
    orc = make_orc(er)
    fighter = er.get_fighter(orc)
    assert fighter == Fighter(max_hp=10, hp=10, defense=0, power=3, on_death=DeathKind.MONSTER)

    er.set_fighter(orc, None)
    assert er.get_fighter(orc) is None
    assert er.get_entity_component(orc, "hp") is None


def test_entity_without_fighter_or_ai():
    er = EntityRegistry()
    rock = er.create_entity(1, 1, ord("*"), (128, 128, 128), "rock")
    assert er.get_fighter(rock) is None
    assert er.get_entity_component(rock, "ai_type") is None
    assert er.ai_entity_ids() == []


def test_unknown_entity_and_component():
    er = EntityRegistry()
    make_orc(er)
    with pytest.raises(EntityNotFoundError):
        er.get_entity_component(5, "name")
    with pytest.raises(ValueError):
        er.get_entity_component(0, "mana")
    with pytest.raises(ValueError):
        er.set_entity_component(0, "entity_id", 3)


def test_split_pair_rejects_aliasing():
    er = EntityRegistry()
    a = make_orc(er)
    with pytest.raises(AliasedEntityError):
        er.split_pair(a, a)


def test_split_pair_views_are_independent():
    er = EntityRegistry()
    a = make_orc(er, x=1, name="a")
    b = make_orc(er, x=2, name="b")
    va, vb = er.split_pair(a, b)
    va.set(hp=1)
    vb.set(hp=9)
    assert (va.fighter.hp, vb.fighter.hp) == (1, 9)
    assert va.distance_to(vb) == 1.0


def test_blocking_and_fighter_queries():
    er = EntityRegistry()
    orc = make_orc(er, x=3, y=3)
    corpse = er.create_entity(4, 4, ord("%"), (191, 0, 0), "remains", blocks_movement=False)
    assert er.get_blocking_entity_at(3, 3) == orc
    assert er.is_occupied(3, 3)
    assert not er.is_occupied(4, 4)
    assert er.get_fighter_at(3, 3) == orc
    assert er.get_fighter_at(3, 3, exclude=orc) is None
    assert er.get_fighter_at(4, 4) is None
    assert corpse == 1


def test_ai_entity_ids_skip_dead_and_cleared():
    er = EntityRegistry()
    a = make_orc(er, x=1)
    b = make_orc(er, x=2)
    c = make_orc(er, x=3)
    er.set_components(b, ai_type=None)
    er.set_components(c, alive=False)
    assert er.ai_entity_ids() == [a]


def test_render_rows_filters_by_visibility_and_orders_corpses_first():
    er = EntityRegistry()
    orc = make_orc(er, x=1, y=1)
    er.create_entity(1, 1, ord("%"), (191, 0, 0), "remains", blocks_movement=False)
    make_orc(er, x=3, y=3)
    visible = np.zeros((5, 5), dtype=bool)
    visible[1, 1] = True
    rows = er.render_rows(visible)
    assert [glyph for _, _, glyph, _ in rows] == [ord("%"), ord("o")]
    assert rows[-1][:2] == (1, 1)
    assert er.entity(orc).color == (63, 127, 63)

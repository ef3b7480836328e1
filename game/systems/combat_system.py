# game/systems/combat_system.py
"""
Handles combat calculations and actions between entities.
"""
from typing import TYPE_CHECKING

import structlog

from game.constants import COLOR_ATTACK_MSG
from game.systems.death_system import handle_entity_death
from game.systems.movement_system import move_by

if TYPE_CHECKING:
    from game.game_state import GameState

log = structlog.get_logger(__name__)


def attack(attacker_id: int, defender_id: int, gs: "GameState") -> int:
    """
    Resolves one melee attack and returns the damage rolled (may be <= 0).

    Damage is attacker power minus defender defense; a side without a fighter
    counts as 0 for its stat.  Attacking oneself raises
    :class:`~game.entities.registry.AliasedEntityError`.
    """
    attacker, defender = gs.entity_registry.split_pair(attacker_id, defender_id)
    attacker_fighter = attacker.fighter
    defender_fighter = defender.fighter
    power = attacker_fighter.power if attacker_fighter else 0
    defense = defender_fighter.defense if defender_fighter else 0
    damage = power - defense

    log.debug(
        "Handling melee attack",
        attacker_id=attacker_id,
        defender_id=defender_id,
        power=power,
        defense=defense,
        damage=damage,
    )

    if damage > 0:
        gs.message_log.add(
            f"{attacker.name} attacks {defender.name} for {damage} hit points!",
            COLOR_ATTACK_MSG,
        )
        take_damage(defender_id, damage, gs)
    else:
        gs.message_log.add(
            f"{attacker.name} attacks {defender.name} but it has no effect!",
            COLOR_ATTACK_MSG,
        )
        take_damage(defender_id, 0, gs)
    return damage


def take_damage(entity_id: int, amount: int, gs: "GameState") -> None:
    """
    Lowers hp by ``amount`` and runs the death transition at hp <= 0.

    No-op for an entity without a fighter (including corpses); an amount of
    zero or less never changes hp and never kills.
    """
    entity_reg = gs.entity_registry
    fighter = entity_reg.get_fighter(entity_id)
    if fighter is None:
        log.debug("Damage ignored, no fighter", entity_id=entity_id, amount=amount)
        return
    if amount <= 0:
        return

    new_hp = fighter.hp - amount
    entity_reg.set_entity_component(entity_id, "hp", new_hp)
    log.debug(
        "Damage applied",
        entity_id=entity_id,
        amount=amount,
        hp_old=fighter.hp,
        hp_new=new_hp,
    )
    if new_hp <= 0:
        entity_reg.set_entity_component(entity_id, "alive", False)
        handle_entity_death(entity_id, gs)


def move_or_attack(entity_id: int, dx: int, dy: int, gs: "GameState") -> bool:
    """
    Bump-to-attack: attacks a fighter on the target cell, otherwise moves.

    Returns ``True`` if an attack happened or the entity moved.  A blocked
    move (wall or blocking non-fighter) returns ``False``.
    """
    x, y = gs.entity_registry.get_position(entity_id)
    target_x, target_y = x + dx, y + dy
    target_id = gs.entity_registry.get_fighter_at(target_x, target_y, exclude=entity_id)
    if target_id is not None:
        attack(entity_id, target_id, gs)
        return True
    return move_by(entity_id, dx, dy, gs)

# spellduel/engine/effects.py
from __future__ import annotations

from typing import List

from .models import Damage, Dodge, EffectResult, Entity, Heal, Shield, Slow
from .rules import clamp, split_damage


def apply_damage(effect: Damage, target: Entity) -> EffectResult:
    if target.is_dodging:
        target.is_dodging = False
        return EffectResult(kind="damage", value=effect.amount, absorbed=0, final=0, dodged=True)

    absorbed, remaining = split_damage(target.shield, effect.amount)
    target.shield -= absorbed
    before = target.hp
    target.hp = clamp(target.hp - remaining, 0, target.hp_max)
    return EffectResult(kind="damage", value=effect.amount, absorbed=absorbed, final=before - target.hp)


def apply_heal(effect: Heal, caster: Entity) -> EffectResult:
    before = caster.hp
    caster.hp = clamp(caster.hp + max(effect.amount, 0), 0, caster.hp_max)
    return EffectResult(kind="heal", value=caster.hp - before)


def apply_shield(effect: Shield, caster: Entity) -> EffectResult:
    # stacks additively, no cap
    gained = max(effect.amount, 0)
    caster.shield += gained
    return EffectResult(kind="shield", value=gained, duration=effect.duration)


def apply_effect(effect, caster: Entity, target: Entity) -> EffectResult:
    """Apply one effect. Damage and slow land on the target, the rest on the caster."""
    if isinstance(effect, Damage):
        return apply_damage(effect, target)
    if isinstance(effect, Heal):
        return apply_heal(effect, caster)
    if isinstance(effect, Shield):
        return apply_shield(effect, caster)
    if isinstance(effect, Dodge):
        caster.is_dodging = True
        return EffectResult(kind="dodge", duration=effect.duration)
    if isinstance(effect, Slow):
        # recorded only; slows have no mechanical effect yet
        return EffectResult(kind="slow", value=effect.value or 0, duration=effect.duration)
    return EffectResult(kind="unknown")


def tick_cooldowns(entity: Entity, elapsed: float) -> None:
    """Decrement every cooldown by `elapsed`, floored at zero."""
    for key, remaining in entity.cooldowns.items():
        entity.cooldowns[key] = max(0, remaining - elapsed)


def regen_mana(entity: Entity, amount: float) -> None:
    entity.mana = clamp(entity.mana + amount, 0, entity.mana_max)


def end_of_turn(entity: Entity, mana_regen: float) -> None:
    """Upkeep for the side whose turn is starting: cooldowns down one turn, mana regen, dodge expires."""
    tick_cooldowns(entity, 1)
    regen_mana(entity, mana_regen)
    entity.is_dodging = False


def describe(results: List[EffectResult]) -> str:
    parts = []
    for r in results:
        if r.kind == "damage":
            if r.dodged:
                parts.append("dodged")
            elif r.absorbed:
                parts.append(f"{r.final} damage ({r.absorbed} absorbed by Shield)")
            else:
                parts.append(f"{r.final} damage")
        elif r.kind == "heal":
            parts.append(f"heals {r.value}")
        elif r.kind == "shield":
            parts.append(f"+{r.value} shield")
        elif r.kind == "dodge":
            parts.append("readies a dodge")
        elif r.kind == "slow":
            parts.append("slowed")
        else:
            parts.append("fizzles")
    return ", ".join(parts)

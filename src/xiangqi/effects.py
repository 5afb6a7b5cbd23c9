"""
Effect registry: the transient effects (Immunity, Seal) bound to pieces.

Effects are kept as an immutable tuple on the GameState and only changed through the functions below,
which enforce the rules:
* at most one effect of each kind per piece (a new grant replaces the old one)
* Seal durations only go down when `advance` is called at the end of a turn
* a captured piece loses all of its effects (`strip_piece`)
"""

from dataclasses import dataclass, replace
from typing import Optional

from src.core.shared_types import Color, EffectKind


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    target_id: str
    # Seal: turns left. Immunity: charges left (always 1, it is used up by the first capture attempt)
    duration: int
    owner: Optional[Color] = None


Effects = tuple[Effect, ...]


def find_effect(
    effects: Effects, kind: EffectKind, target_id: str
) -> Optional[Effect]:
    return next(
        (
            effect
            for effect in effects
            if effect.kind == kind and effect.target_id == target_id
        ),
        None,
    )


def has_effect(effects: Effects, kind: EffectKind, target_id: str) -> bool:
    return find_effect(effects, kind, target_id) is not None


def is_sealed(effects: Effects, piece_id: str) -> bool:
    return has_effect(effects, EffectKind.SEAL, piece_id)


def is_immune(effects: Effects, piece_id: str) -> bool:
    return has_effect(effects, EffectKind.IMMUNITY, piece_id)


def remove_effect(effects: Effects, kind: EffectKind, target_id: str) -> Effects:
    return tuple(
        effect
        for effect in effects
        if not (effect.kind == kind and effect.target_id == target_id)
    )


def grant(effects: Effects, effect: Effect) -> Effects:
    """Add an effect, replacing an effect of the same kind on the same piece (effects never stack)."""
    return remove_effect(effects, effect.kind, effect.target_id) + (effect,)


def strip_piece(effects: Effects, piece_id: str) -> Effects:
    """Remove every effect bound to a piece (it got captured)."""
    return tuple(effect for effect in effects if effect.target_id != piece_id)


def advance(effects: Effects) -> Effects:
    """One tick of the clock: Seals lose a turn and expire at zero. Immunity does not age."""
    aged = (
        replace(effect, duration=effect.duration - 1)
        if effect.kind == EffectKind.SEAL
        else effect
        for effect in effects
    )
    return tuple(
        effect
        for effect in aged
        if effect.kind != EffectKind.SEAL or effect.duration > 0
    )


def seal(target_id: str, owner: Color, duration: int = 1) -> Effect:
    return Effect(EffectKind.SEAL, target_id, duration, owner)


def immunity(target_id: str, owner: Color) -> Effect:
    return Effect(EffectKind.IMMUNITY, target_id, 1, owner)

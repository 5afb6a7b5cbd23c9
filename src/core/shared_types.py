"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    RED = "red"
    BLACK = "black"


class PieceType(StrEnum):
    GENERAL = "general"
    ADVISOR = "advisor"
    ELEPHANT = "elephant"
    HORSE = "horse"
    CHARIOT = "chariot"
    CANNON = "cannon"
    SOLDIER = "soldier"


class GameMode(StrEnum):
    PVE = "PVE"
    LOCAL = "LOCAL"
    ONLINE_RESERVED = "ONLINE_RESERVED"


class AdventureType(StrEnum):
    DARE = "dare"
    REWARD = "reward"


class AdventureStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    OPEN = "open"


class EffectKind(StrEnum):
    IMMUNITY = "IMMUNITY"
    SEAL = "SEAL"


class RewardEffect(StrEnum):
    """Mechanical effect bound to a reward adventure (applied when the adventure closes)."""

    DOUBLE_MOVE = "double_move"
    PACIFISM = "pacifism"
    CRITICAL_STRIKE = "critical_strike"
    ABSOLUTE_ZERO = "absolute_zero"


class Reward(StrEnum):
    """Rewards handed out directly (not through an adventure)."""

    IMMUNITY = "IMMUNITY"
    UNDO = "UNDO"
    TAUNT = "TAUNT"
    SEAL_CHARIOT = "SEAL_CHARIOT"


class MoveOrigin(StrEnum):
    LOCAL = "local"
    SYNCED = "synced"


def opponent_of(color: Color) -> Color:
    """The other side: Red <-> Black"""
    return Color.BLACK if color == Color.RED else Color.RED

"""
The closed set of actions the reducer understands.

One frozen dataclass per action type; `Action` is the union of all of them.
"""

from dataclasses import dataclass
from typing import Optional, Union

from src.core.shared_types import AdventureType, GameMode, Reward
from src.xiangqi.square import Position


@dataclass(frozen=True)
class MovePiece:
    """Move to an empty point"""

    from_: Position
    to: Position


@dataclass(frozen=True)
class CapturePiece:
    from_: Position
    to: Position


@dataclass(frozen=True)
class SyncMove:
    """A move made on the other side of a (future) network connection"""

    from_: Position
    to: Position
    capture: bool
    adventure_type: Optional[AdventureType] = None
    adventure_index: Optional[int] = None


@dataclass(frozen=True)
class OpenAdventure:
    adventure_type: AdventureType
    adventure_index: int


@dataclass(frozen=True)
class SyncAdventure:
    adventure_type: AdventureType
    adventure_index: int


@dataclass(frozen=True)
class CloseAdventure:
    pass


@dataclass(frozen=True)
class SetMode:
    mode: GameMode


@dataclass(frozen=True)
class TurnEnd:
    pass


@dataclass(frozen=True)
class ApplyReward:
    reward: Reward


@dataclass(frozen=True)
class UndoMove:
    pass


@dataclass(frozen=True)
class ConsumeImmunity:
    target_id: str


@dataclass(frozen=True)
class HideTaunt:
    pass


@dataclass(frozen=True)
class ClearShieldPulse:
    pass


@dataclass(frozen=True)
class ForceTurn:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


Action = Union[
    MovePiece,
    CapturePiece,
    SyncMove,
    OpenAdventure,
    SyncAdventure,
    CloseAdventure,
    SetMode,
    TurnEnd,
    ApplyReward,
    UndoMove,
    ConsumeImmunity,
    HideTaunt,
    ClearShieldPulse,
    ForceTurn,
    ResetGame,
]

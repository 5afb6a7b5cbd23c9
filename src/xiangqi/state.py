"""
The aggregate root of a game: GameState.

Every accepted action produces a brand new GameState (all dataclasses here are frozen),
so any GameState someone holds on to never changes underneath them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.shared_types import (
    AdventureStatus,
    AdventureType,
    Color,
    GameMode,
    MoveOrigin,
    PieceType,
    RewardEffect,
)
from src.xiangqi.board import Board
from src.xiangqi.effects import Effects
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Position


@dataclass(frozen=True)
class AdventureState:
    status: AdventureStatus = AdventureStatus.IDLE
    type: Optional[AdventureType] = None
    index: Optional[int] = None
    content: Optional[str] = None
    effect: Optional[RewardEffect] = None

    @classmethod
    def idle(cls) -> Self:
        return cls()

    @classmethod
    def pending(cls) -> Self:
        return cls(status=AdventureStatus.PENDING)


@dataclass(frozen=True)
class MoveRecord:
    """A committed move, as kept in the move history"""

    from_: Position
    to: Position
    piece_id: str
    piece_type: PieceType
    piece_color: Color
    capture: bool = False
    captured_piece_id: Optional[str] = None
    adventure_type: Optional[AdventureType] = None
    adventure_index: Optional[int] = None
    origin: MoveOrigin = MoveOrigin.LOCAL


@dataclass(frozen=True)
class CapturedPieces:
    """The stash of each color: the pieces it has captured, in order of capture."""

    red: tuple[Piece, ...] = ()
    black: tuple[Piece, ...] = ()

    def of(self, color: Color) -> tuple[Piece, ...]:
        return self.red if color == Color.RED else self.black

    def with_pieces(self, color: Color, pieces: tuple[Piece, ...]) -> CapturedPieces:
        if color == Color.RED:
            return CapturedPieces(red=pieces, black=self.black)
        return CapturedPieces(red=self.red, black=pieces)

    def add(self, color: Color, piece: Piece) -> CapturedPieces:
        return self.with_pieces(color, self.of(color) + (piece,))


@dataclass(frozen=True)
class Snapshot:
    """Everything needed to put the game back to how it was right before a move."""

    board: Board
    current_turn: Color
    captured: CapturedPieces
    effects: Effects
    undo_tokens: int
    winner: Optional[Color]
    is_game_over: bool
    pending_double_move: Optional[Color]
    is_bonus_move_phase: bool
    opponent_cannot_capture: bool
    next_capture_grants_extra_move: Optional[Color]


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.starting_position)
    current_turn: Color = Color.RED
    mode: GameMode = GameMode.LOCAL
    # true exactly while an adventure is pending or open
    is_frozen: bool = False
    adventure: AdventureState = field(default_factory=AdventureState.idle)
    last_move: Optional[MoveRecord] = None
    move_history: tuple[MoveRecord, ...] = ()
    captured: CapturedPieces = field(default_factory=CapturedPieces)
    effects: Effects = ()
    undo_tokens: int = 0
    winner: Optional[Color] = None
    is_game_over: bool = False
    # -- turn phase flags --
    pending_double_move: Optional[Color] = None
    is_bonus_move_phase: bool = False
    next_capture_grants_extra_move: Optional[Color] = None
    opponent_cannot_capture: bool = False
    # -- cosmetic --
    show_taunt: bool = False
    shield_pulse_piece_id: Optional[str] = None
    # snapshots taken right before each move in move_history (aligned 1:1)
    history: tuple[Snapshot, ...] = ()

    @classmethod
    def new_game(
        cls, mode: GameMode = GameMode.LOCAL, board: Optional[Board] = None
    ) -> Self:
        return cls(board=board or Board.starting_position(), mode=mode)

"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    AdventureStatus,
    AdventureType,
    Color,
    EffectKind,
    GameMode,
    MoveOrigin,
    PieceType,
    Reward,
)
from src.xiangqi.board import is_valid_position
from src.xiangqi.square import BOARD_DIMENSIONS

ROWS, COLS = BOARD_DIMENSIONS


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    mode: GameMode = GameMode.LOCAL
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        # only the board field is used, anything after it (side to move etc.) is ignored
        board_field = value.strip().split(" ")[0]
        if not is_valid_position(board_field):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a Xiangqi board position."
            )
        return board_field


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class GameActionRequest(BaseModel):
    """For actions that need nothing but the game: resolving the adventure, undo, reset, forcing the turn."""

    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @field_validator(*["from_row", "to_row"])
    @classmethod
    def validate_row(cls, value: int) -> int:
        if not 0 <= value < ROWS:
            raise InvalidRequestError(f"Row {value} is off the board (0-{ROWS - 1}).")
        return value

    @field_validator(*["from_col", "to_col"])
    @classmethod
    def validate_col(cls, value: int) -> int:
        if not 0 <= value < COLS:
            raise InvalidRequestError(
                f"Column {value} is off the board (0-{COLS - 1})."
            )
        return value


class RewardRequest(BaseModel):
    game_id: UUID
    reward: Reward


class SetModeRequest(BaseModel):
    game_id: UUID
    mode: GameMode


class NetworkEventRequest(BaseModel):
    game_id: UUID
    raw_event: str


# --- RESPONSE MODELS ---
class MoveCoordinates(BaseModel):
    from_row: int
    from_col: int
    to_row: int
    to_col: int


class MoveRecordResponse(MoveCoordinates):
    piece_id: str
    piece_type: PieceType
    piece_color: Color
    capture: bool
    captured_piece_id: Optional[str]
    adventure_type: Optional[AdventureType]
    adventure_index: Optional[int]
    origin: MoveOrigin


class EffectResponse(BaseModel):
    kind: EffectKind
    target_id: str
    duration: int
    owner: Optional[Color]


class AdventureResponse(BaseModel):
    status: AdventureStatus
    type: Optional[AdventureType]
    index: Optional[int]
    content: Optional[str]


class GameResponse(BaseModel):
    game_id: UUID
    # did the last requested action change the game?
    accepted: bool = True
    mode: GameMode
    board_fen: str
    current_turn: Color
    is_frozen: bool
    adventure: AdventureResponse
    move_history: list[MoveRecordResponse]
    captured: dict[Color, list[str]]
    effects: list[EffectResponse]
    undo_tokens: int
    winner: Optional[Color]
    is_game_over: bool
    pending_double_move: Optional[Color]
    is_bonus_move_phase: bool
    next_capture_grants_extra_move: Optional[Color]
    opponent_cannot_capture: bool
    show_taunt: bool
    shield_pulse_piece_id: Optional[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[MoveCoordinates]

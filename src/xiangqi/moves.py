"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement rule of each piece type.

Everything here is a pure function of the board: whose turn it is, seals, bonus moves etc.
are checked later by the reducer.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.core.shared_types import Color, PieceType
from src.xiangqi.board import Board
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Position, all_positions


@dataclass(frozen=True)
class CandidateMove:
    """basic definition of a move to be made"""

    from_: Position
    to: Position


# --- HELPERS ---
def count_obstacles(board: Board, from_: Position, to: Position) -> int:
    """
    Count the occupied intersections strictly between two positions on the same row or column.

    Returns -1 if the positions are not on a straight line.
    """
    if from_.row != to.row and from_.col != to.col:
        return -1

    if from_.row == to.row:
        start, end = sorted((from_.col, to.col))
        between = [Position(from_.row, col) for col in range(start + 1, end)]
    else:
        start, end = sorted((from_.row, to.row))
        between = [Position(row, from_.col) for row in range(start + 1, end)]
    return sum(1 for position in between if board.is_occupied(position))


def violates_flying_general(board: Board, from_: Position, to: Position) -> bool:
    """
    Flying general rule
    ----

    The two Generals may never face each other on an open column.

    NOTE: Evaluated on the board AFTER the move, so it applies to every piece (moving a blocker away
    exposes the Generals just as much as moving a General onto the column). A General that gets
    captured by the move is no longer on the board, so there is nothing left to face.
    """
    after_move = board.move_piece(from_, to)
    red = after_move.locate_general(Color.RED)
    black = after_move.locate_general(Color.BLACK)
    if red is None or black is None or red.col != black.col:
        return False
    return count_obstacles(after_move, red, black) == 0


# --- MOVEMENT RULES ---
def validate_general_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """A single orthogonal step, never leaving the palace."""
    d_row = abs(to.row - from_.row)
    d_col = abs(to.col - from_.col)
    if d_row + d_col != 1:
        return False
    return to.is_within_palace(piece.color)


def validate_advisor_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """A single diagonal step, never leaving the palace."""
    d_row = abs(to.row - from_.row)
    d_col = abs(to.col - from_.col)
    return d_row == 1 and d_col == 1 and to.is_within_palace(piece.color)


def validate_elephant_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """
    Exactly two points diagonally. Cannot cross the river, and is blocked if the point
    in between (the elephant's "eye") is occupied.
    """
    d_row = to.row - from_.row
    d_col = to.col - from_.col
    if abs(d_row) != 2 or abs(d_col) != 2:
        return False
    if to.is_across_river(piece.color):
        return False
    eye = from_.offset(d_row // 2, d_col // 2)
    return not board.is_occupied(eye)


def validate_horse_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """
    One point orthogonally, then one diagonally outward: |delta_row| + |delta_col| = 3, no straight lines.
    The horse is hobbled if the orthogonal point next to it (its "leg") is occupied.
    """
    d_row = to.row - from_.row
    d_col = to.col - from_.col
    if sorted((abs(d_row), abs(d_col))) != [1, 2]:
        return False

    if abs(d_row) == 2:
        leg = from_.offset(d_row // 2, 0)
    else:
        leg = from_.offset(0, d_col // 2)
    return not board.is_occupied(leg)


def validate_chariot_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """Slides along a row or column, nothing in between."""
    return count_obstacles(board, from_, to) == 0


def validate_cannon_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """
    Moves like a chariot, but captures by jumping over exactly one piece (the "screen").
    """
    obstacles = count_obstacles(board, from_, to)
    if obstacles < 0:
        return False
    if board.piece(to) is None:
        return obstacles == 0
    return obstacles == 1


def validate_soldier_move(
    board: Board, from_: Position, to: Position, piece: Piece
) -> bool:
    """
    A soldier:
    - steps a single point forward (Red moves UP the board to lower rows, Black moves DOWN)
    - once it has crossed the river, may also step a single point sideways
    - never moves backward or diagonally
    """
    forward = -1 if piece.color == Color.RED else 1
    d_row = to.row - from_.row
    d_col = to.col - from_.col

    if d_row == forward and d_col == 0:
        return True
    return from_.is_across_river(piece.color) and d_row == 0 and abs(d_col) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveRuleFn = Callable[[Board, Position, Position, Piece], bool]
MOVEMENT_RULES: dict[PieceType, MoveRuleFn] = {
    PieceType.GENERAL: validate_general_move,
    PieceType.ADVISOR: validate_advisor_move,
    PieceType.ELEPHANT: validate_elephant_move,
    PieceType.HORSE: validate_horse_move,
    PieceType.CHARIOT: validate_chariot_move,
    PieceType.CANNON: validate_cannon_move,
    PieceType.SOLDIER: validate_soldier_move,
}


def can_move(board: Board, from_: Position, to: Position, piece: Piece) -> bool:
    """
    Is moving `piece` from `from_` to `to` legal on this board?
    ----

    Checked in order:
    1. both positions are on the board, and they differ
    2. the piece standing on `from_` is this very piece (a stale reference is rejected)
    3. the destination does not hold a piece of the mover's own color
    4. the movement rule of the piece type
    5. the flying general rule
    """
    if not (from_.is_within_bounds() and to.is_within_bounds()):
        return False
    if from_ == to:
        return False
    if board.piece(from_) is not piece:
        return False

    destination = board.piece(to)
    if destination is not None and destination.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    if not movement_rule(board, from_, to, piece):
        return False

    return not violates_flying_general(board, from_, to)


def legal_destinations(board: Board, from_: Position) -> list[Position]:
    """All positions the piece on `from_` may move to (captures included)."""
    piece = board.piece(from_)
    if piece is None:
        return []
    return [to for to in all_positions() if can_move(board, from_, to, piece)]


def legal_moves(board: Board, color: Color) -> list[CandidateMove]:
    """
    Every legal (from, to) pair for the pieces of `color`, judged on the board alone.

    NOTE: Seals, bonus moves and pacifism are game state, not board state. Filter those afterwards.
    """
    moves: list[CandidateMove] = []
    for from_ in board.locate_color(color):
        moves.extend(
            CandidateMove(from_, to) for to in legal_destinations(board, from_)
        )
    return moves


def is_capture(board: Board, move: CandidateMove) -> bool:
    mover: Optional[Piece] = board.piece(move.from_)
    target = board.piece(move.to)
    return mover is not None and target is not None and target.color != mover.color

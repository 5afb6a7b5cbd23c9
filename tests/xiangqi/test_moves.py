"""Unit tests for /src/xiangqi/moves.py"""

from typing import Callable
from unittest.mock import Mock, patch

import pytest

from src.core.shared_types import Color, PieceType
from src.xiangqi.board import Board
from src.xiangqi.moves import (
    CandidateMove,
    can_move,
    count_obstacles,
    is_capture,
    legal_destinations,
    legal_moves,
    violates_flying_general,
)
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Position

BoardFactory = Callable[..., Board]


def assert_move(
    board: Board, from_: tuple[int, int], to: tuple[int, int], expected: bool
) -> None:
    from_position = Position(*from_)
    piece = board.piece(from_position)
    assert piece is not None
    assert can_move(board, from_position, Position(*to), piece) == expected


# --- GENERAL PRECONDITIONS ---
def test_cannot_capture_own_color() -> None:
    board = Board.starting_position()
    assert_move(board, (9, 0), (9, 1), False)
    assert_move(board, (7, 1), (7, 7), False)


def test_cannot_move_off_board() -> None:
    board = Board.starting_position()
    chariot = board.piece(Position(9, 0))
    assert not can_move(board, Position(9, 0), Position(10, 0), chariot)
    assert not can_move(board, Position(9, 0), Position(9, -1), chariot)


def test_cannot_stay_on_the_same_point() -> None:
    board = Board.starting_position()
    assert_move(board, (6, 0), (6, 0), False)


def test_stale_piece_reference_is_rejected() -> None:
    """An equal but different piece object is not the piece standing on the board."""
    board = Board.starting_position()
    lookalike = Piece.create(PieceType.SOLDIER, Color.RED, "a")
    assert lookalike == board.piece(Position(6, 0))
    assert not can_move(board, Position(6, 0), Position(5, 0), lookalike)


def test_movement_rule_is_looked_up_by_piece_type() -> None:
    """Strategy pattern: the rule registered for the piece type decides."""
    board = Board.starting_position()
    chariot = board.piece(Position(9, 0))
    mock_rule = Mock(return_value=False)
    with patch.dict("src.xiangqi.moves.MOVEMENT_RULES", {PieceType.CHARIOT: mock_rule}):
        assert not can_move(board, Position(9, 0), Position(8, 0), chariot)
    mock_rule.assert_called_once_with(board, Position(9, 0), Position(8, 0), chariot)


# --- OBSTACLES ---
@pytest.mark.parametrize(
    "from_, to, expected",
    [
        ((9, 0), (9, 4), 3),
        ((9, 0), (0, 0), 2),
        ((9, 0), (8, 0), 0),
        ((9, 0), (8, 1), -1),
        ((7, 1), (0, 1), 1),
    ],
)
def test_count_obstacles(
    from_: tuple[int, int], to: tuple[int, int], expected: int
) -> None:
    board = Board.starting_position()
    assert count_obstacles(board, Position(*from_), Position(*to)) == expected


# --- PER PIECE TYPE ---
@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        ({(5, 0): "R"}, (5, 0), (5, 8), True),
        ({(5, 0): "R"}, (5, 0), (0, 0), True),
        ({(5, 0): "R"}, (5, 0), (6, 1), False),
        ({(5, 0): "R", (5, 3): "p"}, (5, 0), (5, 2), True),
        ({(5, 0): "R", (5, 3): "p"}, (5, 0), (5, 3), True),
        ({(5, 0): "R", (5, 3): "p"}, (5, 0), (5, 5), False),
    ],
)
def test_chariot(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """Slides without jumping"""
    assert_move(board_from(placements), from_, to, expected)


@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        ({(5, 0): "C", (5, 3): "p", (5, 6): "n"}, (5, 0), (5, 2), True),
        ({(5, 0): "C", (5, 3): "p", (5, 6): "n"}, (5, 0), (5, 4), False),
        ({(5, 0): "C", (5, 3): "p", (5, 6): "n"}, (5, 0), (5, 3), False),
        ({(5, 0): "C", (5, 3): "p", (5, 6): "n"}, (5, 0), (5, 6), True),
        ({(5, 0): "C", (5, 2): "p", (5, 4): "p", (5, 6): "n"}, (5, 0), (5, 6), False),
        ({(5, 0): "C", (5, 3): "P", (5, 6): "n"}, (5, 0), (5, 6), True),
    ],
)
def test_cannon(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """Moves like a chariot, captures over exactly one screen (of either color)"""
    assert_move(board_from(placements), from_, to, expected)


@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        ({(5, 4): "N"}, (5, 4), (3, 5), True),
        ({(5, 4): "N"}, (5, 4), (4, 6), True),
        ({(5, 4): "N"}, (5, 4), (7, 3), True),
        ({(5, 4): "N"}, (5, 4), (3, 4), False),
        ({(5, 4): "N"}, (5, 4), (4, 5), False),
        ({(5, 4): "N", (4, 4): "p"}, (5, 4), (3, 5), False),
        ({(5, 4): "N", (4, 4): "p"}, (5, 4), (3, 3), False),
        ({(5, 4): "N", (4, 4): "p"}, (5, 4), (4, 6), True),
    ],
)
def test_horse(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """L-shaped jump, blocked by a piece on its leg"""
    assert_move(board_from(placements), from_, to, expected)


@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        ({(9, 2): "B"}, (9, 2), (7, 4), True),
        ({(7, 4): "B"}, (7, 4), (5, 2), True),
        ({(5, 2): "B"}, (5, 2), (3, 4), False),
        ({(9, 2): "B"}, (9, 2), (8, 3), False),
        ({(9, 2): "B", (8, 3): "p"}, (9, 2), (7, 4), False),
        ({(4, 2): "b"}, (4, 2), (6, 4), False),
        ({(4, 2): "b"}, (4, 2), (2, 4), True),
    ],
)
def test_elephant(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """Two points diagonally, never across the river, blocked by a piece on its eye"""
    assert_move(board_from(placements), from_, to, expected)


@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        ({(9, 3): "A"}, (9, 3), (8, 4), True),
        ({(9, 3): "A"}, (9, 3), (8, 2), False),
        ({(9, 3): "A"}, (9, 3), (9, 4), False),
        ({(8, 4): "A"}, (8, 4), (7, 5), True),
        ({(2, 4): "a"}, (2, 4), (3, 5), False),
    ],
)
def test_advisor(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """One point diagonally inside the palace"""
    assert_move(board_from(placements), from_, to, expected)


@pytest.mark.parametrize(
    "from_, to, expected",
    [
        ((9, 5), (8, 5), True),
        ((9, 5), (9, 4), True),
        ((9, 5), (9, 6), False),
        ((9, 5), (8, 4), False),
        ((9, 5), (7, 5), False),
        ((0, 3), (1, 3), True),
        ((0, 3), (0, 2), False),
    ],
)
def test_general(
    board_from: BoardFactory,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    """One point orthogonally inside the palace"""
    assert_move(board_from({}), from_, to, expected)


@pytest.mark.parametrize(
    "placements, from_, to, expected",
    [
        # red, before the river: forward only
        ({(6, 0): "P"}, (6, 0), (5, 0), True),
        ({(6, 0): "P"}, (6, 0), (6, 1), False),
        ({(6, 0): "P"}, (6, 0), (7, 0), False),
        ({(5, 4): "P"}, (5, 4), (5, 5), False),
        # red, across the river: sideways too, never backward or diagonal
        ({(4, 4): "P"}, (4, 4), (3, 4), True),
        ({(4, 4): "P"}, (4, 4), (4, 3), True),
        ({(4, 4): "P"}, (4, 4), (4, 5), True),
        ({(4, 4): "P"}, (4, 4), (5, 4), False),
        ({(4, 4): "P"}, (4, 4), (3, 5), False),
        ({(4, 4): "P"}, (4, 4), (2, 4), False),
        # black moves down the board
        ({(3, 4): "p"}, (3, 4), (4, 4), True),
        ({(3, 4): "p"}, (3, 4), (3, 5), False),
        ({(5, 4): "p"}, (5, 4), (5, 3), True),
        ({(5, 4): "p"}, (5, 4), (4, 4), False),
    ],
)
def test_soldier(
    board_from: BoardFactory,
    placements: dict,
    from_: tuple[int, int],
    to: tuple[int, int],
    expected: bool,
) -> None:
    assert_move(board_from(placements), from_, to, expected)


# --- FLYING GENERAL ---
def test_general_cannot_face_the_other_general(board_from: BoardFactory) -> None:
    """Red General to (7,4) while the Black General is at (0,4) on an open column"""
    board = board_from({(0, 4): "k", (7, 3): "K"}, with_generals=False)
    assert violates_flying_general(board, Position(7, 3), Position(7, 4))
    assert_move(board, (7, 3), (7, 4), False)


def test_general_can_step_behind_a_blocker(board_from: BoardFactory) -> None:
    board = board_from({(0, 4): "k", (7, 3): "K", (4, 4): "p"}, with_generals=False)
    assert_move(board, (7, 3), (7, 4), True)


def test_moving_the_last_blocker_away_is_illegal(board_from: BoardFactory) -> None:
    """Not only Generals: any move that opens the column is rejected"""
    board = board_from({(0, 4): "k", (9, 4): "K", (5, 4): "R"}, with_generals=False)
    assert_move(board, (5, 4), (5, 0), False)
    assert_move(board, (5, 4), (6, 4), True)


def test_capturing_the_general_is_not_a_flying_general(
    board_from: BoardFactory,
) -> None:
    board = board_from({(0, 4): "k", (9, 4): "K", (5, 4): "R"}, with_generals=False)
    assert_move(board, (5, 4), (0, 4), True)


# --- MOVE GENERATION ---
def test_legal_moves_at_the_start() -> None:
    """The standard opening position has 44 legal moves per side"""
    board = Board.starting_position()
    assert len(legal_moves(board, Color.RED)) == 44
    assert len(legal_moves(board, Color.BLACK)) == 44


def test_legal_destinations_of_a_cannon() -> None:
    board = Board.starting_position()
    destinations = legal_destinations(board, Position(7, 1))
    assert Position(0, 1) in destinations  # capture over the black cannon
    assert Position(1, 1) not in destinations
    assert len(destinations) == 12


def test_legal_destinations_of_an_empty_point() -> None:
    assert legal_destinations(Board.starting_position(), Position(5, 5)) == []


def test_is_capture() -> None:
    board = Board.starting_position()
    assert is_capture(board, CandidateMove(Position(7, 1), Position(0, 1)))
    assert not is_capture(board, CandidateMove(Position(7, 1), Position(7, 4)))

"""Unit tests for /src/xiangqi/pieces.py"""

import pytest

from src.core.shared_types import Color, PieceType
from src.xiangqi.pieces import PIECE_TO_FEN, Piece


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_fen_characters_are_unique(piece_type: PieceType) -> None:
    characters = list(PIECE_TO_FEN.values())
    assert characters.count(PIECE_TO_FEN[piece_type]) == 1


def test_create_piece() -> None:
    """Ids are built from color, type, and a suffix. Symbols depend on color."""
    red = Piece.create(PieceType.SOLDIER, Color.RED, "a")
    black = Piece.create(PieceType.SOLDIER, Color.BLACK, "a")

    assert red.id == "red-soldier-a"
    assert black.id == "black-soldier-a"
    assert red.symbol != black.symbol
    assert red.label == black.label == "Soldier"


@pytest.mark.parametrize(
    "piece_type, color, expected",
    [
        (PieceType.CHARIOT, Color.RED, "R"),
        (PieceType.CHARIOT, Color.BLACK, "r"),
        (PieceType.ELEPHANT, Color.RED, "B"),
        (PieceType.HORSE, Color.BLACK, "n"),
        (PieceType.GENERAL, Color.RED, "K"),
    ],
)
def test_to_fen(piece_type: PieceType, color: Color, expected: str) -> None:
    assert Piece.create(piece_type, color, "a").to_fen() == expected


def test_points() -> None:
    """A chariot is worth more than a horse, which is worth more than a soldier"""
    chariot = Piece.create(PieceType.CHARIOT, Color.RED, "a")
    horse = Piece.create(PieceType.HORSE, Color.RED, "a")
    soldier = Piece.create(PieceType.SOLDIER, Color.RED, "a")
    assert chariot.points > horse.points > soldier.points

"""Defines the types of xiangqi pieces"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "k": PieceType.GENERAL,
    "a": PieceType.ADVISOR,
    "b": PieceType.ELEPHANT,
    "n": PieceType.HORSE,
    "r": PieceType.CHARIOT,
    "c": PieceType.CANNON,
    "p": PieceType.SOLDIER,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Some notations write elephants as "e" and horses as "h". Accepted when reading only.
FEN_ALIASES: dict[str, PieceType] = {
    "e": PieceType.ELEPHANT,
    "h": PieceType.HORSE,
}

# (label, red symbol, black symbol)
PIECE_DEFINITIONS: dict[PieceType, tuple[str, str, str]] = {
    PieceType.GENERAL: ("General", "帅", "将"),
    PieceType.ADVISOR: ("Advisor", "仕", "士"),
    PieceType.ELEPHANT: ("Elephant", "相", "象"),
    PieceType.HORSE: ("Horse", "马", "马"),
    PieceType.CHARIOT: ("Chariot", "车", "车"),
    PieceType.CANNON: ("Cannon", "炮", "炮"),
    PieceType.SOLDIER: ("Soldier", "兵", "卒"),
}

# Rough material values, used by the AI to pick what to capture
PIECE_POINTS: dict[PieceType, int] = {
    PieceType.SOLDIER: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.HORSE: 4,
    PieceType.CANNON: 4,
    PieceType.CHARIOT: 9,
    PieceType.GENERAL: 1000,
}

# Most pieces of each type one side can have (the full starting set)
PIECE_LIMITS: dict[PieceType, int] = {
    PieceType.GENERAL: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.HORSE: 2,
    PieceType.CHARIOT: 2,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 5,
}


@dataclass(frozen=True)
class Piece:
    """
    Immutable identity record. The id is stable for the lifetime of the piece (moving keeps it,
    capturing moves the same record into a stash), so two pieces are never told apart by type/color alone.
    """

    id: str
    type: PieceType
    color: Color
    symbol: str
    label: str

    @classmethod
    def create(cls, piece_type: PieceType, color: Color, suffix: str) -> Self:
        label, red_symbol, black_symbol = PIECE_DEFINITIONS[piece_type]
        symbol = red_symbol if color == Color.RED else black_symbol
        return cls(
            id=f"{color}-{piece_type}-{suffix}",
            type=piece_type,
            color=color,
            symbol=symbol,
            label=label,
        )

    @property
    def points(self) -> int:
        return PIECE_POINTS[self.type]

    def to_fen(self) -> str:
        # upper case: Red pieces, lower case: Black pieces
        character = PIECE_TO_FEN[self.type]
        return character.upper() if self.color == Color.RED else character

"""The Board holds the configuration of pieces. It is immutable: every change returns a new Board."""

from collections import Counter
from dataclasses import dataclass
from string import ascii_lowercase
from typing import Iterator, Optional, Self

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType
from src.xiangqi.pieces import FEN_ALIASES, FEN_TO_PIECE, PIECE_LIMITS, Piece
from src.xiangqi.square import BOARD_DIMENSIONS, Position

STARTING_FEN = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR"
EMPTY_FEN = "/".join(["9"] * BOARD_DIMENSIONS[0])

Cells = tuple[tuple[Optional[Piece], ...], ...]


def fen_character_to_piece_type(character: str) -> Optional[PieceType]:
    lower = character.lower()
    return FEN_TO_PIECE.get(lower) or FEN_ALIASES.get(lower)


def is_valid_position(fen: str) -> bool:
    """
    Check the board field of a xiangqi FEN:
    * 10 ranks, each adding up to 9 columns
    * exactly one General per color
    * no more pieces of a type than a side starts with
    """
    num_rows, num_cols = BOARD_DIMENSIONS
    rank_fens = fen.split("/")
    if len(rank_fens) != num_rows:
        return False

    piece_counts: Counter[tuple[Color, PieceType]] = Counter()
    for rank_fen in rank_fens:
        col_count = 0
        for character in rank_fen:
            if character.isdigit():
                col_count += int(character)
                continue
            piece_type = fen_character_to_piece_type(character)
            if piece_type is None:
                return False
            col_count += 1
            piece_counts[(_fen_character_color(character), piece_type)] += 1
        if col_count != num_cols:
            return False

    if any(piece_counts[(color, PieceType.GENERAL)] != 1 for color in Color):
        return False
    return all(
        count <= PIECE_LIMITS[piece_type]
        for (_, piece_type), count in piece_counts.items()
    )


def _fen_character_color(character: str) -> Color:
    return Color.RED if character.isupper() else Color.BLACK


@dataclass(frozen=True)
class Board:
    cells: Cells

    @classmethod
    def empty(cls) -> Self:
        rows, cols = BOARD_DIMENSIONS
        return cls(tuple(tuple([None] * cols) for _ in range(rows)))

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Construct a board from the board field of a xiangqi FEN string.

        ex. standard starting position:
        rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR
        means:
        * the first rank written is row 0 (Black's back rank), the last one is row 9 (Red's back rank)
        * capital letters are Red pieces, small letters Black pieces
        * a number denotes that many consecutive empty intersections

        Pieces get ids in reading order: "<color>-<type>-a", "<color>-<type>-b", ...
        The General is always "<color>-general-main".
        """
        if not is_valid_position(fen):
            raise InvalidFENError(f"Not a valid xiangqi board: {fen!r}")

        seen: Counter[tuple[Color, PieceType]] = Counter()
        rows: list[tuple[Optional[Piece], ...]] = []
        for rank_fen in fen.split("/"):
            row: list[Optional[Piece]] = []
            for character in rank_fen:
                if character.isdigit():
                    row.extend([None] * int(character))
                    continue

                piece_type = fen_character_to_piece_type(character)
                if piece_type is None:
                    raise InvalidFENError(f"Unknown piece {character!r} in {fen!r}")
                color = _fen_character_color(character)
                suffix = (
                    "main"
                    if piece_type == PieceType.GENERAL
                    else ascii_lowercase[seen[(color, piece_type)]]
                )
                seen[(color, piece_type)] += 1
                row.append(Piece.create(piece_type, color, suffix))
            rows.append(tuple(row))
        return cls(tuple(rows))

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.cells)

    def _row_to_fen(self, row: tuple[Optional[Piece], ...]) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, position: Position) -> Optional[Piece]:
        if not position.is_within_bounds():
            return None
        return self.cells[position.row][position.col]

    def is_occupied(self, position: Position) -> bool:
        return self.piece(position) is not None

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        """All pieces on the board with their position, in reading order"""
        for row_idx, row in enumerate(self.cells):
            for col_idx, piece in enumerate(row):
                if piece is not None:
                    yield Position(row_idx, col_idx), piece

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Position]:
        return [
            position
            for position, piece in self.pieces()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, piece in self.pieces() if piece.color == color]

    def locate_general(self, color: Color) -> Optional[Position]:
        generals = self.locate_pieces(PieceType.GENERAL, color)
        return generals[0] if generals else None

    def find_piece(self, piece_id: str) -> Optional[Position]:
        return next(
            (position for position, piece in self.pieces() if piece.id == piece_id),
            None,
        )

    # --- UPDATES (return a new board) ---
    def place_piece(self, piece: Optional[Piece], position: Position) -> Self:
        rows = [list(row) for row in self.cells]
        rows[position.row][position.col] = piece
        return type(self)(tuple(tuple(row) for row in rows))

    def remove_piece(self, position: Position) -> Self:
        return self.place_piece(None, position)

    def move_piece(self, from_: Position, to: Position) -> Self:
        """Relocate whatever stands on `from_`. Anything on `to` disappears from the board."""
        rows = [list(row) for row in self.cells]
        moving_piece = rows[from_.row][from_.col]
        rows[from_.row][from_.col] = None
        rows[to.row][to.col] = moving_piece
        return type(self)(tuple(tuple(row) for row in rows))

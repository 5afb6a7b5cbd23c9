"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from dataclasses import replace
from typing import Callable

import pytest

from src.core.shared_types import GameMode
from src.xiangqi.board import Board
from src.xiangqi.game import GameEngine
from src.xiangqi.square import BOARD_DIMENSIONS
from src.xiangqi.state import GameState

Placements = dict[tuple[int, int], str]

# Generals on different columns, so the flying general rule stays out of the way unless a test wants it.
GENERALS: Placements = {(0, 3): "k", (9, 5): "K"}


def fen_from_placements(placements: Placements) -> str:
    """{(row, col): fen character} -> board field of a FEN string"""
    rows, cols = BOARD_DIMENSIONS
    grid = [[""] * cols for _ in range(rows)]
    for (row, col), character in placements.items():
        grid[row][col] = character

    rank_fens = []
    for grid_row in grid:
        rank_fen, empty_count = "", 0
        for character in grid_row:
            if not character:
                empty_count += 1
                continue
            if empty_count:
                rank_fen += str(empty_count)
                empty_count = 0
            rank_fen += character
        if empty_count:
            rank_fen += str(empty_count)
        rank_fens.append(rank_fen)
    return "/".join(rank_fens)


@pytest.fixture
def board_from() -> Callable[..., Board]:
    """Call the inner function with {(row, col): fen character}. Both Generals are added unless with_generals=False."""

    def _create_board(placements: Placements, with_generals: bool = True) -> Board:
        all_placements = {**GENERALS, **placements} if with_generals else placements
        return Board.from_fen(fen_from_placements(all_placements))

    return _create_board


@pytest.fixture
def state_from(board_from: Callable[..., Board]) -> Callable[..., GameState]:
    """Call the inner function with piece placements and any GameState field to override."""

    def _create_state(placements: Placements, **fields) -> GameState:
        with_generals = fields.pop("with_generals", True)
        mode = fields.pop("mode", GameMode.LOCAL)
        state = GameState.new_game(
            mode=mode, board=board_from(placements, with_generals)
        )
        return replace(state, **fields)

    return _create_state


@pytest.fixture
def engine() -> GameEngine:
    """Engine on the standard starting position, with a seeded random generator."""
    return GameEngine(rng=random.Random(1234))

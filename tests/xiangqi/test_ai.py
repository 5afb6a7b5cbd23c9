"""Unit tests for /src/xiangqi/ai.py"""

import random
from dataclasses import replace
from typing import Callable

import pytest

from src.core.shared_types import Color
from src.xiangqi.ai import (
    GreedyStrategy,
    RandomStrategy,
    candidate_moves,
    select_strategy,
)
from src.xiangqi.effects import seal
from src.xiangqi.moves import CandidateMove, is_capture
from src.xiangqi.square import Position
from src.xiangqi.state import GameState

StateFactory = Callable[..., GameState]


# --- CANDIDATE MOVES ---
def test_candidates_at_the_start() -> None:
    assert len(candidate_moves(GameState.new_game())) == 44


def test_sealed_pieces_are_skipped() -> None:
    state = replace(
        GameState.new_game(), effects=(seal("red-chariot-a", Color.BLACK),)
    )
    moves = candidate_moves(state)
    assert len(moves) == 42
    assert all(move.from_ != Position(9, 0) for move in moves)


@pytest.mark.parametrize(
    "flag", ["is_bonus_move_phase", "opponent_cannot_capture"]
)
def test_no_captures_when_forbidden(flag: str) -> None:
    """The two cannons can each take a horse at the start. Not during a bonus move, or under pacifism."""
    state = replace(GameState.new_game(), **{flag: True})
    moves = candidate_moves(state)
    assert len(moves) == 42
    assert not any(is_capture(state.board, move) for move in moves)


# --- STRATEGIES ---
def test_random_strategy_picks_a_candidate() -> None:
    state = GameState.new_game()
    strategy = RandomStrategy(random.Random(5))
    assert strategy.pick_move(state) in candidate_moves(state)


def test_random_strategy_is_reproducible() -> None:
    state = GameState.new_game()
    first = RandomStrategy(random.Random(5)).pick_move(state)
    second = RandomStrategy(random.Random(5)).pick_move(state)
    assert first == second


def test_no_move_when_game_over() -> None:
    state = replace(GameState.new_game(), is_game_over=True, winner=Color.BLACK)
    assert RandomStrategy().pick_move(state) is None
    assert GreedyStrategy().pick_move(state) is None


def test_no_move_when_everything_is_sealed(state_from: StateFactory) -> None:
    state = state_from({}, effects=(seal("red-general-main", Color.BLACK),))
    assert RandomStrategy().pick_move(state) is None
    assert GreedyStrategy().pick_move(state) is None


def test_greedy_takes_the_most_valuable_piece(state_from: StateFactory) -> None:
    state = state_from({(5, 0): "R", (5, 4): "n", (2, 0): "p"})
    move = GreedyStrategy(random.Random(0)).pick_move(state)
    assert move == CandidateMove(Position(5, 0), Position(5, 4))


def test_greedy_without_captures(state_from: StateFactory) -> None:
    state = state_from({(5, 0): "R"})
    move = GreedyStrategy(random.Random(0)).pick_move(state)
    assert move in candidate_moves(state)


@pytest.mark.parametrize(
    "key, expected",
    [
        ("random", RandomStrategy),
        ("greedy", GreedyStrategy),
        ("minimax", RandomStrategy),
    ],
)
def test_select_strategy(key: str, expected: type) -> None:
    """Unknown strategies fall back to random"""
    assert isinstance(select_strategy(key), expected)

"""
AI move selection.

A strategy looks at a (read-only) GameState and proposes at most one move for the side to move.
It never touches the state: the proposed move goes through the engine like any other move,
and the engine checks everything again.
"""

import random
from typing import Optional, Protocol

from src.xiangqi.effects import is_sealed
from src.xiangqi.moves import CandidateMove, is_capture, legal_moves
from src.xiangqi.state import GameState


class AIStrategy(Protocol):
    name: str

    def pick_move(self, state: GameState) -> Optional[CandidateMove]: ...


def candidate_moves(state: GameState) -> list[CandidateMove]:
    """
    Legal moves for the side to move, minus the ones the game state forbids:
    * sealed pieces cannot move
    * no captures during a bonus move, or while pacifism is active
    """
    captures_forbidden = state.is_bonus_move_phase or state.opponent_cannot_capture
    candidates = []
    for move in legal_moves(state.board, state.current_turn):
        piece = state.board.piece(move.from_)
        if piece is None or is_sealed(state.effects, piece.id):
            continue
        if captures_forbidden and is_capture(state.board, move):
            continue
        candidates.append(move)
    return candidates


class RandomStrategy:
    """Uniformly random among the candidate moves."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def pick_move(self, state: GameState) -> Optional[CandidateMove]:
        if state.is_game_over:
            return None
        moves = candidate_moves(state)
        if not moves:
            return None
        return self.rng.choice(moves)


class GreedyStrategy:
    """Take the most valuable piece on offer; play a random move when nothing can be captured."""

    name = "greedy"

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def pick_move(self, state: GameState) -> Optional[CandidateMove]:
        if state.is_game_over:
            return None
        moves = candidate_moves(state)
        if not moves:
            return None

        captures = [move for move in moves if is_capture(state.board, move)]
        if not captures:
            return self.rng.choice(moves)

        def captured_points(move: CandidateMove) -> int:
            target = state.board.piece(move.to)
            return target.points if target else 0

        best = max(captured_points(move) for move in captures)
        return self.rng.choice(
            [move for move in captures if captured_points(move) == best]
        )


STRATEGIES: dict[str, type[RandomStrategy] | type[GreedyStrategy]] = {
    RandomStrategy.name: RandomStrategy,
    GreedyStrategy.name: GreedyStrategy,
}


def select_strategy(key: str, rng: Optional[random.Random] = None) -> AIStrategy:
    """Unknown keys get the random strategy."""
    return STRATEGIES.get(key, RandomStrategy)(rng)

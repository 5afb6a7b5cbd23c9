"""
The GameEngine is the entrypoint into the domain layer for the service layer (and for AI turns).
It owns the current GameState and pushes every action through the reducer,
so callers hold an engine instance explicitly instead of reaching for some global game.
"""

import logging
import random
from typing import Callable, Optional

from src.core.shared_types import AdventureType, PieceType
from src.xiangqi.actions import (
    Action,
    CapturePiece,
    ConsumeImmunity,
    MovePiece,
    OpenAdventure,
    TurnEnd,
)
from src.xiangqi.adventure import random_adventure
from src.xiangqi.effects import is_immune, is_sealed
from src.xiangqi.moves import can_move
from src.xiangqi.reducer import reduce
from src.xiangqi.square import Position
from src.xiangqi.state import GameState

logger = logging.getLogger(__name__)

Reducer = Callable[[GameState, Action, random.Random], GameState]
AdventurePicker = Callable[[random.Random], tuple[AdventureType, int]]


class GameEngine:
    """Holds one game. Independent engines never share any state."""

    def __init__(
        self,
        state: Optional[GameState] = None,
        reducer: Reducer = reduce,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.state = state or GameState.new_game()
        self.rng = rng or random.Random()
        self._reducer = reducer
        # bumped on every accepted action, so anything scheduled against an older state can tell it is stale
        self.generation = 0

    def dispatch(self, action: Action) -> bool:
        """Apply one action. Returns whether it was accepted (the reducer produced a new state)."""
        before = self.state
        after = self._reducer(before, action, self.rng)
        if after is before:
            logger.debug("Action %s rejected", action)
            return False

        self.state = after
        self.generation += 1
        if after.is_game_over and not before.is_game_over:
            logger.info("Game over. Winner: %s", after.winner)
        return True

    def play(
        self,
        from_: Position,
        to: Position,
        pick_adventure: Optional[AdventurePicker] = None,
    ) -> bool:
        """
        Play a move the way a player does on the board.
        ----

        1. The target is an immune enemy piece? The capture is blocked, the immunity is used up and the turn passes.
        2. The target is any other enemy piece? Capture it, then open an adventure picked by `pick_adventure`
           (unless the General fell and the game is over).
        3. Otherwise it is a quiet move, followed by the end-of-turn tick.
           NOTE: a move that starts a bonus phase (double move armed) does not end the turn, so no tick.

        Returns whether the move went through.
        """
        state = self.state
        piece = state.board.piece(from_)
        if piece is None or piece.color != state.current_turn:
            return False

        target = state.board.piece(to)
        if target is not None and target.color != piece.color:
            if is_immune(state.effects, target.id):
                if not self._capture_allowed(from_, to):
                    return False
                return self.dispatch(ConsumeImmunity(target_id=target.id))

            if not self.dispatch(CapturePiece(from_=from_, to=to)):
                return False
            if target.type != PieceType.GENERAL:
                adventure_type, adventure_index = (pick_adventure or random_adventure)(
                    self.rng
                )
                self.dispatch(
                    OpenAdventure(
                        adventure_type=adventure_type, adventure_index=adventure_index
                    )
                )
            return True

        skip_turn_end = (
            state.pending_double_move == state.current_turn
            and not state.is_bonus_move_phase
        )
        if not self.dispatch(MovePiece(from_=from_, to=to)):
            return False
        if not skip_turn_end:
            self.dispatch(TurnEnd())
        return True

    def _capture_allowed(self, from_: Position, to: Position) -> bool:
        """Would a capture from `from_` to `to` be accepted right now? (same checks the reducer makes)"""
        state = self.state
        piece = state.board.piece(from_)
        if piece is None or state.is_game_over or state.is_frozen:
            return False
        if state.is_bonus_move_phase or state.opponent_cannot_capture:
            return False
        if is_sealed(state.effects, piece.id):
            return False
        return can_move(state.board, from_, to, piece)

"""
Scheduling of AI turns.

In PVE mode, once it is the AI's turn, an asyncio task waits a short (visual) delay, asks the strategy
for a move, and plays it through the engine.

The task remembers the engine generation it was scheduled at. If anything was dispatched in the meantime
(a human move, an undo, a reset...), the generation has moved on and the task gives up without playing.
"""

import asyncio
import logging
from typing import Optional

from src.core.shared_types import AdventureStatus, Color, GameMode
from src.xiangqi.ai import AIStrategy
from src.xiangqi.game import AdventurePicker, GameEngine
from src.xiangqi.state import GameState

logger = logging.getLogger(__name__)


class AITurnRunner:
    def __init__(
        self,
        engine: GameEngine,
        strategy: AIStrategy,
        color: Color = Color.BLACK,
        delay: float = 0.8,
        pick_adventure: Optional[AdventurePicker] = None,
    ) -> None:
        self.engine = engine
        self.strategy = strategy
        self.color = color
        self.delay = delay
        self.pick_adventure = pick_adventure
        self._task: Optional[asyncio.Task[bool]] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def should_play(self, state: GameState) -> bool:
        return (
            state.mode == GameMode.PVE
            and not state.is_game_over
            and state.current_turn == self.color
            and not state.is_frozen
            and state.adventure.status == AdventureStatus.IDLE
        )

    def maybe_schedule(self) -> Optional[asyncio.Task[bool]]:
        """
        Schedule an AI turn if it is the AI's turn and none is scheduled yet.
        Must be called from inside a running event loop. Returns the task, or None if nothing was scheduled.
        """
        if self.pending or not self.should_play(self.engine.state):
            return None

        generation = self.engine.generation
        self._task = asyncio.get_running_loop().create_task(
            self._take_turn(generation, self.engine.state)
        )
        logger.debug("AI turn scheduled at generation %d", generation)
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("AI turn cancelled")
        self._task = None

    async def _take_turn(self, generation: int, state: GameState) -> bool:
        """The move is computed on the state as it was when the turn was scheduled."""
        await asyncio.sleep(self.delay)

        if self.engine.generation != generation:
            logger.debug(
                "AI turn abandoned: generation %d is stale (now %d)",
                generation,
                self.engine.generation,
            )
            return False

        move = self.strategy.pick_move(state)
        if move is None:
            logger.debug("AI (%s) has no move to play", self.strategy.name)
            return False
        return self.engine.play(move.from_, move.to, self.pick_adventure)

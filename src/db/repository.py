"""Protocol repository (the in-memory one is all a game needs right now; a persistent one can implement the same methods)"""

from typing import Protocol
from uuid import UUID

from src.xiangqi.game import GameEngine


class GameRepository(Protocol):
    """Registry of running games"""

    def get_game(self, game_id: UUID) -> GameEngine | None:
        """Get game by ID, if it exists."""
        ...

    def create_game(self, game: GameEngine) -> tuple[GameEngine, UUID]:
        """Store new game and return it + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameEngine) -> GameEngine | None:
        """Replace the game stored under an existing ID."""
        ...

    def delete_game(self, game_id: UUID) -> GameEngine | None:
        """Remove a game."""
        ...

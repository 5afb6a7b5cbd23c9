"""Implementation of (Game)Repository keeping the engines in a dict"""

from uuid import UUID, uuid4

from src.xiangqi.game import GameEngine


class InMemoryGameRepository:
    """Games live as long as the process does."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameEngine] = {}

    def get_game(self, game_id: UUID) -> GameEngine | None:
        return self._games.get(game_id)

    def create_game(self, game: GameEngine) -> tuple[GameEngine, UUID]:
        new_id = uuid4()
        self._games[new_id] = game
        return game, new_id

    def update_game(self, game_id: UUID, game: GameEngine) -> GameEngine | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameEngine | None:
        return self._games.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._games)

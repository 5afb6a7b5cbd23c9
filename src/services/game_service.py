"""Orchestration of communication from API layer to the rule engine and the game registry (and the reverse direction)."""

import logging
import random
from functools import partial
from typing import Optional
from uuid import UUID

from src.api.events import event_to_action, parse_event
from src.api.models import (
    AdventureResponse,
    CreateGameRequest,
    DeleteGameRequest,
    EffectResponse,
    GameActionRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveCoordinates,
    MoveRecordResponse,
    MoveRequest,
    NetworkEventRequest,
    RewardRequest,
    SetModeRequest,
)
from src.core.config import Settings, load_settings
from src.core.exceptions import RepositoryError
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.xiangqi.actions import (
    Action,
    ApplyReward,
    CloseAdventure,
    ForceTurn,
    ResetGame,
    SetMode,
    UndoMove,
)
from src.xiangqi.adventure import random_adventure
from src.xiangqi.ai import candidate_moves, select_strategy
from src.xiangqi.ai_turn import AITurnRunner
from src.xiangqi.board import Board
from src.xiangqi.game import GameEngine
from src.xiangqi.square import Position
from src.xiangqi.state import GameState, MoveRecord

logger = logging.getLogger(__name__)


class XiangqiService:
    """Orchestration of layers for xiangqi adventure games."""

    def __init__(
        self, repository: GameRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or load_settings()
        self.pick_adventure = partial(
            random_adventure, dare_probability=self.settings.dare_probability
        )

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player requested a new game (in the requested mode, optionally from a custom position)."""

        board = Board.from_fen(request.starting_fen) if request.starting_fen else None
        engine = GameEngine(
            state=GameState.new_game(mode=request.mode, board=board),
            rng=random.Random(self.settings.random_seed),
        )
        stored_game, game_id = self.repo.create_game(engine)
        logger.info("Created %s game %s", request.mode, game_id)
        return self._create_game_response(game_id, stored_game.state)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend, e.g. to find out an adventure has been opened.
        """
        engine = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, engine.state)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Moves the side to move can play right now (seals, bonus move and pacifism taken into account)."""
        state = self._fetch_game(request.game_id).state
        moves = (
            []
            if state.is_game_over or state.is_frozen
            else candidate_moves(state)
        )
        return LegalMovesResponse(
            game_id=request.game_id,
            color=state.current_turn,
            legal_moves=[
                self._coordinates(move.from_, move.to) for move in moves
            ],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. A rejected move is not an error: the response says accepted=False."""

        engine = self._fetch_game(request.game_id)
        accepted = engine.play(
            Position(request.from_row, request.from_col),
            Position(request.to_row, request.to_col),
            self.pick_adventure,
        )
        self.repo.update_game(request.game_id, engine)
        return self._create_game_response(request.game_id, engine.state, accepted)

    def resolve_adventure(self, request: GameActionRequest) -> GameResponse:
        return self._dispatch(request.game_id, CloseAdventure())

    def undo_move(self, request: GameActionRequest) -> GameResponse:
        return self._dispatch(request.game_id, UndoMove())

    def apply_reward(self, request: RewardRequest) -> GameResponse:
        return self._dispatch(request.game_id, ApplyReward(reward=request.reward))

    def reset_game(self, request: GameActionRequest) -> GameResponse:
        return self._dispatch(request.game_id, ResetGame())

    def set_mode(self, request: SetModeRequest) -> GameResponse:
        return self._dispatch(request.game_id, SetMode(mode=request.mode))

    def force_turn(self, request: GameActionRequest) -> GameResponse:
        return self._dispatch(request.game_id, ForceTurn())

    def apply_network_event(self, request: NetworkEventRequest) -> GameResponse:
        """Apply an event received from the other side. Events that cannot be parsed are dropped (accepted=False)."""
        event = parse_event(request.raw_event)
        if event is None:
            engine = self._fetch_game(request.game_id)
            return self._create_game_response(request.game_id, engine.state, False)
        return self._dispatch(request.game_id, event_to_action(event))

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a game."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    def ai_runner(self, game_id: UUID, color: Optional[Color] = None) -> AITurnRunner:
        """An AI opponent for the game, configured from the settings."""
        engine = self._fetch_game(game_id)
        return AITurnRunner(
            engine,
            select_strategy(self.settings.ai_strategy, engine.rng),
            color=color or self.settings.ai_color,
            delay=self.settings.ai_delay_seconds,
            pick_adventure=self.pick_adventure,
        )

    # -- Internal helpers --
    def _dispatch(self, game_id: UUID, action: Action) -> GameResponse:
        engine = self._fetch_game(game_id)
        accepted = engine.dispatch(action)
        self.repo.update_game(game_id, engine)
        return self._create_game_response(game_id, engine.state, accepted)

    def _create_game_response(
        self, game_id: UUID, state: GameState, accepted: bool = True
    ) -> GameResponse:
        """Convert a GameState to a GameResponse (for game with given ID)."""
        return GameResponse(
            game_id=game_id,
            accepted=accepted,
            mode=state.mode,
            board_fen=state.board.to_fen(),
            current_turn=state.current_turn,
            is_frozen=state.is_frozen,
            adventure=AdventureResponse(
                status=state.adventure.status,
                type=state.adventure.type,
                index=state.adventure.index,
                content=state.adventure.content,
            ),
            move_history=[self._record_response(record) for record in state.move_history],
            captured={
                color: [piece.id for piece in state.captured.of(color)]
                for color in Color
            },
            effects=[
                EffectResponse(
                    kind=effect.kind,
                    target_id=effect.target_id,
                    duration=effect.duration,
                    owner=effect.owner,
                )
                for effect in state.effects
            ],
            undo_tokens=state.undo_tokens,
            winner=state.winner,
            is_game_over=state.is_game_over,
            pending_double_move=state.pending_double_move,
            is_bonus_move_phase=state.is_bonus_move_phase,
            next_capture_grants_extra_move=state.next_capture_grants_extra_move,
            opponent_cannot_capture=state.opponent_cannot_capture,
            show_taunt=state.show_taunt,
            shield_pulse_piece_id=state.shield_pulse_piece_id,
        )

    @staticmethod
    def _coordinates(from_: Position, to: Position) -> MoveCoordinates:
        return MoveCoordinates(
            from_row=from_.row, from_col=from_.col, to_row=to.row, to_col=to.col
        )

    @staticmethod
    def _record_response(record: MoveRecord) -> MoveRecordResponse:
        return MoveRecordResponse(
            from_row=record.from_.row,
            from_col=record.from_.col,
            to_row=record.to.row,
            to_col=record.to.col,
            piece_id=record.piece_id,
            piece_type=record.piece_type,
            piece_color=record.piece_color,
            capture=record.capture,
            captured_piece_id=record.captured_piece_id,
            adventure_type=record.adventure_type,
            adventure_index=record.adventure_index,
            origin=record.origin,
        )

    def _fetch_game(self, game_id: UUID) -> GameEngine:
        """Attempt to find the game in the repository and raise error if it fails."""
        engine = self.repo.get_game(game_id)
        if engine is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return engine

"""
Turn/phase state machine.

`reduce(state, action)` resolves exactly one action into a new GameState.
It never raises: an action that is illegal or makes no sense right now returns the very same state object.

The turn phase is encoded in independent flags, because the bonus move can be armed by two unrelated rewards at once:
* pending_double_move: armed for a color, consumed by that color's next completed move of any kind
* next_capture_grants_extra_move: armed for a color, consumed by that color's next completed capture
* is_bonus_move_phase: the current mover is playing a bonus move (cannot capture, always ends the turn)
"""

import logging
import random
from dataclasses import replace
from typing import Callable, Optional

from src.core.shared_types import (
    AdventureStatus,
    AdventureType,
    EffectKind,
    MoveOrigin,
    PieceType,
    Reward,
    RewardEffect,
    opponent_of,
)
from src.xiangqi.actions import (
    Action,
    ApplyReward,
    CapturePiece,
    ClearShieldPulse,
    CloseAdventure,
    ConsumeImmunity,
    ForceTurn,
    HideTaunt,
    MovePiece,
    OpenAdventure,
    ResetGame,
    SetMode,
    SyncAdventure,
    SyncMove,
    TurnEnd,
    UndoMove,
)
from src.xiangqi.adventure import get_adventure
from src.xiangqi.effects import (
    advance,
    grant,
    immunity,
    is_immune,
    is_sealed,
    remove_effect,
    seal,
    strip_piece,
)
from src.xiangqi.history import push_snapshot, take_snapshot, undo_move
from src.xiangqi.moves import can_move
from src.xiangqi.square import Position
from src.xiangqi.state import AdventureState, GameState, MoveRecord

logger = logging.getLogger(__name__)

_default_rng = random.Random()

Handler = Callable[[GameState, Action, random.Random], GameState]

# These still work after the game has ended. Everything else becomes a no-op.
ALLOWED_AFTER_GAME_OVER: tuple[type, ...] = (ResetGame, SetMode)


def reduce(
    state: GameState, action: Action, rng: Optional[random.Random] = None
) -> GameState:
    """Apply one action. Unknown actions and rejected actions return `state` itself."""
    handler = ACTION_HANDLERS.get(type(action))
    if handler is None:
        return state
    if state.is_game_over and not isinstance(action, ALLOWED_AFTER_GAME_OVER):
        return state
    return handler(state, action, rng or _default_rng)


# --- MOVES ---
def _commit_move(
    state: GameState, from_: Position, to: Position, origin: MoveOrigin
) -> GameState:
    """
    A move to an empty point
    ----

    After the move, the turn:
    1. passes, if this was the bonus move (bonus phase ends)
    2. stays, if the mover had a double move armed (the bonus phase starts)
    3. passes, otherwise
    """
    piece = state.board.piece(from_)
    if piece is None or piece.color != state.current_turn:
        return state
    if state.is_frozen or is_sealed(state.effects, piece.id):
        return state
    if state.board.is_occupied(to):
        return state
    if not can_move(state.board, from_, to, piece):
        return state

    snapshot = take_snapshot(state)
    record = MoveRecord(
        from_=from_,
        to=to,
        piece_id=piece.id,
        piece_type=piece.type,
        piece_color=piece.color,
        origin=origin,
    )

    current_turn = state.current_turn
    pending_double_move = state.pending_double_move
    is_bonus_move_phase = state.is_bonus_move_phase
    if state.is_bonus_move_phase:
        is_bonus_move_phase = False
        current_turn = opponent_of(state.current_turn)
    elif state.pending_double_move == state.current_turn:
        pending_double_move = None
        is_bonus_move_phase = True
    else:
        current_turn = opponent_of(state.current_turn)

    moved = replace(
        state,
        board=state.board.move_piece(from_, to),
        current_turn=current_turn,
        is_frozen=False,
        adventure=AdventureState.idle(),
        pending_double_move=pending_double_move,
        is_bonus_move_phase=is_bonus_move_phase,
    )
    return push_snapshot(moved, snapshot, record)


def _commit_capture(
    state: GameState,
    from_: Position,
    to: Position,
    origin: MoveOrigin,
    adventure_type: Optional[AdventureType] = None,
    adventure_index: Optional[int] = None,
) -> GameState:
    """
    Capture an enemy piece
    ----

    The captured piece goes to the capturer's stash and loses all its effects.
    * Captured the General? Game over, the capturer wins.
    * Otherwise the game freezes until the pending adventure is resolved. The turn only moves on then,
      but the bonus flags are converted right now so the extra move is locked in before the adventure starts.
    """
    piece = state.board.piece(from_)
    target = state.board.piece(to)
    if piece is None or target is None:
        return state
    if piece.color != state.current_turn or target.color == piece.color:
        return state
    if state.is_frozen or state.is_bonus_move_phase or state.opponent_cannot_capture:
        return state
    if is_sealed(state.effects, piece.id):
        return state
    if not can_move(state.board, from_, to, piece):
        return state

    snapshot = take_snapshot(state)
    record = MoveRecord(
        from_=from_,
        to=to,
        piece_id=piece.id,
        piece_type=piece.type,
        piece_color=piece.color,
        capture=True,
        captured_piece_id=target.id,
        adventure_type=adventure_type,
        adventure_index=adventure_index,
        origin=origin,
    )
    captured_state = replace(
        state,
        board=state.board.move_piece(from_, to),
        captured=state.captured.add(piece.color, target),
        effects=strip_piece(state.effects, target.id),
    )

    if target.type == PieceType.GENERAL:
        logger.info("%s captured the General, game over", piece.color)
        game_over = replace(
            captured_state,
            winner=piece.color,
            is_game_over=True,
            is_frozen=False,
            adventure=AdventureState.idle(),
            pending_double_move=None,
            is_bonus_move_phase=False,
            next_capture_grants_extra_move=None,
        )
        return push_snapshot(game_over, snapshot, record)

    pending_double_move = state.pending_double_move
    next_capture_grants_extra_move = state.next_capture_grants_extra_move
    is_bonus_move_phase = state.is_bonus_move_phase
    if pending_double_move == piece.color:
        pending_double_move = None
        is_bonus_move_phase = True
    if next_capture_grants_extra_move == piece.color:
        next_capture_grants_extra_move = None
        is_bonus_move_phase = True

    frozen = replace(
        captured_state,
        is_frozen=True,
        adventure=AdventureState.pending(),
        pending_double_move=pending_double_move,
        is_bonus_move_phase=is_bonus_move_phase,
        next_capture_grants_extra_move=next_capture_grants_extra_move,
    )
    return push_snapshot(frozen, snapshot, record)


def _move_piece(state: GameState, action: MovePiece, rng: random.Random) -> GameState:
    return _commit_move(state, action.from_, action.to, MoveOrigin.LOCAL)


def _capture_piece(
    state: GameState, action: CapturePiece, rng: random.Random
) -> GameState:
    return _commit_capture(state, action.from_, action.to, MoveOrigin.LOCAL)


def _sync_move(state: GameState, action: SyncMove, rng: random.Random) -> GameState:
    """Remote moves follow the same rules as local ones; the remote side already chose the adventure."""
    if action.capture:
        return _commit_capture(
            state,
            action.from_,
            action.to,
            MoveOrigin.SYNCED,
            adventure_type=action.adventure_type,
            adventure_index=action.adventure_index,
        )
    return _commit_move(state, action.from_, action.to, MoveOrigin.SYNCED)


# --- ADVENTURES ---
def _open_adventure(
    state: GameState, action: OpenAdventure | SyncAdventure, rng: random.Random
) -> GameState:
    """Open the adventure a capture left pending, and note which one it was on the capturing move."""
    if state.adventure.status != AdventureStatus.PENDING:
        return state
    entry = get_adventure(action.adventure_type, action.adventure_index)
    if entry is None:
        return state

    adventure = AdventureState(
        status=AdventureStatus.OPEN,
        type=action.adventure_type,
        index=action.adventure_index,
        content=entry.text,
        effect=entry.effect,
    )
    move_history = state.move_history
    last_move = state.last_move
    if last_move is not None and move_history:
        last_move = replace(
            last_move,
            adventure_type=action.adventure_type,
            adventure_index=action.adventure_index,
        )
        move_history = move_history[:-1] + (last_move,)

    return replace(
        state,
        adventure=adventure,
        is_frozen=True,
        last_move=last_move,
        move_history=move_history,
    )


def _close_adventure(
    state: GameState, action: CloseAdventure, rng: random.Random
) -> GameState:
    """
    Resolve the adventure
    ----

    1. Seals age by one turn.
    2. A reward applies its effect for the player who made the capture.
    3. The turn passes, unless that player earned a bonus move (then they play it first).
    """
    if state.adventure.status == AdventureStatus.IDLE:
        return state

    resolved = replace(state, effects=advance(state.effects))
    if state.adventure.type == AdventureType.REWARD and state.adventure.effect:
        resolved = _apply_reward_effect(resolved, state.adventure.effect, rng)

    return replace(
        resolved,
        adventure=AdventureState.idle(),
        is_frozen=False,
        current_turn=(
            state.current_turn
            if state.is_bonus_move_phase
            else opponent_of(state.current_turn)
        ),
    )


def _apply_reward_effect(
    state: GameState, effect: RewardEffect, rng: random.Random
) -> GameState:
    mover = state.current_turn
    match effect:
        case RewardEffect.DOUBLE_MOVE:
            return replace(state, pending_double_move=mover)
        case RewardEffect.PACIFISM:
            return replace(state, opponent_cannot_capture=True)
        case RewardEffect.CRITICAL_STRIKE:
            return replace(state, next_capture_grants_extra_move=mover)
        case RewardEffect.ABSOLUTE_ZERO:
            enemy_pieces = [
                piece
                for _, piece in state.board.pieces()
                if piece.color == opponent_of(mover)
            ]
            if not enemy_pieces:
                return state
            frozen_piece = rng.choice(enemy_pieces)
            return replace(
                state, effects=grant(state.effects, seal(frozen_piece.id, mover))
            )
    return state


# --- END OF TURN / REWARDS ---
def _turn_end(state: GameState, action: TurnEnd, rng: random.Random) -> GameState:
    """Seals age, and pacifism only ever lasts for a single turn."""
    return replace(
        state,
        effects=advance(state.effects),
        shield_pulse_piece_id=None,
        opponent_cannot_capture=False,
    )


def _apply_reward(
    state: GameState, action: ApplyReward, rng: random.Random
) -> GameState:
    """A reward for whoever made the last move. Effects granted here replace earlier ones of the same kind."""
    last_move = state.last_move
    if last_move is None:
        return state
    mover = last_move.piece_color

    match action.reward:
        case Reward.IMMUNITY:
            return replace(
                state,
                effects=grant(state.effects, immunity(last_move.piece_id, mover)),
                shield_pulse_piece_id=last_move.piece_id,
            )
        case Reward.UNDO:
            return replace(state, undo_tokens=state.undo_tokens + 1)
        case Reward.TAUNT:
            return replace(state, show_taunt=True)
        case Reward.SEAL_CHARIOT:
            effects = state.effects
            for _, piece in state.board.pieces():
                if piece.type == PieceType.CHARIOT and piece.color != mover:
                    effects = grant(effects, seal(piece.id, mover))
            return replace(state, effects=effects)
    return state


def _consume_immunity(
    state: GameState, action: ConsumeImmunity, rng: random.Random
) -> GameState:
    """
    A capture attempt hit an immune piece: the immunity is used up, the capture never happens,
    and the attacker's turn is over as if they had moved.
    """
    if not is_immune(state.effects, action.target_id):
        return state

    without_immunity = remove_effect(
        state.effects, EffectKind.IMMUNITY, action.target_id
    )
    return replace(
        state,
        effects=advance(without_immunity),
        current_turn=opponent_of(state.current_turn),
        shield_pulse_piece_id=action.target_id,
        is_frozen=False,
        adventure=AdventureState.idle(),
    )


def _undo_move(state: GameState, action: UndoMove, rng: random.Random) -> GameState:
    return undo_move(state)


# --- COSMETICS / ADMIN ---
def _hide_taunt(state: GameState, action: HideTaunt, rng: random.Random) -> GameState:
    if not state.show_taunt:
        return state
    return replace(state, show_taunt=False)


def _clear_shield_pulse(
    state: GameState, action: ClearShieldPulse, rng: random.Random
) -> GameState:
    if state.shield_pulse_piece_id is None:
        return state
    return replace(state, shield_pulse_piece_id=None)


def _force_turn(state: GameState, action: ForceTurn, rng: random.Random) -> GameState:
    """Hand the turn to the other side, dropping every phase flag."""
    return replace(
        state,
        current_turn=opponent_of(state.current_turn),
        is_frozen=False,
        adventure=AdventureState.idle(),
        pending_double_move=None,
        is_bonus_move_phase=False,
        opponent_cannot_capture=False,
        next_capture_grants_extra_move=None,
    )


def _reset_game(state: GameState, action: ResetGame, rng: random.Random) -> GameState:
    return GameState.new_game(mode=state.mode)


def _set_mode(state: GameState, action: SetMode, rng: random.Random) -> GameState:
    """Switching mode always starts a fresh game (also when switching to the same mode)."""
    return GameState.new_game(mode=action.mode)


# -- ACTION DISPATCH TABLE ---
ACTION_HANDLERS: dict[type, Handler] = {
    MovePiece: _move_piece,
    CapturePiece: _capture_piece,
    SyncMove: _sync_move,
    OpenAdventure: _open_adventure,
    SyncAdventure: _open_adventure,
    CloseAdventure: _close_adventure,
    SetMode: _set_mode,
    TurnEnd: _turn_end,
    ApplyReward: _apply_reward,
    UndoMove: _undo_move,
    ConsumeImmunity: _consume_immunity,
    HideTaunt: _hide_taunt,
    ClearShieldPulse: _clear_shield_pulse,
    ForceTurn: _force_turn,
    ResetGame: _reset_game,
}


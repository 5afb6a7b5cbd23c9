"""
History / undo.

Before every committed move the reducer pushes a Snapshot onto `GameState.history`,
so history and move_history stay aligned 1:1. Undoing pops both and restores the snapshot verbatim.
"""

import logging
from dataclasses import replace

from src.xiangqi.state import AdventureState, GameState, MoveRecord, Snapshot

logger = logging.getLogger(__name__)


def take_snapshot(state: GameState) -> Snapshot:
    """Pieces and effects are immutable, so keeping references is as good as a deep copy."""
    return Snapshot(
        board=state.board,
        current_turn=state.current_turn,
        captured=state.captured,
        effects=state.effects,
        undo_tokens=state.undo_tokens,
        winner=state.winner,
        is_game_over=state.is_game_over,
        pending_double_move=state.pending_double_move,
        is_bonus_move_phase=state.is_bonus_move_phase,
        opponent_cannot_capture=state.opponent_cannot_capture,
        next_capture_grants_extra_move=state.next_capture_grants_extra_move,
    )


def push_snapshot(state: GameState, snapshot: Snapshot, record: MoveRecord) -> GameState:
    """Commit a move record together with the snapshot taken before it."""
    return replace(
        state,
        last_move=record,
        move_history=state.move_history + (record,),
        history=state.history + (snapshot,),
    )


def can_undo(state: GameState) -> bool:
    return (
        not state.is_game_over
        and len(state.move_history) > 0
        and state.undo_tokens > 0
    )


def undo_move(state: GameState) -> GameState:
    """
    Take back the last move, paying one undo token.
    ----

    1. No move to take back / no token to pay with? Nothing happens.
    2. Restore everything from the snapshot taken right before the last move.
    3. Drop the last move record (and its snapshot), pay the token.
    4. Any adventure, taunt, or shield animation that belonged to the undone move goes away with it.
    """
    if not can_undo(state):
        return state

    last_move = state.move_history[-1]
    remaining_moves = state.move_history[:-1]

    if len(state.history) == len(state.move_history):
        restored = _restore_snapshot(state, state.history[-1])
        remaining_snapshots = state.history[:-1]
    else:
        # no snapshot belongs to this move: put the board back by hand
        logger.debug("No snapshot for move %s, rebuilding position", last_move)
        restored = _rebuild_without_snapshot(state, last_move)
        remaining_snapshots = state.history

    return replace(
        restored,
        move_history=remaining_moves,
        last_move=remaining_moves[-1] if remaining_moves else None,
        history=remaining_snapshots,
        undo_tokens=max(0, state.undo_tokens - 1),
        adventure=AdventureState.idle(),
        is_frozen=False,
        show_taunt=False,
        shield_pulse_piece_id=None,
    )


def _restore_snapshot(state: GameState, snapshot: Snapshot) -> GameState:
    return replace(
        state,
        board=snapshot.board,
        current_turn=snapshot.current_turn,
        captured=snapshot.captured,
        effects=snapshot.effects,
        winner=snapshot.winner,
        is_game_over=snapshot.is_game_over,
        pending_double_move=snapshot.pending_double_move,
        is_bonus_move_phase=snapshot.is_bonus_move_phase,
        opponent_cannot_capture=snapshot.opponent_cannot_capture,
        next_capture_grants_extra_move=snapshot.next_capture_grants_extra_move,
    )


def _rebuild_without_snapshot(state: GameState, last_move: MoveRecord) -> GameState:
    """
    Fallback: move the piece back and revive whatever it captured.

    The revived piece is looked up by id in the capturer's stash. If it is not there,
    the most recently captured piece is used instead.
    """
    board = state.board.move_piece(last_move.to, last_move.from_)
    captured = state.captured

    if last_move.capture:
        stash = list(captured.of(last_move.piece_color))
        revive_idx = next(
            (
                idx
                for idx, piece in enumerate(stash)
                if piece.id == last_move.captured_piece_id
            ),
            len(stash) - 1,
        )
        if revive_idx >= 0:
            revived = stash.pop(revive_idx)
            board = board.place_piece(revived, last_move.to)
            captured = captured.with_pieces(last_move.piece_color, tuple(stash))

    return replace(
        state,
        board=board,
        current_turn=last_move.piece_color,
        captured=captured,
        winner=None,
        is_game_over=False,
        pending_double_move=None,
        is_bonus_move_phase=False,
        opponent_cannot_capture=False,
        next_capture_grants_extra_move=None,
    )

"""
Immutable state transitions.

Every function takes a complete GameState and returns a complete new one built
with ``model_copy``; the input is never touched. Each transition clears
``checksum`` so the codec recomputes it on the next serialization.

Caller-contract violations (e.g. selecting a board while a different round is
expected) are not validated here. The one guard kept is log monotonicity: a
complete round is never replaced by a less-resolved entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from spaces.logic.derive import derive_current_round, is_round_complete, sum_points, winner_from_points
from spaces.logic.enums import Side, Winner
from spaces.logic.settings import DEFAULT_RULES
from spaces.logic.state import GameState
from spaces.logic.types import RoundEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spaces.logic.enums import GameMode
    from spaces.logic.phase import GamePhase
    from spaces.logic.settings import GameRules
    from spaces.logic.types import Board, Deck, Opponent, UserStats

logger = structlog.get_logger()


def _replace(state: GameState, **updates: object) -> GameState:
    return state.model_copy(update={**updates, "checksum": ""})


def apply_round_stats(stats: UserStats, winner: Winner) -> UserStats:
    """Count one finished game into the user's aggregate stats."""
    return stats.model_copy(
        update={
            "total_games": stats.total_games + 1,
            "wins": stats.wins + (winner is Winner.PLAYER),
            "losses": stats.losses + (winner is Winner.OPPONENT),
            "ties": stats.ties + (winner is Winner.TIE),
        },
    )


def set_phase_override(state: GameState, phase: GamePhase) -> GameState:
    """Show a UI-only phase that the log cannot express."""
    return _replace(state, phase_override=phase)


def clear_phase_override(state: GameState) -> GameState:
    return _replace(state, phase_override=None)


def set_game_mode(state: GameState, mode: GameMode) -> GameState:
    return _replace(state, game_mode=mode, phase_override=None)


def set_board_size(state: GameState, size: int) -> GameState:
    return _replace(state, board_size=size)


def select_opponent(state: GameState, opponent: Opponent, mode: GameMode) -> GameState:
    return _replace(state, opponent=opponent, game_mode=mode, phase_override=None)


def select_deck(state: GameState, side: Side, deck: Deck) -> GameState:
    field_name = "player_selected_deck" if side is Side.PLAYER else "opponent_selected_deck"
    return _replace(state, **{field_name: deck})


def select_board(state: GameState, side: Side, board: Board) -> GameState:
    """
    Record ``side``'s board for the round in progress.

    Creates a partial entry at the next slot when the tail is complete (or the
    log is empty), otherwise updates the in-progress entry in place. Selecting
    the first board of round N+1 is what moves the game past round N's results.
    """
    current = derive_current_round(state)
    history = list(state.round_history)
    index = current - 1

    if index < len(history):
        history[index] = history[index].with_board(side, board)
    else:
        history.append(RoundEntry(round=current).with_board(side, board))

    logger.debug("board selected", round=current, side=side, board_id=board.id)
    return _replace(state, round_history=tuple(history), phase_override=None)


def select_player_board(state: GameState, board: Board) -> GameState:
    return select_board(state, Side.PLAYER, board)


def select_opponent_board(state: GameState, board: Board) -> GameState:
    return select_board(state, Side.OPPONENT, board)


def _is_finished(history: Sequence[RoundEntry], rules: GameRules) -> bool:
    return sum(1 for entry in history if is_round_complete(entry)) >= rules.total_rounds


def complete_round(state: GameState, result: RoundEntry, rules: GameRules = DEFAULT_RULES) -> GameState:
    """
    Store a resolved round.

    Replaces the entry at ``result.round`` wholesale when it exists (reconciling
    a round this tab only saw partially), otherwise appends. When this write is
    the one that completes the final round, the user's stats are updated in the
    same transition because derivation jumps straight to game-over. Re-applying
    a result after game over leaves stats alone.
    """
    history = list(state.round_history)
    index = result.round - 1

    if index < len(history):
        if is_round_complete(history[index]) and not is_round_complete(result):
            logger.warning("ignoring unresolved result for completed round", round=result.round)
            return state
        history[index] = result
    else:
        history.append(result)

    user = state.user
    # counted once: only the write that finishes the game updates stats
    if not _is_finished(state.round_history, rules) and _is_finished(history, rules):
        winner = winner_from_points(sum_points(history, Side.PLAYER), sum_points(history, Side.OPPONENT))
        user = user.model_copy(update={"stats": apply_round_stats(user.stats, winner)})
        logger.info("game finished", winner=winner, rounds=len(history))

    logger.debug("round completed", round=result.round, winner=result.winner)
    return _replace(state, round_history=tuple(history), user=user, phase_override=None)


def complete_all_rounds(state: GameState, results: Sequence[RoundEntry]) -> GameState:
    """Deck mode: replace the whole log with every resolved round and count the game."""
    winner = winner_from_points(sum_points(results, Side.PLAYER), sum_points(results, Side.OPPONENT))
    user = state.user.model_copy(update={"stats": apply_round_stats(state.user.stats, winner)})
    logger.info("deck game finished", winner=winner, rounds=len(results))
    return _replace(state, round_history=tuple(results), user=user)


def reset_game(state: GameState) -> GameState:
    """Start over, keeping only the user's profile."""
    return GameState(user=state.user)


def load_state(_state: GameState, new_state: GameState) -> GameState:
    """Adopt a state parsed from a link, wholesale."""
    return new_state

"""
Pure derivations over the round log.

Everything the UI needs besides the raw log (current round, scores, pending
board selections, the phase) is recomputed from ``round_history`` on every
read. Nothing here caches, counts, or mutates: calling any function twice on
the same state gives the same answer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from spaces.logic.enums import GameMode, Side, Winner
from spaces.logic.phase import (
    AllRoundsResultsPhase,
    BoardSelectionPhase,
    DeckSelectionPhase,
    GameModeSelectionPhase,
    GameOverPhase,
    OpponentSelectionPhase,
    RoundResultsPhase,
    RoundReviewPhase,
    UserSetupPhase,
    WaitingForOpponentPhase,
)
from spaces.logic.settings import DEFAULT_RULES

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spaces.logic.phase import GamePhase
    from spaces.logic.settings import GameRules
    from spaces.logic.state import GameState
    from spaces.logic.types import Board, RoundEntry


def is_round_complete(entry: RoundEntry | None) -> bool:
    """Both boards chosen and the round resolved. Missing entries are not complete."""
    if entry is None:
        return False
    return entry.player_board is not None and entry.opponent_board is not None and entry.winner is not None


def is_round_partial(entry: RoundEntry | None) -> bool:
    """At least one board chosen but not yet complete."""
    if entry is None:
        return False
    return bool(entry.boards) and not is_round_complete(entry)


def get_round_entry(history: Sequence[RoundEntry], round_number: int) -> RoundEntry | None:
    """Entry for a 1-based round number, or None when the log has no such slot."""
    if round_number < 1 or round_number > len(history):
        return None
    return history[round_number - 1]


def get_board_for_round(history: Sequence[RoundEntry], round_number: int, side: Side) -> Board | None:
    entry = get_round_entry(history, round_number)
    return entry.board_for(side) if entry is not None else None


def derive_current_round(state: GameState) -> int:
    """
    Round a new action should target.

    An empty log targets round 1. A complete tail entry targets the next,
    not-yet-created slot; otherwise the tail entry is the round in progress.
    """
    n = len(state.round_history)
    if n == 0:
        return 1
    if is_round_complete(state.round_history[n - 1]):
        return n + 1
    return n


def sum_points(history: Sequence[RoundEntry], side: Side) -> int:
    """Fold one side's points over the log; absent points count as 0."""
    if side is Side.PLAYER:
        return sum(entry.player_points or 0 for entry in history)
    return sum(entry.opponent_points or 0 for entry in history)


def derive_player_score(state: GameState) -> int:
    return sum_points(state.round_history, Side.PLAYER)


def derive_opponent_score(state: GameState) -> int:
    return sum_points(state.round_history, Side.OPPONENT)


def winner_from_points(player_points: int, opponent_points: int) -> Winner:
    if player_points > opponent_points:
        return Winner.PLAYER
    if opponent_points > player_points:
        return Winner.OPPONENT
    return Winner.TIE


def derive_winner(state: GameState) -> Winner:
    return winner_from_points(derive_player_score(state), derive_opponent_score(state))


def _pending_board(state: GameState, side: Side) -> Board | None:
    entry = get_round_entry(state.round_history, derive_current_round(state))
    if entry is None or is_round_complete(entry):
        return None
    return entry.board_for(side)


def derive_player_selected_board(state: GameState) -> Board | None:
    """Player's board for the round in progress, if it is still pending."""
    return _pending_board(state, Side.PLAYER)


def derive_opponent_selected_board(state: GameState) -> Board | None:
    """Opponent's board for the round in progress, if it is still pending."""
    return _pending_board(state, Side.OPPONENT)


def derive_who_moves_first(round_number: int, user_id: str, game_creator_id: str | None) -> Side:
    """
    Turn alternation convention: the creator opens odd rounds, the other player even ones.

    Without a recorded creator the local player opens.
    """
    if not game_creator_id:
        return Side.PLAYER
    is_creator = user_id == game_creator_id
    creator_opens = round_number % 2 == 1
    return Side.PLAYER if is_creator == creator_opens else Side.OPPONENT


def derive_phase(state: GameState, rules: GameRules = DEFAULT_RULES) -> GamePhase:
    """
    Map the full state to exactly one phase.

    Priority: explicit override, then setup gaps (profile, mode, opponent),
    then deck or round-by-round progress read from the log.
    """
    if state.phase_override is not None:
        return state.phase_override

    if not state.user.name:
        return UserSetupPhase()

    if state.game_mode is None:
        return GameModeSelectionPhase()

    if state.opponent is None:
        return OpponentSelectionPhase(game_mode=state.game_mode)

    if state.game_mode is GameMode.DECK:
        return _derive_deck_phase(state)

    return _derive_round_phase(state, rules)


def _derive_deck_phase(state: GameState) -> GamePhase:
    # deck games resolve every round at once, so there is no in-between phase
    if state.player_selected_deck is None or state.opponent_selected_deck is None:
        return DeckSelectionPhase()
    completed = tuple(entry for entry in state.round_history if is_round_complete(entry))
    return AllRoundsResultsPhase(results=completed)


def _derive_round_phase(state: GameState, rules: GameRules) -> GamePhase:
    history = state.round_history
    current = derive_current_round(state)

    if current > rules.total_rounds:
        return GameOverPhase(winner=derive_winner(state))

    entry = get_round_entry(history, current)
    if entry is None:
        previous = get_round_entry(history, current - 1)
        if previous is not None:
            # tail is complete and nobody has picked for the next round yet
            return RoundResultsPhase(round=previous.round, result=previous)
        return BoardSelectionPhase(round=current)

    has_player = entry.player_board is not None
    has_opponent = entry.opponent_board is not None

    if has_player and not has_opponent:
        return WaitingForOpponentPhase(round=current)
    if has_player or has_opponent:
        # opponent picked first, or both picked and resolution is still pending
        return BoardSelectionPhase(round=current)
    if any(is_round_complete(e) for e in history[: current - 1]):
        return RoundReviewPhase(round=current)
    return BoardSelectionPhase(round=current)

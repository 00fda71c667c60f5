"""Hold one tab's GameState and expose derived views alongside the mutators."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from spaces.logic import actions
from spaces.logic.derive import (
    derive_current_round,
    derive_opponent_score,
    derive_opponent_selected_board,
    derive_phase,
    derive_player_score,
    derive_player_selected_board,
)
from spaces.logic.settings import DEFAULT_RULES

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spaces.logic.enums import GameMode, Side
    from spaces.logic.phase import GamePhase
    from spaces.logic.settings import GameRules
    from spaces.logic.state import GameState
    from spaces.logic.types import Board, Deck, Opponent, RoundEntry

StateListener = Callable[["GameState"], None]


class GameStateStore:
    """
    Single owner of the in-memory GameState for one tab.

    Every mutator swaps in a complete new state produced by ``spaces.logic.actions``
    and notifies listeners (typically the sync controller's ``update_url``).
    Derived values are properties, recomputed on each access.
    """

    def __init__(
        self,
        initial_state: GameState,
        rules: GameRules = DEFAULT_RULES,
        on_change: StateListener | None = None,
    ) -> None:
        self._state = initial_state
        self._rules = rules
        self._on_change = on_change

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def phase(self) -> GamePhase:
        return derive_phase(self._state, self._rules)

    @property
    def current_round(self) -> int:
        return derive_current_round(self._state)

    @property
    def player_score(self) -> int:
        return derive_player_score(self._state)

    @property
    def opponent_score(self) -> int:
        return derive_opponent_score(self._state)

    @property
    def player_selected_board(self) -> Board | None:
        return derive_player_selected_board(self._state)

    @property
    def opponent_selected_board(self) -> Board | None:
        return derive_opponent_selected_board(self._state)

    def _commit(self, new_state: GameState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)

    def set_phase(self, phase: GamePhase) -> None:
        self._commit(actions.set_phase_override(self._state, phase))

    def clear_phase_override(self) -> None:
        self._commit(actions.clear_phase_override(self._state))

    def set_game_mode(self, mode: GameMode) -> None:
        self._commit(actions.set_game_mode(self._state, mode))

    def set_board_size(self, size: int) -> None:
        self._commit(actions.set_board_size(self._state, size))

    def select_opponent(self, opponent: Opponent, mode: GameMode) -> None:
        self._commit(actions.select_opponent(self._state, opponent, mode))

    def select_board(self, side: Side, board: Board) -> None:
        self._commit(actions.select_board(self._state, side, board))

    def select_deck(self, side: Side, deck: Deck) -> None:
        self._commit(actions.select_deck(self._state, side, deck))

    def complete_round(self, result: RoundEntry) -> None:
        self._commit(actions.complete_round(self._state, result, self._rules))

    def complete_all_rounds(self, results: Sequence[RoundEntry]) -> None:
        self._commit(actions.complete_all_rounds(self._state, results))

    def reset_game(self) -> None:
        self._commit(actions.reset_game(self._state))

    def load_state(self, new_state: GameState) -> None:
        """Adopt a parsed link without echoing it back to listeners."""
        self._state = actions.load_state(self._state, new_state)

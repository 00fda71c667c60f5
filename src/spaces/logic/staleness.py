"""Reject links that replay a round the local log already shows as resolved.

Two tabs stay consistent only by convention: a player forwards a link when it
is their move. A resent or outdated link can still arrive, claiming a round is
pending when this tab has already resolved it. Such a link is not an error; it
ends in a dedicated notice with one way out, and the log is left untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from spaces.logic.actions import select_board
from spaces.logic.derive import derive_current_round, get_round_entry, is_round_complete
from spaces.logic.enums import RecoveryAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spaces.logic.enums import Side
    from spaces.logic.state import GameState
    from spaces.logic.types import Board, RoundEntry

logger = structlog.get_logger()

UNKNOWN_OPPONENT_NAME = "your opponent"


class CompletedRoundNotice(BaseModel):
    """Terminal outcome for a replayed link: who it came from and which round."""

    model_config = ConfigDict(frozen=True)

    opponent_name: str
    round: int
    recovery: RecoveryAction = RecoveryAction.GO_HOME

    @property
    def message(self) -> str:
        return f"You've already completed round {self.round} with {self.opponent_name}."


def is_round_already_completed(history: Sequence[RoundEntry], round_number: int) -> bool:
    """True when the log holds a complete entry for ``round_number``."""
    return is_round_complete(get_round_entry(history, round_number))


def check_incoming_round(state: GameState, incoming_round: int) -> CompletedRoundNotice | None:
    """Return a notice when a link for ``incoming_round`` would replay a resolved round."""
    if not is_round_already_completed(state.round_history, incoming_round):
        return None
    opponent_name = state.opponent.name if state.opponent is not None else UNKNOWN_OPPONENT_NAME
    logger.info("rejected replayed round link", round=incoming_round, opponent=opponent_name)
    return CompletedRoundNotice(opponent_name=opponent_name, round=incoming_round)


def check_incoming_state(local: GameState, incoming: GameState) -> CompletedRoundNotice | None:
    """
    Screen a whole state parsed from a link before it replaces the local one.

    The link is a replay when the round it would target next is already
    resolved locally, whether it carries a pending pick or an older round's
    results. A link for a different game never is.
    """
    if local.game_id and incoming.game_id and local.game_id != incoming.game_id:
        return None
    return check_incoming_round(local, derive_current_round(incoming))


def apply_incoming_board(
    state: GameState,
    incoming_round: int,
    side: Side,
    board: Board,
) -> tuple[GameState, CompletedRoundNotice | None]:
    """
    Apply a board carried by an incoming link unless the round is already resolved.

    On a replay the original state comes back unchanged together with the notice.
    """
    notice = check_incoming_round(state, incoming_round)
    if notice is not None:
        return state, notice
    return select_board(state, side, board), None

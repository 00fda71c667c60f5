"""
GameState - the single value serialized into a share link.

The round log (``round_history``) is the source of truth. Phase, current round,
scores and pending selections are never stored; see ``spaces.logic.derive``.
"""

from __future__ import annotations

import time
import uuid
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from spaces.logic.enums import GameMode
from spaces.logic.phase import GamePhase  # noqa: TC001
from spaces.logic.settings import DEFAULT_RULES
from spaces.logic.types import Deck, Opponent, RoundEntry, UserProfile


class GameState(BaseModel):
    """
    Complete game state. Never patched in place; every action builds a new one.

    Construction validates the structural invariants a decoded link must satisfy:
    the log is contiguous from round 1, and every board in the log matches the
    game's board size.
    """

    model_config = ConfigDict(frozen=True)

    user: UserProfile
    opponent: Opponent | None = None
    game_id: str | None = None
    game_creator_id: str | None = None
    game_mode: GameMode | None = None
    board_size: int | None = Field(default=None, ge=DEFAULT_RULES.min_board_size, le=DEFAULT_RULES.max_board_size)
    player_selected_deck: Deck | None = None
    opponent_selected_deck: Deck | None = None
    round_history: tuple[RoundEntry, ...] = ()
    phase_override: GamePhase | None = None
    last_discord_notification_time: str | None = None
    checksum: str = ""

    @model_validator(mode="after")
    def _validate_round_log(self) -> Self:
        if len(self.round_history) > DEFAULT_RULES.max_rounds:
            raise ValueError(f"round log holds {len(self.round_history)} entries (max {DEFAULT_RULES.max_rounds})")
        for index, entry in enumerate(self.round_history):
            if entry.round != index + 1:
                raise ValueError(f"round log entry {index} is numbered {entry.round}, expected {index + 1}")
        return self

    @model_validator(mode="after")
    def _validate_board_sizes(self) -> Self:
        boards = [board for entry in self.round_history for board in entry.boards]
        expected = self.board_size
        if expected is None and boards:
            expected = boards[0].board_size  # fixed by the first board chosen
        for board in boards:
            if board.board_size != expected:
                raise ValueError(f"board {board.id} is {board.board_size}x{board.board_size}, game is {expected}")
        for deck in (self.player_selected_deck, self.opponent_selected_deck):
            if deck is not None and len(deck.boards) != DEFAULT_RULES.deck_size:
                raise ValueError(f"deck {deck.id} holds {len(deck.boards)} boards, expected {DEFAULT_RULES.deck_size}")
        return self


def new_user_profile(name: str = "", *, user_id: str | None = None) -> UserProfile:
    """Create a profile with zeroed stats."""
    return UserProfile(
        id=user_id or str(uuid.uuid4()),
        name=name,
        created_at=int(time.time() * 1000),
    )


def create_initial_state(user: UserProfile) -> GameState:
    """Fresh state for a tab that opened without a link: empty log, nothing selected."""
    return GameState(user=user)

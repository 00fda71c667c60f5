"""
GamePhase tagged union.

A phase is normally computed on demand by ``derive_phase``; the only place one
is stored is ``GameState.phase_override`` for screens the round log cannot
express (profile setup, deck management, tutorial steps, final sharing).
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from spaces.logic.enums import GameMode, PhaseType, Winner
from spaces.logic.types import RoundEntry

_ROUND_FIELD = Field(ge=1)


class _Phase(BaseModel):
    model_config = ConfigDict(frozen=True)


class UserSetupPhase(_Phase):
    type: Literal[PhaseType.USER_SETUP] = PhaseType.USER_SETUP


class BoardManagementPhase(_Phase):
    type: Literal[PhaseType.BOARD_MANAGEMENT] = PhaseType.BOARD_MANAGEMENT


class GameModeSelectionPhase(_Phase):
    type: Literal[PhaseType.GAME_MODE_SELECTION] = PhaseType.GAME_MODE_SELECTION


class BoardSizeSelectionPhase(_Phase):
    type: Literal[PhaseType.BOARD_SIZE_SELECTION] = PhaseType.BOARD_SIZE_SELECTION
    game_mode: GameMode


class OpponentSelectionPhase(_Phase):
    type: Literal[PhaseType.OPPONENT_SELECTION] = PhaseType.OPPONENT_SELECTION
    game_mode: GameMode


class DeckManagementPhase(_Phase):
    type: Literal[PhaseType.DECK_MANAGEMENT] = PhaseType.DECK_MANAGEMENT


class DeckSelectionPhase(_Phase):
    type: Literal[PhaseType.DECK_SELECTION] = PhaseType.DECK_SELECTION


class BoardSelectionPhase(_Phase):
    type: Literal[PhaseType.BOARD_SELECTION] = PhaseType.BOARD_SELECTION
    round: int = _ROUND_FIELD


class WaitingForOpponentPhase(_Phase):
    type: Literal[PhaseType.WAITING_FOR_OPPONENT] = PhaseType.WAITING_FOR_OPPONENT
    round: int = _ROUND_FIELD


class ShareChallengePhase(_Phase):
    type: Literal[PhaseType.SHARE_CHALLENGE] = PhaseType.SHARE_CHALLENGE
    round: int = _ROUND_FIELD


class RoundReviewPhase(_Phase):
    type: Literal[PhaseType.ROUND_REVIEW] = PhaseType.ROUND_REVIEW
    round: int = _ROUND_FIELD


class RoundResultsPhase(_Phase):
    type: Literal[PhaseType.ROUND_RESULTS] = PhaseType.ROUND_RESULTS
    round: int = _ROUND_FIELD
    result: RoundEntry


class AllRoundsResultsPhase(_Phase):
    type: Literal[PhaseType.ALL_ROUNDS_RESULTS] = PhaseType.ALL_ROUNDS_RESULTS
    results: tuple[RoundEntry, ...]


class GameOverPhase(_Phase):
    type: Literal[PhaseType.GAME_OVER] = PhaseType.GAME_OVER
    winner: Winner


class ShareFinalResultsPhase(_Phase):
    type: Literal[PhaseType.SHARE_FINAL_RESULTS] = PhaseType.SHARE_FINAL_RESULTS


GamePhase = Annotated[
    UserSetupPhase
    | BoardManagementPhase
    | GameModeSelectionPhase
    | BoardSizeSelectionPhase
    | OpponentSelectionPhase
    | DeckManagementPhase
    | DeckSelectionPhase
    | BoardSelectionPhase
    | WaitingForOpponentPhase
    | ShareChallengePhase
    | RoundReviewPhase
    | RoundResultsPhase
    | AllRoundsResultsPhase
    | GameOverPhase
    | ShareFinalResultsPhase,
    Field(discriminator="type"),
]

_phase_adapter: TypeAdapter[GamePhase] = TypeAdapter(GamePhase)


def parse_phase(data: object) -> GamePhase:
    """Validate a raw dict (e.g. from a decoded link) into a typed GamePhase."""
    return _phase_adapter.validate_python(data)

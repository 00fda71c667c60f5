"""
String enum definitions for game concepts carried in the link.
"""

from enum import Enum


class Side(str, Enum):
    """Which participant a board or score belongs to, from the local tab's view."""

    PLAYER = "player"
    OPPONENT = "opponent"


class Winner(str, Enum):
    """Resolved outcome of a round or a whole game."""

    PLAYER = "player"
    OPPONENT = "opponent"
    TIE = "tie"


class RoundOutcome(str, Enum):
    """Round outcome phrased from the local player's perspective."""

    WON = "won"
    LOST = "lost"
    TIE = "tie"


class GameMode(str, Enum):
    """How boards are committed over the course of a game."""

    ROUND_BY_ROUND = "round-by-round"
    DECK = "deck"


class OpponentType(str, Enum):
    HUMAN = "human"
    CPU = "cpu"
    REMOTE_CPU = "remote-cpu"
    AI_AGENT = "ai-agent"


class CellContent(str, Enum):
    EMPTY = "empty"
    PIECE = "piece"
    TRAP = "trap"
    FINAL = "final"  # goal reached, only appears in move sequences


class MoveType(str, Enum):
    PIECE = "piece"
    TRAP = "trap"
    FINAL = "final"


class PhaseType(str, Enum):
    """Discriminator values for GamePhase variants."""

    USER_SETUP = "user-setup"
    BOARD_MANAGEMENT = "board-management"
    GAME_MODE_SELECTION = "game-mode-selection"
    BOARD_SIZE_SELECTION = "board-size-selection"
    OPPONENT_SELECTION = "opponent-selection"
    DECK_MANAGEMENT = "deck-management"
    DECK_SELECTION = "deck-selection"
    BOARD_SELECTION = "board-selection"
    WAITING_FOR_OPPONENT = "waiting-for-opponent"
    SHARE_CHALLENGE = "share-challenge"
    ROUND_REVIEW = "round-review"
    ROUND_RESULTS = "round-results"
    ALL_ROUNDS_RESULTS = "all-rounds-results"
    GAME_OVER = "game-over"
    SHARE_FINAL_RESULTS = "share-final-results"


class RecoveryAction(str, Enum):
    """Escape actions offered by terminal notices."""

    GO_HOME = "go_home"

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from spaces.logic.enums import CellContent, GameMode, MoveType, OpponentType, Winner
from spaces.logic.settings import DEFAULT_RULES
from spaces.logic.state import GameState
from spaces.logic.types import Board, BoardMove, Deck, Opponent, Position, RoundEntry, UserProfile
from spaces.session.mock import MockAddressBar

if TYPE_CHECKING:
    from collections.abc import Sequence

    from spaces.logic.phase import GamePhase

TEST_USER_ID = "user-1"
TEST_OPPONENT_ID = "opponent-1"
TEST_GAME_ID = "game-1"


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_board(board_id: str = "board-1", *, board_size: int = 2, name: str | None = None) -> Board:
    """Create a board with a single piece in the bottom-left corner reaching the goal."""
    grid = [[CellContent.EMPTY] * board_size for _ in range(board_size)]
    grid[board_size - 1][0] = CellContent.PIECE
    return Board(
        id=board_id,
        name=name if name is not None else f"Board {board_id}",
        board_size=board_size,
        grid=tuple(tuple(row) for row in grid),
        sequence=(
            BoardMove(position=Position(row=board_size - 1, col=0), type=MoveType.PIECE, order=1),
            BoardMove(position=Position(row=-1, col=0), type=MoveType.FINAL, order=2),
        ),
        created_at=1_700_000_000_000,
    )


def create_deck(deck_id: str = "deck-1", *, board_size: int = 2) -> Deck:
    return Deck(
        id=deck_id,
        name=f"Deck {deck_id}",
        boards=tuple(create_board(f"{deck_id}-{i}", board_size=board_size) for i in range(DEFAULT_RULES.deck_size)),
        created_at=1_700_000_000_000,
    )


def create_user(name: str = "Alice", *, user_id: str = TEST_USER_ID) -> UserProfile:
    return UserProfile(id=user_id, name=name, created_at=1_700_000_000_000)


def create_opponent(
    name: str = "Bob",
    *,
    opponent_id: str = TEST_OPPONENT_ID,
    opponent_type: OpponentType = OpponentType.HUMAN,
) -> Opponent:
    return Opponent(id=opponent_id, name=name, type=opponent_type)


def create_round_entry(
    round_number: int,
    *,
    player_board: Board | None = None,
    opponent_board: Board | None = None,
    winner: Winner | None = None,
    player_points: int | None = None,
    opponent_points: int | None = None,
) -> RoundEntry:
    return RoundEntry(
        round=round_number,
        player_board=player_board,
        opponent_board=opponent_board,
        winner=winner,
        player_points=player_points,
        opponent_points=opponent_points,
    )


def create_complete_round(
    round_number: int,
    *,
    winner: Winner = Winner.PLAYER,
    player_points: int = 1,
    opponent_points: int = 0,
) -> RoundEntry:
    """Create a resolved round with both boards set."""
    return create_round_entry(
        round_number,
        player_board=create_board(f"p{round_number}"),
        opponent_board=create_board(f"o{round_number}"),
        winner=winner,
        player_points=player_points,
        opponent_points=opponent_points,
    )


def create_game_state(
    *,
    user: UserProfile | None = None,
    opponent: Opponent | None = None,
    game_mode: GameMode | None = GameMode.ROUND_BY_ROUND,
    board_size: int | None = 2,
    round_history: Sequence[RoundEntry] = (),
    phase_override: GamePhase | None = None,
    game_id: str | None = TEST_GAME_ID,
    game_creator_id: str | None = TEST_USER_ID,
    with_opponent: bool = True,
) -> GameState:
    """Create a round-by-round game past setup, ready for board selection."""
    if opponent is None and with_opponent:
        opponent = create_opponent()
    return GameState(
        user=user if user is not None else create_user(),
        opponent=opponent,
        game_id=game_id,
        game_creator_id=game_creator_id,
        game_mode=game_mode,
        board_size=board_size,
        round_history=tuple(round_history),
        phase_override=phase_override,
    )


def create_completed_rounds(count: int) -> tuple[RoundEntry, ...]:
    return tuple(create_complete_round(i) for i in range(1, count + 1))


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def address_bar() -> MockAddressBar:
    return MockAddressBar()

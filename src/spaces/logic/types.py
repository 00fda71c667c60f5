"""
Pydantic models for the values that travel inside a share link.

Boards and decks are opaque to the protocol: only their identity and
``board_size`` matter here. Grid contents and move legality belong to the
board editor and validator.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from spaces.logic.enums import CellContent, MoveType, OpponentType, RoundOutcome, Side, Winner

_NAME_FIELD = Field(min_length=1, max_length=50)


class Position(BaseModel):
    """Grid coordinate. Row -1 marks a move off the top edge (goal reached)."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=-1)
    col: int = Field(ge=0)


ORIGIN = Position(row=0, col=0)


class BoardMove(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: Position
    type: MoveType
    order: int = Field(ge=1)


class Board(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = _NAME_FIELD
    board_size: int = Field(ge=2, le=99)
    grid: tuple[tuple[CellContent, ...], ...]
    sequence: tuple[BoardMove, ...] = Field(min_length=1)
    thumbnail: str = ""
    created_at: int = Field(ge=0)

    @model_validator(mode="after")
    def _validate_grid_shape(self) -> Self:
        if len(self.grid) != self.board_size or any(len(row) != self.board_size for row in self.grid):
            raise ValueError(f"grid must be {self.board_size}x{self.board_size}")
        return self


class Deck(BaseModel):
    """Ordered boards pre-committed for every round of a deck game."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = _NAME_FIELD
    boards: tuple[Board, ...] = Field(min_length=1)
    created_at: int = Field(ge=0)


class UserStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_games: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    ties: int = Field(default=0, ge=0)


class UserProfile(BaseModel):
    """Local player identity. An empty name means profile setup is not done."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(default="", max_length=50)
    created_at: int = Field(ge=0)
    stats: UserStats = UserStats()
    greeting: str | None = Field(default=None, max_length=200)


class Opponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = _NAME_FIELD
    type: OpponentType
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    has_completed_game: bool | None = None
    discord_id: str | None = None
    discord_username: str | None = Field(default=None, max_length=32)


class SimulationDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_moves: int = Field(ge=0)
    opponent_moves: int = Field(ge=0)
    player_hit_trap: bool
    opponent_hit_trap: bool


class RoundEntry(BaseModel):
    """
    One slot of the round log.

    Partial while either board is unset. Complete once both boards are set and
    a winner has been resolved; points may be absent and then count as 0.
    """

    model_config = ConfigDict(frozen=True)

    round: int = Field(ge=1)
    player_board: Board | None = None
    opponent_board: Board | None = None
    winner: Winner | None = None
    player_points: int | None = Field(default=None, ge=0)
    opponent_points: int | None = Field(default=None, ge=0)
    player_final_position: Position = ORIGIN
    opponent_final_position: Position = ORIGIN
    player_outcome: RoundOutcome | None = None
    simulation_details: SimulationDetails | None = None

    @model_validator(mode="after")
    def _validate_resolution_needs_both_boards(self) -> Self:
        resolved = self.winner is not None or self.player_points is not None or self.opponent_points is not None
        if resolved and (self.player_board is None or self.opponent_board is None):
            raise ValueError(f"round {self.round} carries a resolution but is missing a board")
        return self

    def board_for(self, side: Side) -> Board | None:
        return self.player_board if side is Side.PLAYER else self.opponent_board

    def with_board(self, side: Side, board: Board) -> "RoundEntry":
        """Return a copy with ``side``'s board set, leaving resolution fields alone."""
        field_name = "player_board" if side is Side.PLAYER else "opponent_board"
        return self.model_copy(update={field_name: board})

    @property
    def boards(self) -> tuple[Board, ...]:
        return tuple(b for b in (self.player_board, self.opponent_board) if b is not None)

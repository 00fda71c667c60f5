"""Game rules shared by every derivation - the fixed per-game constants."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GameRules(BaseModel):
    """
    Fixed constants of a game.

    Both clients must agree on these values; they are not carried in the link,
    so changing a default is a protocol change.
    """

    model_config = ConfigDict(frozen=True)

    total_rounds: int = Field(default=5, ge=1)  # round-by-round mode
    deck_size: int = Field(default=10, ge=1)  # boards per deck, rounds per deck game
    default_board_size: int = 2
    min_board_size: int = Field(default=2, ge=2)
    max_board_size: int = 99

    @model_validator(mode="after")
    def _validate_board_size_bounds(self) -> "GameRules":
        if self.max_board_size < self.min_board_size:
            raise ValueError("max_board_size must be >= min_board_size")
        if not self.min_board_size <= self.default_board_size <= self.max_board_size:
            raise ValueError("default_board_size must lie within the board size bounds")
        return self

    @property
    def max_rounds(self) -> int:
        """Largest round number any mode can produce."""
        return max(self.total_rounds, self.deck_size)

    def is_valid_board_size(self, size: int) -> bool:
        return self.min_board_size <= size <= self.max_board_size


DEFAULT_RULES = GameRules()

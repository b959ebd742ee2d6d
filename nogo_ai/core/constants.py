"""
Constants for the NoGo game.

This module defines the game constants used throughout the NoGo implementation,
including players, cell contents, placement results and board dimensions.
"""
from enum import Enum, IntEnum
from typing import Dict, Final
import math


class Player(IntEnum):
    """
    The two sides of the game.

    BLACK always moves first. The integer values double as the cell
    contents stored on the board.
    """
    BLACK = 1
    WHITE = 2

    @property
    def opponent(self) -> 'Player':
        """The other side."""
        return Player.WHITE if self is Player.BLACK else Player.BLACK

    @classmethod
    def from_name(cls, name: str) -> 'Player':
        """
        Parse a role name such as "black" or "white".

        Args:
            name: Case-insensitive role name

        Returns:
            Matching player

        Raises:
            ValueError: If the name is not a known role
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"invalid role: {name}") from None


class PlaceResult(Enum):
    """Outcome of trying to place a stone."""
    LEGAL = "legal"
    ILLEGAL_BOUNDS = "out of bounds"
    ILLEGAL_OCCUPIED = "occupied"
    ILLEGAL_SUICIDE = "suicide"
    ILLEGAL_CAPTURE = "capture"
    ILLEGAL_TURN = "wrong player"

    @property
    def is_legal(self) -> bool:
        return self is PlaceResult.LEGAL


# Cell contents
EMPTY: Final[int] = 0

# Standard NoGo board is 9x9
BOARD_SIZE: Final[int] = 9
MIN_BOARD_SIZE: Final[int] = 1
MAX_BOARD_SIZE: Final[int] = 19

# Column letters skip "I" as on a Go board
COLUMN_LETTERS: Final[str] = "ABCDEFGHJKLMNOPQRST"

# Text diagram symbols
STONE_SYMBOLS: Final[Dict[int, str]] = {
    EMPTY: ".",
    Player.BLACK: "X",
    Player.WHITE: "O",
}

# AI settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 200
DEFAULT_MCTS_EXPLORATION: Final[float] = math.sqrt(2)

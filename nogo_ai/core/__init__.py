"""
NoGo AI Core Package

This package contains the core game logic for NoGo, including:
- Board representation and placement rules
- Moves and coordinate helpers
- The rules interface used by the search engine
- Game flow management
- Constants and enums

All core components can be imported directly from this package.
"""

# Constants
from nogo_ai.core.constants import (
    Player, PlaceResult, EMPTY, BOARD_SIZE
)

# Board
from nogo_ai.core.board import (
    Board, index_to_coordinate, coordinate_to_index
)

# Actions
from nogo_ai.core.actions import Move

# Rules
from nogo_ai.core.rules import RulesOracle, NoGoRules

# Game
from nogo_ai.core.game import Game, GameResult, IllegalMoveError

__all__ = [
    # Constants
    'Player', 'PlaceResult', 'EMPTY', 'BOARD_SIZE',

    # Board
    'Board', 'index_to_coordinate', 'coordinate_to_index',

    # Actions
    'Move',

    # Rules
    'RulesOracle', 'NoGoRules',

    # Game
    'Game', 'GameResult', 'IllegalMoveError',
]

"""
NoGo AI - A Monte Carlo Tree Search engine for the board game NoGo.

This package provides an implementation of the NoGo rules along with
agents that choose moves by plain UCB1 tree search with random playouts.
"""

__version__ = "0.1.0"
__author__ = "NoGo AI Team"

# Make key components available at package level
from nogo_ai.core.board import Board
from nogo_ai.core.actions import Move
from nogo_ai.core.constants import Player
from nogo_ai.core.game import Game
from nogo_ai.core.rules import NoGoRules
from nogo_ai.core.constants import BOARD_SIZE, DEFAULT_MCTS_ITERATIONS

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "board_size": BOARD_SIZE,
    "mcts_iterations": DEFAULT_MCTS_ITERATIONS,
}

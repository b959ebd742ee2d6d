"""
Monte Carlo Tree Search (MCTS) implementation for NoGo.

This package provides a complete MCTS agent that plays NoGo without any
training. The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCB1 until reaching
   a node that is terminal or not yet fully expanded.
2. Expansion: Create a new child node for a legal move that has not been tried.
3. Simulation: From the new node, play uniformly random legal moves to the end of the game.
4. Backpropagation: Update the visit and win counts of every node on the path.

The move played is the most visited child of the root.
"""

from nogo_ai.mcts.node import MCTSNode
from nogo_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent, create_agent
from nogo_ai.mcts.search import (
    mcts_search,
    decide,
    run_search,
    select_path,
    expand_node,
    simulate_game,
    backpropagate,
    best_move
)
from nogo_ai.mcts.config import MCTSConfig
from nogo_ai.core.constants import DEFAULT_MCTS_EXPLORATION

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=200,           # Number of MCTS iterations per move
    exploration_weight=DEFAULT_MCTS_EXPLORATION,  # UCB1 exploration parameter
    seed=None                 # Seed from system entropy
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'RandomAgent',
    'create_agent',
    'MCTSNode',
    'MCTSConfig',
    'mcts_search',
    'decide',
    'run_search',
    'select_path',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'best_move',
    'DEFAULT_CONFIG'
]

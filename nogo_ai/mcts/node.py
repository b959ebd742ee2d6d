"""
Monte Carlo Tree Search Node for NoGo.

This module defines the MCTSNode class which represents a node in the MCTS tree.
Each node holds a position, statistics (visits, wins), and owns its child nodes.
"""
from __future__ import annotations
from typing import Any, List, Optional, Set, Tuple
import math
import random

from nogo_ai.core.constants import Player
from nogo_ai.core.rules import RulesOracle
from nogo_ai.mcts.config import MCTSConfig


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a position and tracks statistics about the
    simulations that pass through it. ``wins`` counts simulations won by
    ``player_just_moved``, the player who chose the move into this node,
    so a parent can compare its children directly.

    Children are separate objects held by reference, so the parent link of
    a node stays valid however many siblings are appended after it.
    """

    def __init__(
        self,
        state: Any,
        rules: RulesOracle,
        parent: Optional['MCTSNode'] = None,
        move: Optional[int] = None,
        config: Optional[MCTSConfig] = None,
    ):
        """
        Initialize an MCTS node.

        Args:
            state: The position this node represents
            rules: Rules oracle for the game
            parent: The parent node (None for root)
            move: The move index that led to this position (None for root)
            config: MCTS configuration parameters
        """
        self.state = state
        self.rules = rules
        self.parent = parent
        self.move = move  # Move that led to this position
        self.config = config or MCTSConfig()

        # The player credited with wins at this node
        if parent is not None:
            self.player_just_moved = rules.current_player(parent.state)
        else:
            self.player_just_moved = rules.current_player(state).opponent

        # Node statistics
        self.visits = 0
        self.wins = 0
        self.children: List[MCTSNode] = []
        self._child_moves: Set[int] = set()

        # Computed on first use; a position's legal moves never change
        self._legal_move_count: Optional[int] = None

    @property
    def player_to_move(self) -> Player:
        return self.player_just_moved.opponent

    @property
    def legal_move_count(self) -> int:
        """
        Number of legal moves at this node's position.

        Counted once by probing every candidate move, then cached.

        Returns:
            Number of legal moves
        """
        if self._legal_move_count is None:
            self._legal_move_count = self.rules.legal_move_count(self.state)
        return self._legal_move_count

    @property
    def win_rate(self) -> float:
        return self.wins / self.visits if self.visits > 0 else 0.0

    def is_terminal(self) -> bool:
        """
        Check if this node represents a terminal position.

        Returns:
            True if the player to move has no legal move
        """
        return self.legal_move_count == 0

    def is_fully_expanded(self) -> bool:
        """
        Check if every legal move from this node has a child.

        Returns:
            True if all legal moves have been expanded
        """
        return len(self.children) == self.legal_move_count

    def is_selectable(self) -> bool:
        """True if selection should continue below this node."""
        return not self.is_terminal() and self.is_fully_expanded()

    def has_child(self, move: int) -> bool:
        return move in self._child_moves

    def ucb_score(self, child: 'MCTSNode') -> float:
        """
        Calculate the UCB1 score for a child node.

        UCB1 = wins / visits + exploration_weight * sqrt(ln(parent_visits) / visits)

        Args:
            child: Child node to calculate score for

        Returns:
            UCB1 score
        """
        # Unvisited children always go first
        if child.visits == 0:
            return self.config.INFINITE_VALUE

        exploitation = child.wins / child.visits
        exploration = math.sqrt(math.log(self.visits) / child.visits)
        return exploitation + self.config.exploration_weight * exploration

    def select_child(self) -> 'MCTSNode':
        """
        Select the child with the highest UCB1 score.

        Ties go to the child that was expanded first.

        Returns:
            Selected child node
        """
        if not self.children:
            raise ValueError("Cannot select child from node with no children")

        return max(self.children, key=self.ucb_score)

    def add_child(self, move: int, state: Any) -> 'MCTSNode':
        """
        Attach a new child node.

        Args:
            move: Move index leading to the child
            state: Position after the move

        Returns:
            The new child node
        """
        if self.has_child(move):
            raise ValueError(f"Node already has a child for move {move}")

        child = MCTSNode(
            state=state,
            rules=self.rules,
            parent=self,
            move=move,
            config=self.config,
        )
        self.children.append(child)
        self._child_moves.add(move)
        return child

    def expand(self, rng: random.Random) -> 'MCTSNode':
        """
        Expand the tree by adding one new child node.

        Candidate moves are probed in a shuffled order; the first one that
        is legal and not yet a child becomes the new child.

        Args:
            rng: Random source for the probe order

        Returns:
            The new child, or this node if it is terminal or has no
            unexpanded legal move
        """
        if self.is_terminal():
            return self

        moves = list(range(self.rules.num_moves(self.state)))
        rng.shuffle(moves)
        for move in moves:
            if self.has_child(move):
                continue
            next_state = self.rules.apply(self.state, move)
            if next_state is not None:
                return self.add_child(move, next_state)

        return self

    def simulate(self, rng: random.Random) -> Tuple[Player, int]:
        """
        Run a uniformly random playout from this node to a terminal position.

        The player to move at the terminal position has no legal move and
        loses.

        Args:
            rng: Random source for the playout

        Returns:
            Tuple of (winner, number of moves played)
        """
        if self._legal_move_count == 0:
            return self.player_just_moved, 0

        state = self.state
        steps = 0
        next_state = self._random_successor(state, rng)
        while next_state is not None:
            state = next_state
            steps += 1
            next_state = self._random_successor(state, rng)

        return self.rules.current_player(state).opponent, steps

    def _random_successor(self, state: Any, rng: random.Random) -> Optional[Any]:
        """Apply the first legal move of a shuffled candidate order."""
        moves = list(range(self.rules.num_moves(state)))
        rng.shuffle(moves)
        for move in moves:
            next_state = self.rules.apply(state, move)
            if next_state is not None:
                return next_state
        return None

    def update(self, winner: Player) -> None:
        """
        Record the result of one simulation.

        Args:
            winner: Winner of the simulation
        """
        self.visits += 1
        if winner == self.player_just_moved:
            self.wins += 1

    def best_child(self) -> Optional['MCTSNode']:
        """
        Get the most visited child.

        Ties go to the child that was expanded first.

        Returns:
            Most visited child, or None if there are no children
        """
        if not self.children:
            return None
        return max(self.children, key=lambda c: c.visits)

    def __str__(self) -> str:
        return (f"MCTSNode(move={self.move}, "
                f"player={self.player_just_moved.name.lower()}, "
                f"visits={self.visits}, "
                f"wins={self.wins}, "
                f"children={len(self.children)})")

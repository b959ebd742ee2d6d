"""
Monte Carlo Tree Search Agent for NoGo.

This module provides the MCTSAgent class, a ready-to-use player that uses
Monte Carlo Tree Search to select moves, and RandomAgent, a baseline that
plays a uniformly random legal move. Agents own their random source, so a
fixed seed makes every decision reproducible.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import random
import time

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board, index_to_coordinate
from nogo_ai.core.constants import Player, DEFAULT_MCTS_EXPLORATION
from nogo_ai.core.game import Game
from nogo_ai.core.rules import NoGoRules, RulesOracle
from nogo_ai.mcts.node import MCTSNode
from nogo_ai.mcts.config import MCTSConfig
from nogo_ai.mcts.search import (
    run_search, best_move, get_action_statistics, get_principal_variation
)

# Characters that would break a tournament harness's name field
INVALID_NAME_CHARS = "[]():; "


def _validate_name(name: str) -> str:
    if not name or any(char in INVALID_NAME_CHARS for char in name):
        raise ValueError(f"invalid name: {name!r}")
    return name


def _validate_role(role: Any) -> Player:
    if isinstance(role, str):
        return Player.from_name(role)
    if isinstance(role, Player):
        return role
    raise ValueError(f"invalid role: {role!r}")


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing NoGo.

    A new search tree is built for every decision and discarded afterwards.
    The agent keeps statistics about its most recent search.
    """

    def __init__(
        self,
        role: Player,
        config: Optional[MCTSConfig] = None,
        name: str = "mcts",
        verbose: bool = False,
        rules: Optional[RulesOracle] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            role: Side the agent plays
            config: MCTS configuration parameters
            name: Name of the agent (no spaces or any of "[]():;")
            verbose: Whether to print a summary after each search
            rules: Rules oracle (NoGo rules by default)
        """
        self.role = _validate_role(role)
        self.name = _validate_name(name)
        self.config = config or MCTSConfig()
        self.verbose = verbose
        self.rules = rules or NoGoRules()

        # Seeded once; every decision draws from the same stream
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Optional[Move], Dict[str, Any]]] = []

        # Root node of the last search
        self.last_root: Optional[MCTSNode] = None

    def select_action(self, state: Board) -> Optional[Move]:
        """
        Select a move using Monte Carlo Tree Search.

        Args:
            state: Current board

        Returns:
            Selected move, or None if there is no legal move or the
            iteration budget is zero
        """
        # Check if it's actually our turn
        if self.rules.current_player(state) != self.role:
            raise ValueError(f"Not {self.role.name.lower()}'s turn")

        legal_moves = self.rules.legal_move_count(state)

        if legal_moves == 0 or self.config.iterations == 0:
            self.last_root = None
            self.last_stats = {"iterations": 0, "terminal": legal_moves == 0}
            self.action_history.append((None, self.last_stats))
            return None

        root = MCTSNode(state=state, rules=self.rules, config=self.config)

        # If there's only one legal move, no need to search
        if legal_moves == 1:
            index = root.expand(self.rng).move
            self.last_root = root
            self.last_stats = {"iterations": 0, "forced_move": True}
            move = Move(index, self.role)
            self.action_history.append((move, self.last_stats))
            return move

        start_time = time.time()
        stats = run_search(root, self.config.iterations, self.rng)
        stats["total_time"] = time.time() - start_time

        move = Move(best_move(root), self.role)

        self.last_root = root
        self.last_stats = stats
        self.action_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats, state.size)

        return move

    def _print_search_info(self, move: Move, stats: Dict[str, Any], size: int) -> None:
        """
        Print information about the search.

        Args:
            move: Selected move
            stats: Search statistics
            size: Board side length, for coordinates
        """
        print(f"\n{self.name} selected: {move.coordinate(size)}")
        print(f"Iterations: {stats['iterations']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max depth: {stats['max_depth']}")

        # Print top moves by visit count
        print("\nTop moves:")
        moves_by_visits = sorted(
            stats['action_visits'].items(),
            key=lambda x: x[1],
            reverse=True
        )
        for i, (index, visits) in enumerate(moves_by_visits[:5]):
            win_rate = stats['action_win_rates'].get(index, 0.0)
            print(f"{i+1}. {index_to_coordinate(index, size)} - {visits} visits, {win_rate:.3f} win rate")

    def get_action_callback(self) -> Callable[[Board, Player], Optional[Move]]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback function that takes a board and player and returns a move
        """
        return lambda state, player: self.select_action(state)

    def register_with_game(self, game: Game) -> None:
        """
        Register this agent with a game for its role.

        Args:
            game: Game object
        """
        game.register_agent(self.role, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[int, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, win rate) pairs representing the principal variation
        """
        if self.last_root is None:
            return []

        return get_principal_variation(self.last_root)

    def get_action_statistics(self) -> Dict[int, Dict[str, float]]:
        """
        Get statistics for all root moves from the last search.

        Returns:
            Dictionary mapping move indices to statistics
        """
        if self.last_root is None:
            return {}

        return get_action_statistics(self.last_root)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []
        self.last_root = None

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.action_history:
            history.append({
                "move": move.to_dict() if move is not None else None,
                "stats": {k: v for k, v in stats.items() if not isinstance(v, dict)}
            })

        data = {
            "agent_name": self.name,
            "role": self.role.name.lower(),
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.role.name.lower()}, {self.config.iterations} iterations)"


class RandomAgent:
    """
    Agent that plays a random legal move.

    This agent serves as a baseline for comparison with MCTS.
    """

    def __init__(self, role: Player, name: str = "random", seed: Optional[int] = None):
        self.role = _validate_role(role)
        self.name = _validate_name(name)
        self.rng = random.Random(seed)

    def select_action(self, state: Board) -> Optional[Move]:
        """
        Select a random legal move.

        Args:
            state: Current board

        Returns:
            Randomly selected move, or None if no legal move exists
        """
        if state.to_move != self.role:
            raise ValueError(f"Not {self.role.name.lower()}'s turn")

        candidates = list(range(state.num_cells))
        self.rng.shuffle(candidates)
        for index in candidates:
            if state.is_legal(index):
                return Move(index, self.role)
        return None

    def get_action_callback(self) -> Callable[[Board, Player], Optional[Move]]:
        return lambda state, player: self.select_action(state)

    def register_with_game(self, game: Game) -> None:
        game.register_agent(self.role, self.get_action_callback())

    def __str__(self) -> str:
        return f"{self.name} (random, {self.role.name.lower()})"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.

    This class provides methods for creating MCTS agents with different
    strengths and configurations.
    """

    @staticmethod
    def create_fast(role: Player, seed: Optional[int] = None) -> MCTSAgent:
        config = replace(MCTSConfig.fast(), seed=seed)
        return MCTSAgent(role, config=config, name="fast-mcts")

    @staticmethod
    def create_standard(role: Player, seed: Optional[int] = None) -> MCTSAgent:
        config = replace(MCTSConfig.default(), seed=seed)
        return MCTSAgent(role, config=config, name="standard-mcts")

    @staticmethod
    def create_strong(role: Player, seed: Optional[int] = None) -> MCTSAgent:
        config = replace(MCTSConfig.deep(), seed=seed)
        return MCTSAgent(role, config=config, name="strong-mcts")

    @staticmethod
    def create_custom(
        role: Player,
        iterations: int = 200,
        exploration_weight: float = DEFAULT_MCTS_EXPLORATION,
        seed: Optional[int] = None,
        name: str = "custom-mcts",
        verbose: bool = False
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            role: Side the agent plays
            iterations: Number of MCTS iterations
            exploration_weight: UCB1 exploration parameter
            seed: Random seed
            name: Name of the agent
            verbose: Whether to print search summaries

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            exploration_weight=exploration_weight,
            seed=seed
        )
        return MCTSAgent(role, config=config, name=name, verbose=verbose)


def create_agent(
    agent_type: str,
    role: Player,
    iterations: int = 200,
    seed: Optional[int] = None,
    name: Optional[str] = None,
    verbose: bool = False
):
    """
    Create an agent by type name.

    Args:
        agent_type: "mcts" or "random"
        role: Side the agent plays
        iterations: MCTS iterations per move (ignored for random agents)
        seed: Random seed
        name: Optional agent name
        verbose: Whether an MCTS agent prints search summaries

    Returns:
        MCTSAgent or RandomAgent
    """
    if agent_type == "mcts":
        return MCTSAgentFactory.create_custom(
            role,
            iterations=iterations,
            seed=seed,
            name=name or "mcts",
            verbose=verbose
        )
    elif agent_type == "random":
        return RandomAgent(role, name=name or "random", seed=seed)
    else:
        raise ValueError(f"Unknown agent type: {agent_type}")

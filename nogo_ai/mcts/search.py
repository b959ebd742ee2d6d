"""
Monte Carlo Tree Search (MCTS) algorithm for NoGo.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Walk down the tree by UCB1 to a node worth expanding
2. Expansion: Create one new child node
3. Simulation: Run a random playout to a terminal position
4. Backpropagation: Update statistics along the selected path

A fresh tree is built for every decision and dropped once the move is chosen.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import random
import time

from nogo_ai.core.constants import Player
from nogo_ai.core.rules import RulesOracle
from nogo_ai.mcts.node import MCTSNode
from nogo_ai.mcts.config import MCTSConfig


def select_path(root: MCTSNode) -> List[MCTSNode]:
    """
    Select a path from the root to a leaf.

    Starting at the root, repeatedly move to the child with the highest UCB1
    score while the current node is fully expanded and non-terminal.

    Args:
        root: Root node of the MCTS tree

    Returns:
        Visited nodes, root first and leaf last
    """
    path = [root]
    current = root
    while current.is_selectable():
        current = current.select_child()
        path.append(current)
    return path


def expand_node(node: MCTSNode, rng: random.Random) -> MCTSNode:
    """
    Expand a node by adding a child.

    Args:
        node: Node to expand
        rng: Random source for the probe order

    Returns:
        New child node, or the node itself if nothing could be expanded
    """
    # This is a wrapper around the node's expand method
    return node.expand(rng)


def simulate_game(node: MCTSNode, rng: random.Random) -> Tuple[Player, int]:
    """
    Run a random playout from a node.

    Args:
        node: Node to simulate from
        rng: Random source for the playout

    Returns:
        Tuple of (winner, number of moves played)
    """
    return node.simulate(rng)


def backpropagate(path: List[MCTSNode], winner: Player) -> None:
    """
    Update statistics for every node on the path.

    Each node gets one more visit, and one more win if ``winner`` is the
    player who chose the move into it.

    Args:
        path: Nodes from the root to the simulated node
        winner: Simulation winner
    """
    for node in path:
        node.update(winner)


def run_search(
    root: MCTSNode,
    iterations: int,
    rng: random.Random
) -> Dict[str, Any]:
    """
    Run exactly ``iterations`` MCTS iterations on an existing tree.

    Args:
        root: Root node of the MCTS tree
        iterations: Number of iterations
        rng: Random source shared by expansion and simulation

    Returns:
        Dictionary of search statistics
    """
    stats: Dict[str, Any] = {
        "iterations": 0,
        "max_depth": 0,
        "total_simulation_steps": 0,
        "node_count": count_nodes(root),
    }

    start_time = time.time()

    for _ in range(iterations):
        # 1. Selection
        path = select_path(root)

        # 2. Expansion
        leaf = expand_node(path[-1], rng)
        if leaf is not path[-1]:
            path.append(leaf)
            stats["node_count"] += 1

        # 3. Simulation
        winner, steps = simulate_game(leaf, rng)

        # 4. Backpropagation
        backpropagate(path, winner)

        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["max_depth"] = max(stats["max_depth"], len(path) - 1)

    stats["time_elapsed"] = time.time() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])
    stats["action_visits"] = {child.move: child.visits for child in root.children}
    stats["action_win_rates"] = {child.move: child.win_rate for child in root.children}

    return stats


def best_move(root: MCTSNode) -> Optional[int]:
    """
    Pick the move to play after the search.

    The most visited root child wins; visit count is more robust than
    win rate. Ties go to the child expanded first.

    Args:
        root: Root node of the MCTS tree

    Returns:
        The chosen move index, or None if the root has no children
    """
    best = root.best_child()
    return best.move if best is not None else None


def mcts_search(
    state: Any,
    rules: RulesOracle,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> Tuple[Optional[int], Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    This function runs the full MCTS algorithm:
    1. Create a root node from the current position
    2. Repeatedly run selection, expansion, simulation, and backpropagation
    3. Return the best move based on visit counts

    A terminal position or a zero iteration budget returns None without
    running any iteration.

    Args:
        state: Current position
        rules: Rules oracle for the game
        config: MCTS configuration parameters
        rng: Random source (a new one seeded from ``config.seed`` if omitted)

    Returns:
        Tuple of (best move or None, search statistics)
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    root = MCTSNode(state=state, rules=rules, config=config)

    if config.iterations == 0 or root.is_terminal():
        return None, {"iterations": 0, "node_count": 1, "terminal": root.is_terminal()}

    stats = run_search(root, config.iterations, rng)
    return best_move(root), stats


def decide(
    state: Any,
    rules: RulesOracle,
    iterations: int,
    rng: random.Random,
    exploration_weight: Optional[float] = None
) -> Optional[int]:
    """
    Choose a move for a position.

    Args:
        state: Current position
        rules: Rules oracle for the game
        iterations: Iteration budget
        rng: Random source
        exploration_weight: Optional UCB1 exploration constant

    Returns:
        Chosen move index, or None if there is no move to recommend
    """
    if exploration_weight is None:
        config = MCTSConfig(iterations=iterations)
    else:
        config = MCTSConfig(iterations=iterations, exploration_weight=exploration_weight)
    move, _ = mcts_search(state, rules, config, rng)
    return move


def count_nodes(node: MCTSNode) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 1  # Count this node
    for child in node.children:
        count += count_nodes(child)
    return count


def get_principal_variation(root: MCTSNode, max_depth: int = 10) -> List[Tuple[int, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the MCTS tree
        max_depth: Maximum depth to explore

    Returns:
        List of (move, win rate) pairs representing the principal variation
    """
    result = []
    current = root
    depth = 0

    while current.children and depth < max_depth:
        best = current.best_child()
        result.append((best.move, best.win_rate))
        current = best
        depth += 1

    return result


def get_action_statistics(root: MCTSNode) -> Dict[int, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the MCTS tree

    Returns:
        Dictionary mapping move indices to statistics
    """
    return {
        child.move: {
            "visits": child.visits,
            "wins": child.wins,
            "value": child.win_rate,
            "ucb": root.ucb_score(child),
        }
        for child in root.children
    }

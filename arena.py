#!/usr/bin/env python
"""
Run a series of NoGo games between two agents.

Colors alternate every game so neither agent always moves first. A summary
of wins per agent and per color is printed at the end.

Example usage:
    python arena.py --agent1 mcts --agent2 random --games 20 --size 7
"""
import argparse
import time
from collections import defaultdict
from typing import Any, Dict, Optional

from tqdm import tqdm

from nogo_ai.core.constants import Player, BOARD_SIZE
from nogo_ai.core.game import Game, GameResult
from nogo_ai.mcts.agent import create_agent


def parse_args():
    """Parse command-line arguments for the match."""
    parser = argparse.ArgumentParser(description="Play a match between two NoGo agents")
    parser.add_argument("--agent1", type=str, default="mcts", choices=["random", "mcts"],
                        help="Type of the first agent")
    parser.add_argument("--agent2", type=str, default="random", choices=["random", "mcts"],
                        help="Type of the second agent")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--size", type=int, default=BOARD_SIZE, help="Board side length")
    parser.add_argument("--iterations", type=int, default=200,
                        help="Number of MCTS iterations per move")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser.parse_args()


def run_match(
    agent1_type: str,
    agent2_type: str,
    num_games: int = 10,
    size: int = BOARD_SIZE,
    iterations: int = 200,
    seed: Optional[int] = None,
    show_progress: bool = True
) -> Dict[str, Any]:
    """
    Play ``num_games`` games between two agent types.

    Args:
        agent1_type: "mcts" or "random"
        agent2_type: "mcts" or "random"
        num_games: Number of games
        size: Board side length
        iterations: MCTS iterations per move
        seed: Base random seed (each game and side derives its own)
        show_progress: Whether to show a progress bar

    Returns:
        Dictionary of match statistics
    """
    stats: Dict[str, Any] = defaultdict(int)
    start_time = time.time()

    games = range(num_games)
    if show_progress:
        games = tqdm(games, desc="Games")

    for game_idx in games:
        # agent1 plays black in even games
        agent1_role = Player.BLACK if game_idx % 2 == 0 else Player.WHITE
        seed1 = seed + 2 * game_idx if seed is not None else None
        seed2 = seed + 2 * game_idx + 1 if seed is not None else None

        agent1 = create_agent(agent1_type, agent1_role, iterations=iterations, seed=seed1, name="agent1")
        agent2 = create_agent(agent2_type, agent1_role.opponent, iterations=iterations, seed=seed2, name="agent2")

        game = Game(size=size)
        agent1.register_with_game(game)
        agent2.register_with_game(game)
        game.run_game()

        winner = "agent1" if game.winner == agent1_role else "agent2"
        stats[f"{winner}_wins"] += 1
        stats[f"{game.winner.name.lower()}_wins"] += 1
        stats["total_moves"] += len(game.history)
        if game.result == GameResult.RESIGNED:
            stats["resignations"] += 1

    stats["games"] = num_games
    stats["elapsed_time"] = time.time() - start_time
    stats["average_moves"] = stats["total_moves"] / max(1, num_games)
    return dict(stats)


def main():
    """Run the match with command-line arguments."""
    args = parse_args()

    stats = run_match(
        args.agent1,
        args.agent2,
        num_games=args.games,
        size=args.size,
        iterations=args.iterations,
        seed=args.seed
    )

    print("\nMatch Summary:")
    print(f"  Games: {stats['games']}")
    print(f"  Duration: {stats['elapsed_time']:.2f} seconds")
    print(f"  Average moves: {stats['average_moves']:.1f}")
    for name, kind in (("agent1", args.agent1), ("agent2", args.agent2)):
        wins = stats.get(f"{name}_wins", 0)
        print(f"  {name} ({kind}): {wins} wins ({wins / max(1, stats['games']):.1%})")
    print(f"  Black wins: {stats.get('black_wins', 0)}")
    print(f"  White wins: {stats.get('white_wins', 0)}")
    print(f"  Resignations: {stats.get('resignations', 0)}")


if __name__ == "__main__":
    main()

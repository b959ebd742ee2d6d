#!/usr/bin/env python
"""
Demonstration script for NoGo AI agents.

This script shows two AI agents playing NoGo against each other, displaying
the board after every move.

Example usage:
    # Watch MCTS play black against a random agent
    python demo_game.py --agent1 mcts --agent2 random

    # Two MCTS agents on a small board, reproducibly
    python demo_game.py --agent1 mcts --agent2 mcts --size 5 --seed 7
"""
import os
import sys
import time
import argparse
from typing import Optional

from nogo_ai.core.board import Board, index_to_coordinate
from nogo_ai.core.constants import Player, EMPTY, BOARD_SIZE, COLUMN_LETTERS
from nogo_ai.core.game import Game, GameResult
from nogo_ai.mcts.agent import create_agent


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BLACK = "\033[90m"
    YELLOW = "\033[93m"

    @staticmethod
    def stone(value: int) -> str:
        """Get the colored symbol for a cell."""
        if value == Player.BLACK:
            return Colors.BLACK + "●" + Colors.RESET
        elif value == Player.WHITE:
            return Colors.WHITE + "○" + Colors.RESET
        else:
            return "·"


def parse_args():
    """Parse command-line arguments for demo configuration."""
    parser = argparse.ArgumentParser(description="Demonstrate NoGo AI agents playing against each other")

    parser.add_argument("--agent1", type=str, default="mcts",
                        choices=["random", "mcts"],
                        help="Type of agent playing black")
    parser.add_argument("--agent2", type=str, default="random",
                        choices=["random", "mcts"],
                        help="Type of agent playing white")
    parser.add_argument("--size", type=int, default=BOARD_SIZE,
                        help="Board side length")
    parser.add_argument("--mcts-iterations", type=int, default=200,
                        help="Number of MCTS iterations per move")
    parser.add_argument("--delay", type=float, default=0.0,
                        help="Delay between moves in seconds")
    parser.add_argument("--max-moves", type=int, default=None,
                        help="Maximum number of moves before stopping the game")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--save", type=str, default=None,
                        help="Save the move record to this JSON file")
    parser.add_argument("--verbose", action="store_true",
                        help="Show search statistics for each MCTS move")

    return parser.parse_args()


def display_board(board: Board, last_move: Optional[int] = None):
    """Display the board with coordinates, highlighting the last move."""
    for row in range(board.size):
        cells = []
        for col in range(board.size):
            index = row * board.size + col
            symbol = Colors.stone(board[index])
            if index == last_move and board[index] != EMPTY:
                symbol = Colors.BOLD + Colors.RED + ("●" if board[index] == Player.BLACK else "○") + Colors.RESET
            cells.append(symbol)
        print(f"{board.size - row:>2} " + " ".join(cells))
    print("   " + " ".join(COLUMN_LETTERS[:board.size]))


def run_demo(args):
    """Run a demonstration game between two AI agents."""
    seed1 = args.seed
    seed2 = args.seed + 1 if args.seed is not None else None

    black = create_agent(args.agent1, Player.BLACK, iterations=args.mcts_iterations,
                         seed=seed1, name=f"{args.agent1}-black", verbose=args.verbose)
    white = create_agent(args.agent2, Player.WHITE, iterations=args.mcts_iterations,
                         seed=seed2, name=f"{args.agent2}-white", verbose=args.verbose)

    print(f"Running demo game: {black.name} vs {white.name} on {args.size}x{args.size}")

    game = Game(size=args.size)
    black.register_with_game(game)
    white.register_with_game(game)

    while not game.game_over and (args.max_moves is None or len(game.history) < args.max_moves):
        current = black if game.current_player == Player.BLACK else white
        print(f"\n{current.name} is thinking...")
        time.sleep(args.delay)

        game.step()

        if game.history and game.history[-1].player == current.role:
            move = game.history[-1]
            print(f"{current.name} plays {index_to_coordinate(move.index, args.size)}")
            display_board(game.board, move.index)

    print("\n" + Colors.BOLD + Colors.YELLOW + "=== GAME OVER ===" + Colors.RESET)

    if game.game_over:
        winner = black if game.winner == Player.BLACK else white
        reason = "opponent resigned" if game.result == GameResult.RESIGNED else "opponent has no legal move"
        print(Colors.BOLD + Colors.GREEN + f"{winner.name} wins ({reason})!" + Colors.RESET)
    else:
        print(f"Stopped after {len(game.history)} moves.")

    stats = game.get_game_statistics()
    print("\nGame Statistics:")
    print(f"  Total moves: {stats['moves']}")
    print(f"  Black moves: {stats['black_moves']}")
    print(f"  White moves: {stats['white_moves']}")
    print(f"  Duration: {stats['duration']:.2f} seconds")

    if args.save:
        game.save_game(args.save)
        print(f"Saved game to {args.save}")


def main():
    """Main function."""
    args = parse_args()

    # Set up colored output for Windows
    if os.name == 'nt':
        os.system('color')

    print(Colors.BOLD + Colors.YELLOW + "Welcome to NoGo AI Demo!" + Colors.RESET)
    print("Watch two AI agents play against each other.")

    try:
        run_demo(args)
    except KeyboardInterrupt:
        print("\nDemo interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()

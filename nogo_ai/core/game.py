"""
Game flow management for NoGo.

This module defines:
- GameResult: Status of a game
- IllegalMoveError: Raised when a move breaks the rules
- Game: Manager for turn order, agents and results
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import time

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board
from nogo_ai.core.constants import Player, PlaceResult, BOARD_SIZE


AgentCallback = Callable[[Board, Player], Optional[Move]]


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()  # Side to move had no legal placement
    RESIGNED = auto()  # An agent returned no move


class IllegalMoveError(ValueError):
    """A move was rejected by the board."""

    def __init__(self, move: Move, result: PlaceResult):
        super().__init__(f"illegal move {move}: {result.value}")
        self.move = move
        self.result = result


class Game:
    """
    Manager for NoGo game flow.

    Agents are registered per side as callbacks that receive a copy of the
    board and the player to move, and return a Move (or None to resign).
    """

    def __init__(self, size: int = BOARD_SIZE, board: Optional[Board] = None):
        """
        Initialize a new game.

        Args:
            size: Board side length for a fresh game
            board: Optional starting position (overrides size)
        """
        self.size = board.size if board is not None else size
        self._initial_board = board.clone() if board is not None else None
        self.agent_callbacks: Dict[Player, AgentCallback] = {}
        self.reset()

    def reset(self) -> Board:
        """
        Reset the game to its starting position.

        Returns:
            New board
        """
        if self._initial_board is not None:
            self.board = self._initial_board.clone()
        else:
            self.board = Board(size=self.size)
        self.history: List[Move] = []
        self.result = GameResult.IN_PROGRESS
        self.winner: Optional[Player] = None
        self.start_time = time.time()
        self.end_time: Optional[float] = None
        if self.board.is_terminal():
            self._finish(self.board.to_move.opponent, GameResult.WINNER)
        return self.board

    @property
    def game_over(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    @property
    def current_player(self) -> Player:
        return self.board.to_move

    def register_agent(self, player: Player, agent_callback: AgentCallback) -> None:
        """
        Register an agent for a side.

        Args:
            player: Side the agent plays
            agent_callback: Function that selects a move given the board and player
        """
        self.agent_callbacks[player] = agent_callback

    def step(self, move: Optional[Move] = None) -> Tuple[Board, bool]:
        """
        Advance the game by one move.

        If no move is given, the registered agent for the side to move is
        asked for one. An agent that returns None resigns.

        Args:
            move: Optional move to apply

        Returns:
            Tuple of (board, whether the game is over)

        Raises:
            IllegalMoveError: If the move is illegal
            ValueError: If no move is given and no agent is registered
        """
        if self.game_over:
            return self.board, True

        player = self.board.to_move
        if move is None:
            if player not in self.agent_callbacks:
                raise ValueError(f"No move provided and no agent registered for {player.name.lower()}")
            move = self.agent_callbacks[player](self.board.clone(), player)
            if move is None:
                self._finish(player.opponent, GameResult.RESIGNED)
                return self.board, True

        result = move.apply(self.board)
        if not result.is_legal:
            raise IllegalMoveError(move, result)
        self.history.append(move)

        if self.board.is_terminal():
            self._finish(self.board.to_move.opponent, GameResult.WINNER)

        return self.board, self.game_over

    def run_game(self, max_moves: Optional[int] = None) -> Board:
        """
        Run the game until completion or ``max_moves`` moves.

        Both sides must have agents registered.

        Args:
            max_moves: Optional move limit

        Returns:
            Final board
        """
        for player in Player:
            if player not in self.agent_callbacks:
                raise ValueError(f"No agent registered for {player.name.lower()}")

        while not self.game_over and (max_moves is None or len(self.history) < max_moves):
            self.step()

        return self.board

    def _finish(self, winner: Player, result: GameResult) -> None:
        self.winner = winner
        self.result = result
        self.end_time = time.time()

    def get_winner(self) -> Optional[Player]:
        """
        Get the winning side, if the game is over.

        Returns:
            Winning player or None
        """
        return self.winner if self.game_over else None

    def get_game_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the game.

        Returns:
            Dictionary of game statistics
        """
        end = self.end_time if self.end_time is not None else time.time()
        stats: Dict[str, Any] = {
            "size": self.size,
            "moves": len(self.history),
            "duration": end - self.start_time,
            "result": self.result.name,
        }
        if self.winner is not None:
            stats["winner"] = self.winner.name.lower()
        for player in Player:
            stats[f"{player.name.lower()}_moves"] = sum(
                1 for move in self.history if move.player == player
            )
        return stats

    def save_game(self, filename: str) -> None:
        """
        Save the starting position and move record to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        data = {
            "size": self.size,
            "initial_board": (
                self._initial_board.to_diagram() if self._initial_board is not None else None
            ),
            "initial_to_move": (
                self._initial_board.to_move.name.lower() if self._initial_board is not None else None
            ),
            "moves": [move.to_dict() for move in self.history],
            "result": self.result.name,
            "winner": self.winner.name.lower() if self.winner is not None else None,
        }
        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load_game(cls, filename: str) -> 'Game':
        """
        Load a game by replaying a saved move record.

        Args:
            filename: Name of the file to load from

        Returns:
            Game object
        """
        with open(filename, 'r') as f:
            data = json.load(f)

        board = None
        if data.get("initial_board") is not None:
            board = Board.from_string(
                data["initial_board"], to_move=Player.from_name(data["initial_to_move"])
            )
        game = cls(size=data["size"], board=board)
        for move_data in data["moves"]:
            game.step(Move.from_dict(move_data))
        if data.get("result") == GameResult.RESIGNED.name and not game.game_over:
            game._finish(Player.from_name(data["winner"]), GameResult.RESIGNED)
        return game

    def __str__(self) -> str:
        result = f"NoGo {self.size}x{self.size} (Move {len(self.history)})\n{self.board}"
        if self.game_over:
            result += f"\nGame over: {self.winner.name.lower()} wins ({self.result.name.lower()})"
        return result

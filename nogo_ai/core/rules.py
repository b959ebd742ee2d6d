"""
Game rules exposed to the search engine.

The search never looks inside a position. Everything it needs to know about
the game comes through a RulesOracle: which moves exist, what a move does,
and whose turn it is.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from nogo_ai.core.board import Board
from nogo_ai.core.constants import Player


class RulesOracle(ABC):
    """
    Abstract base class for game rules used by MCTS.

    Moves are integer indices in ``range(num_moves(position))``. Probing an
    illegal index is normal and cheap: ``apply`` returns None.
    """

    @abstractmethod
    def apply(self, position: Any, move: int) -> Optional[Any]:
        """
        Play a move without modifying the given position.

        Args:
            position: Position to play from
            move: Move index to probe

        Returns:
            The resulting position, or None if the move is illegal
        """
        pass

    @abstractmethod
    def num_moves(self, position: Any) -> int:
        """Size of the candidate move index space for a position."""
        pass

    @abstractmethod
    def current_player(self, position: Any) -> Player:
        """Player to move at a position."""
        pass

    def legal_move_count(self, position: Any) -> int:
        """
        Count legal moves by probing every candidate index.

        Args:
            position: Position to inspect

        Returns:
            Number of legal moves
        """
        return sum(
            1 for move in range(self.num_moves(position))
            if self.is_legal(position, move)
        )

    def is_legal(self, position: Any, move: int) -> bool:
        return self.apply(position, move) is not None

    def is_terminal(self, position: Any) -> bool:
        """True if the player to move has no legal move."""
        return not any(
            self.is_legal(position, move)
            for move in range(self.num_moves(position))
        )


class NoGoRules(RulesOracle):
    """
    RulesOracle over :class:`Board` positions.

    Every cell index is a candidate move; ``apply`` clones the board before
    placing so the input position is never modified.
    """

    def apply(self, position: Board, move: int) -> Optional[Board]:
        board = position.clone()
        if board.place(move).is_legal:
            return board
        return None

    def num_moves(self, position: Board) -> int:
        return position.num_cells

    def current_player(self, position: Board) -> Player:
        return position.to_move

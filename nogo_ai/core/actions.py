"""
Actions for the NoGo game.

NoGo has a single kind of action: placing a stone. A move is identified by
the cell index it targets and the player making it.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from nogo_ai.core.board import Board, index_to_coordinate, coordinate_to_index
from nogo_ai.core.constants import Player, PlaceResult, BOARD_SIZE


@dataclass(frozen=True)
class Move:
    """
    Placement of a stone by ``player`` at cell ``index``.
    """
    index: int
    player: Player

    def apply(self, board: Board) -> PlaceResult:
        """
        Apply the move to a board in place.

        The move is rejected if it is not ``player``'s turn.

        Args:
            board: Board to modify

        Returns:
            Result of the placement
        """
        if board.to_move != self.player:
            return PlaceResult.ILLEGAL_TURN
        return board.place(self.index)

    def coordinate(self, size: int = BOARD_SIZE) -> str:
        return index_to_coordinate(self.index, size)

    @classmethod
    def from_coordinate(cls, coordinate: str, player: Player, size: int = BOARD_SIZE) -> 'Move':
        return cls(coordinate_to_index(coordinate, size), player)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "player": self.player.name.lower()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Move':
        return cls(int(data["index"]), Player.from_name(data["player"]))

    def __str__(self) -> str:
        return f"{self.player.name.lower()} @ {self.index}"

"""
Board representation and placement rules for NoGo.

NoGo is played on a Go board, but capturing is forbidden. A placement is
legal only if:
- the cell is empty,
- the new stone's group keeps at least one liberty (no suicide), and
- no adjacent opponent group loses its last liberty (no capture).

The side to move that has no legal placement loses the game.
"""
from __future__ import annotations
from functools import lru_cache
from typing import List, Optional, Tuple

import numpy as np

from nogo_ai.core.constants import (
    Player, PlaceResult, EMPTY, BOARD_SIZE, MIN_BOARD_SIZE, MAX_BOARD_SIZE,
    COLUMN_LETTERS, STONE_SYMBOLS
)


@lru_cache(maxsize=None)
def _neighbor_table(size: int) -> Tuple[Tuple[int, ...], ...]:
    """Orthogonal neighbours of every cell index on a size x size board."""
    table = []
    for index in range(size * size):
        row, col = divmod(index, size)
        neighbors = []
        if row > 0:
            neighbors.append(index - size)
        if row < size - 1:
            neighbors.append(index + size)
        if col > 0:
            neighbors.append(index - 1)
        if col < size - 1:
            neighbors.append(index + 1)
        table.append(tuple(neighbors))
    return tuple(table)


def index_to_coordinate(index: int, size: int = BOARD_SIZE) -> str:
    """
    Convert a cell index to a Go-style coordinate such as "A9".

    Columns are lettered from the left, skipping "I"; rows are numbered from
    the bottom.

    Args:
        index: Cell index (row-major, top-left is 0)
        size: Board side length

    Returns:
        Coordinate string
    """
    if not 0 <= index < size * size:
        raise ValueError(f"index {index} is off a {size}x{size} board")
    row, col = divmod(index, size)
    return f"{COLUMN_LETTERS[col]}{size - row}"


def coordinate_to_index(coordinate: str, size: int = BOARD_SIZE) -> int:
    """
    Convert a Go-style coordinate such as "C3" to a cell index.

    Args:
        coordinate: Coordinate string (case-insensitive)
        size: Board side length

    Returns:
        Cell index

    Raises:
        ValueError: If the coordinate is malformed or off the board
    """
    text = coordinate.strip().upper()
    if len(text) < 2 or text[0] not in COLUMN_LETTERS[:size] or not text[1:].isdigit():
        raise ValueError(f"invalid coordinate: {coordinate}")
    col = COLUMN_LETTERS.index(text[0])
    number = int(text[1:])
    if not 1 <= number <= size:
        raise ValueError(f"invalid coordinate: {coordinate}")
    return (size - number) * size + col


class Board:
    """
    A NoGo position.

    Cells are stored row-major in a flat numpy array so that a move is a
    single integer index in ``range(size * size)``.
    """

    def __init__(self, size: int = BOARD_SIZE, to_move: Player = Player.BLACK):
        """
        Create an empty board.

        Args:
            size: Board side length
            to_move: Player who places the next stone
        """
        if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            raise ValueError(
                f"board size must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}"
            )
        self.size = size
        self.cells = np.zeros(size * size, dtype=np.int8)
        self.to_move = Player(to_move)
        self.last_move: Optional[int] = None
        self.move_count = 0
        self._neighbors = _neighbor_table(size)

    @property
    def num_cells(self) -> int:
        return self.size * self.size

    @property
    def grid(self) -> np.ndarray:
        """Read-only 2D view of the cells."""
        view = self.cells.reshape(self.size, self.size)
        view.flags.writeable = False
        return view

    def __getitem__(self, index: int) -> int:
        return int(self.cells[index])

    def place(self, index: int) -> PlaceResult:
        """
        Place a stone for the side to move.

        On success the turn passes to the opponent. An illegal placement
        leaves the board untouched.

        Args:
            index: Cell index

        Returns:
            Result of the placement
        """
        if not 0 <= index < self.num_cells:
            return PlaceResult.ILLEGAL_BOUNDS
        if self.cells[index] != EMPTY:
            return PlaceResult.ILLEGAL_OCCUPIED

        me = self.to_move
        self.cells[index] = me

        for neighbor in self._neighbors[index]:
            if self.cells[neighbor] == me.opponent and not self._has_liberty(neighbor):
                self.cells[index] = EMPTY
                return PlaceResult.ILLEGAL_CAPTURE

        if not self._has_liberty(index):
            self.cells[index] = EMPTY
            return PlaceResult.ILLEGAL_SUICIDE

        self.to_move = me.opponent
        self.last_move = index
        self.move_count += 1
        return PlaceResult.LEGAL

    def check(self, index: int) -> PlaceResult:
        """Result ``place(index)`` would give, without changing this board."""
        return self.clone().place(index)

    def is_legal(self, index: int) -> bool:
        return self.check(index).is_legal

    def legal_moves(self) -> List[int]:
        """All legal cell indices for the side to move, in index order."""
        return [index for index in range(self.num_cells) if self.is_legal(index)]

    def is_terminal(self) -> bool:
        """True if the side to move has no legal placement."""
        return not any(self.is_legal(index) for index in range(self.num_cells))

    def winner(self) -> Optional[Player]:
        """
        Winner of a finished game.

        Returns:
            The opponent of the side to move if it cannot move, otherwise None
        """
        if self.is_terminal():
            return self.to_move.opponent
        return None

    def _has_liberty(self, start: int) -> bool:
        """Flood-fill the group containing ``start`` until a liberty is found."""
        color = self.cells[start]
        seen = {start}
        stack = [start]
        while stack:
            current = stack.pop()
            for neighbor in self._neighbors[current]:
                value = self.cells[neighbor]
                if value == EMPTY:
                    return True
                if value == color and neighbor not in seen:
                    seen.add(neighbor)
                    stack.append(neighbor)
        return False

    def clone(self) -> 'Board':
        """
        Create an independent copy of the board.

        Returns:
            Copy of the board
        """
        board = Board.__new__(Board)
        board.size = self.size
        board.cells = self.cells.copy()
        board.to_move = self.to_move
        board.last_move = self.last_move
        board.move_count = self.move_count
        board._neighbors = self._neighbors
        return board

    @classmethod
    def from_string(cls, text: str, to_move: Optional[Player] = None) -> 'Board':
        """
        Build a board from a text diagram.

        Rows are separated by newlines or "/". ``X`` (or ``B``) is black,
        ``O`` (or ``W``) is white, ``.`` (or ``+``) is empty. Blank lines and
        spaces are ignored.

        Args:
            text: Board diagram
            to_move: Side to move; inferred from the stone counts if omitted

        Returns:
            Board object

        Raises:
            ValueError: If the diagram is malformed, or the side to move is
                omitted and black does not have the same number of stones as
                white or one more
        """
        rows = [
            row.replace(" ", "")
            for row in text.replace("/", "\n").splitlines()
            if row.strip()
        ]
        size = len(rows)
        board = cls(size=size)
        for row_idx, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(f"row {row_idx} has {len(row)} cells, expected {size}")
            for col_idx, char in enumerate(row.upper()):
                if char in "XB":
                    board.cells[row_idx * size + col_idx] = Player.BLACK
                elif char in "OW":
                    board.cells[row_idx * size + col_idx] = Player.WHITE
                elif char not in ".+":
                    raise ValueError(f"unknown board symbol: {char!r}")

        black = int(np.count_nonzero(board.cells == Player.BLACK))
        white = int(np.count_nonzero(board.cells == Player.WHITE))
        if to_move is None:
            if black - white not in (0, 1):
                raise ValueError(
                    f"cannot infer side to move from {black} black and {white} white stones"
                )
            to_move = Player.BLACK if black == white else Player.WHITE
        board.to_move = Player(to_move)
        board.move_count = black + white
        return board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.size == other.size
                and self.to_move == other.to_move
                and np.array_equal(self.cells, other.cells))

    __hash__ = None

    def to_diagram(self) -> str:
        """Compact diagram with rows joined by "/", readable by :meth:`from_string`."""
        return "/".join(
            "".join(
                STONE_SYMBOLS[int(value)]
                for value in self.cells[row * self.size:(row + 1) * self.size]
            )
            for row in range(self.size)
        )

    def __str__(self) -> str:
        """
        Get a text diagram of the board with coordinates.

        Returns:
            String representation
        """
        lines = []
        for row in range(self.size):
            cells = " ".join(
                STONE_SYMBOLS[int(value)]
                for value in self.cells[row * self.size:(row + 1) * self.size]
            )
            lines.append(f"{self.size - row:>2} {cells}")
        lines.append("   " + " ".join(COLUMN_LETTERS[:self.size]))
        lines.append(f"{self.to_move.name.lower()} to move")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(size={self.size}, to_move={self.to_move.name}, moves={self.move_count})"

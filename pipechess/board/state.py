"""
Local board state kept in lockstep with the engine.

BoardState pairs the symbol grid with the move history that produced it.
Both change together inside apply(): the new grid is computed first and
the two are committed at once, so a failed decode leaves neither touched.
Replaying the history from the start position always reproduces the grid.
"""

import logging
from typing import Iterable, Optional, Tuple

import chess
import numpy as np

from pipechess.board.moves import DecodedMove, apply_decoded, decode_move
from pipechess.board.representation import (
    START_PLACEMENT,
    grid_to_placement,
    placement_to_grid,
    render_grid,
    square_to_coordinates,
    symbol_to_piece,
)

logger = logging.getLogger(__name__)


class BoardState:
    """
    Board grid plus the ordered history of moves played on it.

    Attributes:
        history: Tuple of move tokens since the start position (read-only)
        last_move: DecodedMove of the most recent apply() (None at start)
    """

    def __init__(self):
        self._grid = placement_to_grid(START_PLACEMENT)
        self._history: Tuple[str, ...] = ()
        self.last_move: Optional[DecodedMove] = None

    @classmethod
    def replay(cls, history: Iterable[str]) -> "BoardState":
        """
        Build a board by applying history from the start position.

        Raises:
            ValueError: If a move cannot be decoded
        """
        state = cls()
        for token in history:
            state.apply(token)
        return state

    @property
    def history(self) -> Tuple[str, ...]:
        return self._history

    @property
    def ply(self) -> int:
        return len(self._history)

    @property
    def side_to_move(self) -> chess.Color:
        """Color to move, assuming the game started from the start position."""
        return chess.WHITE if self.ply % 2 == 0 else chess.BLACK

    def apply(self, token: str) -> DecodedMove:
        """
        Play one move on the board and append it to the history.

        No legality check is made; the caller validates tokens first.

        Args:
            token: Long-algebraic move token

        Returns:
            The decoded move that was applied

        Raises:
            ValueError: If the token is malformed or moves from an empty square
        """
        move = decode_move(token, self._grid)
        grid = apply_decoded(self._grid, move)

        self._grid = grid
        self._history = self._history + (token,)
        self.last_move = move

        logger.debug(f"Applied {token} ({move.kind.value}), ply={self.ply}")
        return move

    def piece_at(self, square: str) -> Optional[chess.Piece]:
        """python-chess Piece on a square ('e4'), or None if empty."""
        row, col = square_to_coordinates(square)
        return symbol_to_piece(str(self._grid[row, col]))

    def as_array(self, flipped: bool = False) -> np.ndarray:
        """
        Read-only snapshot of the symbol grid for renderers.

        Args:
            flipped: Rotate 180 degrees (Black at the bottom)

        Returns:
            8x8 array of piece symbols; writing to it raises ValueError
        """
        snapshot = np.rot90(self._grid, 2).copy() if flipped else self._grid.copy()
        snapshot.flags.writeable = False
        return snapshot

    def board_fen(self) -> str:
        """Piece placement field of FEN, comparable with chess.Board.board_fen()."""
        return grid_to_placement(self._grid)

    def render_text(self, flipped: bool = False) -> str:
        """Text diagram of the board, ranks and files labelled."""
        return render_grid(self.as_array(flipped), flipped)

    def copy(self) -> "BoardState":
        other = BoardState.__new__(BoardState)
        other._grid = self._grid.copy()
        other._history = self._history
        other.last_move = self.last_move
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self._history == other._history and np.array_equal(self._grid, other._grid)

    def __repr__(self) -> str:
        return f"BoardState(fen={self.board_fen()!r}, ply={self.ply})"

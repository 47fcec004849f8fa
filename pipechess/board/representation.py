"""
Board Representation

The local board is an 8x8 numpy array of FEN piece symbols, with ' ' for
an empty square:

    'P' 'N' 'B' 'R' 'Q' 'K'   white pawn, knight, bishop, rook, queen, king
    'p' 'n' 'b' 'r' 'q' 'k'   black pieces

Board Orientation:
    - Row 0 = Rank 8 (Black's back rank)
    - Row 7 = Rank 1 (White's back rank)
    - Column 0 = A-file
    - Column 7 = H-file

The same mapping is used to apply moves and to flip the board for a
renderer viewing from Black's side (a 180 degree rotation).
"""

from typing import Optional, Tuple

import chess
import numpy as np

EMPTY = " "

START_PLACEMENT = chess.STARTING_BOARD_FEN


def square_to_coordinates(square: str) -> Tuple[int, int]:
    """
    Convert an algebraic square name to (row, column) coordinates.

    Args:
        square: Square name 'a1'..'h8'

    Returns:
        Tuple of (row, col) where:
            - row 0 = rank 8, row 7 = rank 1
            - col 0 = A-file, col 7 = H-file

    Raises:
        ValueError: If square is not a valid square name
    """
    index = chess.parse_square(square)
    return 7 - chess.square_rank(index), chess.square_file(index)


def coordinates_to_square(row: int, col: int) -> str:
    """
    Convert (row, column) coordinates to an algebraic square name.

    Args:
        row: Row index (0-7) where 0 is rank 8
        col: Column index (0-7) where 0 is A-file

    Returns:
        Square name, e.g. (6, 4) -> 'e2'
    """
    if not (0 <= row < 8 and 0 <= col < 8):
        raise ValueError(f"Coordinates out of range: ({row}, {col})")
    return chess.square_name(chess.square(col, 7 - row))


def flip_coordinates(row: int, col: int) -> Tuple[int, int]:
    """Coordinates of the same square on a board rotated by 180 degrees."""
    return 7 - row, 7 - col


def placement_to_grid(placement: str = START_PLACEMENT) -> np.ndarray:
    """
    Build a symbol grid from the piece placement field of a FEN string.

    Raises:
        ValueError: If the placement is malformed
    """
    # python-chess validates the placement for us
    board = chess.BaseBoard(placement)
    grid = np.full((8, 8), EMPTY, dtype="<U1")
    for square, piece in board.piece_map().items():
        grid[7 - chess.square_rank(square), chess.square_file(square)] = piece.symbol()
    return grid


def grid_to_placement(grid: np.ndarray) -> str:
    """Piece placement field of FEN for a symbol grid."""
    board = chess.BaseBoard(None)
    for row, col in zip(*np.nonzero(grid != EMPTY)):
        square = chess.square(int(col), 7 - int(row))
        board.set_piece_at(square, chess.Piece.from_symbol(str(grid[row, col])))
    return board.board_fen()


def symbol_to_piece(symbol: str) -> Optional[chess.Piece]:
    """python-chess Piece for a grid symbol (None for an empty square)."""
    if symbol == EMPTY:
        return None
    return chess.Piece.from_symbol(symbol)


def render_grid(grid: np.ndarray, flipped: bool = False) -> str:
    """
    Plain text diagram of a symbol grid with rank and file labels.

    Args:
        grid: 8x8 symbol grid as returned by BoardState.as_array()
        flipped: True if grid was produced with flipped=True
    """
    files = "hgfedcba" if flipped else "abcdefgh"
    lines = []
    for row in range(8):
        rank = row + 1 if flipped else 8 - row
        cells = " ".join("." if symbol == EMPTY else str(symbol) for symbol in grid[row])
        lines.append(f"{rank}  {cells}")
    lines.append("   " + " ".join(files))
    return "\n".join(lines)

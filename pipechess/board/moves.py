"""
Move decoding.

A protocol token such as "e1g1" says nothing about what kind of move it is;
that depends on the board. Decoding turns a token plus the current grid
into a tagged move, and each tag has its own apply rule:

    SIMPLE       relocate the piece (captures overwrite the target)
    CASTLE       king moves two files; the rook jumps to the other side
    EN_PASSANT   pawn moves diagonally onto an empty square; the passed
                 pawn beside the source square is removed
    PROMOTION    pawn reaches the last rank; 5th token character names
                 the new piece

No legality is checked here. Tokens are assumed to come from the legal
move set or from the engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import chess
import numpy as np

from pipechess.board.representation import (
    EMPTY,
    coordinates_to_square,
    square_to_coordinates,
)


class MoveKind(Enum):
    SIMPLE = "simple"
    CASTLE = "castle"
    EN_PASSANT = "en_passant"
    PROMOTION = "promotion"


@dataclass(frozen=True)
class DecodedMove:
    """
    A move token resolved against a position.

    Attributes:
        token: Original protocol token, e.g. 'e7e8q'
        from_square / to_square: Algebraic square names
        kind: MoveKind tag
        piece: Symbol of the moving piece
        captured: Symbol of the captured piece (None if nothing captured)
        promotion: Symbol of the piece placed on promotion (mover's color)
        rook_from / rook_to: Rook squares for castling
        captured_square: Square of the captured pawn for en passant
    """

    token: str
    from_square: str
    to_square: str
    kind: MoveKind
    piece: str
    captured: Optional[str] = None
    promotion: Optional[str] = None
    rook_from: Optional[str] = None
    rook_to: Optional[str] = None
    captured_square: Optional[str] = None


def decode_move(token: str, grid: np.ndarray) -> DecodedMove:
    """
    Decode a long-algebraic token against a symbol grid.

    Args:
        token: 'e2e4', 'e1g1', 'e5d6', 'e7e8q', ...
        grid: 8x8 symbol grid the move is played on

    Returns:
        DecodedMove describing how to apply the token

    Raises:
        ValueError: If the token is malformed or its source square is empty
    """
    move = chess.Move.from_uci(token)
    if not move or move.drop is not None:
        raise ValueError(f"Not a board move: {token!r}")

    from_square = chess.square_name(move.from_square)
    to_square = chess.square_name(move.to_square)
    from_row, from_col = square_to_coordinates(from_square)
    to_row, to_col = square_to_coordinates(to_square)

    piece = str(grid[from_row, from_col])
    if piece == EMPTY:
        raise ValueError(f"No piece on {from_square} for move {token}")

    target = str(grid[to_row, to_col])
    captured = target if target != EMPTY else None
    piece_type = chess.Piece.from_symbol(piece).piece_type

    if move.promotion is not None:
        symbol = chess.piece_symbol(move.promotion)
        promotion = symbol.upper() if piece.isupper() else symbol
        return DecodedMove(
            token, from_square, to_square, MoveKind.PROMOTION, piece,
            captured=captured, promotion=promotion,
        )

    if piece_type == chess.KING and from_row == to_row and abs(to_col - from_col) == 2:
        # Kingside: rook h -> f, queenside: rook a -> d
        if to_col > from_col:
            rook_from, rook_to = (from_row, 7), (from_row, to_col - 1)
        else:
            rook_from, rook_to = (from_row, 0), (from_row, to_col + 1)
        return DecodedMove(
            token, from_square, to_square, MoveKind.CASTLE, piece,
            rook_from=coordinates_to_square(*rook_from),
            rook_to=coordinates_to_square(*rook_to),
        )

    if piece_type == chess.PAWN and from_col != to_col and captured is None:
        # The passed pawn sits on the source rank, destination file
        captured_square = coordinates_to_square(from_row, to_col)
        return DecodedMove(
            token, from_square, to_square, MoveKind.EN_PASSANT, piece,
            captured=_symbol_or_none(grid[from_row, to_col]),
            captured_square=captured_square,
        )

    return DecodedMove(token, from_square, to_square, MoveKind.SIMPLE, piece, captured=captured)


def apply_decoded(grid: np.ndarray, move: DecodedMove) -> np.ndarray:
    """
    Return a new grid with the decoded move applied.

    The input grid is not modified.
    """
    result = grid.copy()
    from_row, from_col = square_to_coordinates(move.from_square)
    to_row, to_col = square_to_coordinates(move.to_square)

    result[from_row, from_col] = EMPTY
    result[to_row, to_col] = move.piece

    if move.kind is MoveKind.CASTLE:
        rook_from_row, rook_from_col = square_to_coordinates(move.rook_from)
        rook_to_row, rook_to_col = square_to_coordinates(move.rook_to)
        rook = result[rook_from_row, rook_from_col]
        result[rook_from_row, rook_from_col] = EMPTY
        result[rook_to_row, rook_to_col] = rook

    elif move.kind is MoveKind.EN_PASSANT:
        row, col = square_to_coordinates(move.captured_square)
        result[row, col] = EMPTY

    elif move.kind is MoveKind.PROMOTION:
        result[to_row, to_col] = move.promotion

    return result


def _symbol_or_none(symbol) -> Optional[str]:
    return str(symbol) if symbol != EMPTY else None

"""
Board Module

Local mirror of the engine's position.

Key Components:
    - BoardState: 8x8 symbol grid plus move history, mutated atomically
    - decode_move: protocol token + grid → tagged DecodedMove
      (SIMPLE, CASTLE, EN_PASSANT, PROMOTION)
    - Coordinate mapping between (row, col) and square names

Data Flow:
    "e1g1" → decode_move() → DecodedMove(kind=CASTLE) → apply_decoded() → new grid
"""

from pipechess.board.moves import DecodedMove, MoveKind, decode_move
from pipechess.board.representation import (
    coordinates_to_square,
    render_grid,
    square_to_coordinates,
)
from pipechess.board.state import BoardState

__all__ = [
    'BoardState',
    'DecodedMove',
    'MoveKind',
    'decode_move',
    'coordinates_to_square',
    'square_to_coordinates',
    'render_grid',
]

"""
Legality from a python-chess replay of the history.

Structured alternative to scraping perft text: the history is pushed onto
a chess.Board and its move generator lists the legal moves. No engine
round trip is needed, which also makes it a reference to check the perft
scrape against.
"""

from typing import Sequence

import chess

from pipechess.legality.base import LegalityOracle, LegalMoveSet


class ReplayLegalityOracle(LegalityOracle):
    """Legality oracle that replays the history on a python-chess board."""

    def legal_moves(self, history: Sequence[str]) -> LegalMoveSet:
        """
        Raises:
            ValueError: If history contains a move that is illegal when replayed
        """
        board = chess.Board()
        for token in history:
            # push_uci validates legality and raises ValueError otherwise
            board.push_uci(token)

        return LegalMoveSet((move.uci() for move in board.legal_moves), history)

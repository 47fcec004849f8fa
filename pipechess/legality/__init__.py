"""
Legality Module

Legal move sources for the turn controller. The key design principle is
that oracles are SWAPPABLE: the controller works with any oracle that
implements the LegalityOracle interface.

Key Components:
    - LegalityOracle (ABC): legal_moves(history) -> LegalMoveSet
    - PerftLegalityOracle: scrapes the engine's 'go perft 1' listing
    - ReplayLegalityOracle: replays the history with python-chess
    - LegalMoveSet: immutable move set tied to one history
"""

from pipechess.legality.base import LegalityOracle, LegalMoveSet
from pipechess.legality.perft import PerftLegalityOracle
from pipechess.legality.replay import ReplayLegalityOracle

__all__ = [
    'LegalityOracle',
    'LegalMoveSet',
    'PerftLegalityOracle',
    'ReplayLegalityOracle',
]

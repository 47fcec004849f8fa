"""
UCI Client Interface

Host side of the Universal Chess Interface (UCI) protocol: this package
talks to an engine such as Stockfish rather than implementing one.

Sentinels the client waits for:
    uciok           identification round complete
    readyok         readiness round complete
    Nodes searched  perft listing complete
    bestmove        search complete, followed by the move

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from pipechess.uci.parsing import parse_best_move, scrape_move_candidates
from pipechess.uci.session import EngineSession, position_command

__all__ = [
    'EngineSession',
    'parse_best_move',
    'position_command',
    'scrape_move_candidates',
]

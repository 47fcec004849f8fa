"""
Game Module

Turn-based human-vs-engine loop on top of the engine session.

Key Components:
    - TurnController: state machine owning the BoardState
    - ConsoleIO: terminal move prompt and text board
    - cli.main: argparse entry point (python -m pipechess.game)
"""

from pipechess.game.controller import QUIT_TOKEN, TurnController, TurnState
from pipechess.game.console import ConsoleIO

__all__ = [
    'QUIT_TOKEN',
    'TurnController',
    'TurnState',
    'ConsoleIO',
]

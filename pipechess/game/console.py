"""
Console collaborator: text board, move prompt, one-line messages.

The turn controller only depends on the MoveSource and BoardView shapes
below, so a graphical front end can replace ConsoleIO without changes to
the game loop.
"""

import sys
from typing import Callable, Optional, Protocol, TextIO

import numpy as np

from pipechess.board.representation import render_grid
from pipechess.game.controller import QUIT_TOKEN


class MoveSource(Protocol):
    """Anything that can supply the user's next move token."""

    def read_move(self) -> str:
        """Return a move token such as 'e2e4', or 'quit'."""


class BoardView(Protocol):
    """Anything that can display a board snapshot and short messages."""

    def show_board(self, grid: np.ndarray) -> None:
        """Display an 8x8 symbol grid (row 0 at the top)."""

    def show_message(self, text: str) -> None:
        """Display a one-line message."""


class ConsoleIO:
    """
    Terminal implementation of MoveSource and BoardView.

    End of input is treated as 'quit' so a closed terminal ends the game
    cleanly.
    """

    def __init__(
        self,
        prompt: str = "Your move: ",
        flipped: bool = False,
        input_fn: Optional[Callable[[str], str]] = None,
        out: Optional[TextIO] = None,
    ):
        self.prompt = prompt
        self.flipped = flipped
        self._input = input_fn if input_fn is not None else input
        self._out = out if out is not None else sys.stdout

    def read_move(self) -> str:
        try:
            return self._input(self.prompt).strip()
        except EOFError:
            return QUIT_TOKEN

    def show_board(self, grid: np.ndarray) -> None:
        print(render_grid(grid, self.flipped), file=self._out)
        print(file=self._out)

    def show_message(self, text: str) -> None:
        print(text, file=self._out)

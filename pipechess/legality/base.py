"""
Abstract Legality Oracle Interface

The turn controller asks "which moves are legal here?" through this
interface only, so the source of the answer can be swapped without
touching the game loop:

    PerftLegalityOracle   scrape the engine's 'go perft 1' listing
    ReplayLegalityOracle  replay the history on a python-chess board

Key Principles:
    1. A LegalMoveSet belongs to exactly one history
    2. Results are never cached across moves; ask again after every ply
    3. An empty set means the side to move has no legal move
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Iterator, Sequence, Tuple

from pipechess.uci.parsing import move_prefixes


class LegalMoveSet:
    """
    Immutable set of legal move tokens for one position.

    Membership is exact: 'e7e8q' is legal when the engine listed 'e7e8q';
    plain 'e7e8' is not. The 4-character view is available as prefixes.

    Attributes:
        history: Move history of the position this set was computed for
        moves: Full move tokens
    """

    def __init__(self, moves: Iterable[str], history: Sequence[str] = ()):
        self.moves: FrozenSet[str] = frozenset(moves)
        self.history: Tuple[str, ...] = tuple(history)

    @property
    def prefixes(self) -> FrozenSet[str]:
        """Deduplicated from-square + to-square prefixes."""
        return frozenset(move_prefixes(self.moves))

    @property
    def is_empty(self) -> bool:
        return not self.moves

    def is_for(self, history: Sequence[str]) -> bool:
        """True if this set was computed for the given history."""
        return self.history == tuple(history)

    def __contains__(self, move: object) -> bool:
        return move in self.moves

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.moves))

    def __len__(self) -> int:
        return len(self.moves)

    def __repr__(self) -> str:
        return f"LegalMoveSet({len(self.moves)} moves, ply={len(self.history)})"


class LegalityOracle(ABC):
    """
    Abstract base class for legal move sources.

    Methods:
        legal_moves(history): Legal moves in the position reached by history
    """

    @abstractmethod
    def legal_moves(self, history: Sequence[str]) -> LegalMoveSet:
        """
        Compute the legal moves after history, played from the start position.

        Args:
            history: Move tokens played so far

        Returns:
            LegalMoveSet for that exact history
        """
        pass

    def is_legal(self, history: Sequence[str], move: str) -> bool:
        """Convenience check for a single move."""
        return move in self.legal_moves(history)

    def __repr__(self) -> str:
        """String representation of oracle."""
        return f"{self.__class__.__name__}()"

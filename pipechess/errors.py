"""
Error Taxonomy

Transport and process failures are fatal to an engine session and must
propagate to the caller. Move validation failures are local: the game
loop catches them and re-prompts.

    EngineError
    ├── SpawnError            engine binary missing or not executable
    ├── EngineDisconnected    a pipe closed or the child exited
    ├── EngineTimeout         a read passed its deadline
    └── ProtocolParseFailure  sentinel seen, payload absent or malformed

    IllegalMoveRejected (ValueError)  move not in the current legal set
"""

from typing import Iterable, Optional


class EngineError(Exception):
    """Base class for engine session failures."""


class SpawnError(EngineError):
    """The engine binary could not be located or executed."""

    def __init__(self, engine_path: str, reason: str = ""):
        self.engine_path = engine_path
        self.reason = reason
        message = f"Could not start engine: {engine_path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class EngineDisconnected(EngineError):
    """A stream to the engine closed unexpectedly."""


class EngineTimeout(EngineError):
    """The engine did not produce the expected sentinel before the deadline."""

    def __init__(self, sentinel: str, timeout: float, partial: str = ""):
        self.sentinel = sentinel
        self.timeout = timeout
        self.partial = partial
        super().__init__(
            f"Did not see '{sentinel}' within {timeout:.1f}s"
            f" ({len(partial)} chars received)"
        )


class ProtocolParseFailure(EngineError):
    """Engine output contained the sentinel but not a usable payload."""

    def __init__(self, message: str, transcript: str = ""):
        self.transcript = transcript
        super().__init__(message)


class IllegalMoveRejected(ValueError):
    """A user-supplied move is not in the current legal move set."""

    def __init__(self, move: str, legal: Optional[Iterable[str]] = None):
        self.move = move
        self.legal = sorted(legal) if legal is not None else []
        message = f"Illegal move: {move}"
        if self.needs_promotion_piece:
            message += f" (promotions need a piece letter, e.g. {move}q)"
        super().__init__(message)

    @property
    def needs_promotion_piece(self) -> bool:
        """True if the move is a legal promotion missing its piece letter."""
        return len(self.move) == 4 and any(
            len(legal) == 5 and legal.startswith(self.move) for legal in self.legal
        )

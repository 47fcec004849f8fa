"""
Engine session configuration.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pipechess.errors import SpawnError

# Locations probed when no engine path is given
STOCKFISH_CANDIDATES = [
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
]


def find_stockfish() -> str:
    """
    Auto-detect Stockfish binary location.

    Returns:
        Path to Stockfish binary

    Raises:
        SpawnError: If Stockfish not found
    """
    for candidate in STOCKFISH_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path

    raise SpawnError(
        "stockfish",
        "not found on PATH. Install with: brew install stockfish (macOS) "
        "or apt install stockfish (Linux)",
    )


@dataclass
class EngineConfig:
    """Configuration for one engine session.

    Groups the engine location, protocol options and the deadlines applied
    to every read, so a game can be started from a single object.
    """

    engine_path: Optional[str] = None
    """Path to the UCI engine binary (None = auto-detect Stockfish)"""

    engine_args: List[str] = field(default_factory=list)
    """Extra command line arguments passed to the engine"""

    search_depth: int = 10
    """Depth used for 'go depth N' when the engine picks its move"""

    read_timeout: Optional[float] = 10.0
    """Seconds to wait for a reply sentinel (None = wait forever)"""

    shutdown_timeout: float = 2.0
    """Seconds to wait for the engine to exit after 'quit' before killing it"""

    options: Dict[str, str] = field(default_factory=dict)
    """UCI options sent with 'setoption' during the handshake"""

    chunk_size: int = 4096
    """Maximum bytes read from the engine per system call"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.search_depth <= 0:
            raise ValueError(f"search_depth must be positive, got {self.search_depth}")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {self.read_timeout}")

        if self.shutdown_timeout <= 0:
            raise ValueError(
                f"shutdown_timeout must be positive, got {self.shutdown_timeout}"
            )

        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

        self.engine_args = [str(arg) for arg in self.engine_args]
        self.options = {str(k): str(v) for k, v in self.options.items()}

    def resolve_engine_path(self) -> str:
        """
        Return the engine binary to execute.

        Raises:
            SpawnError: If no path was configured and Stockfish cannot be found,
                or if the configured path names a directory
        """
        if self.engine_path is None:
            return find_stockfish()

        path = Path(self.engine_path)
        if path.is_dir():
            raise SpawnError(self.engine_path, "is a directory")

        return self.engine_path

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(\n"
            f"  Engine: {self.engine_path or '<auto-detect>'} {' '.join(self.engine_args)}\n"
            f"  Search depth: {self.search_depth}\n"
            f"  Timeouts: read={self.read_timeout}, shutdown={self.shutdown_timeout}\n"
            f"  Options: {self.options}\n"
            f")"
        )

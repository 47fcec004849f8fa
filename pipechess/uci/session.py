"""
UCI engine session.

Owns the engine process and both pipe directions for the lifetime of one
game. Every query re-sends the full move history, so the host never relies
on engine-side state beyond what the history replays.

Protocol Flow:
    Host → "uci"
    Engine → "id name Stockfish 16" ... "uciok"
    Host → "setoption name Threads value 2"     (one per configured option)
    Host → "isready"
    Engine → "readyok"
    Host → "position startpos moves e2e4 e7e5"
    Host → "go perft 1"
    Engine → "g1f3: 1" ... "Nodes searched: 29"
    Host → "go depth 10"
    Engine → "info depth 10 ..." ... "bestmove g1f3 ponder b8c6"
    Host → "quit"

At most one request is in flight: every send is followed by a blocking
read_until() before the next command goes out.
"""

import logging
from typing import Optional, Sequence

from pipechess.config import EngineConfig
from pipechess.errors import EngineDisconnected, ProtocolParseFailure
from pipechess.transport.process import EngineProcess
from pipechess.transport.transcript import CommandSender, TranscriptReader
from pipechess.uci.parsing import is_null_move, is_uci_move, parse_best_move

logger = logging.getLogger(__name__)

# Sentinels; changing any of these breaks handshake and legality parsing
UCIOK = "uciok"
READYOK = "readyok"
PERFT_DONE = "Nodes searched"
BESTMOVE = "bestmove"


def position_command(history: Sequence[str]) -> str:
    """Build the 'position' command replaying history from the start position."""
    if not history:
        return "position startpos"
    return "position startpos moves " + " ".join(history)


class EngineSession:
    """
    One UCI conversation with an engine child process.

    Attributes:
        config: EngineConfig the session was created with
        process: EngineProcess handle (None until start())
        handshake_transcript: Text received during the uci/isready handshake
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config else EngineConfig()
        self.process: Optional[EngineProcess] = None
        self.handshake_transcript = ""
        self._reader: Optional[TranscriptReader] = None
        self._sender: Optional[CommandSender] = None
        self._ready = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def is_ready(self) -> bool:
        return self._ready and self.process is not None and self.process.is_running

    def start(self) -> str:
        """
        Spawn the engine and complete the handshake.

        Returns:
            Handshake transcript

        Raises:
            SpawnError: If the engine cannot be executed
            EngineDisconnected / EngineTimeout: If the handshake fails
        """
        if self.process is not None:
            raise RuntimeError("Engine session already started")

        engine_path = self.config.resolve_engine_path()
        self.process = EngineProcess(
            engine_path,
            engine_args=self.config.engine_args,
            shutdown_timeout=self.config.shutdown_timeout,
            chunk_size=self.config.chunk_size,
        )
        channel = self.process.start()
        self._reader = TranscriptReader(channel, default_timeout=self.config.read_timeout)
        self._sender = CommandSender(channel)

        try:
            self.handshake_transcript = self.handshake()
        except Exception:
            self.close()
            raise

        return self.handshake_transcript

    def handshake(self) -> str:
        """
        Run the identification and readiness rounds.

        Returns:
            Combined transcript of both rounds
        """
        logger.info("Handshake: uci")
        self.send("uci")
        identification = self.read_until(UCIOK)

        for name, value in self.config.options.items():
            logger.info(f"Setting option {name}={value}")
            self.send(f"setoption name {name} value {value}")

        logger.info("Handshake: isready")
        self.send("isready")
        readiness = self.read_until(READYOK)

        self._ready = True
        logger.info("Engine ready")
        return identification + readiness

    def engine_name(self) -> Optional[str]:
        """Name reported in the 'id name' line of the handshake, if any."""
        for line in self.handshake_transcript.splitlines():
            if line.startswith("id name "):
                return line[len("id name "):].strip()
        return None

    def send(self, command: str) -> None:
        if self._sender is None:
            raise EngineDisconnected("Engine session is not started")
        self._require_running()
        self._sender.send(command)

    def read_until(self, sentinel: str, timeout: Optional[float] = None) -> str:
        if self._reader is None:
            raise EngineDisconnected("Engine session is not started")
        return self._reader.read_until(sentinel, timeout)

    def sync(self) -> None:
        """Block until the engine has processed every command sent so far."""
        self.send("isready")
        self.read_until(READYOK)

    def new_game(self) -> None:
        """Tell the engine a new game starts, then wait until it is ready."""
        logger.info("New game")
        self.send("ucinewgame")
        self.sync()

    def set_position(self, history: Sequence[str]) -> None:
        self.send(position_command(history))

    def perft_listing(self, history: Sequence[str], timeout: Optional[float] = None) -> str:
        """
        Run a one-ply perft from the position reached by history.

        Returns:
            Raw perft transcript, ending with the "Nodes searched" line
        """
        self.set_position(history)
        self.send("go perft 1")
        return self.read_until(PERFT_DONE, timeout)

    def best_move(
        self,
        history: Sequence[str],
        depth: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """
        Ask the engine for its move in the position reached by history.

        Args:
            history: Moves played from the start position
            depth: Search depth (default: config.search_depth)
            timeout: Read deadline (default: config.read_timeout)

        Returns:
            Move token, or None if the engine reports no move (game over)

        Raises:
            ProtocolParseFailure: If the bestmove payload is missing or malformed
        """
        depth = depth if depth else self.config.search_depth

        self.set_position(history)
        logger.info(f"Searching: depth={depth}, ply={len(history)}")
        self.send(f"go depth {depth}")
        transcript = self.read_until(BESTMOVE, timeout)

        move = parse_best_move(transcript)
        if move is None:
            raise ProtocolParseFailure("bestmove line has no move", transcript)

        if is_null_move(move):
            logger.info(f"Engine has no move ({move})")
            return None

        if not is_uci_move(move):
            raise ProtocolParseFailure(f"Malformed bestmove payload: {move!r}", transcript)

        logger.info(f"Engine best move: {move}")
        return move

    def quit(self) -> None:
        """Send 'quit' and release the process."""
        self.close()

    def close(self) -> None:
        self._ready = False
        if self.process is not None:
            self.process.shutdown(quit_command="quit")

    def _require_running(self) -> None:
        if self.process is None or not self.process.is_running:
            code = self.process.returncode if self.process else None
            raise EngineDisconnected(f"Engine process has exited (exit code={code})")

    def __repr__(self) -> str:
        return f"EngineSession({self.process!r}, ready={self._ready})"

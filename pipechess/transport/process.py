"""
Engine process handle.

Spawns the engine as a child process with its stdin and stdout wired to a
ByteChannel, and guarantees the child is signaled and reaped exactly once,
whichever way the session ends.

Usage:
    with EngineProcess("/usr/bin/stockfish") as proc:
        proc.channel.write_all(b"uci\\n")
        ...
    # child has exited and both pipe ends are closed here
"""

import logging
import os
import subprocess
from typing import List, Optional

from pipechess.errors import EngineDisconnected, SpawnError
from pipechess.transport.channel import ByteChannel

logger = logging.getLogger(__name__)


class EngineProcess:
    """
    Owns one engine child process and its byte channel.

    Attributes:
        engine_path: Binary that was (or will be) executed
        engine_args: Extra command line arguments
        shutdown_timeout: Seconds to wait for a clean exit before killing
        channel: ByteChannel connected to the child (None before start())
    """

    def __init__(
        self,
        engine_path: str,
        engine_args: Optional[List[str]] = None,
        shutdown_timeout: float = 2.0,
        chunk_size: int = 4096,
    ):
        self.engine_path = engine_path
        self.engine_args = list(engine_args or [])
        self.shutdown_timeout = shutdown_timeout
        self.chunk_size = chunk_size

        self.channel: Optional[ByteChannel] = None
        self._process: Optional[subprocess.Popen] = None
        self._reaped = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> Optional[int]:
        if self._process is None:
            return None
        return self._process.poll()

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self) -> ByteChannel:
        """
        Start the engine process.

        Returns:
            The ByteChannel connected to the child

        Raises:
            SpawnError: If the binary cannot be located or executed
        """
        if self._process is not None:
            raise RuntimeError("Engine process already started")

        command = [self.engine_path, *self.engine_args]
        logger.info(f"Starting engine: {' '.join(command)}")

        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                bufsize=0,
            )
        except FileNotFoundError as e:
            raise SpawnError(self.engine_path, "file not found") from e
        except PermissionError as e:
            raise SpawnError(self.engine_path, "permission denied") from e
        except OSError as e:
            raise SpawnError(self.engine_path, str(e)) from e

        # The channel owns private copies of both pipe ends
        read_fd = os.dup(process.stdout.fileno())
        write_fd = os.dup(process.stdin.fileno())
        process.stdout.close()
        process.stdin.close()

        self._process = process
        self.channel = ByteChannel(read_fd, write_fd, chunk_size=self.chunk_size)
        logger.info(f"Engine started (pid={process.pid})")
        return self.channel

    def require_channel(self) -> ByteChannel:
        """
        Return the live channel.

        Raises:
            EngineDisconnected: If the process was never started or was shut down
        """
        if self.channel is None or self._reaped:
            raise EngineDisconnected("Engine process is not running")
        return self.channel

    def shutdown(self, quit_command: Optional[str] = "quit") -> Optional[int]:
        """
        Stop the engine and reclaim its resources.

        Sends quit_command if the child is still alive, closes the host->engine
        stream, waits for exit (killing the child after shutdown_timeout) and
        closes the engine->host stream. Safe to call more than once.

        Returns:
            The child's exit code, or None if it was never started
        """
        if self._process is None:
            return None
        if self._reaped:
            return self._process.returncode

        process = self._process
        channel = self.channel

        try:
            if quit_command and process.poll() is None and channel is not None:
                try:
                    channel.write_all((quit_command + "\n").encode())
                except EngineDisconnected:
                    logger.debug("Engine input already closed, skipping quit command")

            if channel is not None:
                channel.close_write()

            try:
                process.wait(timeout=self.shutdown_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(
                    f"Engine (pid={process.pid}) did not exit within "
                    f"{self.shutdown_timeout}s, killing it"
                )
                process.kill()
                process.wait()
        finally:
            if channel is not None:
                channel.close()
            self._reaped = True

        logger.info(f"Engine stopped (pid={process.pid}, exit code={process.returncode})")
        return process.returncode

    def __repr__(self) -> str:
        state = "running" if self.is_running else "stopped"
        return f"EngineProcess({self.engine_path!r}, pid={self.pid}, {state})"

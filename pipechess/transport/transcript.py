"""
Protocol transcript reader and command sender.

UCI replies arrive in arbitrary chunks. The reader accumulates bytes until
a sentinel substring (e.g. "uciok", "bestmove") appears and the line that
carries it is complete, then hands back the whole transcript. Detection
works when the sentinel is split across chunk boundaries.

Bytes that arrive after the sentinel line stay buffered for the next call,
so a reply that starts in the same chunk is not lost.
"""

import logging
import time
from typing import Optional

from pipechess.errors import EngineDisconnected, EngineTimeout
from pipechess.transport.channel import ByteChannel, ReadStatus

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class TranscriptReader:
    """
    Accumulates engine output until a sentinel is observed.

    Attributes:
        channel: ByteChannel to read from
        default_timeout: Deadline applied when read_until() gets no timeout
    """

    def __init__(self, channel: ByteChannel, default_timeout: Optional[float] = None):
        self.channel = channel
        self.default_timeout = default_timeout
        self._pending = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes received but not yet returned by read_until()."""
        return bytes(self._pending)

    def read_until(self, sentinel: str, timeout: Optional[float] = None) -> str:
        """
        Read until sentinel has been seen and its line is complete.

        Args:
            sentinel: Substring marking the end of the reply
            timeout: Seconds before giving up (None = use default_timeout;
                if that is None too, wait forever)

        Returns:
            Accumulated text, up to and including the sentinel's line

        Raises:
            EngineDisconnected: If the stream closes before the sentinel
            EngineTimeout: If the deadline passes before the sentinel
        """
        if not sentinel:
            raise ValueError("sentinel must be a non-empty string")

        if timeout is None:
            timeout = self.default_timeout
        deadline = time.monotonic() + timeout if timeout is not None else None

        needle = sentinel.encode(ENCODING)
        buffer = self._pending
        search_from = 0

        while True:
            index = buffer.find(needle, search_from)
            if index >= 0:
                newline = buffer.find(b"\n", index + len(needle))
                if newline >= 0:
                    end = newline + 1
                    transcript = bytes(buffer[:end])
                    del buffer[:end]
                    text = transcript.decode(ENCODING, errors="replace")
                    logger.debug(f"<<< {text.rstrip()}")
                    return text
                # Sentinel seen, its line is still arriving
                search_from = index
            else:
                # Resume where a sentinel split across chunks could start
                search_from = max(0, len(buffer) - len(needle) + 1)

            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    partial = buffer.decode(ENCODING, errors="replace")
                    logger.error(f"Timed out waiting for '{sentinel}'")
                    raise EngineTimeout(sentinel, timeout, partial)

            result = self.channel.read_chunk(remaining)

            if result.status is ReadStatus.DATA:
                buffer.extend(result.data)
            elif result.status is ReadStatus.CLOSED:
                partial = buffer.decode(ENCODING, errors="replace")
                logger.error(
                    f"Engine stream closed while waiting for '{sentinel}' "
                    f"({len(partial)} chars pending)"
                )
                raise EngineDisconnected(
                    f"Engine closed its output while waiting for '{sentinel}'"
                )
            # WOULD_BLOCK: loop re-checks the deadline


class CommandSender:
    """Writes newline-terminated commands to the engine."""

    def __init__(self, channel: ByteChannel):
        self.channel = channel

    def send(self, command: str) -> None:
        """
        Send one command line.

        Raises:
            EngineDisconnected: If the engine's input stream is closed
        """
        logger.debug(f">>> {command}")
        self.channel.write_all((command + "\n").encode(ENCODING))

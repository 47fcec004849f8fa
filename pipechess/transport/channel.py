"""
Byte channel pair between the host and the engine process.

Two unidirectional streams wrapped as raw file descriptors:

    host  --(write_fd)-->  engine stdin
    host  <--(read_fd)---  engine stdout

Reads distinguish three outcomes instead of retrying blindly on an empty
read:

    DATA         bytes were received
    WOULD_BLOCK  no data before the timeout, stream still open
    CLOSED       end of stream (engine exited or closed stdout)

Readiness is checked with select(), so this module is POSIX-only for pipes.
"""

import errno
import logging
import os
import select
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pipechess.errors import EngineDisconnected

logger = logging.getLogger(__name__)


class ReadStatus(Enum):
    DATA = "data"
    WOULD_BLOCK = "would_block"
    CLOSED = "closed"


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a single read attempt."""

    status: ReadStatus
    data: bytes = b""

    @property
    def is_closed(self) -> bool:
        return self.status is ReadStatus.CLOSED


WOULD_BLOCK = ReadResult(ReadStatus.WOULD_BLOCK)
CLOSED = ReadResult(ReadStatus.CLOSED)


class ByteChannel:
    """
    Duplex byte transport over a pair of pipe file descriptors.

    The channel does not own the process on the other side; closing it only
    closes the two descriptors.

    Attributes:
        read_fd: Descriptor of the engine->host stream
        write_fd: Descriptor of the host->engine stream
        chunk_size: Maximum bytes returned by one read_chunk() call
    """

    def __init__(self, read_fd: int, write_fd: int, chunk_size: int = 4096):
        self.read_fd = read_fd
        self.write_fd = write_fd
        self.chunk_size = chunk_size
        self._read_closed = False
        self._write_closed = False

    @property
    def closed(self) -> bool:
        return self._read_closed and self._write_closed

    def read_chunk(self, timeout: Optional[float] = None) -> ReadResult:
        """
        Read whatever the engine has written, up to chunk_size bytes.

        Args:
            timeout: Seconds to wait for data (None = block until data or EOF)

        Returns:
            ReadResult with status DATA, WOULD_BLOCK or CLOSED
        """
        if self._read_closed:
            return CLOSED

        if timeout is not None and timeout < 0:
            timeout = 0

        try:
            ready, _, _ = select.select([self.read_fd], [], [], timeout)
        except (OSError, ValueError) as e:
            # Descriptor closed underneath us
            logger.debug(f"select() on fd {self.read_fd} failed: {e}")
            return CLOSED

        if not ready:
            return WOULD_BLOCK

        try:
            data = os.read(self.read_fd, self.chunk_size)
        except BlockingIOError:
            return WOULD_BLOCK
        except OSError as e:
            if e.errno == errno.EINTR:
                return WOULD_BLOCK
            logger.debug(f"read() on fd {self.read_fd} failed: {e}")
            return CLOSED

        if not data:
            return CLOSED

        return ReadResult(ReadStatus.DATA, data)

    def write_all(self, data: bytes) -> None:
        """
        Write every byte of data, retrying short writes until complete.

        Raises:
            EngineDisconnected: If the host->engine stream is closed
        """
        if self._write_closed:
            raise EngineDisconnected("Write to closed engine stream")

        view = memoryview(data)
        while view:
            try:
                written = os.write(self.write_fd, view)
            except InterruptedError:
                continue
            except (BrokenPipeError, ConnectionResetError) as e:
                raise EngineDisconnected(f"Engine closed its input: {e}") from e
            except OSError as e:
                if e.errno == errno.EBADF:
                    raise EngineDisconnected(f"Engine stream is closed: {e}") from e
                raise
            view = view[written:]

    def close_write(self) -> None:
        """Close the host->engine stream (the engine sees EOF on stdin)."""
        if not self._write_closed:
            self._write_closed = True
            _close_quietly(self.write_fd)

    def close_read(self) -> None:
        if not self._read_closed:
            self._read_closed = True
            _close_quietly(self.read_fd)

    def close(self) -> None:
        self.close_write()
        self.close_read()

    def __repr__(self) -> str:
        return (
            f"ByteChannel(read_fd={self.read_fd}, write_fd={self.write_fd}, "
            f"closed={self.closed})"
        )


def _close_quietly(fd: int) -> None:
    try:
        os.close(fd)
    except OSError as e:
        # Already closed by the owning file object
        logger.debug(f"close() on fd {fd}: {e}")

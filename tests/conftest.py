"""
Shared fixtures.

Engine-level tests run against tests/fixtures/fake_uci_engine.py, spawned
with the current interpreter, so no Stockfish install is needed.
"""

import os
from typing import Callable, Generator

import pytest

from pipechess.transport.channel import ByteChannel
from pipechess.uci.session import EngineSession
from tests.fixtures import fake_engine_config


@pytest.fixture
def make_session() -> Generator[Callable[..., EngineSession], None, None]:
    """Factory for started fake-engine sessions; all are closed at teardown."""
    sessions = []

    def factory(*flags: str, **kwargs) -> EngineSession:
        session = EngineSession(fake_engine_config(*flags, **kwargs))
        session.start()
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.close()


@pytest.fixture
def session(make_session) -> EngineSession:
    """A started session with the default fake engine."""
    return make_session()


@pytest.fixture
def pipe_channel() -> Generator[tuple, None, None]:
    """
    ByteChannel reading from one OS pipe and writing to another.

    Yields:
        (channel, feed_fd, drain_fd): write to feed_fd to make data readable
        on the channel; read from drain_fd to see what the channel wrote
    """
    inbound_read, inbound_write = os.pipe()
    outbound_read, outbound_write = os.pipe()
    channel = ByteChannel(inbound_read, outbound_write, chunk_size=4096)

    yield channel, inbound_write, outbound_read

    channel.close()
    for fd in (inbound_write, outbound_read):
        try:
            os.close(fd)
        except OSError:
            pass

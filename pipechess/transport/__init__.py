"""
Transport Module

Raw plumbing between the host and the engine child process.

Key Components:
    - ByteChannel: duplex pipe transport with DATA / WOULD_BLOCK / CLOSED reads
    - EngineProcess: spawn, teardown and reaping of the engine binary
    - TranscriptReader: accumulate output until a sentinel line is complete
    - CommandSender: newline-terminated command writes

Data Flow:
    CommandSender.send("isready") → ByteChannel.write_all → engine stdin
    engine stdout → ByteChannel.read_chunk → TranscriptReader.read_until("readyok")
"""

from pipechess.transport.channel import ByteChannel, ReadResult, ReadStatus
from pipechess.transport.process import EngineProcess
from pipechess.transport.transcript import CommandSender, TranscriptReader

__all__ = [
    'ByteChannel',
    'ReadResult',
    'ReadStatus',
    'EngineProcess',
    'CommandSender',
    'TranscriptReader',
]

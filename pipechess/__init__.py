"""
pipechess

Play chess against an external UCI engine (Stockfish by default) driven
over stdin/stdout pipes, with a local board kept in lockstep with the
engine through a replayed move history.

## Architecture

The package is organized leaf-first:

1. **transport**: Pipes and process lifecycle
   - ByteChannel: duplex pipe I/O with DATA / WOULD_BLOCK / CLOSED reads
   - EngineProcess: spawn, quit, kill and reap the engine exactly once
   - TranscriptReader: read until a sentinel line, with deadlines

2. **uci**: Host side of the UCI protocol
   - EngineSession: handshake, position replay, perft, best move
   - Transcript parsing (bestmove, perft scrape)

3. **legality**: Swappable legal move sources
   - PerftLegalityOracle: scrape 'go perft 1'
   - ReplayLegalityOracle: python-chess replay

4. **board**: Local board mirror
   - BoardState: grid + history, updated atomically
   - Move decoding for castling, en passant and promotion

5. **game**: Turn controller, console and CLI

## Quick Start

```python
from pipechess.config import EngineConfig
from pipechess.uci import EngineSession
from pipechess.game import TurnController

with EngineSession(EngineConfig(search_depth=8)) as session:
    game = TurnController(session)
    game.start()
    game.play_round("e2e4")
    print(game.board.history)   # ('e2e4', '<engine reply>')
```

### From the terminal

```bash
python -m pipechess.game --engine /usr/bin/stockfish --depth 10
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from pipechess.errors import (
    EngineDisconnected,
    EngineError,
    EngineTimeout,
    IllegalMoveRejected,
    ProtocolParseFailure,
    SpawnError,
)

__all__ = [
    'EngineError',
    'SpawnError',
    'EngineDisconnected',
    'EngineTimeout',
    'ProtocolParseFailure',
    'IllegalMoveRejected',
]

#!/usr/bin/env python3
"""
Engine Smoke Check

Starts a UCI engine over pipes, runs the handshake, a perft legality
listing and a best-move search from a few positions, and prints timings.
Use it to check that an engine binary works with pipechess before playing.

Usage:
    python tools/engine_smoke.py [--engine PATH] [--depth 8] [--timeout 10]
"""

import sys
import argparse
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pipechess.config import EngineConfig
from pipechess.errors import EngineError
from pipechess.legality import PerftLegalityOracle, ReplayLegalityOracle
from pipechess.uci import EngineSession

# Histories checked against the python-chess reference
SAMPLE_HISTORIES = [
    [],
    ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6"],
    ["e2e4", "d7d5", "e4e5", "f7f5"],
]


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.1f}s"


def run_smoke(config: EngineConfig) -> bool:
    """
    Run the smoke check.

    Returns:
        True if the perft listing matched the reference in every position
    """
    print("=" * 60)
    print("ENGINE SMOKE CHECK")
    print("=" * 60)

    all_match = True
    reference = ReplayLegalityOracle()

    start = time.time()
    with EngineSession(config) as session:
        print(f"Engine: {session.engine_name() or config.engine_path}")
        print(f"Handshake: {format_time(time.time() - start)}")
        print("-" * 60)

        oracle = PerftLegalityOracle(session)
        for history in SAMPLE_HISTORIES:
            t0 = time.time()
            legal = oracle.legal_moves(history)
            perft_time = time.time() - t0

            expected = reference.legal_moves(history)
            match = legal.moves == expected.moves
            all_match = all_match and match

            t0 = time.time()
            best = session.best_move(history)
            search_time = time.time() - t0

            label = " ".join(history) if history else "startpos"
            print(f"Position: {label}")
            print(f"  Legal moves: {len(legal)} ({'match' if match else 'MISMATCH'}, {format_time(perft_time)})")
            print(f"  Best move:   {best} ({format_time(search_time)})")

    print("=" * 60)
    print(f"Result: {'OK' if all_match else 'MISMATCH'}")
    return all_match


def main():
    parser = argparse.ArgumentParser(description="Smoke-check a UCI engine over pipes")
    parser.add_argument("--engine", type=str, default=None, help="Engine binary")
    parser.add_argument("--depth", type=int, default=8, help="Search depth")
    parser.add_argument("--timeout", type=float, default=10.0, help="Read timeout in seconds")
    args = parser.parse_args()

    config = EngineConfig(
        engine_path=args.engine,
        search_depth=args.depth,
        read_timeout=args.timeout,
    )

    try:
        ok = run_smoke(config)
    except EngineError as e:
        print(f"Engine error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0 if ok else 2)


if __name__ == "__main__":
    main()

"""
Command line entry point: play against a UCI engine in the terminal.

Usage:
    python -m pipechess.game [--engine PATH] [--depth 10] [--timeout 10]
                             [--option Threads=2] [--play-black]
                             [--structured-legality] [--debug]
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import chess

from pipechess.config import EngineConfig
from pipechess.errors import EngineError
from pipechess.game.console import ConsoleIO
from pipechess.game.controller import TurnController
from pipechess.legality import PerftLegalityOracle, ReplayLegalityOracle
from pipechess.uci.session import EngineSession
from pipechess.utils.logs import DEFAULT_LOG_FILE, setup_logger


def parse_options(pairs: List[str]) -> Dict[str, str]:
    """Turn ['Threads=2', 'Hash=64'] into {'Threads': '2', 'Hash': '64'}."""
    options = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"Option must be NAME=VALUE, got {pair!r}")
        options[name.strip()] = value.strip()
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play chess against a UCI engine over pipes"
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Path to the UCI engine binary (default: auto-detect Stockfish)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=10,
        help="Search depth for the engine's moves (default: 10)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Seconds to wait for each engine reply (default: 10)",
    )
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="UCI option sent during the handshake (repeatable)",
    )
    parser.add_argument(
        "--play-black",
        action="store_true",
        help="Play Black; the engine moves first",
    )
    parser.add_argument(
        "--structured-legality",
        action="store_true",
        help="Validate moves with python-chess instead of scraping 'go perft 1'",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help=f"Session log file (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every engine command and reply",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = parse_options(args.option)
        config = EngineConfig(
            engine_path=args.engine,
            search_depth=args.depth,
            read_timeout=args.timeout,
            options=options,
        )
    except (argparse.ArgumentTypeError, ValueError) as e:
        parser.error(str(e))

    setup_logger(debug=args.debug, log_file=args.log_file, console=True)

    user_color = chess.BLACK if args.play_black else chess.WHITE
    session = EngineSession(config)
    oracle = ReplayLegalityOracle() if args.structured_legality else PerftLegalityOracle(session)
    controller = TurnController(session, oracle=oracle, user_color=user_color)
    console = ConsoleIO(flipped=args.play_black)

    try:
        controller.run(console)
    except EngineError as e:
        print(f"Engine error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    return 0

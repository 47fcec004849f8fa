"""
Parsing of engine transcripts.

Two payloads are extracted from raw UCI output:

    bestmove line    "bestmove e2e4 ponder e7e5"  →  "e2e4"
    perft listing    "e2e4: 1\\n...\\nNodes searched: 20"  →  {"e2e4", ...}

The perft scrape is a heuristic over a diagnostic listing, not a structured
API. A token counts as a move candidate when it is at least 4 characters
long and its third character is a file letter a-h. That shape test is
deliberately permissive and admits non-moves that happen to match it:
"searched:" becomes "sear". Callers that need a clean set should filter the
candidates (see PerftLegalityOracle(strict=True)).
"""

from typing import Iterable, Optional, Set

import chess

BESTMOVE_TOKEN = "bestmove"

# Engines report "no legal move" with one of these instead of a move
NULL_MOVES = frozenset({"(none)", "0000", "none"})

FILES = "abcdefgh"


def parse_best_move(text: str) -> Optional[str]:
    """
    Extract the best move announced in a search transcript.

    Args:
        text: Raw engine output

    Returns:
        The token following the last "bestmove" token, or None if the
        transcript has no bestmove announcement with a payload
    """
    tokens = text.split()
    for i in range(len(tokens) - 1, -1, -1):
        if tokens[i] == BESTMOVE_TOKEN:
            if i + 1 < len(tokens):
                return tokens[i + 1]
            return None
    return None


def is_null_move(token: Optional[str]) -> bool:
    """True if the engine announced that it has no move to play."""
    return token is not None and token.lower() in NULL_MOVES


def is_uci_move(token: str) -> bool:
    """True if token parses as a long-algebraic move (e2e4, e7e8q)."""
    try:
        move = chess.Move.from_uci(token)
    except ValueError:
        return False
    return bool(move)


def scrape_move_candidates(text: str) -> Set[str]:
    """
    Collect tokens shaped like moves from a perft listing.

    Trailing ':' separators are stripped and candidates are cut to at most
    5 characters (4 for the squares plus an optional promotion piece).

    Returns:
        Set of candidate move tokens (may contain non-moves, see module doc)
    """
    candidates = set()
    for token in text.split():
        if len(token) < 4 or token[2] not in FILES:
            continue
        token = token.rstrip(":")
        if len(token) < 4:
            continue
        candidates.add(token[:5])
    return candidates


def move_prefixes(tokens: Iterable[str]) -> Set[str]:
    """Deduplicated 4-character prefixes (from-square + to-square)."""
    return {token[:4] for token in tokens if len(token) >= 4}

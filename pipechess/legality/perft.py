"""
Legality from the engine's perft listing.

'go perft 1' is a diagnostic command: the engine prints one line per legal
move with the node count below it, then a summary:

    a2a3: 1
    b2b3: 1
    ...
    Nodes searched: 20

There is no structured legality query in plain UCI, so the move list is
scraped from that text (see pipechess.uci.parsing for the heuristic and
its known false positives).
"""

import logging
from typing import Sequence

from pipechess.legality.base import LegalityOracle, LegalMoveSet
from pipechess.uci.parsing import is_uci_move, scrape_move_candidates
from pipechess.uci.session import EngineSession

logger = logging.getLogger(__name__)


class PerftLegalityOracle(LegalityOracle):
    """
    Legality oracle backed by a running engine session.

    Args:
        session: Started EngineSession
        strict: Drop scraped candidates that do not parse as UCI moves.
            With strict=False the raw shape heuristic is returned, which can
            contain tokens like 'sear' from "Nodes searched:".
    """

    def __init__(self, session: EngineSession, strict: bool = True):
        self.session = session
        self.strict = strict

    def legal_moves(self, history: Sequence[str]) -> LegalMoveSet:
        transcript = self.session.perft_listing(history)
        candidates = scrape_move_candidates(transcript)

        if self.strict:
            rejected = {token for token in candidates if not is_uci_move(token)}
            if rejected:
                logger.debug(f"Dropped non-move tokens from perft listing: {sorted(rejected)}")
            candidates -= rejected

        logger.debug(f"Legal moves at ply {len(history)}: {len(candidates)}")
        return LegalMoveSet(candidates, history)

    def __repr__(self) -> str:
        return f"PerftLegalityOracle(strict={self.strict})"

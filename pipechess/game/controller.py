"""
Turn Controller

Runs the human-vs-engine game loop and is the only code that mutates the
board. Each round:

    1. show the board (console collaborator)
    2. ask the oracle for the legal moves of the current history
    3. accept the user's move only if it is in that set
    4. apply it (board + history together)
    5. ask the engine for its move at the configured depth and apply it

States:

    AWAITING_HANDSHAKE → AWAITING_USER_MOVE → USER_MOVE_APPLIED
        → AWAITING_ENGINE_MOVE → ENGINE_MOVE_APPLIED → AWAITING_USER_MOVE ...

    'quit', an empty legal move set, or an engine null move → TERMINATED

An illegal move raises IllegalMoveRejected and leaves the state, board and
history unchanged. Check, mate and draws are not evaluated locally; the
game ends when either side has no legal move. run() checks the user's
legal set before prompting, so a mated user is told before typing.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

import chess
import numpy as np

from pipechess.board.moves import DecodedMove
from pipechess.board.state import BoardState
from pipechess.errors import EngineError, IllegalMoveRejected, ProtocolParseFailure
from pipechess.legality.base import LegalityOracle, LegalMoveSet
from pipechess.legality.perft import PerftLegalityOracle
from pipechess.uci.session import EngineSession

logger = logging.getLogger(__name__)

QUIT_TOKEN = "quit"

BoardListener = Callable[[np.ndarray, DecodedMove], None]


class TurnState(Enum):
    AWAITING_HANDSHAKE = "awaiting_handshake"
    AWAITING_USER_MOVE = "awaiting_user_move"
    USER_MOVE_APPLIED = "user_move_applied"
    AWAITING_ENGINE_MOVE = "awaiting_engine_move"
    ENGINE_MOVE_APPLIED = "engine_move_applied"
    TERMINATED = "terminated"


class TurnController:
    """
    Orchestrates one game between a user and the engine.

    Attributes:
        session: EngineSession the engine moves come from
        oracle: LegalityOracle used to validate user moves
        board: BoardState owned by this controller
        user_color: Side the user plays (chess.WHITE or chess.BLACK)
        search_depth: Depth for the engine's search (None = session default)
        state: Current TurnState
        game_over_reason: Why the game ended on its own (None otherwise)
    """

    def __init__(
        self,
        session: EngineSession,
        oracle: Optional[LegalityOracle] = None,
        board: Optional[BoardState] = None,
        user_color: chess.Color = chess.WHITE,
        search_depth: Optional[int] = None,
    ):
        self.session = session
        self.oracle = oracle if oracle is not None else PerftLegalityOracle(session)
        self.board = board if board is not None else BoardState()
        self.user_color = user_color
        self.search_depth = search_depth

        self.state = TurnState.AWAITING_HANDSHAKE
        self.game_over_reason: Optional[str] = None
        self._listeners: List[BoardListener] = []
        self._turn_moves: Optional[LegalMoveSet] = None

    @property
    def is_terminated(self) -> bool:
        return self.state is TurnState.TERMINATED

    def add_board_listener(self, listener: BoardListener) -> None:
        """Register a callback run with (board snapshot, move) after each mutation."""
        self._listeners.append(listener)

    def current_board(self) -> np.ndarray:
        """Read-only snapshot of the board, oriented for the user's side."""
        return self.board.as_array(flipped=self.user_color == chess.BLACK)

    def start(self) -> None:
        """
        Complete the engine handshake and get ready for the first user move.

        If the user plays Black, the engine makes its first move here.
        """
        self._expect(TurnState.AWAITING_HANDSHAKE)

        if not self.session.is_ready:
            self.session.start()
        logger.info(f"Game started, user plays {chess.COLOR_NAMES[self.user_color]}")

        self.state = TurnState.AWAITING_USER_MOVE
        if self.board.side_to_move != self.user_color:
            self.engine_turn()

    def legal_moves(self) -> LegalMoveSet:
        """Legal moves for the current history (recomputed on every call)."""
        return self.oracle.legal_moves(self.board.history)

    def submit_user_move(self, token: str) -> Optional[DecodedMove]:
        """
        Validate and apply the user's move.

        Args:
            token: Move token such as 'e2e4', or 'quit'

        Returns:
            The applied move, or None if the game ended instead

        Raises:
            IllegalMoveRejected: If token is not legal here (nothing changes)
        """
        self._expect(TurnState.AWAITING_USER_MOVE)
        token = token.strip()

        if token == QUIT_TOKEN:
            logger.info("User quit")
            self.terminate()
            return None

        legal = self._legal_for_turn()
        if legal.is_empty:
            self._finish("no legal moves for the user")
            return None

        if token not in legal:
            logger.info(f"Rejected illegal move: {token}")
            raise IllegalMoveRejected(token, legal)

        move = self._apply(token)
        self.state = TurnState.USER_MOVE_APPLIED
        self._notify(move)
        return move

    def engine_turn(self) -> Optional[DecodedMove]:
        """
        Let the engine search and apply its best move.

        Returns:
            The applied move, or None if the engine has no move (game over)

        Raises:
            ProtocolParseFailure: If the engine's move cannot be applied locally
        """
        if self.state not in (TurnState.USER_MOVE_APPLIED, TurnState.AWAITING_USER_MOVE):
            raise RuntimeError(f"Engine cannot move in state {self.state.value}")

        self.state = TurnState.AWAITING_ENGINE_MOVE
        token = self.session.best_move(self.board.history, self.search_depth)

        if token is None:
            self._finish("engine has no legal move")
            return None

        try:
            move = self._apply(token)
        except ValueError as e:
            raise ProtocolParseFailure(
                f"Engine move {token} does not fit the local board: {e}"
            ) from e

        self.state = TurnState.ENGINE_MOVE_APPLIED
        self._notify(move)
        self.state = TurnState.AWAITING_USER_MOVE
        return move

    def play_round(self, token: str) -> Tuple[Optional[DecodedMove], Optional[DecodedMove]]:
        """
        Play the user's move and the engine's reply.

        Returns:
            (user move, engine move); either is None if the game ended
        """
        user_move = self.submit_user_move(token)
        if self.state is not TurnState.USER_MOVE_APPLIED:
            return user_move, None
        return user_move, self.engine_turn()

    def terminate(self) -> None:
        """Shut the engine down and end the game without touching the board."""
        if self.state is TurnState.TERMINATED:
            return
        self.session.quit()
        self.state = TurnState.TERMINATED

    def run(self, console) -> Optional[str]:
        """
        Interactive loop until the user quits or the game ends.

        Args:
            console: Object with read_move(), show_board(grid) and show_message(text)

        Returns:
            game_over_reason (None if the user quit)

        Raises:
            EngineError: Fatal engine failures, after the session is shut down
        """
        try:
            if self.state is TurnState.AWAITING_HANDSHAKE:
                self.start()

            while not self.is_terminated:
                if self._legal_for_turn().is_empty:
                    self._finish("no legal moves for the user")
                    break
                console.show_board(self.current_board())
                token = console.read_move()
                try:
                    self.play_round(token)
                except IllegalMoveRejected as e:
                    console.show_message(f"{e}. Try again.")
        except EngineError as e:
            logger.error(f"Fatal engine error: {e}", exc_info=True)
            self.state = TurnState.TERMINATED
            raise
        finally:
            self.session.close()

        if self.game_over_reason:
            console.show_board(self.current_board())
            console.show_message(f"Game over: {self.game_over_reason}")
        return self.game_over_reason

    def _legal_for_turn(self) -> LegalMoveSet:
        # One oracle query per position; a new ply invalidates it
        if self._turn_moves is None or not self._turn_moves.is_for(self.board.history):
            self._turn_moves = self.legal_moves()
        return self._turn_moves

    def _apply(self, token: str) -> DecodedMove:
        move = self.board.apply(token)
        logger.info(f"Ply {self.board.ply}: {token} ({move.kind.value})")
        return move

    def _finish(self, reason: str) -> None:
        logger.info(f"Game over: {reason}")
        self.game_over_reason = reason
        self.terminate()

    def _notify(self, move: DecodedMove) -> None:
        snapshot = self.current_board()
        for listener in self._listeners:
            listener(snapshot, move)

    def _expect(self, state: TurnState) -> None:
        if self.state is not state:
            raise RuntimeError(
                f"Expected state {state.value}, controller is {self.state.value}"
            )

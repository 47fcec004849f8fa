"""
Unit Tests for Board State

Tests for:
    - Coordinate mapping between (row, col) and square names
    - Move decoding: simple, castling, en passant, promotion
    - Atomic apply: grid and history change together or not at all
    - Replay of a history matches python-chess piece placement
"""

import chess
import numpy as np
import pytest

from pipechess.board import BoardState, MoveKind, decode_move
from pipechess.board.moves import apply_decoded
from pipechess.board.representation import (
    EMPTY,
    coordinates_to_square,
    flip_coordinates,
    grid_to_placement,
    placement_to_grid,
    square_to_coordinates,
)

# Covers en passant, promotion with capture, and both castling directions
SPECIAL_MOVES_GAME = [
    "e2e4", "d7d5",
    "e4e5", "f7f5",
    "e5f6", "b8c6",    # en passant
    "f6g7", "c8e6",
    "g7h8q", "d8d7",   # promotion capturing the h8 rook
    "g1f3", "e8c8",    # black castles queenside
    "f1e2", "a7a6",
    "e1g1",            # white castles kingside
]


class TestCoordinates:
    """Tests for coordinate mapping."""

    def test_corners(self):
        """Row 0 is rank 8, column 0 is the a-file."""
        assert square_to_coordinates("a8") == (0, 0)
        assert square_to_coordinates("h8") == (0, 7)
        assert square_to_coordinates("a1") == (7, 0)
        assert square_to_coordinates("h1") == (7, 7)

    def test_round_trip_all_squares(self):
        """coordinates_to_square inverts square_to_coordinates."""
        for name in chess.SQUARE_NAMES:
            assert coordinates_to_square(*square_to_coordinates(name)) == name

    def test_e2(self):
        assert square_to_coordinates("e2") == (6, 4)
        assert coordinates_to_square(6, 4) == "e2"

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            coordinates_to_square(8, 0)
        with pytest.raises(ValueError):
            square_to_coordinates("i9")

    def test_flip(self):
        """Flipping maps a1 onto h8's position and is its own inverse."""
        assert flip_coordinates(*square_to_coordinates("a1")) == square_to_coordinates("h8")
        assert flip_coordinates(*flip_coordinates(3, 5)) == (3, 5)


class TestGrid:
    """Tests for FEN placement conversion."""

    def test_start_position(self):
        grid = placement_to_grid()

        assert grid[7, 4] == "K"
        assert grid[0, 4] == "k"
        assert grid[4, 4] == EMPTY
        assert grid_to_placement(grid) == chess.STARTING_BOARD_FEN

    def test_invalid_placement(self):
        with pytest.raises(ValueError):
            placement_to_grid("not/a/board")

    def test_placement_run_lengths(self):
        """Empty runs at rank edges and mid-rank are counted the FEN way."""
        placement = "r3k2r/1p4p1/8/3Pp3/8/8/P6P/R3K2R"

        assert grid_to_placement(placement_to_grid(placement)) == placement

    def test_empty_grid(self):
        grid = np.full((8, 8), EMPTY, dtype="<U1")

        assert grid_to_placement(grid) == "8/8/8/8/8/8/8/8"


class TestDecodeMove:
    """Tests for decode_move on specific positions."""

    def test_simple(self):
        move = decode_move("g1f3", placement_to_grid())

        assert move.kind is MoveKind.SIMPLE
        assert move.piece == "N"
        assert move.captured is None

    def test_black_promotion(self):
        """Black promotions produce a black piece."""
        grid = placement_to_grid("4k3/8/8/8/8/8/p7/4K3")

        move = decode_move("a2a1q", grid)
        result = apply_decoded(grid, move)

        assert move.kind is MoveKind.PROMOTION
        assert move.promotion == "q"
        assert result[7, 0] == "q"
        assert result[6, 0] == EMPTY

    def test_underpromotion(self):
        grid = placement_to_grid("4k3/P7/8/8/8/8/8/4K3")

        move = decode_move("a7a8n", grid)

        assert move.promotion == "N"
        assert apply_decoded(grid, move)[0, 0] == "N"

    def test_white_queenside_castle(self):
        grid = placement_to_grid("r3k2r/8/8/8/8/8/8/R3K2R")

        move = decode_move("e1c1", grid)
        result = apply_decoded(grid, move)

        assert move.kind is MoveKind.CASTLE
        assert (move.rook_from, move.rook_to) == ("a1", "d1")
        assert grid_to_placement(result) == "r3k2r/8/8/8/8/8/8/2KR3R"

    def test_black_kingside_castle(self):
        grid = placement_to_grid("r3k2r/8/8/8/8/8/8/R3K2R")

        result = apply_decoded(grid, decode_move("e8g8", grid))

        assert grid_to_placement(result) == "r4rk1/8/8/8/8/8/8/R3K2R"

    def test_king_single_step_is_simple(self):
        grid = placement_to_grid("4k3/8/8/8/8/8/8/4K3")

        assert decode_move("e1f1", grid).kind is MoveKind.SIMPLE

    def test_black_en_passant(self):
        """A black pawn capturing en passant removes the white pawn beside it."""
        grid = placement_to_grid("4k3/8/8/8/3Pp3/8/8/4K3")

        move = decode_move("e4d3", grid)
        result = apply_decoded(grid, move)

        assert move.kind is MoveKind.EN_PASSANT
        assert move.captured_square == "d4"
        assert move.captured == "P"
        assert grid_to_placement(result) == "4k3/8/8/8/8/3p4/8/4K3"

    def test_pawn_capture_is_simple(self):
        grid = placement_to_grid("4k3/8/8/3p4/4P3/8/8/4K3")

        move = decode_move("e4d5", grid)

        assert move.kind is MoveKind.SIMPLE
        assert move.captured == "p"

    def test_input_grid_untouched(self):
        grid = placement_to_grid()
        before = grid.copy()

        apply_decoded(grid, decode_move("e2e4", grid))

        assert np.array_equal(grid, before)

    @pytest.mark.parametrize("token", ["e2", "e2e9", "0000", "P@e4", "hello"])
    def test_malformed_tokens(self, token):
        with pytest.raises(ValueError):
            decode_move(token, placement_to_grid())

    def test_empty_source_square(self):
        with pytest.raises(ValueError):
            decode_move("e4e5", placement_to_grid())


class TestBoardState:
    """Tests for BoardState."""

    def test_start(self):
        state = BoardState()

        assert state.history == ()
        assert state.board_fen() == chess.STARTING_BOARD_FEN
        assert state.side_to_move == chess.WHITE

    def test_apply_relocates_and_records(self):
        """e2e4 moves the pawn and appends the token."""
        state = BoardState()

        state.apply("e2e4")

        assert state.piece_at("e2") is None
        assert state.piece_at("e4") == chess.Piece(chess.PAWN, chess.WHITE)
        assert state.history == ("e2e4",)
        assert state.side_to_move == chess.BLACK

    def test_failed_apply_changes_nothing(self):
        """A bad token leaves grid and history untouched."""
        state = BoardState()
        state.apply("e2e4")
        before = state.copy()

        with pytest.raises(ValueError):
            state.apply("e4e4x")
        with pytest.raises(ValueError):
            state.apply("d4d5")

        assert state == before

    def test_special_moves_decoded(self):
        """The sample game exercises each move kind."""
        state = BoardState()
        kinds = {token: state.apply(token).kind for token in SPECIAL_MOVES_GAME}

        assert kinds["e5f6"] is MoveKind.EN_PASSANT
        assert kinds["g7h8q"] is MoveKind.PROMOTION
        assert kinds["e8c8"] is MoveKind.CASTLE
        assert kinds["e1g1"] is MoveKind.CASTLE
        assert kinds["d7d5"] is MoveKind.SIMPLE

    def test_replay_matches_python_chess_every_ply(self):
        """Placement agrees with python-chess after every move."""
        state = BoardState()
        reference = chess.Board()

        for token in SPECIAL_MOVES_GAME:
            state.apply(token)
            reference.push_uci(token)
            assert state.board_fen() == reference.board_fen(), token

    def test_replay_classmethod(self):
        """replay(history) reproduces an incrementally built board."""
        incremental = BoardState()
        for token in SPECIAL_MOVES_GAME:
            incremental.apply(token)

        assert BoardState.replay(SPECIAL_MOVES_GAME) == incremental

    def test_snapshot_is_read_only(self):
        snapshot = BoardState().as_array()

        with pytest.raises(ValueError):
            snapshot[0, 0] = EMPTY

    def test_snapshot_is_detached(self):
        """Later moves do not leak into an earlier snapshot."""
        state = BoardState()
        snapshot = state.as_array()

        state.apply("e2e4")

        assert snapshot[6, 4] == "P"

    def test_flipped_snapshot(self):
        """The flipped view has White's back rank at the top."""
        flipped = BoardState().as_array(flipped=True)

        assert "".join(flipped[0]) == "RNBKQBNR"
        assert "".join(flipped[7]) == "rnbkqbnr"

    def test_independent_games(self):
        """Two boards in one process do not share state."""
        first = BoardState()
        second = BoardState()

        first.apply("e2e4")

        assert second.history == ()
        assert second.piece_at("e2") is not None

    def test_render_text(self):
        """The text diagram shows the move on the board."""
        state = BoardState.replay(["e2e4"])

        lines = state.render_text().splitlines()

        assert lines[4] == "4  . . . . P . . ."
        assert lines[6] == "2  P P P P . P P P"
        assert lines[-1] == "   a b c d e f g h"

    def test_render_text_flipped(self):
        lines = BoardState().render_text(flipped=True).splitlines()

        assert lines[0] == "1  R N B K Q B N R"
        assert lines[-1] == "   h g f e d c b a"

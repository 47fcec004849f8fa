"""
Tests for the UCI engine session against the fake engine.
"""

import pytest

from pipechess.config import EngineConfig
from pipechess.errors import (
    EngineDisconnected,
    EngineTimeout,
    ProtocolParseFailure,
    SpawnError,
)
from pipechess.uci.session import EngineSession, position_command
from tests.fixtures import fake_engine_config


class TestPositionCommand:
    """Tests for position_command."""

    def test_empty_history(self):
        assert position_command([]) == "position startpos"

    def test_with_moves(self):
        assert position_command(["e2e4", "e7e5"]) == "position startpos moves e2e4 e7e5"


class TestHandshake:
    """Tests for session start-up."""

    def test_handshake_completes(self, session):
        """Both uciok and readyok rounds are observed."""
        assert session.is_ready
        assert "uciok" in session.handshake_transcript
        assert "readyok" in session.handshake_transcript
        assert session.engine_name() == "FakeFish 1.0"

    def test_options_sent(self, tmp_path, make_session):
        """Configured options go out as setoption commands before isready."""
        log = tmp_path / "commands.log"
        make_session("--log", str(log), options={"Threads": "2", "Hash": "64"})

        commands = log.read_text().splitlines()

        assert commands[0] == "uci"
        assert "setoption name Threads value 2" in commands
        assert "setoption name Hash value 64" in commands
        assert commands.index("isready") > commands.index("setoption name Hash value 64")

    def test_missing_engine(self, tmp_path):
        """A missing binary raises SpawnError from start()."""
        session = EngineSession(EngineConfig(engine_path=str(tmp_path / "missing")))

        with pytest.raises(SpawnError):
            session.start()

        assert not session.is_ready

    def test_context_manager(self):
        with EngineSession(fake_engine_config()) as session:
            assert session.is_ready
            process = session.process

        assert not process.is_running

    def test_new_game(self, session):
        session.new_game()

        assert session.is_ready


class TestBestMove:
    """Tests for EngineSession.best_move."""

    def test_returns_move(self, session):
        """The fake engine plays the first legal move in UCI order."""
        assert session.best_move([]) == "a2a3"

    def test_move_after_history(self, session):
        assert session.best_move(["e2e4"]) == "a7a5"

    def test_checkmated_side_has_no_move(self, session):
        """A null bestmove means game over, not an error."""
        assert session.best_move(["f2f3", "e7e5", "g2g4", "d8h4"]) is None

    def test_empty_payload_is_parse_failure(self, make_session):
        session = make_session("--empty-bestmove")

        with pytest.raises(ProtocolParseFailure):
            session.best_move([])

    def test_garbage_payload_is_parse_failure(self, make_session):
        session = make_session("--garbage-bestmove")

        with pytest.raises(ProtocolParseFailure) as excinfo:
            session.best_move([])

        assert "zz99" in str(excinfo.value)

    def test_silent_engine_times_out(self, make_session):
        session = make_session("--silent-on-go", read_timeout=0.3)

        with pytest.raises(EngineTimeout):
            session.best_move([])

    def test_crashed_engine_disconnects(self, make_session):
        """A crash mid-search is EngineDisconnected, and so is every later call."""
        session = make_session("--die-on-go")

        with pytest.raises(EngineDisconnected):
            session.best_move([])
        with pytest.raises(EngineDisconnected):
            session.perft_listing([])

    def test_perft_then_search(self, session):
        """Consecutive requests each get their own reply."""
        listing = session.perft_listing([])
        move = session.best_move([])

        assert "Nodes searched: 20" in listing
        assert move == "a2a3"


class TestQuit:
    """Tests for shutting the session down."""

    def test_quit_stops_engine(self, session):
        process = session.process

        session.quit()

        assert not process.is_running
        assert process.returncode == 0
        assert not session.is_ready

    def test_send_after_quit(self, session):
        session.quit()

        with pytest.raises(EngineDisconnected):
            session.send("isready")

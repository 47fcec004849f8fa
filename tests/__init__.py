"""
Unit Tests for pipechess

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_transcript.py

    # Run with coverage
    pytest tests/ --cov=pipechess --cov-report=html

Engine tests spawn tests/fixtures/fake_uci_engine.py with the current
interpreter; no Stockfish install is required.

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""

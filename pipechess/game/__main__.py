"""
Main entry point for playing against an engine in the terminal.

Usage:
    python -m pipechess.game
"""

import sys

from pipechess.game.cli import main

if __name__ == "__main__":
    sys.exit(main())

"""
Utility helpers shared by the CLI and tools.
"""

from pipechess.utils.logs import setup_logger

__all__ = ['setup_logger']

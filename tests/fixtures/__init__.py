"""
Test fixtures: the fake UCI engine and helpers to launch it.
"""

import sys
from pathlib import Path

from pipechess.config import EngineConfig

FAKE_ENGINE = Path(__file__).parent / "fake_uci_engine.py"


def fake_engine_config(*flags: str, **kwargs) -> EngineConfig:
    """EngineConfig that runs the fake engine with the given flags."""
    kwargs.setdefault("read_timeout", 10.0)
    kwargs.setdefault("search_depth", 3)
    return EngineConfig(
        engine_path=sys.executable,
        engine_args=[str(FAKE_ENGINE), *flags],
        **kwargs,
    )

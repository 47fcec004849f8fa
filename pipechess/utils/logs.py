"""
Logging setup for game sessions.

Library modules log through logging.getLogger(__name__) under the
'pipechess' namespace; this module attaches the handlers. Engine traffic is
logged at DEBUG as '>>> command' (sent) and '<<< transcript' (received).
"""

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path.home() / ".pipechess"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "session.log"


def setup_logger(
    debug: bool = False,
    log_file: Optional[Path] = DEFAULT_LOG_FILE,
    console: bool = False,
) -> logging.Logger:
    """
    Setup logger for engine session debugging.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_file: File to write (None disables file logging)
        console: Also log warnings and errors to stderr

    Returns:
        Configured 'pipechess' logger
    """
    logger = logging.getLogger("pipechess")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, mode='w')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.WARNING)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger

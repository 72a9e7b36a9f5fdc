"""
Process-wide logging setup.

Every module logs through ``logging.getLogger(__name__)``; this module
only decides where those records go.  Concept services log state
changes (a user joining a community, a buddy match, a deleted comment)
at INFO and the error handler logs rejected requests at WARNING, so
``LOG_LEVEL=WARNING`` leaves just the refusals.
"""

import logging
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Send log records to stderr and, with ``LOG_FILE`` set, to a file.

    Only the first call has an effect: the app factory calls this on
    every ``create_app()``, and an embedding process may have configured
    logging already.  An unknown level name falls back to INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

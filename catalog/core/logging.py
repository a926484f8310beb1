# catalog/core/logging.py
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# uvicorn installs its own handlers; only their levels are aligned with ours
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str | int = "INFO") -> int:
    """
    Configures the root logger once (stdout, LOG_FORMAT) and applies `level`
    to it and to the uvicorn loggers. Unknown level names fall back to INFO.
    Returns the numeric level in effect.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        numeric = resolved if isinstance(resolved, int) else logging.INFO
    else:
        numeric = level

    root = logging.getLogger()
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(h)
    root.setLevel(numeric)
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(numeric)
    return numeric

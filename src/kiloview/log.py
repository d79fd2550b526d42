from __future__ import annotations

import logging
import os

LOG_ENV_VAR = "KILOVIEW_LOG"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(path: str | None = None, level: str = "INFO") -> logging.Logger:
    """Configure the ``kiloview`` logger.

    The terminal is in raw mode while the editor runs, so records only ever go
    to a file. Without a path (argument or ``KILOVIEW_LOG``) they are dropped.
    """
    path = path or os.environ.get(LOG_ENV_VAR) or None
    root = logging.getLogger("kiloview")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    if path:
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.setLevel(getattr(logging, level.upper(), logging.INFO))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)
    return root

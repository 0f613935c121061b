"""Logging setup for the sequence player.

Console handler plus a size-capped file handler.  The file is the one the
web remote serves at ``/log``.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
MAX_BYTES = 1_000_000
BACKUP_COUNT = 3


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  console: bool = True) -> logging.Logger:
    """Configure the root logger; safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_seqplay", False):
            root.removeHandler(handler)
            handler.close()

    fmt = logging.Formatter(LOG_FORMAT)

    if console:
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        ch._seqplay = True  # type: ignore[attr-defined]
        root.addHandler(ch)

    path = log_file if log_file is not None else config.LOG_FILE
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh._seqplay = True  # type: ignore[attr-defined]
        root.addHandler(fh)

    return root

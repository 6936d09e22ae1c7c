# pagewatch/utils/log.py
# Shared logging setup for pagewatch.
# get_logger(name) configures the root logger once (console, plus a rotating
# file when LOG_TO_FILE=true) and returns a named logger.

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_INITIALIZED = False


def _level_from_env() -> int:
    lvl = getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), None)
    return lvl if isinstance(lvl, int) else logging.INFO


def _init_root() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    lvl = _level_from_env()
    root = logging.getLogger()
    root.setLevel(lvl)

    # Clean existing handlers in case this is reloaded in notebooks/tests
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if os.getenv("LOG_TO_FILE", "false").strip().lower() == "true":
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_dir / "pagewatch.log",
            maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
            backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        )
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    _INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with consistent formatting/level.

    Usage:
        from .utils.log import get_logger
        logger = get_logger("pagewatch.state")
    """
    _init_root()
    return logging.getLogger(name)

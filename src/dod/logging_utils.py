# src/dod/logging_utils.py
"""
Logging for the two entry points.

stdout belongs to the reports (fixture status lines, DoD preview), so log
records go to stderr and, when LOG_FILE / log_file is set, to a UTF-8 file.
Calling setup_logging() again replaces the handlers it installed earlier
instead of stacking new ones.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Marks handlers owned by this module on the root logger.
_OWNED = "_dod_handler"


def resolve_level(name: Optional[str]) -> int:
    """Level name -> logging constant; unknown or empty names mean WARNING."""
    value = logging.getLevelName((name or "").strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def _handlers(log_file: Optional[Path]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    log_level = resolve_level(level)
    root = logging.getLogger()

    for old in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in _handlers(log_file):
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        root.addHandler(handler)

    root.setLevel(log_level)
    # httpx logs every request at INFO; keep it out unless debugging.
    logging.getLogger("httpx").setLevel(log_level if log_level <= logging.DEBUG else logging.WARNING)

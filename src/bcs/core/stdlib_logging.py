from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_BCS_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str = "WARNING", *, stream: Optional[TextIO] = None) -> logging.Handler:
    """Install the single BCS stream handler on the ``bcs`` logger.

    Idempotent per-process: a second call replaces the handler so the level
    and stream follow the latest CLI flags.
    """
    global _BCS_HANDLER

    logger = logging.getLogger("bcs")
    if _BCS_HANDLER is not None:
        logger.removeHandler(_BCS_HANDLER)
        _BCS_HANDLER.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level_from_name(level))
    logger.propagate = False

    _BCS_HANDLER = handler
    return handler


def reset_logging_for_tests() -> None:
    """Test-only: drop the installed handler."""
    global _BCS_HANDLER, _JSON_MODE_NULL_HANDLER_INSTALLED
    logger = logging.getLogger("bcs")
    if _BCS_HANDLER is not None:
        logger.removeHandler(_BCS_HANDLER)
        _BCS_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _BCS_HANDLER = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib logging's lastResort handler from writing to stderr.

    With ``--json`` the CLI must stay machine-readable, so the root logger
    gets a NullHandler when it otherwise has none.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "level_from_name",
    "reset_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]

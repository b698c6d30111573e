"""
Severity names <-> stdlib logging levels.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = logging.INFO

# Accepted config names (lowercase) -> logging level
_LEVEL_MAP: dict[str, int] = {
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_DISPLAY_NAMES: dict[int, str] = {
    logging.CRITICAL: "fatal",
    logging.ERROR: "error",
    logging.WARNING: "warning",
    logging.INFO: "info",
    logging.DEBUG: "debug",
}


def resolve_level(name: str) -> int:
    """
    Map a level name to a logging level, case-insensitively.

    Empty and unknown names resolve to INFO; unknown ones also log a
    warning. Never raises.
    """
    key = (name or "").strip().lower()
    if not key:
        return DEFAULT_LEVEL
    level = _LEVEL_MAP.get(key)
    if level is None:
        logger.warning("Unknown log level %r, using %s", name, level_name(DEFAULT_LEVEL))
        return DEFAULT_LEVEL
    return level


def level_name(levelno: int) -> str:
    """Lowercase display name for a logging level (custom levels fall back to stdlib)."""
    name = _DISPLAY_NAMES.get(levelno)
    if name is None:
        name = logging.getLevelName(levelno).lower()
    return name

"""Process-wide settings, read once from the environment.

FAIRDICE_TRACEBACK   "1", "true" or "yes" re-raises session errors instead
                     of printing a one-line message.
FAIRDICE_LOG_LEVEL   a `logging` level name, e.g. DEBUG.
"""

import logging
import os

TRUE_VALUES = ("1", "true", "yes", "on")


def _flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def _level(name, default=logging.WARNING):
    value = os.environ.get(name)
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


traceback = _flag("FAIRDICE_TRACEBACK")
log_level = _level("FAIRDICE_LOG_LEVEL")

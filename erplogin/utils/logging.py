"""Root logger setup shared by the web UI and the CLI.

The effective level is taken from ``ERPLOGIN_LOG_LEVEL`` (name or number),
then from a truthy ``ERPLOGIN_DEBUG``, and only then from the caller: the
CLI default or the "Debug logging" switch of the settings page.

``urllib3`` and ``nicegui`` stay at WARNING unless DEBUG is in effect.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

LOG_LEVEL_ENV = "ERPLOGIN_LOG_LEVEL"
DEBUG_ENV = "ERPLOGIN_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_TRUTHY = {"1", "true", "yes", "on"}
_QUIET_LOGGERS = ("urllib3", "nicegui")


def _parse_level(text: str) -> Optional[int]:
    text = text.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else None


def env_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Level forced by the environment, or ``None`` when nothing is set.

    An unparseable ``ERPLOGIN_LOG_LEVEL`` counts as INFO.
    """
    env = os.environ if environ is None else environ
    raw = (env.get(LOG_LEVEL_ENV) or "").strip()
    if raw:
        level = _parse_level(raw)
        return logging.INFO if level is None else level
    if (env.get(DEBUG_ENV) or "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def _set_level(level: int) -> int:
    logging.getLogger().setLevel(level)
    quiet = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return level


def configure_root(default_level: int | str = logging.INFO) -> int:
    """Install the console handler once and return the effective level."""
    if isinstance(default_level, str):
        default_level = _parse_level(default_level) or logging.INFO
    level = env_level()
    if level is None:
        level = default_level

    if not logging.getLogger().handlers:
        logging.basicConfig(format=_FORMAT, datefmt=_DATEFMT)
    return _set_level(level)


def apply_gui_preferences(debug_enabled: bool) -> int:
    level = env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    return _set_level(level)

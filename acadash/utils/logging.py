"""Root logger setup for the dashboard process.

Environment overrides take precedence over the settings toggle:

* ``ACADASH_LOG_LEVEL``: explicit level, as a name (``debug``) or a number.
* ``ACADASH_DEBUG``: any truthy value forces ``DEBUG``.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

ENV_LEVEL = "ACADASH_LOG_LEVEL"
ENV_DEBUG = "ACADASH_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


def parse_level(value: Union[int, str, None], fallback: int = logging.INFO) -> int:
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper()) if text else None
    return level if isinstance(level, int) else fallback


def env_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Level forced by the environment, or ``None`` when nothing is set."""
    env = os.environ if environ is None else environ
    if env.get(ENV_LEVEL):
        return parse_level(env[ENV_LEVEL])
    if (env.get(ENV_DEBUG) or "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def env_forces_debug(environ: Optional[Mapping[str, str]] = None) -> bool:
    level = env_level(environ)
    return level is not None and level <= logging.DEBUG


def configure_root(default_level: Union[int, str] = logging.INFO) -> int:
    """Install the compact handler once and return the effective level."""
    level = env_level()
    if level is None:
        level = parse_level(default_level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.setLevel(level)
    return level


def apply_debug_toggle(enabled: bool) -> int:
    """Follow the settings debug switch unless the environment pins a level."""
    level = env_level()
    if level is None:
        level = logging.DEBUG if enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


__all__ = ["apply_debug_toggle", "configure_root", "env_forces_debug", "env_level", "parse_level"]

"""Logging setup shared by the CLI and application entry points."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_LEVEL_ENV: Final[str] = "METADEPLOY_LOG_LEVEL"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``METADEPLOY_LOG_LEVEL``, or ``default`` when unset."""

    raw = os.getenv(LOG_LEVEL_ENV)
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV} {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for terse CLI output.

    Bundle, package, content and chore timings are reported at INFO. ``force``
    replaces handlers installed earlier (tests, embedding applications).
    """

    logging.basicConfig(
        level=resolve_log_level() if level is None else level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        force=force,
    )

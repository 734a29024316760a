"""Central logging configuration for the ``household_ledger`` package.

Entrypoints (the CLI) call :func:`configure_logging` once at startup; library
modules only ever call :func:`get_logger` with a dotted name under
``household_ledger`` and never attach handlers of their own.

The operator-facing seed report is *not* logging: orchestrators write it
through an ``emit`` callable. Logging carries the per-entity create/skip trail
of the upsert engine and resolver, which is useful when ``--verbose`` or
``HOUSEHOLD_LEDGER_LOG_LEVEL=DEBUG`` is set.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "household_ledger"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_handler: logging.Handler | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("HOUSEHOLD_LEDGER_LOG_LEVEL") or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    verbose: bool = False,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a single stream handler to the package root logger.

    Parameters
    ----------
    level:
        ``int`` level or level name. ``None`` falls back to
        ``HOUSEHOLD_LEDGER_LOG_LEVEL`` and then ``INFO``.
    verbose:
        Force ``DEBUG`` regardless of ``level``.
    fmt:
        Optional format string for the handler.
    stream:
        Output stream; defaults to ``sys.stderr`` so the seed report on
        stdout stays clean.

    Calling this again replaces the handler installed by the previous call.
    """

    global _handler
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler) or h is _handler:
            logger.removeHandler(h)

    resolved = logging.DEBUG if verbose else _resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    handler.setLevel(resolved)

    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    _handler = handler
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, silencing the package until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]

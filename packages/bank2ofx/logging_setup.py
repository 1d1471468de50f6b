"""Centralized logging configuration for the ``bank2ofx`` package.

- ``configure_logging(...)``: install the package's ``StreamHandler`` on the
  ``"bank2ofx"`` logger. Called by the CLI at startup; calling it again
  replaces the handler installed by the previous call.
- ``get_logger(name)``: acquire a logger by name, ensuring that the package
  root logger has at least a ``NullHandler`` attached when not configured.

Library modules never attach their own handlers. Log records go to stderr;
stdout may carry the OFX document itself.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "bank2ofx"
_DEFAULT_FMT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _PackageHandler(logging.StreamHandler):
    """Marker subclass so reconfiguration can find the handler it owns."""


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
        raise ValueError(f"unknown log level: {level!r}")
    env_val = os.getenv("BANK2OFX_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure and return the package root logger.

    ``level`` falls back to ``BANK2OFX_LOG_LEVEL`` and then ``INFO``;
    ``stream`` defaults to ``sys.stderr`` as seen at call time.
    """

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, (logging.NullHandler, _PackageHandler)):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = _PackageHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    # Avoid double emission via the root logger.
    logger.propagate = False
    return logger


def is_configured() -> bool:
    return any(
        isinstance(h, _PackageHandler) for h in logging.getLogger(_PKG_LOGGER_NAME).handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name; silent until :func:`configure_logging` runs."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "is_configured"]

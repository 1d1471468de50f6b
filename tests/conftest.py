"""Pytest configuration for test isolation.

The CLI installs a handler on the ``bank2ofx`` logger and reads ``BANK2OFX_*``
environment variables (optionally from a ``.env`` in the working directory).
To keep tests hermetic, each test runs from its own temporary directory with
those variables cleared and with logging configuration reset afterwards.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `bank2ofx` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

from bank2ofx.settings import ConversionSettings  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("BANK2OFX_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield
    pkg_logger = logging.getLogger("bank2ofx")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True


@pytest.fixture
def make_settings():
    """Build :class:`ConversionSettings` with test account ids filled in."""

    def _make(**overrides) -> ConversionSettings:
        values = {"bank_id": "SAMPOFIHH", "account_id": "800012-345678"}
        values.update(overrides)
        return ConversionSettings(**values)

    return _make

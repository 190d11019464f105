"""Pytest configuration and shared fixtures.

Every test runs with a clean import-related environment: ``DATABASE_URL``,
``BANK_IMPORT_LOG_LEVEL`` and ``BANK_IMPORT_USER`` are removed so a developer's
shell or ``.env`` cannot leak into assertions. Database tests get their own
SQLite file under ``tmp_path``.
"""

from __future__ import annotations

import logging
import textwrap
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from bank_import import logging_setup
from tests.helpers.db import bootstrap_sqlite_db

FIXED_NOW = datetime(2025, 6, 20, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("DATABASE_URL", "BANK_IMPORT_LOG_LEVEL", "BANK_IMPORT_USER"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo any configure_logging() a test (or the CLI callback) performs."""

    pkg = logging.getLogger("bank_import")
    saved = (list(pkg.handlers), pkg.level, pkg.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    pkg.handlers[:] = saved[0]
    pkg.setLevel(saved[1])
    pkg.propagate = saved[2]


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write dedented CSV text to ``tmp_path/<name>`` and return the path."""

    def _write(text: str, name: str = "statement.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        body = textwrap.dedent(text).lstrip("\n")
        path.write_text(body, encoding=encoding)
        return path

    return _write


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def business_id() -> uuid.UUID:
    return uuid.UUID("6f1c3a52-8d1e-4c1b-9a51-0a3f3c0b7d21")


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "bank-import.db")

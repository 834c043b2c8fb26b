"""Shared pytest fixtures for envbind tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

import envbind
from envbind.infrastructure.store import ValueStore


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> ValueStore:
    """A fresh, empty value store."""
    return ValueStore()


@pytest.fixture(autouse=True)
def _reset_default_store() -> Generator[None]:
    """Keep the process-wide store isolated between tests."""
    envbind.reset()
    yield
    envbind.reset()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory so no envbind.toml is discovered.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on CLI test classes.
    """
    monkeypatch.delenv("ENVBIND_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    envbind_logger = logging.getLogger("envbind")
    envbind_level = envbind_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    envbind_logger.setLevel(envbind_level)

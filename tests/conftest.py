"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None]:
    """Undo handler and level changes made by configure_logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def scenario_tree(tmp_path: Path) -> Path:
    """Create ``A/a.txt`` (10 bytes) and ``A/B/b.txt`` (1000 bytes)."""
    root = tmp_path / "A"
    (root / "B").mkdir(parents=True)
    _ = (root / "a.txt").write_bytes(b"a" * 10)
    _ = (root / "B" / "b.txt").write_bytes(b"b" * 1000)
    return root


@pytest.fixture
def mixed_tree(tmp_path: Path) -> Path:
    """Create a directory holding ``a.txt`` and ``a.log``."""
    root = tmp_path / "mixed"
    root.mkdir()
    _ = (root / "a.txt").write_bytes(b"t" * 10)
    _ = (root / "a.log").write_bytes(b"l" * 20)
    return root

"""Application module for packsize."""

from __future__ import annotations

from packsize.app.cli import cli
from packsize.app.runner import ApplicationRunner, RootResult

__all__ = [
    "cli",
    "ApplicationRunner",
    "RootResult",
]

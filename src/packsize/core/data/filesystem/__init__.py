"""Filesystem operations module for tree walking and size measurement."""

from __future__ import annotations

from .compression import BrotliCodec, CompressionMeasurer, GzipCodec
from .filters import FilterMode, GlobPattern, PathFilter, validate_glob_pattern
from .walker import TreeWalker, collect_errors, iter_nodes

__all__ = [
    "BrotliCodec",
    "CompressionMeasurer",
    "FilterMode",
    "GlobPattern",
    "GzipCodec",
    "PathFilter",
    "TreeWalker",
    "collect_errors",
    "iter_nodes",
    "validate_glob_pattern",
]

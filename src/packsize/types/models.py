"""Data models for packsize.

This module defines the size measurement triple and the polymorphic path
tree produced by the walker. File and error nodes are immutable; directory
nodes are immutable apart from the one-time fill of their memoized total.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path


def _add_optional(left: int | None, right: int | None) -> int | None:
    if left is None or right is None:
        return None
    return left + right


@dataclass(slots=True, frozen=True)
class SizeInfo:
    """Measured size of a file or aggregated size of a directory.

    ``uncompressed`` is always known. A compressed estimate is ``None`` when
    it was not measured, or when any part of an aggregate could not be
    measured for that codec.
    """

    uncompressed: int
    gzip_estimate: int | None = None
    brotli_estimate: int | None = None

    @classmethod
    def empty(cls) -> SizeInfo:
        """Return the identity of an empty reduction."""
        return cls(uncompressed=0)

    def combine(self, other: SizeInfo) -> SizeInfo:
        """Add two measurements, propagating missing estimates per codec.

        Args:
            other: Measurement to add to this one

        Returns:
            New SizeInfo with summed byte counts

        Examples:
            >>> SizeInfo(10, 30, 25).combine(SizeInfo(1000, 400, None))
            SizeInfo(uncompressed=1010, gzip_estimate=430, brotli_estimate=None)
        """
        return SizeInfo(
            uncompressed=self.uncompressed + other.uncompressed,
            gzip_estimate=_add_optional(self.gzip_estimate, other.gzip_estimate),
            brotli_estimate=_add_optional(self.brotli_estimate, other.brotli_estimate),
        )


def reduce_sizes(sizes: Iterable[SizeInfo]) -> SizeInfo:
    """Fold measurements together without a seed value.

    A single measurement reduces to itself; no measurements reduce to
    ``SizeInfo.empty()``.
    """
    iterator = iter(sizes)
    first = next(iterator, None)
    if first is None:
        return SizeInfo.empty()
    return reduce(SizeInfo.combine, iterator, first)


@dataclass(slots=True, frozen=True)
class FileNode:
    """Leaf node holding the measurement of a single regular file."""

    path: Path
    size: SizeInfo

    @property
    def total(self) -> SizeInfo:
        return self.size


@dataclass(slots=True, frozen=True)
class ErrorNode:
    """Entry that could not be listed, read or classified.

    Contributes nothing to the uncompressed total and blanks the compressed
    estimates of every ancestor.
    """

    path: Path
    error: str

    @property
    def total(self) -> SizeInfo:
        return SizeInfo.empty()


@dataclass(slots=True, eq=False)
class DirectoryNode:
    """Directory with its children in listing order.

    The total is reduced from the children on first access and cached for
    the lifetime of the node. Concurrent first readers, whether threads or
    tasks, trigger a single reduction and all observe the same value.
    """

    path: Path
    children: tuple[PathNode, ...]
    _total: SizeInfo | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def total(self) -> SizeInfo:
        cached = self._total
        if cached is not None:
            return cached
        return _fill_totals(self)

    def _publish_total(self) -> SizeInfo:
        # Children must already hold their totals
        with self._lock:
            if self._total is None:
                self._total = reduce_sizes(child.total for child in self.children)
            return self._total

    @property
    def is_total_computed(self) -> bool:
        """Whether the memoized total has been filled."""
        return self._total is not None


type PathNode = FileNode | DirectoryNode | ErrorNode


def _fill_totals(root: DirectoryNode) -> SizeInfo:
    """Fill missing directory totals below ``root`` bottom-up with an explicit stack.

    Trees can be nested deeper than the interpreter's recursion limit, so
    directories are expanded iteratively and each one publishes its total
    only after all of its subdirectories have.
    """
    stack: list[tuple[DirectoryNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node.is_total_computed:
            continue
        if expanded:
            _ = node._publish_total()  # pyright: ignore[reportPrivateUsage]
            continue

        stack.append((node, True))
        stack.extend(
            (child, False)
            for child in node.children
            if isinstance(child, DirectoryNode) and not child.is_total_computed
        )
    return root._publish_total()  # pyright: ignore[reportPrivateUsage]

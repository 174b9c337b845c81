"""Asynchronous recursive walker building the path tree."""

from __future__ import annotations

import asyncio
import logging
import stat
from collections.abc import Iterator
from pathlib import Path
from typing import Final

from packsize.core.exceptions import PathNotFoundError, TraversalError
from packsize.types.models import DirectoryNode, ErrorNode, FileNode, PathNode

from .compression import CompressionMeasurer
from .filters import PathFilter

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY: Final[int] = 64


class TreeWalker:
    """Walker turning a root path into a tree of measured nodes.

    Provides recursive traversal with support for:
    - An optional include/exclude filter applied to directory entries
    - One task per kept entry, joined per directory in listing order
    - A semaphore bounding concurrent listings and file reads
    - Per-entry error isolation, or fail-fast propagation
    """

    def __init__(
        self,
        path_filter: PathFilter | None = None,
        measurer: CompressionMeasurer | None = None,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        fail_fast: bool = False,
    ) -> None:
        """Initialize the tree walker.

        Args:
            path_filter: Rule deciding which directory entries are walked
            measurer: Compression measurer used for every regular file
            max_concurrency: Maximum number of concurrent listings and reads
            fail_fast: Raise TraversalError on the first unreadable entry
                instead of recording an ErrorNode
        """
        if max_concurrency <= 0:
            msg = "max_concurrency must be positive"
            raise ValueError(msg)

        self.path_filter: PathFilter | None = path_filter
        self.measurer: CompressionMeasurer = measurer or CompressionMeasurer()
        self.max_concurrency: int = max_concurrency
        self.fail_fast: bool = fail_fast
        self._semaphore: asyncio.Semaphore = asyncio.Semaphore(max_concurrency)

    async def walk(self, path: Path) -> PathNode:
        """Build the tree rooted at ``path``.

        The root itself is never filtered.

        Args:
            path: File or directory to walk

        Returns:
            FileNode, DirectoryNode or ErrorNode for the root

        Raises:
            PathNotFoundError: If the root does not exist
            TraversalError: If fail_fast is set and any entry is unreadable
        """
        exists = await asyncio.to_thread(path.exists)
        if not exists:
            raise PathNotFoundError(path)

        logger.debug("Walking root", extra={"path": str(path)})
        return await self._walk_entry(path)

    async def _walk_entry(self, path: Path) -> PathNode:
        try:
            mode = (await asyncio.to_thread(path.stat)).st_mode
            if stat.S_ISDIR(mode):
                return await self._walk_directory(path)
            if stat.S_ISREG(mode):
                return await self._walk_file(path)
            raise TraversalError(path, f"{path}: unsupported file type")
        except OSError as exc:
            return self._handle_failure(TraversalError(path, _describe_os_error(path, exc)), exc)
        except TraversalError as exc:
            return self._handle_failure(exc, None)

    async def _walk_directory(self, path: Path) -> DirectoryNode:
        async with self._semaphore:
            entries = await asyncio.to_thread(_list_directory, path)

        if self.path_filter is not None:
            entries = [entry for entry in entries if self.path_filter.include_path(entry)]

        try:
            async with asyncio.TaskGroup() as task_group:
                tasks = [task_group.create_task(self._walk_entry(entry)) for entry in entries]
        except ExceptionGroup as group:
            error = _first_traversal_error(group)
            if error is group:
                raise
            raise error from error.__cause__

        children = tuple(task.result() for task in tasks)
        logger.debug(
            "Directory walked",
            extra={"path": str(path), "children": len(children)},
        )
        return DirectoryNode(path=path, children=children)

    async def _walk_file(self, path: Path) -> FileNode:
        async with self._semaphore:
            data = await asyncio.to_thread(path.read_bytes)
            size = await self.measurer.measure(data, path=path)
        return FileNode(path=path, size=size)

    def _handle_failure(self, error: TraversalError, cause: OSError | None) -> ErrorNode:
        if self.fail_fast:
            if cause is not None:
                raise error from cause
            raise error

        logger.warning(
            "Skipping unreadable entry",
            extra={"path": str(error.path), "error": str(error)},
        )
        return ErrorNode(path=error.path, error=str(error))


def _list_directory(path: Path) -> list[Path]:
    return list(path.iterdir())


def _describe_os_error(path: Path, exc: OSError) -> str:
    reason = exc.strerror or str(exc)
    return f"{path}: {reason[0].lower()}{reason[1:]}" if reason else f"{path}: {type(exc).__name__}"


def _first_traversal_error(group: BaseExceptionGroup[BaseException]) -> BaseException:
    """Return the first TraversalError from a (possibly nested) group.

    Anything else is returned as the group itself so unexpected failures are
    not masked.
    """
    for exc in group.exceptions:
        if isinstance(exc, TraversalError):
            return exc
        if isinstance(exc, BaseExceptionGroup):
            nested = _first_traversal_error(exc)
            if isinstance(nested, TraversalError):
                return nested
    return group


def iter_nodes(node: PathNode) -> Iterator[PathNode]:
    """Yield ``node`` and all of its descendants depth-first in listing order."""
    stack: list[PathNode] = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, DirectoryNode):
            stack.extend(reversed(current.children))


def collect_errors(node: PathNode) -> list[ErrorNode]:
    """Return every ErrorNode in the subtree rooted at ``node``."""
    return [entry for entry in iter_nodes(node) if isinstance(entry, ErrorNode)]

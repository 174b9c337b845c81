"""Application runner for packsize."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import click

from packsize.app.report import path_report_lines, summary_lines
from packsize.core.config import MainConfig
from packsize.core.data.filesystem import (
    BrotliCodec,
    CompressionMeasurer,
    GzipCodec,
    PathFilter,
    TreeWalker,
    collect_errors,
)
from packsize.core.exceptions import TraversalError
from packsize.types.models import ErrorNode, PathNode
from packsize.utils.formatting import format_duration
from packsize.utils.logging import set_scan_root

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_TRAVERSAL_ERROR: Final[int] = 1
EXIT_USAGE_ERROR: Final[int] = 2


@dataclass(slots=True, frozen=True)
class RootResult:
    """Outcome of walking one command-line root.

    Exactly one of ``node`` and ``error`` is set.
    """

    path: Path
    node: PathNode | None = None
    error: TraversalError | None = None

    @property
    def skipped(self) -> list[ErrorNode]:
        """Entries below the root that could not be read."""
        if self.node is None:
            return []
        return collect_errors(self.node)


def build_walker(config: MainConfig, path_filter: PathFilter | None) -> TreeWalker:
    """Create a TreeWalker wired with codecs from configuration."""
    compression = config.compression
    measurer = CompressionMeasurer(
        gzip_codec=GzipCodec(level=compression.gzip_level, chunk_size=compression.chunk_size),
        brotli_codec=BrotliCodec(
            quality=compression.brotli_quality,
            lgwin=compression.brotli_window,
            chunk_size=compression.chunk_size,
        ),
    )
    return TreeWalker(
        path_filter,
        measurer,
        max_concurrency=config.walk.max_concurrency,
        fail_fast=config.walk.fail_fast,
    )


class ApplicationRunner:
    """Main application runner that coordinates all components.

    Walks every root concurrently, isolates failures per root, then prints
    the per-path report followed by the ranked summary.
    """

    def __init__(
        self,
        paths: Sequence[Path],
        *,
        config: MainConfig,
        path_filter: PathFilter | None = None,
    ) -> None:
        """Initialize the application runner.

        Args:
            paths: Roots in command-line order
            config: Validated configuration
            path_filter: Optional include/exclude rule for directory entries
        """
        self.paths: tuple[Path, ...] = tuple(paths)
        self.config: MainConfig = config
        self.path_filter: PathFilter | None = path_filter

    async def collect(self) -> list[RootResult]:
        """Walk all roots and return their results in command-line order."""
        walker = build_walker(self.config, self.path_filter)
        async with asyncio.TaskGroup() as task_group:
            tasks = [task_group.create_task(self._walk_root(walker, path)) for path in self.paths]
        return [task.result() for task in tasks]

    async def _walk_root(self, walker: TreeWalker, path: Path) -> RootResult:
        # Runs in its own task, so the scan root only tags this root's records
        set_scan_root(str(path))
        started = time.perf_counter()
        try:
            node = await walker.walk(path)
        except TraversalError as exc:
            logger.error("Root could not be walked", extra={"path": str(path), "error": str(exc)})
            return RootResult(path=path, error=exc)

        if isinstance(node, ErrorNode):
            # An unreadable root has nothing to rank
            return RootResult(path=path, error=TraversalError(path, node.error))

        logger.info(
            "Root walked",
            extra={
                "path": str(path),
                "elapsed": format_duration(time.perf_counter() - started),
            },
        )
        return RootResult(path=path, node=node)

    def run(self) -> int:
        """Run the application.

        Returns:
            Process exit code
        """
        results = asyncio.run(self.collect())
        self.render(results)

        if any(result.error is not None or result.skipped for result in results):
            return EXIT_TRAVERSAL_ERROR
        return EXIT_SUCCESS

    def render(self, results: Sequence[RootResult]) -> None:
        """Write the report to stdout and failures to stderr."""
        color = None if self.config.application.color else False
        nodes = [result.node for result in results if result.node is not None]

        for node in nodes:
            for line in path_report_lines(node):
                click.echo(line, color=color)

        for line in summary_lines(nodes):
            click.echo(line, color=color)

        for result in results:
            if result.error is not None:
                click.echo(f"{click.style('Error:', fg='red', bold=True)} {result.error}", err=True, color=color)
            for skipped in result.skipped:
                click.echo(f"{click.style('Skipped', fg='yellow')} {skipped.error}", err=True, color=color)

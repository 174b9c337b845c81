"""Human-readable report of measured roots.

Pure functions building styled lines; callers decide where they are written.
Styling uses click.style so it can be stripped with click.unstyle or
disabled by click.echo when output is not a terminal.
"""

from __future__ import annotations

from collections.abc import Sequence

import click

from packsize.types.models import PathNode, SizeInfo
from packsize.utils.formatting import format_scale, format_size


def _styled_size(size: int) -> str:
    return click.style(format_size(size), fg="bright_yellow", bold=True)


def format_size_info(size: SizeInfo) -> str:
    """Format a measurement as ``Size: <raw> (<gzip> gzip) (<brotli> brotli)``.

    Missing estimates are omitted.

    Args:
        size: Measurement to format

    Returns:
        Styled single-line description
    """
    parts = [f"Size: {_styled_size(size.uncompressed)}"]
    if size.gzip_estimate is not None:
        parts.append(f"({_styled_size(size.gzip_estimate)} gzip)")
    if size.brotli_estimate is not None:
        parts.append(f"({_styled_size(size.brotli_estimate)} brotli)")
    return " ".join(parts)


def path_report_lines(node: PathNode) -> list[str]:
    """Build the per-path block of the report."""
    return [
        f"{click.style('Path:', bold=True)} {node.path}",
        f"    {format_size_info(node.total)}",
    ]


def rank_by_size(nodes: Sequence[PathNode]) -> list[PathNode]:
    """Return ``nodes`` sorted by uncompressed total, ties in input order."""
    return sorted(nodes, key=lambda node: node.total.uncompressed)


def summary_lines(nodes: Sequence[PathNode]) -> list[str]:
    """Build the ranked summary naming the smallest path.

    Args:
        nodes: Measured roots in argument order

    Returns:
        Styled lines, empty when there is nothing to rank
    """
    ranked = rank_by_size(nodes)
    if not ranked:
        return []

    smallest, *others = ranked
    smallest_size = smallest.total.uncompressed
    smallest_name = click.style(str(smallest.path), fg="bright_green", bold=True)

    lines = ["", f"{click.style('Smallest:', bold=True)} {smallest_name} {_styled_size(smallest_size)}"]
    if others:
        lines.append("")
        lines.append(click.style("Other paths:", bold=True))

    reference = click.style(str(smallest.path), fg="bright_green")
    for node in others:
        size = node.total.uncompressed
        name = click.style(str(node.path), fg="bright_magenta")
        scale = format_scale(size, smallest_size)
        if scale is None and size == smallest_size:
            lines.append(f"    {name} {_styled_size(size)}, same size as {reference}")
        elif scale is None:
            lines.append(f"    {name} {_styled_size(size)}, larger than {reference}")
        else:
            lines.append(f"    {name} {_styled_size(size)}, {scale} times larger than {reference}")
    return lines

"""Application entry point for packsize.

Allows running the tool with ``python -m packsize``; the console script
points at :func:`main` as well.
"""

from __future__ import annotations

from packsize.app.cli import cli

__all__ = ["main"]


def main() -> None:
    """Main entry point for packsize.

    Exit Codes:
        0: Every path was measured completely
        1: A path was missing or some entries could not be read
        2: Usage or configuration error
    """
    cli(prog_name="packsize")


if __name__ == "__main__":
    main()

"""packsize - Compare file and directory sizes with compressed estimates.

This package walks files and directories concurrently, estimates how large
each file would be under gzip and brotli, aggregates the results per
directory and ranks the given paths from smallest to largest.
"""

from packsize.__main__ import main

__all__ = ["main"]

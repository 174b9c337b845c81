"""Type definitions and protocols for packsize.

This package provides:
- Data models (size measurements and the path tree)
- Protocol definitions (structural subtyping interfaces)
"""

from packsize.types.models import (
    DirectoryNode,
    ErrorNode,
    FileNode,
    PathNode,
    SizeInfo,
    reduce_sizes,
)
from packsize.types.protocols import Codec

__all__ = [
    # Data models
    "DirectoryNode",
    "ErrorNode",
    "FileNode",
    "PathNode",
    "SizeInfo",
    "reduce_sizes",
    # Protocols
    "Codec",
]

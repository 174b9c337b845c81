"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols that establish
contracts for core application components without requiring inheritance.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    """Protocol for compression codecs used to estimate encoded sizes.

    Implementations stream the input through their encoder and count the
    produced bytes without keeping them. The count must be reproducible for
    identical input and settings.
    """

    name: str

    def encoded_length(self, data: bytes | memoryview) -> int:
        """Count the bytes the codec produces for ``data``.

        Args:
            data: Complete input buffer

        Returns:
            Length of the encoded stream in bytes
        """
        ...

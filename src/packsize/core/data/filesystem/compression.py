"""Compressed size estimation for file contents.

Each codec streams the input buffer through its encoder in fixed-size chunks
and only accumulates the number of produced bytes; the encoded output is
discarded as it is produced. Both codecs run concurrently over the same
buffer in worker threads so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
import zlib
from pathlib import Path
from typing import Final

import brotli

from packsize.types.models import SizeInfo
from packsize.types.protocols import Codec

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: Final[int] = 64 * 1024
DEFAULT_GZIP_LEVEL: Final[int] = 6
DEFAULT_BROTLI_QUALITY: Final[int] = 11
DEFAULT_BROTLI_WINDOW: Final[int] = 22

# zlib window bits selecting the gzip container (16 + max window of 15)
_GZIP_WBITS: Final[int] = 16 + zlib.MAX_WBITS


def _chunks(data: bytes | memoryview, chunk_size: int) -> list[memoryview]:
    view = memoryview(data)
    return [view[offset : offset + chunk_size] for offset in range(0, len(view), chunk_size)]


class GzipCodec:
    """gzip size estimator backed by zlib's streaming compressor.

    zlib writes a gzip header with a zero modification time, so the count
    only depends on the input and the compression level.
    """

    name: str = "gzip"

    def __init__(self, level: int = DEFAULT_GZIP_LEVEL, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Initialize the codec.

        Args:
            level: zlib compression level (0-9)
            chunk_size: Number of input bytes fed to the encoder per call
        """
        if not 0 <= level <= 9:
            msg = f"gzip level must be between 0 and 9, got: {level}"
            raise ValueError(msg)
        if chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ValueError(msg)
        self.level: int = level
        self.chunk_size: int = chunk_size

    def encoded_length(self, data: bytes | memoryview) -> int:
        compressor = zlib.compressobj(self.level, zlib.DEFLATED, _GZIP_WBITS)
        total = 0
        for chunk in _chunks(data, self.chunk_size):
            total += len(compressor.compress(chunk))
        total += len(compressor.flush(zlib.Z_FINISH))
        return total


class BrotliCodec:
    """brotli size estimator backed by the brotli streaming compressor."""

    name: str = "brotli"

    def __init__(
        self,
        quality: int = DEFAULT_BROTLI_QUALITY,
        lgwin: int = DEFAULT_BROTLI_WINDOW,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize the codec.

        Args:
            quality: brotli quality level (0-11)
            lgwin: Base 2 logarithm of the sliding window size (10-24)
            chunk_size: Number of input bytes fed to the encoder per call
        """
        if not 0 <= quality <= 11:
            msg = f"brotli quality must be between 0 and 11, got: {quality}"
            raise ValueError(msg)
        if not 10 <= lgwin <= 24:
            msg = f"brotli window must be between 10 and 24, got: {lgwin}"
            raise ValueError(msg)
        if chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ValueError(msg)
        self.quality: int = quality
        self.lgwin: int = lgwin
        self.chunk_size: int = chunk_size

    def encoded_length(self, data: bytes | memoryview) -> int:
        compressor = brotli.Compressor(mode=brotli.MODE_GENERIC, quality=self.quality, lgwin=self.lgwin)
        total = 0
        for chunk in _chunks(data, self.chunk_size):
            total += len(compressor.process(bytes(chunk)))
        total += len(compressor.finish())
        return total


class CompressionMeasurer:
    """Measures a buffer's uncompressed size and its gzip and brotli estimates.

    Both codec passes run concurrently and are awaited together. A failing
    codec yields ``None`` for its estimate while the other estimate is kept,
    matching how aggregation treats missing estimates.
    """

    def __init__(self, gzip_codec: Codec | None = None, brotli_codec: Codec | None = None) -> None:
        """Initialize the measurer.

        Args:
            gzip_codec: Codec providing the gzip estimate (default settings if None)
            brotli_codec: Codec providing the brotli estimate (default settings if None)
        """
        self.gzip_codec: Codec = gzip_codec or GzipCodec()
        self.brotli_codec: Codec = brotli_codec or BrotliCodec()

    async def measure(self, data: bytes, *, path: Path | None = None) -> SizeInfo:
        """Measure a complete file buffer.

        Args:
            data: File contents
            path: Originating path, used for log context only

        Returns:
            SizeInfo with the buffer length and both codec estimates
        """
        gzip_result, brotli_result = await asyncio.gather(
            asyncio.to_thread(self.gzip_codec.encoded_length, data),
            asyncio.to_thread(self.brotli_codec.encoded_length, data),
            return_exceptions=True,
        )
        return SizeInfo(
            uncompressed=len(data),
            gzip_estimate=self._estimate_or_none(self.gzip_codec, gzip_result, path),
            brotli_estimate=self._estimate_or_none(self.brotli_codec, brotli_result, path),
        )

    def _estimate_or_none(self, codec: Codec, result: int | BaseException, path: Path | None) -> int | None:
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning(
                "Compression estimate unavailable",
                extra={
                    "codec": codec.name,
                    "path": str(path) if path is not None else None,
                    "error": str(result),
                },
            )
            return None
        return result

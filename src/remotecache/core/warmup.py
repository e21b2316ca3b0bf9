"""Read-through warm-up of a source without writing anything locally."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from remotecache.core.exceptions import InvalidSourceLengthError


if TYPE_CHECKING:
    from remotecache.core.ports import ProgressCallback, SourceStream


# 64 MiB chunks
DEFAULT_WARMUP_CHUNK_SIZE = 64 * 1024 * 1024


def read_through(
    stream: SourceStream,
    chunk_size: int = DEFAULT_WARMUP_CHUNK_SIZE,
    progress: ProgressCallback | None = None,
) -> int:
    """Read a stream to the end into a throwaway buffer.

    Useful to pull a file into the OS or share-side cache. The buffer is
    allocated per call and discarded.

    Args:
        stream: Open source stream.
        chunk_size: Size of the throwaway buffer.
        progress: Optional callback(bytes_so_far, total, bytes_per_sec).

    Returns:
        Number of bytes read.
    """
    length = stream.length
    if length is not None and length < 0:
        raise InvalidSourceLengthError(stream.name, length)

    buffer = bytearray(chunk_size)
    position = 0
    started = time.monotonic()

    while length is None or position < length:
        count = stream.readinto(buffer) or 0
        if count == 0:
            # A sized stream ending early is not an error for a warm-up
            break
        position += count
        if progress is not None:
            elapsed = time.monotonic() - started
            progress(position, length or 0, position / elapsed if elapsed > 0 else 0.0)

    return position

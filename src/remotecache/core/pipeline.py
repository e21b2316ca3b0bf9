"""Double-buffered copy of a source stream into a local file.

The read stage runs on the calling thread and the write stage on a single
worker submitted to an ExecutorPort. Two buffers alternate between them:

    reader: read into own buffer -> wait buffer_free -> swap -> signal data_ready
    writer: wait data_ready -> write its buffer -> signal buffer_free

so the disk write of one chunk overlaps the network read of the next, and a
buffer is never touched by both stages at once.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from remotecache.core.exceptions import (
    InvalidSourceLengthError,
    IOWriteError,
    SourceUnreadableError,
)
from remotecache.logging import get_logger


if TYPE_CHECKING:
    from concurrent.futures import Future
    from pathlib import Path

    from remotecache.core.ports import ExecutorPort, ProgressCallback, SourceStream


logger = get_logger(__name__)

# 4 MiB per buffer, two buffers in flight
DEFAULT_BUFFER_SIZE = 4 * 1024 * 1024

# Consecutive zero-byte reads tolerated before a sized source counts as truncated
DEFAULT_MAX_EMPTY_READS = 1000


@dataclass
class _Handoff:
    """State shared between the read and write stages.

    The writer owns ``buffer`` and ``length`` from acquiring data_ready until
    it releases buffer_free; the reader owns them from acquiring buffer_free
    until it releases data_ready.
    """

    buffer: bytearray
    length: int = 0
    data_ready: threading.Semaphore = field(
        default_factory=lambda: threading.Semaphore(0)
    )
    buffer_free: threading.Semaphore = field(
        default_factory=lambda: threading.Semaphore(1)
    )
    cancelled: threading.Event = field(default_factory=threading.Event)
    writer_stopped: threading.Event = field(default_factory=threading.Event)

    def stop_writer(self) -> None:
        """Set cancellation and wake the writer if it is waiting."""
        self.cancelled.set()
        self.data_ready.release()


def _write_stage(handoff: _Handoff, dest: Path) -> int:
    """Drain handed-off buffers into dest until cancelled.

    Returns:
        Number of bytes written.

    Raises:
        IOWriteError: If the destination cannot be created or written.
    """
    written = 0
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("wb") as f:
            while True:
                handoff.data_ready.acquire()
                if handoff.length:
                    f.write(memoryview(handoff.buffer)[: handoff.length])
                    written += handoff.length
                    handoff.length = 0
                    handoff.buffer_free.release()
                if handoff.cancelled.is_set():
                    break
    except OSError as e:
        raise IOWriteError(f"Failed to write '{dest}': {e}", path=dest, cause=e) from e
    finally:
        # Unblock a reader waiting for a buffer that will never be freed
        handoff.writer_stopped.set()
        handoff.buffer_free.release()
    return written


class StreamCopyPipeline:
    """Copies a readable source stream to a new local file.

    Example:
        >>> pipeline = StreamCopyPipeline(buffer_size=1024 * 1024)
        >>> with create_router().open("//nas/movies/a.mkv") as stream:
        ...     pipeline.run(stream, Path("/tmp/a.mkv"))
    """

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        executor: ExecutorPort | None = None,
        max_empty_reads: int = DEFAULT_MAX_EMPTY_READS,
    ) -> None:
        """Initialize the pipeline.

        Args:
            buffer_size: Size of each of the two transfer buffers in bytes.
            executor: Executor that runs the write stage. Must run work
                concurrently with the caller. If None, a single-worker
                thread pool is created for each run.
            max_empty_reads: Consecutive zero-byte reads tolerated before a
                source with a declared length is reported as truncated.
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self._buffer_size = buffer_size
        self._executor = executor
        self._max_empty_reads = max_empty_reads

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def run(
        self,
        stream: SourceStream,
        dest: Path,
        progress: ProgressCallback | None = None,
    ) -> int:
        """Copy stream into dest, overlapping reads with writes.

        The destination is created (truncated) even for an empty source. On
        failure the partially written destination is left in place; callers
        must not treat it as a complete copy.

        Args:
            stream: Open source stream, owned by the read stage.
            dest: Destination file path, owned by the write stage.
            progress: Optional callback(bytes_so_far, total, bytes_per_sec)
                invoked after each buffer handoff.

        Returns:
            Number of bytes written to dest.

        Raises:
            InvalidSourceLengthError: If the stream reports a negative length.
            SourceUnreadableError: If a sized stream stops producing data.
            IOWriteError: If the destination cannot be written.
        """
        if stream.length is not None and stream.length < 0:
            raise InvalidSourceLengthError(stream.name, stream.length)

        callback = progress or (lambda _done, _total, _rate: None)

        if self._executor is not None:
            return self._copy(stream, dest, callback, self._executor)

        from remotecache.adapters.executor import ThreadPoolExecutorAdapter

        with ThreadPoolExecutorAdapter(max_workers=1) as executor:
            return self._copy(stream, dest, callback, executor)

    def _copy(
        self,
        stream: SourceStream,
        dest: Path,
        progress: ProgressCallback,
        executor: ExecutorPort,
    ) -> int:
        handoff = _Handoff(buffer=bytearray(self._buffer_size))
        writer: Future[object] = executor.submit(_write_stage, handoff, dest)

        try:
            copied = self._read_stage(stream, handoff, progress)
        except BaseException:
            handoff.stop_writer()
            writer_error = writer.exception()
            if writer_error is not None:
                logger.debug("Write stage also failed: %s", writer_error)
            raise

        handoff.stop_writer()
        written = writer.result()
        logger.debug("Copied %d bytes (%d written) to %s", copied, written, dest)
        return int(written)  # type: ignore[call-overload]

    def _read_stage(
        self,
        stream: SourceStream,
        handoff: _Handoff,
        progress: ProgressCallback,
    ) -> int:
        length = stream.length
        total = length or 0
        read_buffer = bytearray(self._buffer_size)
        position = 0
        empty_reads = 0
        started = time.monotonic()

        while length is None or position < length:
            count = stream.readinto(read_buffer) or 0

            if count == 0:
                if length is None:
                    break  # EOF on an unsized stream
                # No progress this cycle; intermittent on network streams
                empty_reads += 1
                if empty_reads > self._max_empty_reads:
                    raise SourceUnreadableError(
                        f"Source stopped after {position} of {length} bytes: "
                        f"{stream.name}",
                        source=stream.name,
                    )
                continue
            empty_reads = 0

            handoff.buffer_free.acquire()
            if handoff.writer_stopped.is_set():
                return position
            read_buffer, handoff.buffer = handoff.buffer, read_buffer
            handoff.length = count
            handoff.data_ready.release()

            position += count
            elapsed = time.monotonic() - started
            progress(position, total, position / elapsed if elapsed > 0 else 0.0)

        # Wait for the writer to finish the last buffer
        handoff.buffer_free.acquire()
        return position

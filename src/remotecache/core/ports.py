"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from concurrent.futures import Future
    from pathlib import Path

    from remotecache.core.models import CachedFile, ForwardResult

ProgressCallback = Callable[[int, int, float], None]


@runtime_checkable
class SourceStream(Protocol):
    """An open, readable source owned by the read stage.

    Attributes:
        name: Display name for logs and progress.
        length: Declared size in bytes, or None when the source does not
            report one (e.g. HTTP without Content-Length).
    """

    name: str
    length: int | None

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read up to len(buffer) bytes into buffer.

        Returns:
            Number of bytes read. 0 means no progress this cycle, or EOF
            when the length is unknown.
        """
        ...

    def close(self) -> None:
        """Release the underlying handle."""
        ...

    def __enter__(self) -> SourceStream:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager, closing the stream."""
        ...


@runtime_checkable
class SourcePort(Protocol):
    """Opens source paths (local files, shares, HTTP URLs) for reading."""

    def exists(self, source: str) -> bool:
        """Check whether the source exists without reading it."""
        ...

    def open(self, source: str) -> SourceStream:
        """Open the source for streaming reads.

        Raises:
            SourceNotFoundError: If the source does not exist.
            SourceUnreadableError: If the source exists but cannot be read.
        """
        ...

    def close(self) -> None:
        """Release connections held by the adapter."""
        ...


@runtime_checkable
class CachePort(Protocol):
    """Local cache directory, described only by filesystem metadata."""

    cache_dir: Path

    def snapshot(self) -> list[CachedFile]:
        """List regular files directly under the cache directory.

        Returns:
            Files ordered by last-access time, most recent first.
        """
        ...

    def remove(self, path: Path) -> None:
        """Delete one cached file.

        Raises:
            OSError: If the file cannot be deleted.
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Receives per-handoff byte counts for one transfer at a time.

    The orchestrator opens a task per source file and closes it when the
    copy or warm-up ends, whether it succeeded or not.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a transfer.

        Args:
            name: Human-readable name for the task (source file name).
            total: Total bytes to transfer, 0 when unknown.

        Returns:
            A ProgressCallback to call with (bytes_so_far, total, bytes_per_sec).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Close the task opened by start_task(name)."""
        ...


class NullProgressReporter:
    """Silent ProgressReporter for library callers that want no output."""

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Callback that discards every update."""
        return lambda _done, _total, _rate: None

    def finish_task(self, name: str) -> None:
        del name


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor that runs the pipeline's write stage.

    Abstracts over concurrent.futures executors so the core never imports
    threading primitives for worker management. Implementations must run
    submitted work concurrently with the caller.
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Schedule fn on a worker and return its Future."""
        ...

    def __enter__(self) -> ExecutorPort: ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Release workers once submitted work has finished."""
        ...


@runtime_checkable
class CommandForwarderPort(Protocol):
    """Hands a resolved file path to an external command."""

    def forward(
        self, command: str, arguments: str | None, file_path: str
    ) -> ForwardResult:
        """Run command with file_path substituted into arguments.

        Raises:
            PathResolutionError: If file_path cannot be made absolute.
            ProcessStartError: If the process cannot be started.
        """
        ...

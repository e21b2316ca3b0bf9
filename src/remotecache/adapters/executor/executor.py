"""Executor adapter implementing ExecutorPort."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future


class ThreadPoolExecutorAdapter:
    """Runs pipeline stages on named worker threads.

    The copy pipeline submits exactly one job, its write stage, which blocks
    on the caller's handoff; the pool therefore always needs a real thread.

    Example:
        >>> with ThreadPoolExecutorAdapter(max_workers=1) as executor:
        ...     StreamCopyPipeline(executor=executor).run(stream, dest)
    """

    def __init__(
        self, max_workers: int | None = None, thread_name_prefix: str = "remotecache"
    ) -> None:
        """Create the underlying pool.

        Args:
            max_workers: Worker thread limit; None lets the pool decide.
            thread_name_prefix: Prefix for worker names, visible in debuggers
                and thread dumps.
        """
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Schedule fn(*args, **kwargs) on a worker thread."""
        return self._pool.submit(fn, *args, **kwargs)

    def __enter__(self) -> ThreadPoolExecutorAdapter:
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Shut the pool down, waiting for submitted work."""
        self._pool.shutdown(wait=True)
        return None

"""Progress reporter that writes one log line per buffer handoff."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from remotecache.core.formatting import format_megabytes
from remotecache.logging import get_logger


if TYPE_CHECKING:
    from remotecache.core.ports import ProgressCallback


class LoggingProgressReporter:
    """Reports progress as informational log lines.

    Lines look like:
        Preloading file 'a.mkv (700.00 MB)'... 12.50% complete. 87.50 MB read.
        10.00 MB/s. 61 seconds remaining.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("remotecache.progress")

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Return a callback that logs progress for name."""
        display_name = f"{name} ({format_megabytes(total)})" if total else name

        def callback(done: int, total: int, rate: float) -> None:
            self._logger.info(describe_progress(display_name, done, total, rate))

        return callback

    def finish_task(self, name: str) -> None:
        """Log completion of name."""
        self._logger.debug("Finished transfer of '%s'", name)


def describe_progress(display_name: str, done: int, total: int, rate: float) -> str:
    """Format one progress line; percentage and ETA only when total is known."""
    parts = [f"Preloading file '{display_name}'..."]
    if total > 0:
        parts.append(f"{done / total:.2%} complete.")
    parts.append(f"{format_megabytes(done)} read.")
    parts.append(f"{format_megabytes(rate)}/s.")
    if total > 0 and rate > 0:
        parts.append(f"{max(total - done, 0) / rate:.0f} seconds remaining.")
    return " ".join(parts)

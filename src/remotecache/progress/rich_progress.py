"""Progress bar for a single cache transfer, drawn with Rich on stderr."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from remotecache.logging import get_console


if TYPE_CHECKING:
    from types import TracebackType

    from remotecache.core.ports import ProgressCallback


def _build_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold cyan]{task.description}", justify="right"),
        BarColumn(bar_width=None),
        DownloadColumn(binary_units=True),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=get_console(),
        transient=False,
    )


class RichProgressReporter:
    """Implements ProgressReporter with a live Rich transfer bar.

    The bar shares the logging console, so log lines print above it
    instead of tearing it. Sources without a declared length get a
    pulsing bar; the byte count and speed are still shown.

    Example:
        with RichProgressReporter() as reporter:
            with CacheOrchestrator.from_preferences(prefs, progress=reporter) as o:
                o.cache("//nas/movies/a.mkv")
    """

    def __init__(self) -> None:
        self._progress = _build_progress()
        self._task_ids: dict[str, TaskID] = {}
        self._live = False

    def __enter__(self) -> RichProgressReporter:
        self._ensure_live()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._live:
            self._progress.stop()
            self._live = False

    def _ensure_live(self) -> None:
        if not self._live:
            self._progress.start()
            self._live = True

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Add a bar for name; total 0 means the length is unknown."""
        self._ensure_live()
        task_id = self._progress.add_task(name, total=total if total > 0 else None)
        self._task_ids[name] = task_id

        def on_handoff(done: int, _total: int, _rate: float) -> None:
            # Rich computes its own speed from the completed counter
            self._progress.update(task_id, completed=done)

        return on_handoff

    def finish_task(self, name: str) -> None:
        """Fill the bar for name; an unsized bar is frozen at its byte count."""
        task_id = self._task_ids.pop(name, None)
        if task_id is None:
            return
        task = next(t for t in self._progress.tasks if t.id == task_id)
        if task.total is None:
            self._progress.update(task_id, total=task.completed)
        else:
            self._progress.update(task_id, completed=task.total)

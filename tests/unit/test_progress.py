"""Unit tests for progress reporters."""

import logging

import pytest

from remotecache.core.ports import NullProgressReporter, ProgressReporter
from remotecache.progress import LoggingProgressReporter, RichProgressReporter
from remotecache.progress.log_progress import describe_progress


MB = 1024 * 1024


@pytest.mark.progress
@pytest.mark.tier(0)
class TestDescribeProgress:
    """Tests for the log-line format."""

    def test_known_total(self) -> None:
        """Percentage, bytes, rate and ETA are shown."""
        line = describe_progress("a.mkv (100.00 MB)", 25 * MB, 100 * MB, 5 * MB)
        assert line == (
            "Preloading file 'a.mkv (100.00 MB)'... 25.00% complete. "
            "25.00 MB read. 5.00 MB/s. 15 seconds remaining."
        )

    def test_unknown_total(self) -> None:
        """Without a total there is no percentage or ETA."""
        line = describe_progress("a.mkv", 3 * MB, 0, MB)
        assert line == "Preloading file 'a.mkv'... 3.00 MB read. 1.00 MB/s."

    def test_zero_rate_has_no_eta(self) -> None:
        """A stalled transfer shows no ETA."""
        line = describe_progress("a", MB, 2 * MB, 0.0)
        assert "remaining" not in line


@pytest.mark.progress
@pytest.mark.tier(0)
class TestReporters:
    """Tests for the reporter implementations."""

    @pytest.mark.parametrize(
        "reporter",
        [NullProgressReporter(), LoggingProgressReporter()],
    )
    def test_implements_protocol(self, reporter: object) -> None:
        """Reporters satisfy the ProgressReporter protocol."""
        assert isinstance(reporter, ProgressReporter)

    def test_logging_reporter_logs_each_update(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Each callback becomes one INFO line."""
        reporter = LoggingProgressReporter()
        with caplog.at_level(logging.INFO, logger="remotecache"):
            callback = reporter.start_task("a.mkv", 2 * MB)
            callback(MB, 2 * MB, MB)
            callback(2 * MB, 2 * MB, MB)
            reporter.finish_task("a.mkv")

        lines = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert len(lines) == 2
        assert lines[0].startswith("Preloading file 'a.mkv (2.00 MB)'... 50.00%")

    def test_rich_reporter_tracks_tasks(self) -> None:
        """Rich tasks are created, updated and completed."""
        with RichProgressReporter() as reporter:
            assert isinstance(reporter, ProgressReporter)
            callback = reporter.start_task("a.mkv", 100)
            callback(40, 100, 10.0)
            task = reporter._progress.tasks[0]
            assert task.completed == 40
            reporter.finish_task("a.mkv")
            assert task.completed == 100

    def test_rich_reporter_unknown_total(self) -> None:
        """An unknown total gives an open-ended task."""
        with RichProgressReporter() as reporter:
            reporter.start_task("stream", 0)
            assert reporter._progress.tasks[0].total is None
            reporter.finish_task("stream")

"""Progress reporters for transfers."""

from remotecache.progress.log_progress import LoggingProgressReporter
from remotecache.progress.rich_progress import RichProgressReporter


__all__ = ["LoggingProgressReporter", "RichProgressReporter"]

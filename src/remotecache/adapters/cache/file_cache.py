"""File-based cache adapter implementing CachePort."""

from __future__ import annotations

import contextlib
import stat
from typing import TYPE_CHECKING

from remotecache.core.models import CachedFile


if TYPE_CHECKING:
    from pathlib import Path


class FileCache:
    """Local cache directory described only by filesystem metadata.

    Cached files live directly under cache_dir; there are no sidecar or
    index files. Every call re-reads the directory.

    Attributes:
        cache_dir: Directory where cached files are stored.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir

    def snapshot(self) -> list[CachedFile]:
        """List regular files directly under the cache directory.

        Files that vanish or cannot be stat'ed mid-scan are skipped.

        Returns:
            CachedFile rows ordered by last-access time, most recent first.
        """
        if not self.cache_dir.is_dir():
            return []

        files: list[CachedFile] = []
        for path in self.cache_dir.iterdir():
            with contextlib.suppress(OSError):
                st = path.stat()
                if stat.S_ISREG(st.st_mode):
                    files.append(
                        CachedFile(path=path, size=st.st_size, accessed_at=st.st_atime)
                    )

        files.sort(key=lambda f: f.accessed_at, reverse=True)
        return files

    def remove(self, path: Path) -> None:
        """Delete one cached file.

        Args:
            path: File to delete. Missing files are ignored.

        Raises:
            OSError: If the file exists but cannot be deleted.
        """
        path.unlink(missing_ok=True)

    def size(self) -> int:
        """Bytes currently held in the cache directory."""
        return sum(f.size for f in self.snapshot())

    def statistics(self) -> dict[str, int]:
        """Summarise the directory for the stats command.

        Returns:
            {"total_size": bytes, "file_count": regular files}
        """
        files = self.snapshot()
        return {
            "total_size": sum(f.size for f in files),
            "file_count": len(files),
        }

"""Size-based eviction for the cache directory.

The directory is re-scanned on every pass; there is no persisted index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from remotecache.core.models import EvictionReport
from remotecache.logging import get_logger


if TYPE_CHECKING:
    from pathlib import Path

    from remotecache.core.models import CachedFile
    from remotecache.core.ports import CachePort


logger = get_logger(__name__)


def order_for_eviction(files: list[CachedFile]) -> list[CachedFile]:
    """Order files most-recently-accessed first.

    Returns:
        New list; the eviction candidate is the last element.
    """
    return sorted(files, key=lambda f: f.accessed_at, reverse=True)


def enforce_size_limit(
    cache: CachePort,
    max_size_bytes: int,
    protect: Path | None = None,
) -> EvictionReport:
    """Delete least-recently-accessed files until the cache fits its budget.

    Stops when the total size is within max_size_bytes or only kept files
    remain. The most recently accessed file and protect are always kept,
    so at least one file survives even above the budget. A file that
    cannot be deleted is logged and skipped; its size still counts.

    Args:
        cache: The cache directory port.
        max_size_bytes: Size budget in bytes.
        protect: Path that must never be evicted (e.g. the file just written).

    Returns:
        EvictionReport listing deleted and undeletable files.
    """
    ordered = order_for_eviction(cache.snapshot())
    total = sum(f.size for f in ordered)
    report = EvictionReport(remaining_bytes=total)

    # ordered[0] is the most recently accessed file
    candidates = ordered[1:]

    while total > max_size_bytes and candidates:
        stale = candidates.pop()
        if stale.path == protect:
            continue
        try:
            cache.remove(stale.path)
        except OSError as e:
            logger.warning("Failed to evict '%s': %s", stale.path, e)
            report.failed.append(stale.path)
            continue
        total -= stale.size
        report.deleted.append(stale.path)
        logger.info("Evicted '%s' (%d bytes)", stale.path.name, stale.size)

    report.remaining_bytes = total
    if report.deleted:
        logger.info(
            "Eviction removed %d file(s); cache now %d of %d bytes",
            report.deleted_count,
            total,
            max_size_bytes,
        )
    return report

"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from remotecache import (
    CacheOrchestrator,
    CachePreferences,
    CacheResult,
    IOWriteError,
    # Exceptions
    RemoteCacheError,
    SourceNotFoundError,
    SourceUnreadableError,
)


orchestrator = CacheOrchestrator.from_preferences(
    CachePreferences(cache_directory=Path("./media-cache"))
)


# Pattern 1: Fall back to the original path when the copy fails
def cached_or_original(path: str) -> str:
    """Return the cached path, or the original if it could not be cached."""
    try:
        return orchestrator.cache(path).path
    except SourceUnreadableError as e:
        print(f"Could not read {e.source}: {e}")
        print(f"Hint: {e.recovery_hint}")
        return path


# Pattern 2: Treat a missing source as "nothing to play"
def cache_if_present(path: str) -> CacheResult | None:
    """Cache a file, returning None if it does not exist."""
    try:
        return orchestrator.cache(path)
    except SourceNotFoundError as e:
        print(f"Not found: {e.source}")
        return None


# Pattern 3: Disk problems need user action
def cache_or_report_disk(path: str) -> CacheResult | None:
    """Cache a file, explaining local write failures."""
    try:
        return orchestrator.cache(path)
    except IOWriteError as e:
        print(f"Could not write {e.path}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 4: Catch everything from the library
def cache_safely(path: str) -> CacheResult | None:
    """Cache a file, catching any library error."""
    try:
        return orchestrator.cache(path)
    except RemoteCacheError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None


if __name__ == "__main__":
    with orchestrator:
        print(cached_or_original("//nas/movies/Movie.mkv"))

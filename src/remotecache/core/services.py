"""Core domain services for remotecache."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any

from remotecache.core.eviction import enforce_size_limit
from remotecache.core.exceptions import IOWriteError, SourceNotFoundError
from remotecache.core.models import (
    CacheEntry,
    CacheOutcome,
    CachePreferences,
    CacheResult,
    SourceDescriptor,
)
from remotecache.core.path_utils import base_name, classify_path, derive_local_path
from remotecache.core.pipeline import DEFAULT_BUFFER_SIZE, StreamCopyPipeline
from remotecache.core.ports import (
    CachePort,
    CommandForwarderPort,
    NullProgressReporter,
    ProgressReporter,
    SourcePort,
)
from remotecache.core.warmup import DEFAULT_WARMUP_CHUNK_SIZE, read_through
from remotecache.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType

    from remotecache.core.models import EvictionReport


logger = get_logger(__name__)

# In-flight downloads are written next to their final name, then renamed
PARTIAL_SUFFIX = ".partial"


class CacheOrchestrator:
    """Decides skip/hit/miss for a source, fills the cache, evicts, forwards.

    Preferences may be given as a loader. It runs only once a call needs the
    cache directory, so skipped local paths and warm-ups never read (or
    create) the settings file. Closing the orchestrator closes its source.
    """

    def __init__(
        self,
        preferences: CachePreferences | Callable[[], CachePreferences],
        source: SourcePort,
        cache: CachePort | None,
        forwarder: CommandForwarderPort,
        pipeline: StreamCopyPipeline | None = None,
        progress: ProgressReporter | None = None,
        warmup_chunk_size: int = DEFAULT_WARMUP_CHUNK_SIZE,
    ) -> None:
        self._preferences_source = preferences
        self._preferences: CachePreferences | None = (
            preferences if isinstance(preferences, CachePreferences) else None
        )
        self._source = source
        self._cache = cache
        self._forwarder = forwarder
        self._pipeline = pipeline or StreamCopyPipeline()
        self._progress = progress or NullProgressReporter()
        self._warmup_chunk_size = warmup_chunk_size

    @classmethod
    def from_preferences(
        cls,
        preferences: CachePreferences | Callable[[], CachePreferences],
        progress: ProgressReporter | None = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        http_client: Any | None = None,
    ) -> CacheOrchestrator:
        """Create an orchestrator with the default adapters.

        Args:
            preferences: Cache directory and size budget, or a zero-argument
                loader for them (e.g. config.load_preferences).
            progress: Optional progress reporter for transfer feedback.
            buffer_size: Size of each pipeline transfer buffer.
            http_client: Optional httpx.Client for HTTP sources.

        Returns:
            CacheOrchestrator with RouterSource, a FileCache created on
            first use and a subprocess-based command forwarder.
        """
        from remotecache.adapters.forwarding import SubprocessCommandForwarder
        from remotecache.adapters.storage import create_router

        return cls(
            preferences=preferences,
            source=create_router(http_client=http_client),
            cache=None,
            forwarder=SubprocessCommandForwarder(),
            pipeline=StreamCopyPipeline(buffer_size=buffer_size),
            progress=progress,
        )

    def __enter__(self) -> CacheOrchestrator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the source's connections."""
        self._source.close()

    @property
    def preferences(self) -> CachePreferences:
        """Preferences, loaded on first access when given as a loader.

        Raises:
            PreferencesError: If the loader cannot read the settings.
        """
        if self._preferences is None:
            source = self._preferences_source
            assert callable(source)
            self._preferences = source()
        return self._preferences

    def _cache_port(self) -> CachePort:
        if self._cache is None:
            from remotecache.adapters.cache import FileCache

            self._cache = FileCache(self.preferences.cache_directory)
        return self._cache

    def entry_for(self, source: SourceDescriptor) -> CacheEntry:
        """Derive the cache entry for a classified source."""
        return CacheEntry(
            source=source,
            local_path=derive_local_path(source.path, self._cache_port().cache_dir),
        )

    def cache(
        self,
        path: str,
        *,
        cache_non_network_paths: bool = False,
        forward_command: str | None = None,
        forward_arguments: str | None = None,
    ) -> CacheResult:
        """Make a local copy of path available, then optionally forward it.

        Local paths are passed through untouched unless
        cache_non_network_paths is set. An existing cache file is a hit and
        is used as is. Otherwise the source is copied into the cache and
        older files are evicted to stay within the size budget.

        Args:
            path: Source path or URL.
            cache_non_network_paths: Also cache local paths.
            forward_command: Optional command to run with the resolved path.
            forward_arguments: Argument template for forward_command.

        Returns:
            CacheResult describing the branch taken.

        Raises:
            SourceNotFoundError: If the source does not exist.
            SourceUnreadableError: If the source cannot be read to the end.
            IOWriteError: If the cache file cannot be written.
            PathResolutionError: If the path to forward cannot be resolved.
            ProcessStartError: If the forwarding command cannot be started.
        """
        source = classify_path(path)

        if not source.is_remote and not cache_non_network_paths:
            logger.info("Skipping caching '%s' because it is not a network path", path)
            return self._finish(
                CacheOutcome.SKIPPED,
                path,
                "Skipping caching file because it is not a network path.",
                forward_command,
                forward_arguments,
            )

        # HTTP existence is confirmed by opening the stream
        if not source.is_http and not self._source.exists(path):
            raise SourceNotFoundError(f"File does not exist: {path}", source=path)

        entry = self.entry_for(source)

        if entry.exists:
            logger.info("Cache hit for '%s': %s", path, entry.local_path)
            return self._finish(
                CacheOutcome.HIT,
                str(entry.local_path),
                "Skipping caching file because it already exists locally.",
                forward_command,
                forward_arguments,
            )

        self._download(source, entry.local_path)
        self.evict(protect=entry.local_path)

        return self._finish(
            CacheOutcome.MISS,
            str(entry.local_path),
            "Successfully preloaded file.",
            forward_command,
            forward_arguments,
        )

    def pseudo_cache(
        self,
        path: str,
        *,
        cache_non_network_paths: bool = False,
        forward_command: str | None = None,
        forward_arguments: str | None = None,
    ) -> CacheResult:
        """Read the source through once without storing it.

        The cache directory is never touched. When a forward command is
        configured it receives the original path.
        """
        source = classify_path(path)

        if not source.is_remote and not cache_non_network_paths:
            logger.info(
                "Skipping preloading file '%s' because it is not a network path", path
            )
            return self._finish(
                CacheOutcome.SKIPPED,
                path,
                "Skipping preloading file because it is not a network path.",
                forward_command,
                forward_arguments,
            )

        logger.info("Preloading file '%s'...", path)
        name = base_name(path)
        with self._source.open(path) as stream:
            logger.info("File stream opened.")
            callback = self._progress.start_task(name, stream.length or 0)
            try:
                count = read_through(stream, self._warmup_chunk_size, callback)
            finally:
                self._progress.finish_task(name)
        logger.info("Successfully preloaded file '%s'", path)

        return self._finish(
            CacheOutcome.WARMED,
            path,
            f"Successfully preloaded {count} bytes.",
            forward_command,
            forward_arguments,
        )

    def evict(self, protect: Path | None = None) -> EvictionReport:
        """Run one eviction pass over the cache directory."""
        return enforce_size_limit(
            self._cache_port(),
            self.preferences.max_cache_size_bytes,
            protect=protect,
        )

    def _download(self, source: SourceDescriptor, local_path: Path) -> None:
        """Copy source into local_path via a partial file.

        The partial file is renamed only after the pipeline completes, so a
        failed copy never shows up as a cache hit.
        """
        partial = local_path.with_name(local_path.name + PARTIAL_SUFFIX)
        name = base_name(source.path)
        logger.info("Preloading file '%s'...", source.path)

        try:
            with self._source.open(source.path) as stream:
                logger.info("File stream opened.")
                callback = self._progress.start_task(name, stream.length or 0)
                try:
                    copied = self._pipeline.run(stream, partial, callback)
                finally:
                    self._progress.finish_task(name)

            try:
                partial.replace(local_path)
            except OSError as e:
                raise IOWriteError(
                    f"Failed to move '{partial}' into place: {e}",
                    path=local_path,
                    cause=e,
                ) from e
        except Exception as e:
            logger.error("Failed to preload file %s: %s", source.path, e)
            raise
        finally:
            with contextlib.suppress(OSError):
                partial.unlink(missing_ok=True)

        logger.info("Successfully preloaded file '%s' (%d bytes)", source.path, copied)

    def _finish(
        self,
        outcome: CacheOutcome,
        path: str,
        message: str,
        forward_command: str | None,
        forward_arguments: str | None,
    ) -> CacheResult:
        if not forward_command or not forward_command.strip():
            return CacheResult(outcome=outcome, path=path, message=message)

        if outcome is CacheOutcome.SKIPPED:
            outcome = CacheOutcome.FORWARDED_ORIGINAL

        logger.info("Forwarding '%s' to %s", path, forward_command)
        result = self._forwarder.forward(forward_command, forward_arguments, path)
        return CacheResult(
            outcome=outcome,
            path=path,
            message=result.message
            or f"{forward_command} exited with {result.exit_code}",
            exit_code=result.exit_code,
        )

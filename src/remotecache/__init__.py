"""remotecache - prefetch remote media files into a local size-bounded cache.

This library copies a file from a network share or HTTP(S) server to local
disk, names it after a digest of its source path, evicts least-recently
accessed files once the cache exceeds its budget, and can hand the local
path to an external command.

Example:
    >>> from remotecache import CacheOrchestrator, CachePreferences
    >>> prefs = CachePreferences(cache_directory=Path("/tmp/cache"))
    >>> with CacheOrchestrator.from_preferences(prefs) as orchestrator:
    ...     result = orchestrator.cache("https://host/video.mp4")
    >>> result.path  # '/tmp/cache/video.mp4_<SHA1>'
"""

from remotecache.adapters.cache import FileCache
from remotecache.adapters.executor import ThreadPoolExecutorAdapter
from remotecache.adapters.forwarding import (
    SubprocessCommandForwarder,
    build_forward_arguments,
)
from remotecache.adapters.storage import (
    FilesystemSource,
    HttpSource,
    RouterSource,
    create_router,
)
from remotecache.config import load_preferences, save_preferences, try_get_preferences
from remotecache.core.eviction import enforce_size_limit
from remotecache.core.exceptions import (
    InvalidSourceLengthError,
    IOWriteError,
    PathResolutionError,
    PreferencesError,
    ProcessStartError,
    RemoteCacheError,
    SourceError,
    SourceNotFoundError,
    SourceUnreadableError,
)
from remotecache.core.models import (
    CachedFile,
    CacheEntry,
    CacheOutcome,
    CachePreferences,
    CacheResult,
    EvictionReport,
    ForwardResult,
    SourceDescriptor,
    SourceKind,
)
from remotecache.core.path_utils import classify_path, derive_local_path
from remotecache.core.pipeline import StreamCopyPipeline
from remotecache.core.ports import (
    CachePort,
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
    SourcePort,
    SourceStream,
)
from remotecache.core.services import CacheOrchestrator
from remotecache.progress import LoggingProgressReporter, RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CacheOrchestrator",
    "CacheOutcome",
    "CachePort",
    "CachePreferences",
    "CacheResult",
    "CachedFile",
    "EvictionReport",
    "FileCache",
    "FilesystemSource",
    "ForwardResult",
    "HttpSource",
    "IOWriteError",
    "InvalidSourceLengthError",
    "LoggingProgressReporter",
    "NullProgressReporter",
    "PathResolutionError",
    "PreferencesError",
    "ProcessStartError",
    "ProgressCallback",
    "ProgressReporter",
    "RemoteCacheError",
    "RichProgressReporter",
    "RouterSource",
    "SourceDescriptor",
    "SourceError",
    "SourceKind",
    "SourceNotFoundError",
    "SourcePort",
    "SourceStream",
    "SourceUnreadableError",
    "StreamCopyPipeline",
    "SubprocessCommandForwarder",
    "ThreadPoolExecutorAdapter",
    "__version__",
    "build_forward_arguments",
    "classify_path",
    "create_router",
    "derive_local_path",
    "enforce_size_limit",
    "load_preferences",
    "save_preferences",
    "try_get_preferences",
]

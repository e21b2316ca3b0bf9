"""Core domain module for remotecache.

This module contains the domain models, port definitions and the caching
pipeline. It depends on adapters only through the ports.
"""

from remotecache.core.models import (
    CachedFile,
    CacheEntry,
    CacheOutcome,
    CachePreferences,
    CacheResult,
    SourceDescriptor,
    SourceKind,
)
from remotecache.core.ports import (
    CachePort,
    ProgressCallback,
    SourcePort,
    SourceStream,
)


__all__ = [
    "CacheEntry",
    "CacheOutcome",
    "CachePort",
    "CachePreferences",
    "CacheResult",
    "CachedFile",
    "ProgressCallback",
    "SourceDescriptor",
    "SourceKind",
    "SourcePort",
    "SourceStream",
]

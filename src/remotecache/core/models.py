"""Core domain models for remotecache.

These models are pure Python dataclasses with no I/O dependencies,
apart from the filesystem existence check on CacheEntry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class SourceKind(StrEnum):
    """Lexical classification of a source path."""

    LOCAL = "local"
    NETWORK_SHARE = "network-share"
    HTTP = "http"


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """A source path together with its classification.

    Attributes:
        path: The source path exactly as given by the caller.
        kind: Result of classifying the path.

    Example:
        >>> from remotecache.core.path_utils import classify_path
        >>> classify_path("https://host/video.mp4").is_http
        True
    """

    path: str
    kind: SourceKind

    def __post_init__(self) -> None:
        """Validate descriptor fields after initialization."""
        if not self.path:
            raise ValueError("Source path cannot be empty")

    @property
    def is_remote(self) -> bool:
        """True for network shares and HTTP(S) sources."""
        return self.kind is not SourceKind.LOCAL

    @property
    def is_http(self) -> bool:
        """True when the source should be opened with a streaming GET."""
        return self.kind is SourceKind.HTTP


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Relationship between a source and its local cache file.

    There is no metadata record: the entry exists iff the file does.
    """

    source: SourceDescriptor
    local_path: Path

    @property
    def exists(self) -> bool:
        return self.local_path.is_file()


@dataclass(frozen=True, slots=True)
class CachedFile:
    """One row of a cache directory snapshot."""

    path: Path
    size: int
    accessed_at: float


@dataclass(frozen=True, slots=True)
class CachePreferences:
    """User preferences consumed read-only by a single invocation.

    Attributes:
        cache_directory: Directory holding cached files.
        max_cache_size_mb: Size budget for the cache directory in MiB.
    """

    cache_directory: Path
    max_cache_size_mb: int = 1024

    def __post_init__(self) -> None:
        """Validate the size budget."""
        if self.max_cache_size_mb < 0:
            raise ValueError("max_cache_size_mb cannot be negative")

    @property
    def max_cache_size_bytes(self) -> int:
        """Size budget in bytes."""
        return self.max_cache_size_mb * 1024 * 1024


class CacheOutcome(StrEnum):
    """Which branch of the cache state machine produced a result."""

    SKIPPED = "skipped"
    FORWARDED_ORIGINAL = "forwarded-original"
    HIT = "hit"
    MISS = "miss"
    WARMED = "warmed"


@dataclass(frozen=True, slots=True)
class ForwardResult:
    """Exit status of a forwarded external command."""

    exit_code: int
    message: str | None = None


@dataclass(frozen=True, slots=True)
class CacheResult:
    """Terminal outcome of one cache or pseudo-cache invocation.

    Attributes:
        outcome: The branch taken.
        path: The resolved path (cached local path, or the original path).
        message: Human-readable status line.
        exit_code: 0 on success, or the forwarded command's exit code.
    """

    outcome: CacheOutcome
    path: str
    message: str
    exit_code: int = 0


@dataclass(slots=True)
class EvictionReport:
    """Summary of one eviction pass."""

    deleted: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)
    remaining_bytes: int = 0

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

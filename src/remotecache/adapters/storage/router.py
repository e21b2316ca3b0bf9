"""RouterSource composite adapter for classification-based routing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from remotecache.core.path_utils import is_http_path


if TYPE_CHECKING:
    from remotecache.core.ports import SourcePort, SourceStream


class RouterSource:
    """Source adapter that routes HTTP(S) paths and file paths to backends.

    Implements SourcePort by delegating to the HTTP adapter for paths the
    classifier tags as HTTP, and to the filesystem adapter for everything
    else (local files and network shares).
    """

    def __init__(self, http: SourcePort, filesystem: SourcePort) -> None:
        """Initialize with the two backends.

        Args:
            http: Adapter for http://, https:// and www. paths.
            filesystem: Adapter for local paths and shares.
        """
        self._http = http
        self._filesystem = filesystem

    def _backend_for(self, source: str) -> SourcePort:
        return self._http if is_http_path(source) else self._filesystem

    def exists(self, source: str) -> bool:
        """Check existence by delegating to appropriate backend."""
        return self._backend_for(source).exists(source)

    def open(self, source: str) -> SourceStream:
        """Open a stream by delegating to appropriate backend."""
        return self._backend_for(source).open(source)

    def close(self) -> None:
        """Close both backends."""
        self._http.close()
        self._filesystem.close()


def create_router(http_client: Any | None = None) -> RouterSource:
    """Create a RouterSource with default backends.

    Args:
        http_client: Optional httpx.Client. If not provided, creates default.

    Returns:
        RouterSource configured with HttpSource and FilesystemSource.
    """
    from remotecache.adapters.storage import FilesystemSource, HttpSource

    return RouterSource(
        http=HttpSource(client=http_client),
        filesystem=FilesystemSource(),
    )

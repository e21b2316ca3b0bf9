"""HTTP(S) source adapter using httpx streaming GETs."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from remotecache.core.exceptions import (
    SourceError,
    SourceNotFoundError,
    SourceUnreadableError,
)
from remotecache.core.path_utils import base_name


if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType


# Only connecting is bounded; a stalled body read stalls the transfer
_DEFAULT_TIMEOUT = httpx.Timeout(None, connect=30.0)

_NOT_FOUND_STATUSES = (404, 410)


def to_url(source: str) -> str:
    """Turn a source path into a URL httpx accepts ('www.' gets https)."""
    if source.startswith("www."):
        return f"https://{source}"
    return source


class HttpSourceStream:
    """SourceStream over a streaming httpx response body.

    Attributes:
        length: Content-Length when the body is sent unencoded, else None.
    """

    def __init__(self, source: str, response: httpx.Response) -> None:
        self.source = source
        self.name = base_name(source)
        self._response = response
        self._chunks: Iterator[bytes] | None = None
        self._pending = b""
        self.length: int | None = self._declared_length(response)

    @staticmethod
    def _declared_length(response: httpx.Response) -> int | None:
        encoding = response.headers.get("Content-Encoding", "identity").lower()
        header = response.headers.get("Content-Length")
        if header is None or encoding != "identity":
            return None
        try:
            return int(header)
        except ValueError:
            return None

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Copy the next piece of the body into buffer.

        Returns:
            Bytes copied; 0 once the body is exhausted.
        """
        if self._chunks is None:
            self._chunks = self._response.iter_bytes(chunk_size=len(buffer))
        try:
            if not self._pending:
                self._pending = next(self._chunks, b"")
        except httpx.HTTPError as e:
            raise SourceUnreadableError(
                f"Failed to read {self.source}: {e}",
                source=self.source,
                cause=e,
            ) from e

        count = min(len(buffer), len(self._pending))
        buffer[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> HttpSourceStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class HttpSource:
    """Source adapter for HTTP and HTTPS URLs.

    Implements SourcePort with streaming GET requests.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize HTTP source.

        Args:
            client: Optional httpx client. If not provided, creates a default
                client that follows redirects and has no read timeout.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True, timeout=_DEFAULT_TIMEOUT
        )

    def close(self) -> None:
        """Close the default client; an injected client belongs to the caller."""
        if self._owns_client:
            self._client.close()

    def exists(self, source: str) -> bool:  # noqa: ARG002
        """Existence of an HTTP source is confirmed by open()."""
        return True

    def open(self, source: str) -> HttpSourceStream:
        """Start a streaming GET for source.

        Args:
            source: http(s):// URL or 'www.' address.

        Returns:
            An open HttpSourceStream; the caller must close it.

        Raises:
            SourceNotFoundError: If the server answers 404 or 410.
            SourceUnreadableError: For other error statuses and transport errors.
        """
        try:
            request = self._client.build_request("GET", to_url(source))
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise SourceUnreadableError(
                f"Failed to open {source}: {e}",
                source=source,
                cause=e,
            ) from e

        if response.is_error:
            response.close()
            raise self._translate_status(response, source)

        return HttpSourceStream(source, response)

    def _translate_status(self, response: httpx.Response, source: str) -> SourceError:
        """Translate an error response to a domain exception.

        Args:
            response: The httpx response with a 4xx/5xx status.
            source: The source URL for context.

        Returns:
            Appropriate SourceError subclass.
        """
        if response.status_code in _NOT_FOUND_STATUSES:
            return SourceNotFoundError(
                f"Object not found ({response.status_code}): {source}",
                source=source,
            )
        return SourceUnreadableError(
            f"HTTP error ({response.status_code}): {source}",
            source=source,
        )

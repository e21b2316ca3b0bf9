"""Filesystem source adapter for local files and mounted network shares."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, TYPE_CHECKING

from remotecache.core.exceptions import SourceNotFoundError, SourceUnreadableError
from remotecache.core.path_utils import base_name


if TYPE_CHECKING:
    from types import TracebackType


class FileSourceStream:
    """SourceStream over an open binary file.

    The declared length is taken from fstat at open time.
    """

    def __init__(self, source: str, handle: IO[bytes]) -> None:
        self.source = source
        self.name = base_name(source)
        self._handle = handle
        self.length: int | None = os.fstat(handle.fileno()).st_size

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into buffer, translating OS errors to SourceUnreadableError."""
        try:
            return self._handle.readinto(buffer) or 0  # type: ignore[attr-defined]
        except OSError as e:
            raise SourceUnreadableError(
                f"Failed to read {self.source}: {e}",
                source=self.source,
                cause=e,
            ) from e

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> FileSourceStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class FilesystemSource:
    """Source adapter for local paths and shares reachable through the OS.

    Implements SourcePort. UNC-style paths and anything else that is not
    HTTP are opened as files; schemes the OS cannot open simply don't exist.
    """

    def exists(self, source: str) -> bool:
        """Check that source is an existing regular file."""
        try:
            return Path(source).is_file()
        except (OSError, ValueError):
            return False

    def close(self) -> None:
        """Nothing to release; each stream owns its handle."""

    def open(self, source: str) -> FileSourceStream:
        """Open a file for streaming reads.

        Args:
            source: Path to the file.

        Returns:
            An open FileSourceStream.

        Raises:
            SourceNotFoundError: If the file does not exist.
            SourceUnreadableError: If the file cannot be opened for reading.
        """
        try:
            handle = Path(source).open("rb")
        except FileNotFoundError as e:
            raise SourceNotFoundError(
                f"Could not find file '{source}'",
                source=source,
                cause=e,
            ) from e
        except OSError as e:
            raise SourceUnreadableError(
                f"File stream is not readable: {source}",
                source=source,
                cause=e,
            ) from e

        if not handle.readable():
            handle.close()
            raise SourceUnreadableError(
                f"File stream is not readable: {source}", source=source
            )
        return FileSourceStream(source, handle)

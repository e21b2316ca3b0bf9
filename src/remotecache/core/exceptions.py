"""Domain exceptions for remotecache.

All library errors inherit from RemoteCacheError, allowing callers to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class RemoteCacheError(Exception):
    """Base class for all remotecache exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class PathResolutionError(RemoteCacheError):
    """Raised when an absolute path cannot be computed.

    Attributes:
        path: The path that could not be resolved.
        cause: The underlying exception, if any.
    """

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to get full path of '{path}'")


class SourceError(RemoteCacheError):
    """Base class for errors reading from the source.

    Attributes:
        source: The source path/URL that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class SourceNotFoundError(SourceError):
    """Raised when the source file does not exist."""

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the path."""
        return f"Verify the source path exists: {self.source}"


class SourceUnreadableError(SourceError):
    """Raised when the source was opened but could not be read to the end."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the share or server."""
        return "Check that the share or server is reachable and the file is readable"


class InvalidSourceLengthError(SourceUnreadableError):
    """Raised when the source reports a negative length."""

    def __init__(self, source: str, length: int) -> None:
        self.length = length
        super().__init__(f"Invalid source length {length}: {source}", source=source)


class IOWriteError(RemoteCacheError):
    """Raised when writing the local cache file fails.

    Attributes:
        path: The destination path.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking disk space and permissions."""
        return f"Check free space and permissions for {self.path.parent}"


class PreferencesError(RemoteCacheError):
    """Raised when preferences cannot be loaded, parsed or saved.

    Attributes:
        settings_path: Path to the settings file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        settings_path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.settings_path = settings_path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest deleting or repairing the settings file."""
        return f"Delete or repair the settings file at '{self.settings_path}'"


class ProcessStartError(RemoteCacheError):
    """Raised when the forwarding command fails to launch.

    Attributes:
        command: The command that failed to start.
        cause: The underlying exception, if any.
    """

    def __init__(self, command: str, cause: Exception | None = None) -> None:
        self.command = command
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Process failed to start: {command}{detail}")

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the command."""
        return f"Check that '{self.command}' is installed and on PATH"

"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from remotecache.core.models import CachePreferences, ForwardResult


if TYPE_CHECKING:
    from types import TracebackType


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "source: Source adapters (filesystem, http)")
    config.addinivalue_line("markers", "cache: Cache directory and eviction")
    config.addinivalue_line("markers", "pipeline: Double-buffered stream copy")
    config.addinivalue_line("markers", "forwarding: Command forwarding")
    config.addinivalue_line("markers", "progress: Progress reporters")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class ScriptedStream:
    """SourceStream that replays a script of chunks and errors.

    Each readinto() consumes the next item: bytes are copied (split across
    calls if larger than the buffer), b"" is a zero-byte read and an
    exception instance is raised.
    """

    def __init__(
        self,
        script: list[bytes | Exception],
        length: int | None,
        name: str = "scripted.bin",
    ) -> None:
        self.name = name
        self.length = length
        self._script = list(script)
        self.closed = False

    def readinto(self, buffer: bytearray | memoryview) -> int:
        if not self._script:
            return 0
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        count = min(len(buffer), len(item))
        buffer[:count] = item[:count]
        if count < len(item):
            self._script.insert(0, item[count:])
        return count

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> ScriptedStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class FakeSource:
    """SourcePort serving in-memory streams and recording opens."""

    def __init__(self, streams: dict[str, ScriptedStream] | None = None) -> None:
        self.streams = streams or {}
        self.opened: list[str] = []
        self.closed = False

    def exists(self, source: str) -> bool:
        return source in self.streams

    def open(self, source: str) -> ScriptedStream:
        from remotecache.core.exceptions import SourceNotFoundError

        self.opened.append(source)
        if source not in self.streams:
            raise SourceNotFoundError(f"Could not find file '{source}'", source=source)
        return self.streams[source]

    def close(self) -> None:
        self.closed = True


class RecordingForwarder:
    """CommandForwarderPort that records calls instead of spawning."""

    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls: list[tuple[str, str | None, str]] = []

    def forward(
        self, command: str, arguments: str | None, file_path: str
    ) -> ForwardResult:
        self.calls.append((command, arguments, file_path))
        return ForwardResult(exit_code=self.exit_code)


@pytest.fixture
def recording_forwarder() -> RecordingForwarder:
    """Forwarder that records calls and returns exit code 0."""
    return RecordingForwarder()


@pytest.fixture
def preferences(tmp_path: Path) -> CachePreferences:
    """Preferences pointing at a fresh cache directory with a 1 MB budget."""
    return CachePreferences(cache_directory=tmp_path / "cache", max_cache_size_mb=1)


@pytest.fixture
def settings_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the settings folder under tmp_path."""
    home = tmp_path / "settings"
    monkeypatch.setenv("REMOTE_MEDIA_CACHE_HOME", str(home))
    return home


def make_cached_file(directory: Path, name: str, size: int, accessed_at: float) -> Path:
    """Create a file of size bytes with a given access time."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(b"x" * size)
    os.utime(path, (accessed_at, accessed_at))
    return path


@pytest.fixture
def scripted_stream() -> type[ScriptedStream]:
    """The ScriptedStream class, for building streams inside tests."""
    return ScriptedStream


@pytest.fixture
def fake_source() -> type[FakeSource]:
    """The FakeSource class, for building in-memory sources inside tests."""
    return FakeSource


@pytest.fixture
def cached_file_factory():
    """Factory creating files with a chosen size and access time."""
    return make_cached_file

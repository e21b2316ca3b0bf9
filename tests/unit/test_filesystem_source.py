"""Unit tests for the filesystem source adapter."""

from pathlib import Path

import pytest

from remotecache.adapters.storage import FilesystemSource
from remotecache.core.exceptions import SourceNotFoundError, SourceUnreadableError
from remotecache.core.ports import SourcePort, SourceStream


@pytest.mark.source
@pytest.mark.tier(0)
class TestFilesystemSource:
    """Tests for FilesystemSource."""

    def test_implements_source_port(self) -> None:
        """FilesystemSource satisfies the SourcePort protocol."""
        assert isinstance(FilesystemSource(), SourcePort)

    def test_exists_for_regular_file(self, tmp_path: Path) -> None:
        """exists() is true only for regular files."""
        (tmp_path / "a.mkv").write_bytes(b"x")
        source = FilesystemSource()

        assert source.exists(str(tmp_path / "a.mkv"))
        assert not source.exists(str(tmp_path / "missing.mkv"))
        assert not source.exists(str(tmp_path))

    def test_exists_on_share_style_path(self, tmp_path: Path) -> None:
        """A doubled leading slash still reaches the file on POSIX."""
        (tmp_path / "a.mkv").write_bytes(b"x")
        assert FilesystemSource().exists("/" + str(tmp_path / "a.mkv"))

    def test_open_reports_length_and_name(self, tmp_path: Path) -> None:
        """The stream exposes the file size and base name."""
        path = tmp_path / "Movie.MKV"
        path.write_bytes(b"0123456789")

        with FilesystemSource().open(str(path)) as stream:
            assert isinstance(stream, SourceStream)
            assert stream.length == 10
            assert stream.name == "Movie.MKV"
            buffer = bytearray(4)
            assert stream.readinto(buffer) == 4
            assert bytes(buffer) == b"0123"

    def test_open_missing_raises_not_found(self, tmp_path: Path) -> None:
        """A missing file is SourceNotFoundError."""
        missing = str(tmp_path / "missing.mkv")
        with pytest.raises(SourceNotFoundError, match="Could not find file") as exc:
            FilesystemSource().open(missing)
        assert exc.value.source == missing

    def test_open_directory_raises_unreadable(self, tmp_path: Path) -> None:
        """Opening a directory fails as unreadable, not as missing."""
        with pytest.raises(SourceUnreadableError):
            FilesystemSource().open(str(tmp_path))

    def test_context_exit_closes_stream(self, tmp_path: Path) -> None:
        """Leaving the context closes the stream."""
        path = tmp_path / "a"
        path.write_bytes(b"x")
        stream = FilesystemSource().open(str(path))
        with stream:
            pass
        with pytest.raises(ValueError):
            stream.readinto(bytearray(1))

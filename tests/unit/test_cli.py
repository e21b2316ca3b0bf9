"""Tests for the CLI commands."""

import json
import sys
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

from remotecache.cli import app
from remotecache.cli.main import route_default_command
from remotecache.core.path_utils import derive_local_path


runner = CliRunner()


def _write_settings(home: Path, cache_dir: Path, max_mb: int = 1024) -> None:
    home.mkdir(parents=True, exist_ok=True)
    (home / "settings.json").write_text(
        json.dumps({"CacheDirectory": str(cache_dir), "MaxCacheSizeMB": max_mb})
    )


@pytest.mark.cli
@pytest.mark.tier(0)
class TestRouteDefaultCommand:
    """Tests for default-command routing."""

    def test_bare_path_routes_to_cache(self) -> None:
        """A path as first argument means the cache command."""
        assert route_default_command(["//nas/a.mkv", "--progress-bar"]) == [
            "cache",
            "//nas/a.mkv",
            "--progress-bar",
        ]

    @pytest.mark.parametrize(
        "argv",
        [
            ["cache", "//nas/a"],
            ["pseudo-cache", "//nas/a"],
            ["settings"],
            ["stats"],
            ["evict"],
            ["--help"],
            [],
        ],
    )
    def test_known_commands_are_untouched(self, argv: list[str]) -> None:
        """Explicit commands and help are passed through."""
        assert route_default_command(argv) == argv


@pytest.mark.cli
@pytest.mark.tier(1)
class TestCacheCommand:
    """Tests for the cache command."""

    def test_local_path_is_echoed_back(self, settings_home: Path) -> None:
        """A local path is skipped and printed unchanged."""
        result = runner.invoke(app, ["cache", "/home/me/a.mkv"])

        assert result.exit_code == 0
        assert "Running Cache command." in result.output
        assert "/home/me/a.mkv" in result.stdout
        assert "not a network path" in result.output

    def test_forced_local_copy(self, settings_home: Path, tmp_path: Path) -> None:
        """--cache-non-network-paths copies into the configured cache."""
        cache_dir = tmp_path / "cache"
        _write_settings(settings_home, cache_dir)
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"data" * 10)

        result = runner.invoke(
            app, ["cache", str(media), "--cache-non-network-paths"]
        )

        expected = derive_local_path(str(media), cache_dir)
        assert result.exit_code == 0, result.output
        assert str(expected) in result.stdout
        assert expected.read_bytes() == b"data" * 10
        assert "Successfully preloaded file." in result.output

    def test_second_run_is_a_hit(self, settings_home: Path, tmp_path: Path) -> None:
        """Running twice reuses the cached copy."""
        _write_settings(settings_home, tmp_path / "cache")
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"data")
        args = ["cache", str(media), "--cache-non-network-paths"]

        runner.invoke(app, args)
        result = runner.invoke(app, args)

        assert result.exit_code == 0
        assert "already exists locally" in result.output

    def test_missing_share_file_exits_1(
        self, settings_home: Path, tmp_path: Path
    ) -> None:
        """A missing source fails with exit code 1 and a hint."""
        result = runner.invoke(app, ["cache", "/" + str(tmp_path / "missing.mkv")])

        assert result.exit_code == 1
        assert "File does not exist" in result.output
        assert "Hint:" in result.output
        assert "Quitting application: (1)" in result.output

    def test_forwarded_exit_code_becomes_ours(self, settings_home: Path) -> None:
        """The forwarded command's exit code is the process exit code."""
        result = runner.invoke(
            app,
            [
                "cache",
                "/home/me/a.mkv",
                "--forward-to-command",
                sys.executable,
                "--forward-to-command-arguments",
                "-c 'import sys; sys.exit(4)'",
            ],
        )

        assert result.exit_code == 4
        assert "Quitting application: (4)" in result.output

    def test_unstartable_command_exits_1(
        self, settings_home: Path, tmp_path: Path
    ) -> None:
        """A forward command that cannot start fails with exit code 1."""
        result = runner.invoke(
            app,
            [
                "cache",
                "/home/me/a.mkv",
                "--forward-to-command",
                str(tmp_path / "no-such-player"),
            ],
        )

        assert result.exit_code == 1
        assert "Process failed to start" in result.output

    def test_broken_settings_do_not_stop_a_skip(self, settings_home: Path) -> None:
        """A local path passes through without reading the settings."""
        settings_home.mkdir(parents=True)
        (settings_home / "settings.json").write_text("{broken")

        result = runner.invoke(app, ["cache", "/home/me/a.mkv"])

        assert result.exit_code == 0, result.output
        assert "/home/me/a.mkv" in result.output

    def test_broken_settings_exit_1_on_miss(
        self, settings_home: Path, tmp_path: Path
    ) -> None:
        """Unreadable preferences stop a command that needs the cache."""
        settings_home.mkdir(parents=True)
        (settings_home / "settings.json").write_text("{broken")
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"x")

        result = runner.invoke(app, ["cache", str(media), "--cache-non-network-paths"])

        assert result.exit_code == 1
        assert "Failed to load preferences" in result.output
        assert "Quitting application: (1)" in result.output

    def test_progress_bar_flag(self, settings_home: Path, tmp_path: Path) -> None:
        """--progress-bar copies with the Rich reporter."""
        _write_settings(settings_home, tmp_path / "cache")
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"x" * 1000)

        result = runner.invoke(
            app,
            ["cache", str(media), "--cache-non-network-paths", "--progress-bar"],
        )

        assert result.exit_code == 0, result.output
        assert len(list((tmp_path / "cache").iterdir())) == 1


@pytest.mark.cli
@pytest.mark.tier(1)
class TestPseudoCacheCommand:
    """Tests for the pseudo-cache command."""

    def test_reads_without_caching(self, settings_home: Path, tmp_path: Path) -> None:
        """The file is read through and the cache stays empty."""
        _write_settings(settings_home, tmp_path / "cache")
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"x" * 123)

        result = runner.invoke(
            app, ["pseudo-cache", str(media), "--cache-non-network-paths"]
        )

        assert result.exit_code == 0, result.output
        assert "Running PseudoCache command." in result.output
        assert "Successfully preloaded 123 bytes." in result.output
        assert not (tmp_path / "cache").exists()

    def test_local_path_skipped(self, settings_home: Path) -> None:
        """Local paths are not read by default."""
        result = runner.invoke(app, ["pseudo-cache", "/home/me/a.mkv"])

        assert result.exit_code == 0
        assert "Skipping preloading file" in result.output


@pytest.mark.cli
@pytest.mark.tier(1)
class TestSettingsCommand:
    """Tests for the settings command."""

    def test_shows_defaults(self, settings_home: Path) -> None:
        """Without options the current settings are shown."""
        result = runner.invoke(app, ["settings"])

        assert result.exit_code == 0
        assert str(settings_home / "settings.json") in result.output
        assert "1024 MB" in result.output

    def test_updates_values(self, settings_home: Path, tmp_path: Path) -> None:
        """Options are persisted."""
        result = runner.invoke(
            app,
            [
                "settings",
                "--cache-directory",
                str(tmp_path / "c"),
                "--max-cache-size-mb",
                "64",
            ],
        )

        assert result.exit_code == 0
        data = json.loads((settings_home / "settings.json").read_text())
        assert data == {"CacheDirectory": str(tmp_path / "c"), "MaxCacheSizeMB": 64}

    def test_rejects_negative_size(self, settings_home: Path) -> None:
        """Typer validates the lower bound."""
        result = runner.invoke(app, ["settings", "--max-cache-size-mb", "-1"])
        assert result.exit_code != 0


@pytest.mark.cli
@pytest.mark.tier(1)
class TestStatsAndEvict:
    """Tests for the stats and evict commands."""

    def test_stats_empty_cache(self, settings_home: Path, tmp_path: Path) -> None:
        """stats reports an empty cache."""
        _write_settings(settings_home, tmp_path / "cache")

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "Cache directory" in result.output
        assert "Cache is empty." in result.output

    def test_stats_counts_files(
        self, settings_home: Path, tmp_path: Path, cached_file_factory
    ) -> None:
        """stats shows the file count."""
        cache_dir = tmp_path / "cache"
        _write_settings(settings_home, cache_dir)
        cached_file_factory(cache_dir, "a", 2048, time.time())

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "2.0 KB" in result.output
        assert "Cache is empty." not in result.output

    def test_evict_trims_cache(
        self, settings_home: Path, tmp_path: Path, cached_file_factory
    ) -> None:
        """evict applies the budget to the directory now."""
        cache_dir = tmp_path / "cache"
        _write_settings(settings_home, cache_dir, max_mb=1)
        now = time.time()
        cached_file_factory(cache_dir, "old", 800 * 1024, now - 100)
        cached_file_factory(cache_dir, "new", 800 * 1024, now)

        result = runner.invoke(app, ["evict"])

        assert result.exit_code == 0
        assert "Evicted 1 file(s)" in result.output
        assert [p.name for p in cache_dir.iterdir()] == ["new"]

    def test_evict_with_broken_settings_exits_1(self, settings_home: Path) -> None:
        """evict always needs the settings, so unreadable ones stop it."""
        settings_home.mkdir(parents=True)
        (settings_home / "settings.json").write_text("{broken")

        result = runner.invoke(app, ["evict"])

        assert result.exit_code == 1
        assert "Failed to get preferences" in result.output

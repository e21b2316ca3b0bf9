"""CLI commands for remotecache."""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Callable, Iterator
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

import typer

from remotecache.core.exceptions import PreferencesError, RemoteCacheError


if TYPE_CHECKING:
    from remotecache.core.models import CachePreferences, CacheResult
    from remotecache.core.ports import ProgressReporter


app = typer.Typer(
    name="remote-media-cache",
    help="Prefetch remote media files into a size-bounded local cache.",
    no_args_is_help=True,
)

DEFAULT_COMMAND = "cache"
COMMAND_NAMES = ("cache", "pseudo-cache", "settings", "stats", "evict")
_PASSTHROUGH_OPTIONS = ("--help", "--install-completion", "--show-completion")


def route_default_command(argv: list[str]) -> list[str]:
    """Prepend the default command when argv does not start with one.

    ``remote-media-cache //nas/a.mkv`` becomes
    ``remote-media-cache cache //nas/a.mkv``.
    """
    if not argv:
        return argv
    first = argv[0]
    if first in COMMAND_NAMES or first in _PASSTHROUGH_OPTIONS:
        return argv
    return [DEFAULT_COMMAND, *argv]


def report_error(error: RemoteCacheError) -> None:
    """Print an error and its recovery hint."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)


def load_preferences_or_exit() -> CachePreferences:
    """Load preferences for a CLI command.

    Raises:
        typer.Exit: If the settings file cannot be loaded.
    """
    from remotecache.config import load_preferences

    try:
        return load_preferences()
    except PreferencesError as e:
        report_error(e)
        typer.echo("Quitting application: (1) Failed to get preferences", err=True)
        raise typer.Exit(1) from None


@contextlib.contextmanager
def progress_reporter(progress_bar: bool) -> Iterator[ProgressReporter]:
    """Yield a Rich progress bar or the log-line reporter."""
    from remotecache.progress import LoggingProgressReporter, RichProgressReporter

    if progress_bar:
        with RichProgressReporter() as reporter:
            yield reporter
    else:
        yield LoggingProgressReporter()


def finish(run: Callable[[], CacheResult]) -> None:
    """Run an orchestrator call and turn its outcome into an exit code.

    Raises:
        typer.Exit: With the forwarded command's exit code, or 1 on failure.
    """
    try:
        result = run()
    except RemoteCacheError as e:
        report_error(e)
        typer.echo(f"Quitting application: (1) {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(result.path)
    typer.echo(
        f"Quitting application: ({result.exit_code}) {result.message}", err=True
    )
    if result.exit_code != 0:
        raise typer.Exit(result.exit_code)


@app.command()
def cache(
    path: str = typer.Argument(..., help="File path or URL to cache."),
    cache_non_network_paths: bool = typer.Option(
        False,
        "--cache-non-network-paths",
        help="Cache local paths too, not only shares and URLs.",
    ),
    forward_to_command: str | None = typer.Option(
        None,
        "--forward-to-command",
        help="Command to run with the cached (or original) path.",
    ),
    forward_to_command_arguments: str | None = typer.Option(
        None,
        "--forward-to-command-arguments",
        help="Argument template; {0} and {1} are replaced with the quoted path.",
    ),
    progress_bar: bool = typer.Option(
        False,
        "--progress-bar",
        help="Show a progress bar instead of progress log lines.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Copy a remote file into the local cache (default command)."""
    from remotecache.config import load_preferences
    from remotecache.core.services import CacheOrchestrator
    from remotecache.logging import setup_logging

    setup_logging(log_level)
    typer.echo("Running Cache command.", err=True)

    # Settings are read only once a hit or miss needs the cache directory
    with (
        progress_reporter(progress_bar) as progress,
        CacheOrchestrator.from_preferences(
            load_preferences, progress=progress
        ) as orchestrator,
    ):
        finish(
            lambda: orchestrator.cache(
                path,
                cache_non_network_paths=cache_non_network_paths,
                forward_command=forward_to_command,
                forward_arguments=forward_to_command_arguments,
            )
        )


@app.command(name="pseudo-cache")
def pseudo_cache(
    path: str = typer.Argument(..., help="File path or URL to read through."),
    cache_non_network_paths: bool = typer.Option(
        False,
        "--cache-non-network-paths",
        help="Read local paths too, not only shares and URLs.",
    ),
    forward_to_command: str | None = typer.Option(
        None,
        "--forward-to-command",
        help="Command to run with the original path afterwards.",
    ),
    forward_to_command_arguments: str | None = typer.Option(
        None,
        "--forward-to-command-arguments",
        help="Argument template; {0} and {1} are replaced with the quoted path.",
    ),
    progress_bar: bool = typer.Option(
        False,
        "--progress-bar",
        help="Show a progress bar instead of progress log lines.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Read a remote file once without storing it, to warm remote caches."""
    from remotecache.config import load_preferences
    from remotecache.core.services import CacheOrchestrator
    from remotecache.logging import setup_logging

    setup_logging(log_level)
    typer.echo("Running PseudoCache command.", err=True)

    # A warm-up never touches the cache directory
    with (
        progress_reporter(progress_bar) as progress,
        CacheOrchestrator.from_preferences(
            load_preferences, progress=progress
        ) as orchestrator,
    ):
        finish(
            lambda: orchestrator.pseudo_cache(
                path,
                cache_non_network_paths=cache_non_network_paths,
                forward_command=forward_to_command,
                forward_arguments=forward_to_command_arguments,
            )
        )


@app.command()
def settings(
    cache_directory: Path | None = typer.Option(
        None,
        "--cache-directory",
        help="Directory where cached files are stored.",
    ),
    max_cache_size_mb: int | None = typer.Option(
        None,
        "--max-cache-size-mb",
        min=0,
        help="Size budget for the cache directory in MB.",
    ),
) -> None:
    """Show or update the stored preferences."""
    from remotecache.config import settings_path, update_preferences

    try:
        preferences = update_preferences(
            cache_directory=cache_directory.expanduser().resolve()
            if cache_directory
            else None,
            max_cache_size_mb=max_cache_size_mb,
        )
    except PreferencesError as e:
        report_error(e)
        raise typer.Exit(1) from None

    typer.echo(f"Settings file: {settings_path()}")
    typer.echo(f"  Cache directory: {preferences.cache_directory}")
    typer.echo(f"  Max cache size: {preferences.max_cache_size_mb} MB")


@app.command()
def evict(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Run an eviction pass over the cache directory now."""
    from remotecache.core.formatting import format_size
    from remotecache.core.services import CacheOrchestrator
    from remotecache.logging import setup_logging

    setup_logging(log_level)
    preferences = load_preferences_or_exit()
    with CacheOrchestrator.from_preferences(preferences) as orchestrator:
        report = orchestrator.evict()

    typer.echo(
        f"Evicted {report.deleted_count} file(s); "
        f"{format_size(report.remaining_bytes)} remaining."
    )
    if report.failed:
        typer.echo(f"Could not delete {len(report.failed)} file(s).", err=True)


def main() -> None:
    """Entry point for the CLI."""
    app(args=route_default_command(sys.argv[1:]), prog_name="remote-media-cache")

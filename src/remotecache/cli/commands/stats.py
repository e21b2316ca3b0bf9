"""Stats command for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from remotecache.cli.formatting import format_usage_with_color
from remotecache.cli.main import app, load_preferences_or_exit
from remotecache.core.formatting import format_size


@app.command()
def stats() -> None:
    """Show cache directory, file count and size against the budget."""
    from remotecache.adapters.cache import FileCache

    preferences = load_preferences_or_exit()
    cache = FileCache(preferences.cache_directory)
    statistics = cache.statistics()
    limit = preferences.max_cache_size_bytes

    # Build Rich table
    table = Table(show_header=False)
    table.add_column("Key")
    table.add_column("Value")

    table.add_row("Cache directory", str(preferences.cache_directory))
    table.add_row("Files", str(statistics["file_count"]))
    table.add_row("Total size", format_size(statistics["total_size"]))
    table.add_row("Limit", format_size(limit))
    table.add_row("Usage", format_usage_with_color(statistics["total_size"], limit))

    # Print table using Rich Console
    console = Console(force_terminal=True)
    console.print(table)

    if statistics["file_count"] == 0:
        typer.echo("Cache is empty.")

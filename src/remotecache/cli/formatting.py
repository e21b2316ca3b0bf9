"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from rich.text import Text


def format_usage_with_color(total_size: int, limit: int) -> Text:
    """Format cache usage as a percentage of the budget.

    Args:
        total_size: Bytes currently in the cache directory.
        limit: Size budget in bytes.

    Returns:
        Rich Text object with appropriate color:
        - over budget -> red
        - within budget -> green
        - no budget -> plain "n/a"
    """
    if limit <= 0:
        return Text("n/a")
    percent = total_size / limit
    return Text(f"{percent:.1%}", style="red" if percent > 1 else "green")

"""Formatting utilities for domain logic."""


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"


def format_megabytes(size_bytes: int | float) -> str:
    """Format a byte count as MB with two decimals (e.g. '12.50 MB')."""
    return f"{size_bytes / 1024 / 1024:.2f} MB"

"""Basic usage: cache a remote file and hand it to a player.

This example shows the library equivalent of

    remote-media-cache cache //nas/movies/Movie.mkv --forward-to-command mpv
"""

from pathlib import Path

from remotecache import CacheOrchestrator, CacheOutcome, CachePreferences
from remotecache.progress import RichProgressReporter


preferences = CachePreferences(
    cache_directory=Path("./media-cache"),
    max_cache_size_mb=4096,
)

# Closing the orchestrator closes its HTTP connections
with (
    RichProgressReporter() as progress,
    CacheOrchestrator.from_preferences(preferences, progress=progress) as orchestrator,
):
    # First call copies the file, later calls are cache hits
    result = orchestrator.cache(
        "//nas/movies/Movie.mkv",
        forward_command="mpv",
        forward_arguments="--fullscreen {0}",
    )

    if result.outcome is CacheOutcome.HIT:
        print(f"Played cached copy: {result.path}")
    else:
        print(f"{result.message} ({result.path})")

    # Warm the share's own cache without storing anything locally
    orchestrator.pseudo_cache("https://media.example.com/trailers/teaser.mp4")

"""CLI for remotecache."""

# Import commands to register them with the app
# These imports have side effects (registering commands with @app.command())
from remotecache.cli.commands import stats as _stats_module  # noqa: F401
from remotecache.cli.main import app, main


__all__ = ["app", "main"]

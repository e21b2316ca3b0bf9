"""CLI commands for remotecache."""

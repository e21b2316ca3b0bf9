"""Cache directory adapters."""

from remotecache.adapters.cache.file_cache import FileCache


__all__ = ["FileCache"]

"""Source backend adapters."""

from remotecache.adapters.storage.filesystem import FilesystemSource
from remotecache.adapters.storage.http import HttpSource
from remotecache.adapters.storage.router import RouterSource, create_router


__all__ = ["FilesystemSource", "HttpSource", "RouterSource", "create_router"]

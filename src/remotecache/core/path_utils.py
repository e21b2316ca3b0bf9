"""Path classification and cache key derivation.

Both are purely lexical: no network probing and no filesystem access.
"""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

from remotecache.core.models import SourceDescriptor, SourceKind


HTTP_PREFIXES = ("http://", "https://", "www.")
NETWORK_SHARE_PREFIXES = ("//", "\\\\", "ftp://", "sftp://", "smb://")

_SEPARATORS = re.compile(r"[\\/]")


def is_http_path(path: str) -> bool:
    """Check whether a path should be fetched with a streaming GET."""
    return path.startswith(HTTP_PREFIXES)


def is_network_path(path: str) -> bool:
    """Check whether a path points at a share, FTP/SFTP/SMB or HTTP(S)."""
    return path.startswith(NETWORK_SHARE_PREFIXES) or is_http_path(path)


def classify_path(path: str) -> SourceDescriptor:
    """Classify a source path.

    Args:
        path: Source path or URL.

    Returns:
        SourceDescriptor tagged local, network-share or http.

    Example:
        >>> classify_path("//server/share/a.mkv").kind
        <SourceKind.NETWORK_SHARE: 'network-share'>
    """
    if is_http_path(path):
        kind = SourceKind.HTTP
    elif path.startswith(NETWORK_SHARE_PREFIXES):
        kind = SourceKind.NETWORK_SHARE
    else:
        kind = SourceKind.LOCAL
    return SourceDescriptor(path=path, kind=kind)


def normalize_separators(path: str) -> str:
    """Replace every backslash and slash with a single canonical '/'."""
    return _SEPARATORS.sub("/", path)


def base_name(path: str) -> str:
    """Last segment of a path split on either separator style.

    Casing and extension are preserved.
    """
    return _SEPARATORS.split(path)[-1]


def cache_digest(path: str) -> str:
    """Uppercase SHA-1 hex digest of the normalized path."""
    normalized = normalize_separators(path)
    return hashlib.sha1(normalized.encode("utf-8")).hexdigest().upper()


def derive_local_path(source: str, cache_dir: Path) -> Path:
    """Map a source path to its local cache file.

    The file name is ``{base_name}_{digest}`` so the cache directory stays
    human-scannable while distinct sources never share a name. Sources that
    differ only in separator style map to the same file.

    Args:
        source: Source path as given by the caller.
        cache_dir: Directory holding cached files.

    Returns:
        Path of the cache file for this source.
    """
    return cache_dir / f"{base_name(source)}_{cache_digest(source)}"

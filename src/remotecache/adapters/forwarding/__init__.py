"""Command forwarding adapters."""

from remotecache.adapters.forwarding.command import (
    SubprocessCommandForwarder,
    build_forward_arguments,
    quote_path,
)


__all__ = ["SubprocessCommandForwarder", "build_forward_arguments", "quote_path"]

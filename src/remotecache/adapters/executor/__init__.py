"""Executor adapters for the pipeline's write stage."""

from remotecache.adapters.executor.executor import ThreadPoolExecutorAdapter


__all__ = ["ThreadPoolExecutorAdapter"]

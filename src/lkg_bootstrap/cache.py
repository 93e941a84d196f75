"""Persistent key cache backed by a diskcache directory."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from types import TracebackType

import diskcache

from lkg_bootstrap.errors import CacheError

logger: logging.Logger = logging.getLogger(__name__)

_CACHE_ERRORS: tuple[type[BaseException], ...] = (OSError, sqlite3.Error, diskcache.Timeout)


class DiskKeyCache:
    """``KeyCache`` stored under the configured cache directory.

    Entries are keyed by ``(namespace, key)`` and never expire. Concurrent
    writers are not coordinated; the last ``put`` wins.
    """

    def __init__(self, directory: Path) -> None:
        self.directory: Path = directory
        try:
            directory.mkdir(parents=True, exist_ok=True)
            # values are identifier strings; JSONDisk keeps the store pickle-free
            self._cache: diskcache.Cache = diskcache.Cache(str(directory), disk=diskcache.JSONDisk)
        except _CACHE_ERRORS as exc:
            raise CacheError(f"Cannot open key cache at {directory}: {exc}") from exc

    def get(self, namespace: str, key: str) -> str | None:
        try:
            value = self._cache.get((namespace, key))
        except _CACHE_ERRORS as exc:
            raise CacheError(f"Cannot read {namespace}/{key} from key cache: {exc}") from exc
        logger.debug(
            "key_cache_get",
            extra={"namespace": namespace, "key": key, "hit": value is not None},
        )
        return value

    def put(self, namespace: str, key: str, value: str) -> str:
        """Store ``value`` and return it for chaining."""
        try:
            self._cache.set((namespace, key), value)
        except _CACHE_ERRORS as exc:
            raise CacheError(f"Cannot write {namespace}/{key} to key cache: {exc}") from exc
        logger.debug("key_cache_put", extra={"namespace": namespace, "key": key, "value": value})
        return value

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> DiskKeyCache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

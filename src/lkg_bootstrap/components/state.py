"""Interfaces for the persistent key cache and the override source."""

from __future__ import annotations

from typing import Protocol


class KeyCache(Protocol):
    """Durable mapping from ``(namespace, key)`` to a resolved identifier."""

    def get(self, namespace: str, key: str) -> str | None: ...

    def put(self, namespace: str, key: str, value: str) -> str: ...


class OverrideSource(Protocol):
    """Read-only lookup of operator supplied values."""

    def lookup(self, variable: str) -> str | None: ...

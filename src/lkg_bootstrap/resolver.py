"""Override -> cache -> discovery -> create resolution of bootstrap resources."""

from __future__ import annotations

import logging
from collections.abc import Callable

from lkg_bootstrap.components.gateway import ProviderGateway
from lkg_bootstrap.components.state import KeyCache, OverrideSource
from lkg_bootstrap.keys import ResourceKey, RunFact

logger: logging.Logger = logging.getLogger(__name__)

Discover = Callable[[], str | None]
Create = Callable[[], str]


class ResourceResolver:
    """Decide, per resource key, whether to reuse an identifier or create one.

    Each resolution walks a fixed chain and stops at the first step that
    yields an identifier:

    1. the override source, which is returned untouched;
    2. the key cache, under the namespace;
    3. remote discovery, by default the first resource tagged with the
       namespace (provider order, duplicates are not detected);
    4. ``create``, after which the resource is Name-tagged.

    Steps 3 and 4 write exactly one cache record. The namespace is
    supplied lazily so an overridden key never has to compute it. The
    resolver keeps no state of its own; memoization belongs to the caller.
    """

    def __init__(
        self,
        namespace: Callable[[], str],
        overrides: OverrideSource,
        cache: KeyCache,
        gateway: ProviderGateway,
    ) -> None:
        self._namespace: Callable[[], str] = namespace
        self._overrides: OverrideSource = overrides
        self._cache: KeyCache = cache
        self._gateway: ProviderGateway = gateway

    @property
    def namespace(self) -> str:
        return self._namespace()

    def resolve(
        self,
        key: ResourceKey,
        create: Create,
        discover: Discover | None = None,
    ) -> str:
        """Return the identifier for ``key``, creating the resource if needed.

        Args:
            key: Resource kind to resolve.
            create: Creates the resource and returns its identifier. Only
                called when every earlier step comes up empty.
            discover: Replaces the default tag lookup for resources that
                need a different discovery policy.
        """
        if key.override_variable is not None:
            override = self._overrides.lookup(key.override_variable)
            if override is not None:
                logger.info("resource_overridden", extra={"key": key.value, "id": override})
                return override

        namespace = self.namespace
        cached = self._cache.get(namespace, key.value)
        if cached is not None:
            logger.debug("resource_cached", extra={"key": key.value, "id": cached})
            return cached

        found = discover() if discover is not None else self.discover_tagged(key)
        if found is not None:
            logger.info("resource_discovered", extra={"key": key.value, "id": found})
            return self._cache.put(namespace, key.value, found)

        resource_id = create()
        self._gateway.assign_name(namespace, resource_id)
        logger.info("resource_created", extra={"key": key.value, "id": resource_id})
        return self._cache.put(namespace, key.value, resource_id)

    def discover_tagged(self, key: ResourceKey) -> str | None:
        """Return the first resource of ``key``'s type tagged with the namespace."""
        matches = self._gateway.tagged(key.resource_type, self.namespace)
        if len(matches) > 1:
            logger.warning(
                "ambiguous_discovery",
                extra={
                    "key": key.value,
                    "candidates": [match.resource_id for match in matches],
                },
            )
        return matches[0].resource_id if matches else None

    def fact(self, fact: RunFact, compute: Create) -> str:
        """Resolve a run fact: override, then cache, then ``compute`` and store."""
        override = self._overrides.lookup(fact.override_variable)
        if override is not None:
            return override
        namespace = self.namespace
        cached = self._cache.get(namespace, fact.value)
        if cached is not None:
            return cached
        return self._cache.put(namespace, fact.value, compute())

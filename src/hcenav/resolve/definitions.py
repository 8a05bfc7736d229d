"""Location descriptor to concrete file location.

Exact locations are translated directly. Approximate locations take exactly
one remote hop through the definition site API; whatever that returns must be
exact, or the location counts as unresolved. Unknown locations never touch
the network.
"""

from __future__ import annotations

from typing import assert_never

import structlog

from hcenav.client.http import HceClient
from hcenav.client.urls import definition_site_key
from hcenav.config.constants import DEFINITION_SITE_MAX_HOPS
from hcenav.index.models import (
    ApproximateLocation,
    DefinitionSite,
    ExactLocation,
    LocationInfo,
    UnknownLocation,
)
from hcenav.resolve.locations import ConcreteLocation, exact_to_concrete
from hcenav.resolve.packages import PackageRegistry

log = structlog.get_logger(__name__)


class DefinitionSiteCache:
    """Definition sites by ``definition_site_key``. Never expires."""

    def __init__(self) -> None:
        self._sites: dict[str, DefinitionSite] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._sites

    def __len__(self) -> int:
        return len(self._sites)

    def get(self, key: str) -> DefinitionSite | None:
        return self._sites.get(key)

    def put(self, key: str, site: DefinitionSite) -> None:
        self._sites[key] = site

    def clear(self) -> None:
        self._sites.clear()


class DefinitionResolver:
    def __init__(
        self,
        client: HceClient,
        registry: PackageRegistry,
        cache: DefinitionSiteCache | None = None,
    ) -> None:
        self._client = client
        self._registry = registry
        self.cache = cache if cache is not None else DefinitionSiteCache()

    async def definition_site(self, location: ApproximateLocation) -> DefinitionSite | None:
        """Cached or freshly fetched definition site of ``location``."""
        key = definition_site_key(location)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        site = await self._client.fetch_definition_site(location)
        if site is None:
            log.info("definition_site_unavailable", key=key)
            return None
        self.cache.put(key, site)
        return site

    async def resolve_location(self, location: LocationInfo) -> ConcreteLocation | None:
        return await self._resolve(location, hops_left=DEFINITION_SITE_MAX_HOPS)

    async def _resolve(self, location: LocationInfo, hops_left: int) -> ConcreteLocation | None:
        if isinstance(location, ExactLocation):
            concrete = exact_to_concrete(location, self._registry)
            if concrete is None:
                log.info("package_not_loaded", package_id=str(location.package_id))
            return concrete

        if isinstance(location, UnknownLocation):
            return None

        if isinstance(location, ApproximateLocation):
            if hops_left <= 0:
                log.info(
                    "definition_site_not_exact",
                    key=definition_site_key(location),
                )
                return None
            site = await self.definition_site(location)
            if site is None:
                return None
            return await self._resolve(site.location, hops_left - 1)

        assert_never(location)

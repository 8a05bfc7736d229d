"""Navigation engine: hover, go to definition and find references.

One ``Navigator`` per editing session owns the HTTP client, the package
registry and the three caches. Every entry point returns ``None`` when it
has nothing to offer; the reason is logged as a ``lookup_miss`` event.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from hcenav.client.http import HceClient
from hcenav.client.urls import definition_site_key
from hcenav.config.constants import HASKELL_SOURCE_SUFFIXES
from hcenav.config.models import HceNavConfig
from hcenav.core.logging import set_request_id
from hcenav.index.models import ExactLocation, LocationInfo, ModuleInfo, UnknownLocation
from hcenav.resolve.definitions import DefinitionResolver, DefinitionSiteCache
from hcenav.resolve.hover import HoverInfo, identifier_hover, module_hover
from hcenav.resolve.locations import ConcreteLocation, references_to_concrete
from hcenav.resolve.modules import ModuleCache
from hcenav.resolve.packages import PackageInfo, PackageRegistry
from hcenav.resolve.position import (
    Feature,
    MissReason,
    Position,
    PositionResolver,
    log_miss,
)
from hcenav.resolve.references import ReferenceAggregator


def is_haskell_file(path: Path) -> bool:
    return path.suffix in HASKELL_SOURCE_SUFFIXES


class Navigator:
    """Resolution engine for one session.

    Usage::

        async with Navigator.from_config(config, roots=[workspace]) as nav:
            await nav.open_document(path)
            location = await nav.definition(path, text, Position(9, 4))
    """

    def __init__(
        self,
        client: HceClient,
        registry: PackageRegistry | None = None,
        *,
        modules: ModuleCache | None = None,
        definitions: DefinitionResolver | None = None,
        references: ReferenceAggregator | None = None,
    ) -> None:
        self.client = client
        self.registry = registry if registry is not None else PackageRegistry()
        self.modules = modules if modules is not None else ModuleCache(client, self.registry)
        self.definitions = (
            definitions
            if definitions is not None
            else DefinitionResolver(client, self.registry, DefinitionSiteCache())
        )
        self.references_index = (
            references if references is not None else ReferenceAggregator(client)
        )
        self.positions = PositionResolver(self.modules)

    @classmethod
    def from_config(
        cls,
        config: HceNavConfig,
        roots: Iterable[Path] = (),
        client: HceClient | None = None,
    ) -> Navigator:
        registry = PackageRegistry(manifest_suffix=config.index.manifest_suffix)
        registry.refresh(roots)
        return cls(client or HceClient(config.server, config.index), registry)

    async def __aenter__(self) -> Navigator:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop pending module fetches, then close the client."""
        try:
            await self.modules.aclose()
        finally:
            await self.client.aclose()

    # =========================================================================
    # Session
    # =========================================================================

    def refresh_packages(self, roots: Iterable[Path]) -> list[PackageInfo]:
        """Rebuild the package registry after the workspace folders changed."""
        return self.registry.refresh(roots)

    async def open_document(self, path: Path) -> ModuleInfo | None:
        """Fetch a Haskell file's module tables ahead of the first query."""
        if not is_haskell_file(path):
            return None
        return await self.modules.get(path)

    def clear_caches(self) -> None:
        self.modules.clear()
        self.definitions.cache.clear()
        self.references_index.clear()

    # =========================================================================
    # Queries
    # =========================================================================

    async def hover(self, path: Path, text: str, position: Position) -> HoverInfo | None:
        set_request_id()
        resolution = self.positions.resolve(path, text, position, Feature.HOVER)
        if resolution is None:
            return None

        if resolution.module_location is not None:
            info = module_hover(resolution.module_location, resolution.word_range)
            if info is None:
                log_miss(
                    Feature.HOVER,
                    MissReason.NO_MODULE_INFO,
                    path,
                    position,
                    resolution.word_range,
                )
            return info

        assert resolution.identifier is not None
        return identifier_hover(
            resolution.identifier, resolution.occurrence, resolution.word_range
        )

    async def definition(
        self, path: Path, text: str, position: Position
    ) -> ConcreteLocation | None:
        set_request_id()
        resolution = self.positions.resolve(path, text, position, Feature.DEFINITION)
        if resolution is None:
            return None

        if resolution.module_location is not None:
            location_info = resolution.module_location
        else:
            assert resolution.identifier is not None
            # A definition site is not a jump target for itself
            if resolution.occurrence.is_binder:
                log_miss(
                    Feature.DEFINITION,
                    MissReason.BINDER,
                    path,
                    position,
                    resolution.word_range,
                )
                return None
            location_info = resolution.identifier.location_info

        location = await self.definitions.resolve_location(location_info)
        if location is None:
            log_miss(
                Feature.DEFINITION,
                self._definition_miss_reason(location_info),
                path,
                position,
                resolution.word_range,
            )
        return location

    def _definition_miss_reason(self, location_info: LocationInfo) -> MissReason:
        if isinstance(location_info, UnknownLocation):
            return MissReason.UNKNOWN_LOCATION
        if isinstance(location_info, ExactLocation):
            return MissReason.PACKAGE_NOT_LOADED
        site = self.definitions.cache.get(definition_site_key(location_info))
        if site is None:
            return MissReason.NO_DEFINITION_SITE
        if isinstance(site.location, ExactLocation):
            return MissReason.PACKAGE_NOT_LOADED
        return MissReason.NOT_EXACT

    async def references(
        self, path: Path, text: str, position: Position
    ) -> list[ConcreteLocation] | None:
        set_request_id()
        resolution = self.positions.resolve(path, text, position, Feature.REFERENCES)
        if resolution is None:
            return None

        if resolution.identifier is None:
            log_miss(
                Feature.REFERENCES,
                MissReason.MODULE_OCCURRENCE,
                path,
                position,
                resolution.word_range,
            )
            return None

        external_id = resolution.identifier.external_id
        if not external_id:
            log_miss(
                Feature.REFERENCES,
                MissReason.NO_EXTERNAL_ID,
                path,
                position,
                resolution.word_range,
            )
            return None

        references = await self.references_index.find_references(external_id)
        if references is None:
            log_miss(
                Feature.REFERENCES,
                MissReason.NO_REFERENCES,
                path,
                position,
                resolution.word_range,
            )
            return None

        return references_to_concrete(references, self.registry)


"""Cross-package reference search for external identifiers.

Two phases:

1. Discovery: ask the global index which packages reference the identifier.
2. Fan-out: query every discovered package concurrently and merge.

The merge follows discovery order, not completion order. A package whose
query fails contributes nothing; the other packages are unaffected.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import structlog

from hcenav.client.http import HceClient
from hcenav.index.models import ExternalId, SourceFile
from hcenav.resolve.locations import ReferenceWithPackageId

log = structlog.get_logger(__name__)


@dataclass
class PackageReferences:
    """Fan-out outcome for one package."""

    package_id: str
    references: list[ReferenceWithPackageId] = field(default_factory=list)
    failed: bool = False


def flatten_source_files(
    package_id: str, source_files: list[SourceFile]
) -> list[ReferenceWithPackageId]:
    """Tag each reference with its package, keeping server order."""
    return [
        ReferenceWithPackageId(package_id=package_id, id_src_span=ref.id_src_span)
        for source_file in source_files
        for ref in source_file.references
    ]


class ReferenceAggregator:
    """Finds all references of an external identifier across packages.

    Results, including partial ones where some packages failed, are cached per
    identifier for the session. A failed discovery caches nothing.
    ``invalidate`` drops one entry to force a fresh search.
    """

    def __init__(self, client: HceClient) -> None:
        self._client = client
        self._references: dict[ExternalId, list[ReferenceWithPackageId]] = {}

    def __contains__(self, external_id: ExternalId) -> bool:
        return external_id in self._references

    def cached(self, external_id: ExternalId) -> list[ReferenceWithPackageId] | None:
        return self._references.get(external_id)

    def invalidate(self, external_id: ExternalId) -> None:
        self._references.pop(external_id, None)

    def clear(self) -> None:
        self._references.clear()

    async def find_references(self, external_id: ExternalId) -> list[ReferenceWithPackageId] | None:
        cached = self._references.get(external_id)
        if cached is not None:
            return cached

        global_references = await self._client.fetch_global_references(external_id)
        if global_references is None:
            return None

        package_ids = [g.package_id for g in global_references]
        outcomes = await asyncio.gather(
            *(self._package_references(package_id, external_id) for package_id in package_ids),
            return_exceptions=True,
        )
        results: list[PackageReferences] = []
        for package_id, outcome in zip(package_ids, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                log.error(
                    "package_references_failed",
                    package_id=package_id,
                    external_id=external_id,
                    exc_info=outcome,
                )
                outcome = PackageReferences(package_id=package_id, failed=True)
            results.append(outcome)

        references: list[ReferenceWithPackageId] = []
        for result in results:
            references.extend(result.references)

        failed = [r.package_id for r in results if r.failed]
        if failed:
            log.warning(
                "references_partial",
                external_id=external_id,
                failed_packages=failed,
                packages=len(results),
            )
        log.debug(
            "references_merged",
            external_id=external_id,
            packages=len(results),
            references=len(references),
        )

        self._references[external_id] = references
        return references

    async def _package_references(
        self, package_id: str, external_id: ExternalId
    ) -> PackageReferences:
        source_files = await self._client.fetch_references(package_id, external_id)
        if source_files is None:
            return PackageReferences(package_id=package_id, failed=True)
        return PackageReferences(
            package_id=package_id,
            references=flatten_source_files(package_id, source_files),
        )

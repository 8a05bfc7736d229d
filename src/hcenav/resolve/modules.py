"""Per-file cache of module identifier/occurrence tables."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from hcenav.client.http import HceClient
from hcenav.index.models import ModuleInfo
from hcenav.resolve.packages import PackageRegistry

log = structlog.get_logger(__name__)


class ModuleCache:
    """Lazily fetched ``ModuleInfo`` per absolute file path.

    Entries live for the whole session: edits to a file do not invalidate its
    entry. Failed fetches are not cached, so the next ``get`` retries.
    Concurrent misses for one file share a single request.
    """

    def __init__(self, client: HceClient, registry: PackageRegistry) -> None:
        self._client = client
        self._registry = registry
        self._modules: dict[Path, ModuleInfo] = {}
        self._inflight: dict[Path, asyncio.Task[ModuleInfo | None]] = {}
        self._background: set[asyncio.Task[ModuleInfo | None]] = set()

    def __contains__(self, path: Path) -> bool:
        return _key(path) in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def peek(self, path: Path) -> ModuleInfo | None:
        """Cached entry only; never fetches."""
        return self._modules.get(_key(path))

    async def get(self, path: Path) -> ModuleInfo | None:
        key = _key(path)
        cached = self._modules.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key))
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        return await asyncio.shield(task)

    def prefetch(self, path: Path) -> asyncio.Task[ModuleInfo | None] | None:
        """Start a background fetch unless the file is cached. Best effort."""
        if path in self:
            return None
        task = asyncio.ensure_future(self.get(path))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def clear(self) -> None:
        self._modules.clear()

    async def aclose(self) -> None:
        """Cancel background and in-flight fetches and wait for them to end.

        Must run before the client is closed; a fetch still pending on a
        closed client fails outside any caller.
        """
        tasks = [*self._background, *self._inflight.values()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _fetch(self, path: Path) -> ModuleInfo | None:
        package = self._registry.package_for_file(path)
        if package is None:
            log.info("package_not_found", file=str(path))
            return None

        relative_path = self._registry.relative_module_path(package, path)
        module = await self._client.fetch_module(package.package_id, relative_path)
        if module is None:
            return None

        self._modules[path] = module
        log.debug(
            "module_cached",
            file=str(path),
            identifiers=len(module.identifiers),
            occurrences=len(module.occurrences),
        )
        return module


def _key(path: Path) -> Path:
    return path.resolve()

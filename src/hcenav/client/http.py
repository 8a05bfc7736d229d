"""Async client for haskell-code-server.

Every ``fetch_*`` coroutine returns the parsed payload or ``None``. Failures
are classified and logged here and never propagate:

- connection refused: one warning until the server answers again
- 404: the entity has no indexed data, logged at info
- anything else (timeouts, 5xx, malformed JSON): logged as an error
"""

from __future__ import annotations

from pathlib import PurePosixPath
from types import TracebackType
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from hcenav.client import urls
from hcenav.config.models import IndexConfig, ServerConfig
from hcenav.core.errors import ErrorCode, FetchError
from hcenav.index.models import (
    GLOBAL_REFERENCES_ADAPTER,
    SOURCE_FILES_ADAPTER,
    ApproximateLocation,
    DefinitionSite,
    GlobalReferences,
    ModuleInfo,
    PackageId,
    SourceFile,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

_DEFINITION_SITE_ADAPTER: TypeAdapter[DefinitionSite] = TypeAdapter(DefinitionSite)
_MODULE_INFO_ADAPTER: TypeAdapter[ModuleInfo] = TypeAdapter(ModuleInfo)


class HceClient:
    """Thin typed wrapper over one ``httpx.AsyncClient``.

    Usage::

        async with HceClient(ServerConfig(host="http://localhost:8080")) as client:
            site = await client.fetch_definition_site(location)
    """

    def __init__(
        self,
        server: ServerConfig | None = None,
        index: IndexConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._server = server or ServerConfig()
        self._index = index or IndexConfig()
        self._http = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(self._server.request_timeout_sec),
        )
        self._server_down_reported = False

    @property
    def host(self) -> str:
        return self._server.host

    async def __aenter__(self) -> HceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def fetch_module(
        self, package_id: PackageId, relative_path: PurePosixPath
    ) -> ModuleInfo | None:
        url = urls.module_url(self.host, package_id, relative_path, self._index.index_directory)
        headers = {"Accept-Encoding": "gzip"} if self._server.accept_gzip else None
        return await self.fetch(url, _MODULE_INFO_ADAPTER, headers=headers)

    async def fetch_definition_site(self, location: ApproximateLocation) -> DefinitionSite | None:
        url = urls.definition_site_url(self.host, location)
        return await self.fetch(url, _DEFINITION_SITE_ADAPTER)

    async def fetch_global_references(self, external_id: str) -> list[GlobalReferences] | None:
        url = urls.global_references_url(self.host, external_id)
        return await self.fetch(url, GLOBAL_REFERENCES_ADAPTER)

    async def fetch_references(self, package_id: str, external_id: str) -> list[SourceFile] | None:
        url = urls.references_url(
            self.host, package_id, external_id, self._server.references_per_page
        )
        return await self.fetch(url, SOURCE_FILES_ADAPTER)

    # =========================================================================
    # Transport
    # =========================================================================

    async def fetch(
        self,
        url: str,
        adapter: TypeAdapter[T],
        headers: dict[str, str] | None = None,
    ) -> T | None:
        """GET ``url`` and validate the JSON body, or return None."""
        log.debug("fetch", url=url)
        try:
            data = await self._get_json(url, headers)
            if data is None or data == "":
                return None
            result = adapter.validate_python(data)
        except ValidationError as e:
            self._report(FetchError.decode(url, f"{e.error_count()} validation error(s)"))
            return None
        except FetchError as e:
            self._report(e)
            return None
        self._server_down_reported = False
        return result

    async def _get_json(self, url: str, headers: dict[str, str] | None) -> Any:
        try:
            response = await self._http.get(url, headers=headers)
        except httpx.ConnectError as e:
            if _is_connection_refused(e):
                raise FetchError.connection_refused(self.host) from e
            raise FetchError.transport(url, str(e) or type(e).__name__) from e
        except httpx.HTTPError as e:
            raise FetchError.transport(url, str(e) or type(e).__name__) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise FetchError.not_found(url)
        if response.is_error:
            raise FetchError.bad_status(url, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise FetchError.decode(url, str(e)) from e

    def _report(self, error: FetchError) -> None:
        if error.code is ErrorCode.FETCH_CONNECTION_REFUSED:
            if not self._server_down_reported:
                log.warning("server_not_running", host=self.host)
                self._server_down_reported = True
            else:
                log.debug("server_not_running", host=self.host)
        elif error.code is ErrorCode.FETCH_NOT_FOUND:
            # Entity legitimately has no indexed data
            log.info("fetch_not_found", **error.details)
        else:
            log.error("fetch_failed", error=error.error_name, message=error.message, **error.details)


def _is_connection_refused(error: httpx.ConnectError) -> bool:
    seen: set[int] = set()
    cause: BaseException | None = error
    while cause is not None and id(cause) not in seen:
        if isinstance(cause, ConnectionRefusedError):
            return True
        seen.add(id(cause))
        cause = cause.__cause__ or cause.__context__
    return "refused" in str(error).lower()

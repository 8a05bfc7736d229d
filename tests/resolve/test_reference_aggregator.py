"""Tests for cross-package reference search."""

import asyncio
from unittest.mock import patch

import httpx
import pytest
from structlog.testing import capture_logs

from hce_fakes import HOST, FakeServer, source_files
from hcenav.client.http import HceClient
from hcenav.config.models import ServerConfig
from hcenav.index.models import SOURCE_FILES_ADAPTER, SourceFile
from hcenav.resolve.references import ReferenceAggregator, flatten_source_files

EXTERNAL_ID = "base-4.12|Data.Maybe|Val|fromMaybe"
ENCODED_ID = "base-4.12%7CData.Maybe%7CVal%7CfromMaybe"
DISCOVERY_PATH = f"/api/globalReferences/{ENCODED_ID}"


def _references_path(package_id: str) -> str:
    return f"/api/references/{package_id}/{ENCODED_ID}?per_page=500"


def _spans(result: list) -> list[tuple[str, str, int]]:
    return [(r.package_id, r.id_src_span.module_path, r.id_src_span.line) for r in result]


def _discover(server: FakeServer, *package_ids: str) -> None:
    server.add_json(DISCOVERY_PATH, [{"count": 1, "packageId": p} for p in package_ids])


class TestFlattenSourceFiles:
    """Per-package result flattening."""

    def test_given_several_files_when_flattened_then_server_order_kept(self) -> None:
        """References keep file order, then in-file order."""
        # Given
        files = SOURCE_FILES_ADAPTER.validate_python(
            source_files("p-1", ("B.hs", 9, 1, 2), ("A.hs", 2, 1, 2), ("B.hs", 3, 1, 2))
        )

        # When
        result = flatten_source_files("p-1", files)

        # Then
        assert _spans(result) == [("p-1", "B.hs", 9), ("p-1", "B.hs", 3), ("p-1", "A.hs", 2)]


class TestFindReferences:
    """Discovery, fan-out and merge."""

    @pytest.mark.asyncio
    async def test_given_two_packages_when_found_then_merged_in_discovery_order(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """The merge follows discovery order."""
        # Given
        _discover(server, "p2-1.0", "p1-1.0")
        server.add_json(_references_path("p1-1.0"), source_files("p1-1.0", ("A.hs", 1, 1, 4)))
        server.add_json(_references_path("p2-1.0"), source_files("p2-1.0", ("B.hs", 7, 1, 4)))

        # When
        result = await ReferenceAggregator(client).find_references(EXTERNAL_ID)

        # Then
        assert result is not None
        assert _spans(result) == [("p2-1.0", "B.hs", 7), ("p1-1.0", "A.hs", 1)]
        assert server.paths[0] == DISCOVERY_PATH
        assert len(server.requests) == 3

    @pytest.mark.asyncio
    async def test_given_one_package_fails_when_found_then_partial_result_cached(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """A failing package contributes nothing; the rest is kept and cached."""
        # Given
        _discover(server, "p1-1.0", "p2-1.0")
        server.add_json(_references_path("p1-1.0"), source_files("p1-1.0", ("A.hs", 1, 1, 4)))
        server.add_status(_references_path("p2-1.0"), 500)
        aggregator = ReferenceAggregator(client)

        # When
        with capture_logs() as logs:
            first = await aggregator.find_references(EXTERNAL_ID)
        second = await aggregator.find_references(EXTERNAL_ID)

        # Then
        assert first is not None
        assert _spans(first) == [("p1-1.0", "A.hs", 1)]
        assert second is first
        assert len(server.requests) == 3
        [partial] = [e for e in logs if e["event"] == "references_partial"]
        assert partial["failed_packages"] == ["p2-1.0"]

    @pytest.mark.asyncio
    async def test_given_package_query_raises_when_found_then_others_unaffected(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """Unexpected exceptions in one package are logged and isolated."""
        # Given
        _discover(server, "p1-1.0", "p2-1.0")
        ok = SOURCE_FILES_ADAPTER.validate_python(source_files("p2-1.0", ("B.hs", 2, 1, 4)))

        async def fetch_references(package_id: str, external_id: str) -> list[SourceFile]:
            if package_id == "p1-1.0":
                raise RuntimeError("boom")
            return ok

        # When
        with (
            patch.object(client, "fetch_references", side_effect=fetch_references),
            capture_logs() as logs,
        ):
            result = await ReferenceAggregator(client).find_references(EXTERNAL_ID)

        # Then
        assert result is not None
        assert _spans(result) == [("p2-1.0", "B.hs", 2)]
        [failure] = [e for e in logs if e["event"] == "package_references_failed"]
        assert failure["package_id"] == "p1-1.0"

    @pytest.mark.asyncio
    async def test_given_discovery_fails_when_found_then_none_and_not_cached(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """Nothing is cached when discovery itself fails."""
        # Given
        aggregator = ReferenceAggregator(client)

        # When
        first = await aggregator.find_references(EXTERNAL_ID)
        second = await aggregator.find_references(EXTERNAL_ID)

        # Then
        assert first is None and second is None
        assert server.paths == [DISCOVERY_PATH, DISCOVERY_PATH]
        assert EXTERNAL_ID not in aggregator

    @pytest.mark.asyncio
    async def test_given_no_packages_when_found_then_empty_and_cached(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """An identifier nobody references yields an empty list."""
        # Given
        _discover(server)
        aggregator = ReferenceAggregator(client)

        # When
        result = await aggregator.find_references(EXTERNAL_ID)

        # Then
        assert result == []
        assert aggregator.cached(EXTERNAL_ID) == []

    @pytest.mark.asyncio
    async def test_given_cached_result_when_invalidated_then_searched_again(
        self, server: FakeServer, client: HceClient
    ) -> None:
        """Invalidation forces a fresh search."""
        # Given
        _discover(server, "p1-1.0")
        server.add_json(_references_path("p1-1.0"), source_files("p1-1.0", ("A.hs", 1, 1, 4)))
        aggregator = ReferenceAggregator(client)
        await aggregator.find_references(EXTERNAL_ID)

        # When
        aggregator.invalidate(EXTERNAL_ID)
        await aggregator.find_references(EXTERNAL_ID)

        # Then
        assert server.count("/api/globalReferences/") == 2

    @pytest.mark.asyncio
    async def test_given_first_package_answers_last_when_found_then_discovery_order_kept(
        self, server: FakeServer
    ) -> None:
        """Merge order does not depend on completion order."""
        # Given
        _discover(server, "p1-1.0", "p2-1.0")
        server.add_json(_references_path("p1-1.0"), source_files("p1-1.0", ("A.hs", 1, 1, 4)))
        server.add_json(_references_path("p2-1.0"), source_files("p2-1.0", ("B.hs", 2, 1, 4)))
        completed: list[str] = []

        async def slow_first_package(request: httpx.Request) -> httpx.Response:
            path = request.url.raw_path.decode()
            if path.startswith("/api/references/p1-1.0/"):
                await asyncio.sleep(0.05)
            response = server.handler(request)
            if path.startswith("/api/references/"):
                completed.append(path.split("/")[3])
            return response

        client = HceClient(
            ServerConfig(host=HOST), transport=httpx.MockTransport(slow_first_package)
        )

        # When
        async with client:
            result = await ReferenceAggregator(client).find_references(EXTERNAL_ID)

        # Then
        assert completed == ["p2-1.0", "p1-1.0"]
        assert result is not None
        assert _spans(result) == [("p1-1.0", "A.hs", 1), ("p2-1.0", "B.hs", 2)]

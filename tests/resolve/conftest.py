"""Shared fixtures for resolver tests."""

from pathlib import Path

import pytest

from hce_fakes import MAIN_SOURCE, FakeServer, write_package
from hcenav.client.http import HceClient
from hcenav.resolve.packages import PackageRegistry


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with package ``pkg-1.0`` holding ``src/Main.hs``."""
    folder = write_package(tmp_path, "pkg", "1.0")
    (folder / "src").mkdir()
    (folder / "src" / "Main.hs").write_text(MAIN_SOURCE)
    return tmp_path


@pytest.fixture
def main_file(workspace: Path) -> Path:
    return (workspace / "pkg" / "src" / "Main.hs").resolve()


@pytest.fixture
def registry(workspace: Path) -> PackageRegistry:
    registry = PackageRegistry()
    registry.refresh([workspace])
    return registry


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def client(server: FakeServer) -> HceClient:
    return server.client()

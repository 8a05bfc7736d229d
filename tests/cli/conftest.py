"""Shared fixtures for CLI tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from hce_fakes import MAIN_SOURCE, FakeServer, write_package
from hcenav.client.http import HceClient


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path) -> Iterator[None]:
    """Ignore the user's global config and keep log output out of stdout."""
    with (
        patch("hcenav.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"),
        patch("hcenav.cli.utils.configure_logging"),
    ):
        yield


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "ws"
    folder = write_package(root, "pkg", "1.0")
    (folder / "src").mkdir()
    (folder / "src" / "Main.hs").write_text(MAIN_SOURCE)
    (root / "cabal.project").write_text("packages: pkg\n")
    return root


@pytest.fixture
def server() -> Iterator[FakeServer]:
    """Fake server wired into every client the CLI creates."""
    fake = FakeServer()

    def make_client(server: Any, index: Any) -> HceClient:
        return HceClient(server, index, transport=fake.transport())

    with patch("hcenav.resolve.engine.HceClient", side_effect=make_client):
        yield fake

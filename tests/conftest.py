"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local hcenav package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of hcenav modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("hcenav"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any level filtering a previous test configured."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()

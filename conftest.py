import os
from pathlib import Path

import pytest

# buccaneer.app builds a default app at import; keep its world out of ./data
os.environ.setdefault("DATA_DIR", str(Path(__file__).parent / "data-tests"))
os.environ.setdefault("STATIC_DIR", str(Path(__file__).parent / "data-tests" / "no-static"))

from buccaneer.demo import create_demo_data  # noqa: E402
from buccaneer.tools import ToolExecutor  # noqa: E402
from buccaneer.world import WorldStore, init_world  # noqa: E402


@pytest.fixture
def world(tmp_path) -> WorldStore:
    """Fresh JSON world store seeded with the demo world."""
    store = init_world(tmp_path / "world")
    create_demo_data(store)
    return store


@pytest.fixture
def executor(world) -> ToolExecutor:
    return ToolExecutor(world)

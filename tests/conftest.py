import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from delve.config import GenerationSettings  # noqa: E402
from delve.generator import DungeonGenerator  # noqa: E402


@pytest.fixture
def scenario_settings() -> GenerationSettings:
    """The reference 40x40 layout used across the suite."""
    return GenerationSettings(width=40, height=40, min_partition_size=6, max_room_size=10, seed=1234)


@pytest.fixture
def scenario_layout(scenario_settings):
    return DungeonGenerator(scenario_settings).generate()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep DELVE_* variables from the developer's shell out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("DELVE_"):
            monkeypatch.delenv(key, raising=False)
    yield

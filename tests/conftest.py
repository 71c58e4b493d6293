from __future__ import annotations

import sys
from pathlib import Path

import pytest

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "plotargs" / "__init__.py").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))

from plotargs.registry import PlotRegistry  # noqa: E402


@pytest.fixture
def registry() -> PlotRegistry:
    """A freshly seeded registry, isolated from the process-wide one."""
    return PlotRegistry.seeded()


@pytest.fixture
def table(registry: PlotRegistry):
    return registry.snapshot().table

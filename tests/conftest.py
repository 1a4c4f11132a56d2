"""Shared test fixtures for tilewave."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from tilewave.wfc import Direction, Module


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="tilewave_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def solid_tile():
    """Factory for single-color RGBA pixel arrays."""
    def make(color: tuple[int, int, int, int], size: int = 4) -> np.ndarray:
        tile = np.zeros((size, size, 4), dtype=np.uint8)
        tile[:, :] = color
        return tile

    return make


@pytest.fixture
def split_tile():
    """Factory for tiles whose top half and bottom half differ in color."""
    def make(top: tuple[int, int, int, int], bottom: tuple[int, int, int, int], size: int = 4) -> np.ndarray:
        tile = np.zeros((size, size, 4), dtype=np.uint8)
        tile[: size // 2, :] = top
        tile[size // 2:, :] = bottom
        return tile

    return make


@pytest.fixture
def make_modules():
    """
    Factory for modules with explicit adjacency.

    Takes one dict per module mapping Direction to allowed indices; missing
    directions allow nothing.
    """
    def make(*rules: dict[Direction, set[int]]) -> list[Module]:
        return [
            Module(
                index=i,
                content=f"tile-{i}",
                adjacency={d: frozenset(allowed) for d, allowed in rule.items()},
            )
            for i, rule in enumerate(rules)
        ]

    return make

"""Tests for the generation entry point."""

import logging

import pytest
from PIL import Image

from tilewave import Contradiction, GenerationConfig, generate
from tilewave.wfc import Direction

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def never_adjacent(a, b, direction):
    return False


class TestGenerate:
    """Test the generate() wrapper."""

    def test_generates_fully_collapsed_grid(self, solid_tile):
        config = GenerationConfig(width=6, height=5, seed=12345)
        wave = generate([solid_tile(RED), solid_tile(BLUE)], config)

        assert (wave.width, wave.height) == (6, 5)
        assert wave.is_collapsed()
        assert len({slot.module_index for slot in wave.slots}) == 1

    def test_seed_produces_reproducible_results(self):
        tiles = ["a", "b", "c"]
        config = GenerationConfig(width=6, height=6, seed=99)
        free = lambda a, b, d: True

        first = generate(tiles, config, constraint=free)
        second = generate(tiles, config, constraint=free)

        assert first.to_index_grid() == second.to_index_grid()

    def test_limited_attempts_leave_grid_partial(self):
        config = GenerationConfig(width=4, height=4, seed=1, attempts=3)
        wave = generate(["a", "b"], config, constraint=lambda a, b, d: True)

        assert not wave.is_collapsed()
        assert sum(slot.collapsed for slot in wave.slots) == 3

    def test_contradiction_propagates_without_retries(self):
        config = GenerationConfig(width=3, height=3, seed=1)
        with pytest.raises(Contradiction):
            generate(["a", "b"], config, constraint=never_adjacent)

    def test_retries_use_fresh_grids(self, caplog):
        """Every retry starts over and logs its contradiction."""
        config = GenerationConfig(width=3, height=3, seed=1, max_retries=2)

        with caplog.at_level(logging.INFO, logger="tilewave"):
            with pytest.raises(Contradiction):
                generate(["a", "b"], config, constraint=never_adjacent)

        contradictions = [r for r in caplog.records if "GENERATE" in r.getMessage() and "CONTRADICTION" in r.getMessage()]
        assert len(contradictions) == 3
        assert "seed=3" in contradictions[-1].getMessage()

    def test_retry_can_recover(self):
        """A predicate that only fails the first try lets the retry succeed."""
        calls = {"count": 0}

        def is_possible(candidate, current, neighbor, direction):
            # Both candidates of the first propagation get rejected
            calls["count"] += 1
            return calls["count"] > 2

        config = GenerationConfig(width=2, height=1, seed=1, max_retries=1)
        wave = generate(["a", "b"], config, constraint=lambda a, b, d: True, is_possible=is_possible)

        assert wave.is_collapsed()
        assert calls["count"] > 2

    def test_loads_tiles_from_config(self, temp_data_dir):
        Image.new("RGBA", (4, 4), RED).save(temp_data_dir / "red.png")
        Image.new("RGBA", (4, 4), BLUE).save(temp_data_dir / "blue.png")
        config = GenerationConfig(width=3, height=3, seed=5, tile_dir=temp_data_dir)

        wave = generate(config=config)

        assert len(wave.modules) == 2
        assert wave.is_collapsed()
        assert wave.modules[0].adjacency[Direction.RIGHT] == frozenset({0})

    def test_requires_tiles_or_tile_dir(self):
        with pytest.raises(ValueError):
            generate(config=GenerationConfig(width=2, height=2))

    def test_logs_completion(self, caplog):
        config = GenerationConfig(width=2, height=2, seed=3)
        with caplog.at_level(logging.INFO, logger="tilewave"):
            generate(["a"], config, constraint=lambda a, b, d: True)
        assert any("COMPLETE" in r.getMessage() for r in caplog.records)

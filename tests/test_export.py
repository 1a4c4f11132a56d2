"""Tests for rendering a wave to an image."""

import numpy as np
import pytest
from PIL import Image

from tilewave import Contradiction, Wave, export_image, save_image
from tilewave.export import CONTRADICTION_COLOR
from tilewave.wfc import Module

GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
TRANSPARENT = (0, 0, 0, 0)


@pytest.fixture
def wave(solid_tile):
    """A 3x2 wave over green and blue tiles that never touch anything."""
    modules = [
        Module(index=0, content=solid_tile(GREEN)),
        Module(index=1, content=solid_tile(BLUE)),
    ]
    wave = Wave.from_modules(modules, 3, 2)
    wave.initialize(seed=0)
    return wave


class TestExportImage:
    """Test exported image layout and colors."""

    def test_size_is_grid_times_tile(self, wave):
        image = export_image(wave)
        assert image.mode == "RGBA"
        assert image.size == (3 * 4, 2 * 4)

    def test_undecided_slots_are_transparent(self, wave):
        image = export_image(wave)
        assert image.getpixel((0, 0)) == TRANSPARENT
        assert image.getpixel((11, 7)) == TRANSPARENT

    def test_collapsed_slots_draw_their_tile(self, wave):
        wave.get_slot(1, 0).superposition = [0]
        wave.get_slot(2, 1).superposition = [1]

        image = export_image(wave)

        assert image.getpixel((4, 0)) == GREEN
        assert image.getpixel((7, 3)) == GREEN
        assert image.getpixel((8, 4)) == BLUE
        assert image.getpixel((0, 0)) == TRANSPARENT

    def test_contradictions_are_red(self, wave):
        wave.get_slot(0, 1).superposition = []
        image = export_image(wave)
        assert image.getpixel((0, 4)) == CONTRADICTION_COLOR
        assert image.getpixel((3, 7)) == CONTRADICTION_COLOR
        assert CONTRADICTION_COLOR == (255, 0, 0, 255)

    def test_failed_run_shows_offending_slot(self, wave):
        """Modules with no neighbors allowed fail on the first propagation."""
        with pytest.raises(Contradiction) as exc_info:
            wave.collapse(1)

        slot = exc_info.value.slot
        image = export_image(wave)
        assert image.getpixel((slot.x * 4, slot.y * 4)) == CONTRADICTION_COLOR

    def test_accepts_pillow_tiles(self):
        tiles = [Image.new("RGBA", (2, 3), GREEN)]
        wave = Wave(tiles, 2, 2)
        wave.initialize(seed=0)
        wave.collapse_all()

        image = export_image(wave)

        assert image.size == (4, 6)
        assert np.all(np.asarray(image) == GREEN)

    def test_save_image(self, wave, temp_data_dir):
        path = temp_data_dir / "out.png"
        save_image(wave, path)
        with Image.open(path) as image:
            assert image.size == (12, 8)

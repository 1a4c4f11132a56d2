"""
Render the wave to an image.

Debugging surface only; the algorithm never reads it back. Collapsed slots
draw their module's tile, undecided slots stay transparent, and contradicted
slots are filled red so a failed run shows which tiles clash.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from PIL import Image

from .wfc import Wave

CONTRADICTION_COLOR = (255, 0, 0, 255)


def _as_image(content: Any) -> Image.Image:
    """Turn tile content (Pillow image or pixel array) into an RGBA image."""
    if isinstance(content, Image.Image):
        return content.convert("RGBA")
    return Image.fromarray(np.asarray(content)).convert("RGBA")


def export_image(wave: Wave) -> Image.Image:
    """
    Draw the current state of the wave.

    The output is width*tile_w by height*tile_h pixels, where the tile size
    comes from the first module.
    """
    tiles = [_as_image(module.content) for module in wave.modules]
    tile_w, tile_h = tiles[0].size

    image = Image.new("RGBA", (wave.width * tile_w, wave.height * tile_h), (0, 0, 0, 0))
    contradiction = Image.new("RGBA", (tile_w, tile_h), CONTRADICTION_COLOR)

    for slot in wave.slots:
        box = (slot.x * tile_w, slot.y * tile_h)
        if slot.collapsed:
            image.alpha_composite(tiles[slot.module_index], dest=box)
        elif slot.contradicted:
            image.paste(contradiction, box)

    return image


def save_image(wave: Wave, path) -> None:
    """Export the wave and write it to `path` (format from the extension)."""
    export_image(wave).save(path)

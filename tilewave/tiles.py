"""
Tile loading.

Reads a directory of tile images into the ordered catalog a Wave is built
from. Files are taken in filename order, so renaming tiles changes module
indices.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .logging_config import get_logger
from .wfc import WaveError

logger = get_logger(__name__)


class TileLoadError(WaveError):
    """Tiles could not be read, or don't form a usable catalog."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


def load_tiles(directory: Path | str, pattern: str = "*.png") -> list[Image.Image]:
    """
    Load every tile image in a directory as RGBA.

    Args:
        directory: Folder containing the tile images
        pattern: Glob pattern selecting tile files

    Returns:
        Tiles sorted by filename

    Raises:
        TileLoadError: If the directory has no tiles, a file can't be
                       decoded, or the tiles don't all share one size
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise TileLoadError(f"Tile directory not found: {directory}", directory)

    paths = sorted(p for p in directory.glob(pattern) if p.is_file())
    if not paths:
        raise TileLoadError(f"No tiles matching {pattern!r} in {directory}", directory)

    tiles = [load_tile(path) for path in paths]

    size = tiles[0].size
    for path, tile in zip(paths, tiles):
        if tile.size != size:
            raise TileLoadError(
                f"Tile {path.name} is {tile.size[0]}x{tile.size[1]}, expected {size[0]}x{size[1]}",
                path,
            )

    logger.debug(f"Loaded {len(tiles)} tiles ({size[0]}x{size[1]}) from {directory}")
    return tiles


def load_tile(path: Path | str) -> Image.Image:
    """Load a single tile image as RGBA."""
    path = Path(path)
    try:
        with Image.open(path) as image:
            return image.convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        raise TileLoadError(f"Could not read tile {path}: {e}", path) from e

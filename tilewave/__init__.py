"""tilewave - tile map generation with Wave Function Collapse."""

__version__ = "0.1.0"

from .wfc import Direction, Module, Slot, Wave, WaveError, Contradiction, edge_constraint
from .config import GenerationConfig
from .tiles import load_tiles, TileLoadError
from .export import export_image, save_image
from .generate import generate

__all__ = [
    "Direction",
    "Module",
    "Slot",
    "Wave",
    "WaveError",
    "Contradiction",
    "edge_constraint",
    "GenerationConfig",
    "load_tiles",
    "TileLoadError",
    "export_image",
    "save_image",
    "generate",
]

"""Wave Function Collapse engine: modules, slots and the wave."""

from .module import Direction, DIRECTIONS, Module, build_modules, adjacency_predicate
from .slot import Slot
from .constraints import edge_constraint, edge_pixels, sampled_edge_constraint
from .wave import Wave, WaveError, Contradiction

__all__ = [
    "Direction",
    "DIRECTIONS",
    "Module",
    "build_modules",
    "adjacency_predicate",
    "Slot",
    "edge_constraint",
    "edge_pixels",
    "sampled_edge_constraint",
    "Wave",
    "WaveError",
    "Contradiction",
]

"""
Module definition for Wave Function Collapse.

A Module is one candidate tile type. Each module knows which other modules
may sit next to it in each direction; these sets are computed once, before
any collapse happens, and never change afterwards.

Modules live in an index arena: a module's identity is its position in the
catalog, and adjacency sets hold catalog indices rather than references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

if TYPE_CHECKING:
    from .slot import Slot


class Direction(Enum):
    """
    Cardinal directions in image coordinates (y grows downward).

    Compatibility from A to B in one direction says nothing about B to A in
    the opposite direction; keeping rules symmetric is up to the constraint
    function.
    """
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def opposite(self) -> "Direction":
        """Return the opposite direction."""
        return _OPPOSITES[self]

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Propagation visits neighbors in this order
DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


ConstraintFunc = Callable[[Any, Any, Direction], bool]
"""(content_a, content_b, direction) -> may b sit on the `direction` side of a"""

IsPossibleFunc = Callable[["Module", "Slot", "Slot", Direction], bool]
"""(candidate, current, neighbor, direction) -> is candidate still viable in neighbor"""


@dataclass(frozen=True, eq=False)
class Module:
    """
    A tile type that can occupy a slot.

    Attributes:
        index: Position in the wave's catalog. This is the module's identity;
               two modules with identical content are still different modules.
        content: Opaque tile payload (usually an RGBA image or pixel array).
        adjacency: For each direction, the catalog indices of modules allowed
                   in the neighboring slot on that side.
    """
    index: int
    content: Any = None
    adjacency: Mapping[Direction, frozenset[int]] = field(default_factory=dict)

    def __post_init__(self):
        # Copy into a read-only mapping; missing directions allow nothing
        adjacency = {
            direction: frozenset(self.adjacency.get(direction, ()))
            for direction in Direction
        }
        object.__setattr__(self, "adjacency", MappingProxyType(adjacency))

    def allows(self, direction: Direction, index: int) -> bool:
        """Check whether module `index` may sit on the `direction` side of this one."""
        return index in self.adjacency[direction]

    def __repr__(self) -> str:
        return f"Module(index={self.index})"


def build_modules(tiles: Sequence[Any], constraint: ConstraintFunc) -> list[Module]:
    """
    Build the module catalog, deriving adjacency eagerly.

    Every tile is checked against every tile (itself included) in all four
    directions, so the propagation loop never has to look at raw content.
    """
    modules = []
    for i, tile in enumerate(tiles):
        adjacency = {
            direction: frozenset(
                j for j, other in enumerate(tiles)
                if constraint(tile, other, direction)
            )
            for direction in DIRECTIONS
        }
        modules.append(Module(index=i, content=tile, adjacency=adjacency))
    return modules


def adjacency_predicate(modules: Sequence[Module]) -> IsPossibleFunc:
    """
    Create the default IsPossibleFunc for a catalog.

    A candidate stays possible in the neighbor if at least one module still
    possible in the current slot allows it on that side.
    """
    def is_possible(candidate: Module, current: "Slot", neighbor: "Slot", direction: Direction) -> bool:
        return any(
            modules[i].allows(direction, candidate.index)
            for i in current.superposition
        )

    return is_possible

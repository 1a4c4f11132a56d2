"""
The wave: grid state and the collapse/propagation loop.

The wave is a 2D array of slots that all start in a superposition of every
module. Each attempt picks a random slot that is still undecided, collapses
it to one module, and pushes the resulting restriction outward depth-first:
a neighbor that loses candidates immediately propagates to its own
neighbors before the next direction is looked at.

Propagation stops at a fixed point (a neighbor whose candidate count did not
change) or at a contradiction (a neighbor with no candidates left). There is
no backtracking; a contradiction fails the run and leaves the grid as-is so it
can be exported and inspected.

The algorithm follows Oskar Stalberg's description of the wave:
https://www.youtube.com/watch?v=0bcZb-SsnrA&t=350s
"""

from __future__ import annotations

import random
from typing import Any, Iterator, Sequence

from ..logging_config import get_logger, log_attempt, log_collapse, log_contradiction
from .constraints import edge_constraint
from .module import (
    DIRECTIONS,
    ConstraintFunc,
    Direction,
    IsPossibleFunc,
    Module,
    adjacency_predicate,
    build_modules,
)
from .slot import Slot

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class WaveError(Exception):
    """Base exception for tilewave errors."""

    pass


class Contradiction(WaveError):
    """A slot ran out of possible modules during propagation."""

    def __init__(self, slot: Slot):
        super().__init__(f"no possible modules for slot ({slot.x}, {slot.y})")
        self.slot = slot


# -----------------------------------------------------------------------------
# Wave
# -----------------------------------------------------------------------------


class Wave:
    """
    Wave function collapse over a rectangular grid of slots.

    Usage:
        wave = Wave(tiles, width=16, height=16)
        wave.initialize(seed=42)
        wave.collapse(attempts=100)   # raises Contradiction on failure
        image = export_image(wave)

    A wave is not safe to share between threads. Independent waves are: each
    one draws from its own random generator.
    """

    def __init__(
        self,
        tiles: Sequence[Any],
        width: int,
        height: int,
        constraint: ConstraintFunc | None = None,
        is_possible: IsPossibleFunc | None = None,
        *,
        _modules: list[Module] | None = None,
    ):
        """
        Build a wave from tile contents, deriving adjacency rules.

        Args:
            tiles: Ordered tile contents; position in this list becomes the
                   module index
            width: Number of slots horizontally
            height: Number of slots vertically
            constraint: Decides whether two tiles may touch in a direction.
                        Defaults to sampling edge pixels.
            is_possible: Override for the per-candidate viability check, e.g.
                         to add probabilities. Defaults to the adjacency sets.
            _modules: Prebuilt catalog, already validated by `from_modules`
        """
        if len(tiles) == 0:
            raise ValueError("Tile catalog is empty")
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")

        if _modules is None:
            _modules = build_modules(tiles, constraint or edge_constraint)

        self.width = width
        self.height = height
        self.modules = _modules
        self.is_possible = is_possible or adjacency_predicate(_modules)

        self.slots: list[Slot] = []
        # Active propagation path, as slot indices
        self.history: list[int] = []
        # visited[i] is True exactly when slot i is on the history stack
        self.visited: list[bool] = []
        self.rng = random.Random()

    @classmethod
    def from_modules(
        cls,
        modules: Sequence[Module],
        width: int,
        height: int,
        is_possible: IsPossibleFunc | None = None,
    ) -> Wave:
        """
        Build a wave from prebuilt modules with explicit adjacency rules.

        Module indices must match their catalog positions, and adjacency sets
        may only refer to modules in the same catalog.
        """
        if not modules:
            raise ValueError("Tile catalog is empty")
        for position, module in enumerate(modules):
            if module.index != position:
                raise ValueError(f"Module at position {position} has index {module.index}")
            for direction, allowed in module.adjacency.items():
                foreign = [i for i in allowed if not 0 <= i < len(modules)]
                if foreign:
                    raise ValueError(
                        f"Module {position} allows unknown modules {foreign} to its {direction.name}"
                    )

        return cls(
            [module.content for module in modules],
            width,
            height,
            is_possible=is_possible,
            _modules=list(modules),
        )

    def initialize(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        """
        Put every slot in a superposition of all modules.

        Args:
            seed: Seed for a fresh random generator owned by this wave
            rng: Use this generator instead (seed is ignored)
        """
        self.rng = rng if rng is not None else random.Random(seed)

        catalog = [module.index for module in self.modules]
        self.slots = [
            Slot(x=x, y=y, index=x + y * self.width, superposition=list(catalog))
            for y in range(self.height)
            for x in range(self.width)
        ]
        self.visited = [False] * len(self.slots)
        self.history.clear()

        logger.debug(
            f"Initialized {self.width}x{self.height} wave with "
            f"{len(self.modules)} modules (seed={seed})"
        )

    def collapse(self, attempts: int) -> None:
        """
        Run `attempts` collapse attempts.

        Attempts are cumulative: the grid is not reset between them, and
        slots that are already decided are simply skipped. Not every tileset
        yields a solution; on a contradiction this raises and the remaining
        attempts are abandoned. The grid keeps its state so the failure can be
        exported and inspected.

        Raises:
            Contradiction: If some slot ends up with no possible modules
        """
        for number in range(attempts):
            log_attempt(logger, number, "START")
            try:
                self.attempt()
            except Contradiction as e:
                log_contradiction(logger, number, e.slot.x, e.slot.y)
                raise
            self._clear_history()

    def collapse_all(self) -> int:
        """
        Run attempts until the grid is fully collapsed.

        Each attempt decides at least one slot, so this stops after at most
        one attempt per slot. Returns the number of attempts made.

        Raises:
            Contradiction: If some slot ends up with no possible modules
        """
        attempts = 0
        while not self.is_collapsed():
            self.collapse(1)
            attempts += 1
        return attempts

    def attempt(self) -> None:
        """
        One pick-collapse-propagate pass.

        Raises:
            Contradiction: If propagation empties a slot
        """
        if self.is_collapsed():
            return

        # Pick a starting point unless a propagation is already in progress
        if not self.history:
            slot = self.collapse_random_slot()
            self._push(slot)

        self._propagate()

    def collapse_random_slot(self) -> Slot | None:
        """
        Collapse a random undecided slot and return it.

        Draws random slots, skipping ones that are already collapsed (or
        contradicted), until an undecided one turns up. Returns None if there
        is nothing left to collapse.
        """
        if self.is_collapsed():
            return None

        while True:
            slot = self.slots[self.rng.randrange(len(self.slots))]
            if slot.entropy <= 1:
                continue

            chosen = slot.collapse(self.rng)
            log_collapse(logger, slot.x, slot.y, chosen)
            return slot

    def _propagate(self) -> None:
        """
        Depth-first propagation from the slot on top of the history stack.

        Equivalent to recursing into each changed neighbor and popping it on
        return, but uses an explicit stack of (slot index, next direction)
        frames so large grids don't hit the recursion limit.
        """
        frames = [[self.history[-1], 0]]

        while frames:
            frame = frames[-1]
            current = self.slots[frame[0]]

            if frame[1] == len(DIRECTIONS):
                frames.pop()
                # The starting slot stays on history until the attempt ends
                if frames:
                    self._pop()
                continue

            direction = DIRECTIONS[frame[1]]
            frame[1] += 1

            neighbor = self.get_neighbor(current, direction)
            if neighbor is None or self.has_visited(neighbor):
                continue

            possible = self.get_possible_modules(current, neighbor, direction)
            if len(possible) == len(neighbor.superposition):
                # Same state as before, no reason to go further
                continue

            neighbor.superposition = possible
            if not possible:
                raise Contradiction(neighbor)

            self._push(neighbor)
            frames.append([neighbor.index, 0])

    def get_possible_modules(self, current: Slot, neighbor: Slot, direction: Direction) -> list[int]:
        """
        Modules of `neighbor` that are still possible given `current`.

        `neighbor` lies in `direction` from `current`. Keeps the order of the
        neighbor's superposition.
        """
        return [
            index for index in neighbor.superposition
            if self.is_possible(self.modules[index], current, neighbor, direction)
        ]

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def has_visited(self, slot: Slot) -> bool:
        """Check if the slot is on the active propagation path."""
        return self.visited[slot.index]

    def _push(self, slot: Slot) -> None:
        self.history.append(slot.index)
        self.visited[slot.index] = True

    def _pop(self) -> None:
        index = self.history.pop()
        self.visited[index] = False

    def _clear_history(self) -> None:
        for index in self.history:
            self.visited[index] = False
        self.history.clear()

    # -------------------------------------------------------------------------
    # Grid queries
    # -------------------------------------------------------------------------

    def get_slot(self, x: int, y: int) -> Slot:
        """Get the slot at the given coordinates."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Slot ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return self.slots[x + y * self.width]

    def module_at(self, x: int, y: int) -> Module | None:
        """The module chosen at (x, y), or None if undecided or contradicted."""
        index = self.get_slot(x, y).module_index
        if index is None:
            return None
        return self.modules[index]

    def is_collapsed(self) -> bool:
        """True when every slot holds one module or none (contradiction)."""
        return all(slot.entropy <= 1 for slot in self.slots)

    def has_neighbor(self, slot: Slot, direction: Direction) -> bool:
        """Check if the slot has a neighbor in the direction (grid edges don't wrap)."""
        nx = slot.x + direction.dx
        ny = slot.y + direction.dy
        return 0 <= nx < self.width and 0 <= ny < self.height

    def get_neighbor(self, slot: Slot, direction: Direction) -> Slot | None:
        """The neighboring slot in the direction, or None past the edge."""
        if not self.has_neighbor(slot, direction):
            return None
        return self.slots[(slot.x + direction.dx) + (slot.y + direction.dy) * self.width]

    def neighbors(self, slot: Slot) -> Iterator[tuple[Slot, Direction]]:
        """
        Yield all neighbors of a slot with their directions.

        Direction is FROM the given slot TO the neighbor.
        """
        for direction in DIRECTIONS:
            neighbor = self.get_neighbor(slot, direction)
            if neighbor is not None:
                yield neighbor, direction

    def to_index_grid(self) -> list[list[int | None]]:
        """Chosen module indices as grid[y][x]; None where undecided or contradicted."""
        return [
            [self.slots[x + y * self.width].module_index for x in range(self.width)]
            for y in range(self.height)
        ]

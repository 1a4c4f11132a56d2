"""
Slot representation for Wave Function Collapse.

A Slot is one cell of the grid. It holds the catalog indices of every module
that is still possible there (its superposition). The superposition only
ever shrinks: collapse reduces it to one entry, propagation filters it, and
an empty superposition means a contradiction.
"""

from dataclasses import dataclass, field
import random


@dataclass(eq=False)
class Slot:
    """
    A single cell in the wave.

    Slots compare by identity; the wave tracks them by their flat `index`.
    """
    x: int
    y: int
    index: int
    superposition: list[int] = field(default_factory=list)

    @property
    def entropy(self) -> int:
        """Number of modules still possible here."""
        return len(self.superposition)

    @property
    def collapsed(self) -> bool:
        """A slot is collapsed when exactly one module remains."""
        return len(self.superposition) == 1

    @property
    def contradicted(self) -> bool:
        """No module fits here anymore."""
        return not self.superposition

    @property
    def module_index(self) -> int | None:
        """The chosen module index, or None if not yet collapsed."""
        if self.collapsed:
            return self.superposition[0]
        return None

    def collapse(self, rng: random.Random) -> int:
        """
        Collapse to a single module picked uniformly from the superposition.

        Only valid on slots with more than one possibility; callers filter out
        collapsed and contradicted slots first.
        """
        if len(self.superposition) <= 1:
            raise ValueError(
                f"Cannot collapse slot ({self.x}, {self.y}) with "
                f"{len(self.superposition)} possibilities"
            )
        chosen = rng.choice(self.superposition)
        self.superposition = [chosen]
        return chosen

    def __repr__(self) -> str:
        return f"Slot(x={self.x}, y={self.y}, superposition={self.superposition})"

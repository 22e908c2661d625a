"""Deterministically ordered disk neighborhoods used to sample complexity traces.

Ordering invariant: offsets are sorted by ``(distance, dx, dy)`` ascending.
Compressed length is order-sensitive, so two templates with the same offsets
in a different order are NOT interchangeable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from complexity_drift.domain.grid import Coord, Grid


class Offset(NamedTuple):
    """One template entry relative to the trace center."""

    dx: int
    dy: int
    distance: float


@dataclass(frozen=True)
class NeighborhoodTemplate:
    """Immutable ordered disk of offsets with radius ``radius``."""

    radius: int
    offsets: tuple[Offset, ...]
    dx: np.ndarray = field(repr=False, compare=False)
    dy: np.ndarray = field(repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.offsets)

    def pairs(self) -> list[tuple[int, int]]:
        """Return ``(dx, dy)`` pairs in template order."""
        return [(o.dx, o.dy) for o in self.offsets]

    def nearest_free(self, grid: Grid, center: Coord) -> Coord | None:
        """Return the first inactive cell around *center* in template order."""
        size = grid.size
        x0, y0 = center
        for o in self.offsets:
            cell = ((x0 + o.dx) % size, (y0 + o.dy) % size)
            if grid.get(cell) == 0:
                return cell
        return None


@lru_cache(maxsize=None)
def build_template(radius: int) -> NeighborhoodTemplate:
    """Enumerate integer offsets within Euclidean distance *radius* of the origin.

    The result is cached per radius; the returned template and its index
    arrays are read-only.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    offsets: list[Offset] = []
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            squared = dx * dx + dy * dy
            if squared <= radius * radius:
                # sqrt of an exact integer keeps equal-distance ties exactly equal
                offsets.append(Offset(dx, dy, math.sqrt(squared)))
    offsets.sort(key=lambda o: (o.distance, o.dx, o.dy))

    dx_arr = np.array([o.dx for o in offsets], dtype=np.int64)
    dy_arr = np.array([o.dy for o in offsets], dtype=np.int64)
    dx_arr.flags.writeable = False
    dy_arr.flags.writeable = False
    return NeighborhoodTemplate(radius=radius, offsets=tuple(offsets), dx=dx_arr, dy=dy_arr)

"""Fixed-size toroidal grid of byte cell states.

Cells are stored in a ``(size, size)`` ``uint8`` array indexed ``[y, x]``.
``0`` is inactive; any non-zero byte is active. Every coordinate read goes
through modular wraparound, so out-of-bounds access is impossible.
"""

from __future__ import annotations

from random import Random
from typing import TYPE_CHECKING, TypeAlias

import numpy as np

from complexity_drift.config.constants import ACTIVE_VALUE

if TYPE_CHECKING:
    from complexity_drift.domain.neighborhood import NeighborhoodTemplate

Coord: TypeAlias = tuple[int, int]
"""An ``(x, y)`` cell position."""


def wrap(coord: int, size: int) -> int:
    """Return *coord* modulo *size*, always in ``[0, size)``."""
    return coord % size


class Grid:
    """Square torus of ``size * size`` byte cells."""

    __slots__ = ("size", "cells")

    def __init__(self, size: int, cells: np.ndarray) -> None:
        if size < 1:
            raise ValueError("size must be >= 1")
        if cells.shape != (size, size):
            raise ValueError(f"cells must have shape ({size}, {size}), got {cells.shape}")
        self.size = size
        self.cells = cells.astype(np.uint8, copy=False)

    @classmethod
    def empty(cls, size: int) -> Grid:
        return cls(size, np.zeros((size, size), dtype=np.uint8))

    @classmethod
    def scatter(cls, size: int, n_active: int, rng: Random, value: int = ACTIVE_VALUE) -> Grid:
        """Place exactly *n_active* cells holding *value* at distinct seeded positions."""
        if not 0 <= n_active <= size * size:
            raise ValueError("n_active must be in [0, size * size]")
        grid = cls.empty(size)
        for index in rng.sample(range(size * size), n_active):
            grid.cells[index // size, index % size] = value
        return grid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self.cells, other.cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid(size={self.size}, active={int(np.count_nonzero(self.cells))})"

    def get(self, cell: Coord) -> int:
        x, y = cell
        return int(self.cells[wrap(y, self.size), wrap(x, self.size)])

    def set(self, cell: Coord, value: int) -> None:
        x, y = cell
        self.cells[wrap(y, self.size), wrap(x, self.size)] = value

    def copy(self) -> Grid:
        return Grid(self.size, self.cells.copy())

    def snapshot(self) -> np.ndarray:
        """Return a detached copy of the cell array."""
        return self.cells.copy()

    def swap(self, a: Coord, b: Coord) -> None:
        """Exchange the states of cells *a* and *b* in place."""
        ax, ay = wrap(a[0], self.size), wrap(a[1], self.size)
        bx, by = wrap(b[0], self.size), wrap(b[1], self.size)
        self.cells[ay, ax], self.cells[by, bx] = self.cells[by, bx], self.cells[ay, ax]

    def swapped(self, a: Coord, b: Coord) -> Grid:
        """Return a copy with cells *a* and *b* exchanged; ``self`` is untouched."""
        candidate = self.copy()
        candidate.swap(a, b)
        return candidate

    def sample_trace(self, center: Coord, template: NeighborhoodTemplate) -> bytes:
        """Read cell bytes at ``center + offset`` for every offset, in template order."""
        x0, y0 = center
        xs = (x0 + template.dx) % self.size
        ys = (y0 + template.dy) % self.size
        return self.cells[ys, xs].tobytes()

    def active_cells(self) -> list[Coord]:
        """Active positions in row-major order."""
        ys, xs = np.nonzero(self.cells)
        return [(int(x), int(y)) for y, x in zip(ys, xs, strict=True)]

    def inactive_cells(self) -> list[Coord]:
        """Inactive positions in row-major order."""
        ys, xs = np.nonzero(self.cells == 0)
        return [(int(x), int(y)) for y, x in zip(ys, xs, strict=True)]

    def active_indices(self) -> np.ndarray:
        """Row-major flat indices (``y * size + x``) of active cells."""
        return np.flatnonzero(self.cells)

    def inactive_indices(self) -> np.ndarray:
        return np.flatnonzero(self.cells == 0)

    def coord_of(self, index: int) -> Coord:
        y, x = divmod(int(index), self.size)
        return (x, y)

    def all_cells(self) -> list[Coord]:
        return [(x, y) for y in range(self.size) for x in range(self.size)]

    def count_active(self) -> int:
        return int(np.count_nonzero(self.cells))

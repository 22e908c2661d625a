"""Shared search state, step results, and the policy base class.

Grids are handled copy-on-propose / commit-on-accept: a policy never mutates
``state.grid``; it returns a :class:`StepResult` holding either a new grid or
the unchanged one, and the driver commits it with :meth:`SearchState.commit`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random

from complexity_drift.config.types import AggregateScope, StepOutcome
from complexity_drift.domain.complexity import ComplexityEstimator
from complexity_drift.domain.grid import Coord, Grid
from complexity_drift.domain.neighborhood import NeighborhoodTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Element:
    """A movable labeled point for gaussian-perturbation search."""

    position: Coord
    target: tuple[float, float]
    mean: tuple[float, float] = (0.0, 0.0)
    stddev: float = 1.0


@dataclass(frozen=True)
class PairMeasurement:
    """Local complexities of both swap participants before and after the swap."""

    a: Coord
    b: Coord
    before_a: int
    before_b: int
    after_a: int
    after_b: int


@dataclass(frozen=True)
class StepResult:
    """Outcome of one policy step."""

    outcome: StepOutcome
    attempts: int
    grid: Grid
    complexity: int
    elements: tuple[Element, ...] = ()
    measurement: PairMeasurement | None = None

    @property
    def changed(self) -> bool:
        return self.outcome is not StepOutcome.EXHAUSTED


@dataclass
class SearchState:
    """Mutable state of one run; never shared across runs.

    ``best_complexity`` is the running minimum of ``complexity``. Pairwise
    steps can raise the aggregate, so it may describe a grid no longer held.
    """

    grid: Grid
    complexity: int
    rng: Random
    best_complexity: int = field(default=-1)
    step: int = 0
    elements: tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        if self.best_complexity < 0:
            self.best_complexity = self.complexity

    def commit(self, result: StepResult) -> None:
        """Adopt *result* as the current state and advance the step counter."""
        if result.changed:
            self.grid = result.grid
            self.complexity = result.complexity
            if result.elements:
                self.elements = result.elements
        self.best_complexity = min(self.best_complexity, self.complexity)
        self.step += 1


class SearchPolicy:
    """Base class holding the template, estimator and attempt budget."""

    name = "base"

    def __init__(
        self,
        template: NeighborhoodTemplate,
        estimator: ComplexityEstimator,
        attempt_budget: int,
        scope: AggregateScope = AggregateScope.ACTIVE,
    ) -> None:
        if attempt_budget < 1:
            raise ValueError("attempt_budget must be >= 1")
        self.template = template
        self.estimator = estimator
        self.attempt_budget = attempt_budget
        self.scope = scope

    def local_complexity(self, grid: Grid, cell: Coord) -> int:
        """Complexity of the trace centered at *cell*."""
        return self.estimator.estimate(grid.sample_trace(cell, self.template))

    def aggregate(self, grid: Grid) -> int:
        """Sum of local complexities over the cells selected by ``self.scope``."""
        cells = grid.all_cells() if self.scope is AggregateScope.ALL else grid.active_cells()
        return sum(self.local_complexity(grid, cell) for cell in cells)

    def score(self, grid: Grid, elements: tuple[Element, ...] = ()) -> int:
        """Fitness tracked in :class:`SearchState`; lower is better."""
        return self.aggregate(grid)

    def prepare(
        self, grid: Grid, rng: Random, elements: tuple[Element, ...] = ()
    ) -> tuple[Grid, tuple[Element, ...]]:
        """Hook run once before the first step; may return a modified start grid."""
        return grid, elements

    def step(self, state: SearchState) -> StepResult:
        raise NotImplementedError

    def _exhausted(self, state: SearchState, attempts: int) -> StepResult:
        logger.debug(
            "%s step %d exhausted after %d attempts", self.name, state.step, attempts
        )
        return StepResult(
            outcome=StepOutcome.EXHAUSTED,
            attempts=attempts,
            grid=state.grid,
            complexity=state.complexity,
            elements=state.elements,
        )


def apply_moves(
    grid: Grid, moves: list[tuple[Coord, Coord]]
) -> tuple[Grid, list[Coord]]:
    """Apply ``(source, destination)`` moves in order as swaps on a copy of *grid*.

    A move whose destination is another mover's current cell displaces that
    mover to the source cell. Returns the candidate grid and each mover's
    final position, in input order.
    """
    candidate = grid.copy()
    size = grid.size
    positions = [(src[0] % size, src[1] % size) for src, _ in moves]
    occupant = {pos: index for index, pos in enumerate(positions)}
    for index, (_, dst) in enumerate(moves):
        src = positions[index]
        dst = (dst[0] % size, dst[1] % size)
        if src == dst:
            continue
        candidate.swap(src, dst)
        other = occupant.pop(dst, None)
        del occupant[src]
        if other is not None:
            positions[other] = src
            occupant[src] = other
        positions[index] = dst
        occupant[dst] = index
    return candidate, positions

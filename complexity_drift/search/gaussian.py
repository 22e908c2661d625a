"""Gaussian-perturbation descent over a set of movable elements.

Each element keeps a continuous target position. An attempt samples
``target + mean + N(0, stddev)`` per axis for every element, rounds to the
nearest cell and applies the moves as swaps. A fixed overlay of noise cells,
scattered once before the first step, diversifies the sampled traces without
being scored. The first attempt whose fitness does not exceed the best so far
is accepted and the sampled positions become the new targets.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from random import Random

from complexity_drift.config.constants import NOISE_VALUE
from complexity_drift.config.types import AggregateScope, StepOutcome
from complexity_drift.domain.complexity import ComplexityEstimator
from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import NeighborhoodTemplate
from complexity_drift.search.base import (
    Element,
    SearchPolicy,
    SearchState,
    StepResult,
    apply_moves,
)

logger = logging.getLogger(__name__)


def _nearest(value: float) -> int:
    """Round half up, independent of Python's banker's rounding."""
    return math.floor(value + 0.5)


class GaussianPerturbationPolicy(SearchPolicy):
    name = "gaussian"

    def __init__(
        self,
        template: NeighborhoodTemplate,
        estimator: ComplexityEstimator,
        attempt_budget: int,
        scope: AggregateScope = AggregateScope.ACTIVE,
        stddev: float = 1.0,
        noise_cells: int = 0,
    ) -> None:
        super().__init__(template, estimator, attempt_budget, scope)
        if stddev < 0.0:
            raise ValueError("stddev must be >= 0.0")
        if noise_cells < 0:
            raise ValueError("noise_cells must be >= 0")
        self.stddev = stddev
        self.noise_cells = noise_cells

    def prepare(
        self, grid: Grid, rng: Random, elements: tuple[Element, ...] = ()
    ) -> tuple[Grid, tuple[Element, ...]]:
        """Default elements to the active cells and scatter the noise overlay."""
        if not elements:
            elements = tuple(
                Element(position=cell, target=(float(cell[0]), float(cell[1])), stddev=self.stddev)
                for cell in grid.active_cells()
            )
        if self.noise_cells == 0:
            return grid, elements

        free = grid.inactive_cells()
        if self.noise_cells > len(free):
            raise ValueError("noise_cells exceeds the number of free cells")
        overlay = grid.copy()
        for cell in rng.sample(free, self.noise_cells):
            overlay.set(cell, NOISE_VALUE)
        logger.debug("scattered %d noise cells", self.noise_cells)
        return overlay, elements

    def score(self, grid: Grid, elements: tuple[Element, ...] = ()) -> int:
        if not elements:
            return self.aggregate(grid)
        return sum(self.local_complexity(grid, e.position) for e in elements)

    def step(self, state: SearchState) -> StepResult:
        elements = state.elements
        if not elements:
            return self._exhausted(state, 0)

        grid = state.grid
        size = grid.size
        rng = state.rng
        best = state.best_complexity
        for attempt in range(1, self.attempt_budget + 1):
            sampled: list[tuple[float, float]] = []
            moves = []
            for element in elements:
                sx = (element.target[0] + element.mean[0] + rng.gauss(0.0, element.stddev)) % size
                sy = (element.target[1] + element.mean[1] + rng.gauss(0.0, element.stddev)) % size
                sampled.append((sx, sy))
                moves.append((element.position, (_nearest(sx) % size, _nearest(sy) % size)))
            candidate, positions = apply_moves(grid, moves)
            moved = tuple(
                replace(element, position=position, target=target)
                for element, position, target in zip(elements, positions, sampled, strict=True)
            )
            fitness = self.score(candidate, moved)
            if fitness <= best:
                return StepResult(
                    outcome=StepOutcome.IMPROVED if fitness < best else StepOutcome.ACCEPTED,
                    attempts=attempt,
                    grid=candidate,
                    complexity=fitness,
                    elements=moved,
                )
        return self._exhausted(state, self.attempt_budget)

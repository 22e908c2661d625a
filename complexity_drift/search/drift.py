"""Directional drift: every active cell steps one cell in a random direction at once."""

from __future__ import annotations

from complexity_drift.config.constants import DRIFT_DIRECTIONS
from complexity_drift.config.types import StepOutcome
from complexity_drift.search.base import SearchPolicy, SearchState, StepResult, apply_moves


class DirectionalDriftPolicy(SearchPolicy):
    """Diffusion-like relaxation over all active cells.

    Each attempt draws one of the 8 king-move directions per active cell and
    applies all moves as swaps in row-major order. The attempt is kept only
    if the aggregate strictly decreases; otherwise every direction is redrawn.
    """

    name = "drift"

    def step(self, state: SearchState) -> StepResult:
        grid = state.grid
        active = grid.active_cells()
        if not active:
            return self._exhausted(state, 0)

        rng = state.rng
        before_total = state.complexity
        for attempt in range(1, self.attempt_budget + 1):
            moves = []
            for x, y in active:
                dx, dy = DRIFT_DIRECTIONS[rng.randrange(len(DRIFT_DIRECTIONS))]
                moves.append(((x, y), (x + dx, y + dy)))
            candidate, _ = apply_moves(grid, moves)
            after_total = self.score(candidate)
            if after_total < before_total:
                return StepResult(
                    outcome=StepOutcome.IMPROVED,
                    attempts=attempt,
                    grid=candidate,
                    complexity=after_total,
                    elements=state.elements,
                )
        return self._exhausted(state, self.attempt_budget)

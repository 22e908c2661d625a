"""Pairwise greedy swap: both swap participants must individually improve.

Termination contract: the retry loop is bounded by ``attempt_budget``. When no
improving pair is found within the budget the step is reported as
``StepOutcome.EXHAUSTED`` and the grid is left unchanged, so a configuration
with no improving pair can never livelock the run.
"""

from __future__ import annotations

from complexity_drift.config.types import StepOutcome
from complexity_drift.search.base import PairMeasurement, SearchPolicy, SearchState, StepResult


class PairwiseSwapPolicy(SearchPolicy):
    """Swap one active and one inactive cell when both local traces simplify."""

    name = "pairwise"

    def step(self, state: SearchState) -> StepResult:
        grid = state.grid
        active = grid.active_indices()
        inactive = grid.inactive_indices()
        if len(active) == 0 or len(inactive) == 0:
            return self._exhausted(state, 0)

        rng = state.rng
        for attempt in range(1, self.attempt_budget + 1):
            a = grid.coord_of(active[rng.randrange(len(active))])
            b = grid.coord_of(inactive[rng.randrange(len(inactive))])
            before_a = self.local_complexity(grid, a)
            before_b = self.local_complexity(grid, b)
            candidate = grid.swapped(a, b)
            after_a = self.local_complexity(candidate, a)
            after_b = self.local_complexity(candidate, b)
            if after_a < before_a and after_b < before_b:
                return StepResult(
                    outcome=StepOutcome.IMPROVED,
                    attempts=attempt,
                    grid=candidate,
                    complexity=self.score(candidate),
                    elements=state.elements,
                    measurement=PairMeasurement(
                        a=a,
                        b=b,
                        before_a=before_a,
                        before_b=before_b,
                        after_a=after_a,
                        after_b=after_b,
                    ),
                )
        return self._exhausted(state, self.attempt_budget)

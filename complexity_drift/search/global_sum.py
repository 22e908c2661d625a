"""Global-sum improvement: a swap is kept when the aggregate does not increase.

Individual cells may regress as long as the summed complexity over the
configured scope stays the same or drops.
"""

from __future__ import annotations

from complexity_drift.config.types import StepOutcome
from complexity_drift.search.base import SearchPolicy, SearchState, StepResult


class GlobalSumPolicy(SearchPolicy):
    name = "global_sum"

    def step(self, state: SearchState) -> StepResult:
        grid = state.grid
        active = grid.active_indices()
        inactive = grid.inactive_indices()
        if len(active) == 0 or len(inactive) == 0:
            return self._exhausted(state, 0)

        rng = state.rng
        before_total = self.score(grid)
        for attempt in range(1, self.attempt_budget + 1):
            a = grid.coord_of(active[rng.randrange(len(active))])
            b = grid.coord_of(inactive[rng.randrange(len(inactive))])
            candidate = grid.swapped(a, b)
            after_total = self.score(candidate)
            if after_total <= before_total:
                outcome = (
                    StepOutcome.IMPROVED if after_total < before_total else StepOutcome.ACCEPTED
                )
                return StepResult(
                    outcome=outcome,
                    attempts=attempt,
                    grid=candidate,
                    complexity=after_total,
                    elements=state.elements,
                )
        return self._exhausted(state, self.attempt_budget)

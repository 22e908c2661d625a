"""Tests for complexity_drift.search.base and the policy factory."""

from __future__ import annotations

from random import Random

import pytest

from complexity_drift.config.types import AggregateScope, PolicyKind, SearchConfig, StepOutcome
from complexity_drift.domain.complexity import RunLengthEstimator
from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import build_template
from complexity_drift.search import (
    DirectionalDriftPolicy,
    GaussianPerturbationPolicy,
    GlobalSumPolicy,
    PairwiseSwapPolicy,
    make_policy,
)
from complexity_drift.search.base import SearchPolicy, SearchState, StepResult, apply_moves


class TestApplyMoves:
    def test_displaced_mover_continues_from_new_cell(self) -> None:
        grid = Grid.empty(3)
        grid.set((0, 0), 255)
        grid.set((1, 0), 254)
        candidate, positions = apply_moves(grid, [((0, 0), (1, 0)), ((1, 0), (2, 0))])
        assert positions == [(1, 0), (2, 0)]
        assert candidate.get((0, 0)) == 0
        assert candidate.get((1, 0)) == 255
        assert candidate.get((2, 0)) == 254
        assert grid.get((0, 0)) == 255

    def test_destination_wraps(self) -> None:
        grid = Grid.empty(3)
        grid.set((2, 2), 255)
        candidate, positions = apply_moves(grid, [((2, 2), (3, 3))])
        assert positions == [(0, 0)]
        assert candidate.get((0, 0)) == 255

    def test_stay_in_place(self) -> None:
        grid = Grid.empty(3)
        grid.set((1, 1), 255)
        candidate, positions = apply_moves(grid, [((1, 1), (1, 1))])
        assert positions == [(1, 1)]
        assert candidate == grid


class TestSearchState:
    def test_best_defaults_to_initial_complexity(self) -> None:
        state = SearchState(grid=Grid.empty(2), complexity=12, rng=Random(0))
        assert state.best_complexity == 12

    def test_commit_tracks_best_so_far(self) -> None:
        grid = Grid.empty(2)
        state = SearchState(grid=grid, complexity=10, rng=Random(0))
        other = Grid.empty(2)
        other.set((0, 0), 1)
        state.commit(StepResult(StepOutcome.IMPROVED, 1, other, 6))
        state.commit(StepResult(StepOutcome.IMPROVED, 1, grid, 9))
        assert state.complexity == 9
        assert state.best_complexity == 6
        assert state.grid is grid
        assert state.step == 2

    def test_exhausted_commit_keeps_grid(self) -> None:
        grid = Grid.empty(2)
        state = SearchState(grid=grid, complexity=4, rng=Random(0))
        state.commit(StepResult(StepOutcome.EXHAUSTED, 8, Grid.empty(2), 1))
        assert state.grid is grid
        assert state.complexity == 4


class TestSearchPolicy:
    def test_rejects_zero_budget(self) -> None:
        with pytest.raises(ValueError, match="attempt_budget"):
            SearchPolicy(build_template(1), RunLengthEstimator(), attempt_budget=0)

    def test_aggregate_scopes(self) -> None:
        grid = Grid.empty(3)
        grid.set((1, 1), 255)
        template = build_template(1)
        active = SearchPolicy(template, RunLengthEstimator(), 1, AggregateScope.ACTIVE)
        every = SearchPolicy(template, RunLengthEstimator(), 1, AggregateScope.ALL)
        # center trace: [255, 0, 0, 0, 0] -> 2 runs -> 4
        assert active.aggregate(grid) == 4
        assert every.aggregate(grid) == sum(
            every.local_complexity(grid, cell) for cell in grid.all_cells()
        )


class TestMakePolicy:
    @pytest.mark.parametrize(
        ("kind", "cls", "budget"),
        [
            (PolicyKind.PAIRWISE, PairwiseSwapPolicy, 4096),
            (PolicyKind.GLOBAL_SUM, GlobalSumPolicy, 256),
            (PolicyKind.DRIFT, DirectionalDriftPolicy, 256),
            (PolicyKind.GAUSSIAN, GaussianPerturbationPolicy, 256),
        ],
    )
    def test_builds_selected_policy(self, kind: PolicyKind, cls: type, budget: int) -> None:
        policy = make_policy(SearchConfig(policy=kind), build_template(1), RunLengthEstimator())
        assert isinstance(policy, cls)
        assert policy.attempt_budget == budget

    def test_explicit_budget_wins(self) -> None:
        config = SearchConfig(policy=PolicyKind.PAIRWISE, attempt_budget=12)
        policy = make_policy(config, build_template(1), RunLengthEstimator())
        assert policy.attempt_budget == 12

"""Tests for complexity_drift.simulation.engine module."""

from __future__ import annotations

import itertools
import json
from pathlib import Path
from random import Random

import numpy as np
import pyarrow.parquet as pq
import pytest

from complexity_drift.config.types import (
    EstimatorKind,
    PolicyKind,
    SearchConfig,
    StepOutcome,
    UniverseConfig,
)
from complexity_drift.domain.complexity import RunLengthEstimator
from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import build_template
from complexity_drift.io.schemas import RUN_PAYLOAD_SCHEMA_VERSION, STEP_TRACE_SCHEMA
from complexity_drift.search import PairwiseSwapPolicy
from complexity_drift.simulation.engine import run_policy, run_simulation, run_universe


def _golden_final_grid() -> np.ndarray:
    """Final grid of seed 1, 9x9, 9 active cells after 50 default pairwise steps."""
    cells = np.zeros((9, 9), dtype=np.uint8)
    for x, y in [(0, 0), (2, 0), (0, 3), (0, 4), (7, 4), (0, 5), (5, 5), (5, 6), (6, 6)]:
        cells[y, x] = 255
    return cells


def _config(policy: PolicyKind = PolicyKind.PAIRWISE, **search_kwargs: object) -> UniverseConfig:
    search = SearchConfig(policy=policy, steps=50, attempt_budget=256, **search_kwargs)
    return UniverseConfig(size=9, n_active=9, seed=1, search=search)


class TestRunPolicy:
    def test_one_record_and_snapshot_per_step(self) -> None:
        rng = Random(0)
        grid = Grid.scatter(9, 9, rng)
        policy = PairwiseSwapPolicy(build_template(2), RunLengthEstimator(), attempt_budget=32)
        result = run_policy(grid, policy, 12, rng)
        assert [r.step for r in result.records] == list(range(12))
        assert len(result.snapshots) == 12
        assert (result.snapshots[-1] == result.final_grid.cells).all()

    def test_input_grid_is_not_mutated(self) -> None:
        rng = Random(0)
        grid = Grid.scatter(9, 9, rng)
        before = grid.snapshot()
        policy = PairwiseSwapPolicy(build_template(2), RunLengthEstimator(), attempt_budget=32)
        run_policy(grid, policy, 10, rng)
        assert (grid.cells == before).all()

    def test_snapshots_can_be_skipped(self) -> None:
        rng = Random(0)
        grid = Grid.scatter(9, 9, rng)
        policy = PairwiseSwapPolicy(build_template(2), RunLengthEstimator(), attempt_budget=8)
        result = run_policy(grid, policy, 5, rng, keep_snapshots=False)
        assert result.snapshots == []
        assert len(result.records) == 5

    def test_on_step_sees_every_record(self) -> None:
        rng = Random(0)
        grid = Grid.scatter(9, 9, rng)
        policy = PairwiseSwapPolicy(build_template(2), RunLengthEstimator(), attempt_budget=8)
        seen: list[int] = []
        run_policy(grid, policy, 4, rng, on_step=lambda record, _: seen.append(record.step))
        assert seen == [0, 1, 2, 3]

    def test_zero_steps_rejected(self) -> None:
        rng = Random(0)
        policy = PairwiseSwapPolicy(build_template(1), RunLengthEstimator(), attempt_budget=8)
        with pytest.raises(ValueError, match="steps"):
            run_policy(Grid.empty(3), policy, 0, rng)


class TestRunSimulation:
    def test_same_seed_is_deterministic(self) -> None:
        first = run_simulation(_config())
        second = run_simulation(_config())
        assert (first.initial_grid == second.initial_grid).all()
        assert first.final_grid == second.final_grid
        assert [r.complexity for r in first.records] == [r.complexity for r in second.records]

    def test_different_seed_differs(self) -> None:
        first = run_simulation(_config())
        other = UniverseConfig(size=9, n_active=9, seed=2, search=_config().search)
        second = run_simulation(other)
        assert not np.array_equal(first.initial_grid, second.initial_grid)

    def test_pairwise_best_trace_is_non_increasing(self) -> None:
        result = run_simulation(_config())
        trace = result.best_trace
        assert len(trace) == 50
        assert trace[0] <= result.initial_complexity
        assert all(b <= a for a, b in itertools.pairwise(trace))
        assert result.best_complexity == min(trace)

    def test_pairwise_reproduces_recorded_final_grid(self) -> None:
        config = UniverseConfig(size=9, n_active=9, seed=1, search=SearchConfig(steps=50))
        result = run_simulation(config)
        assert np.array_equal(result.final_grid.cells, _golden_final_grid())
        assert result.outcome_counts()["improved"] == 50

    def test_pairwise_best_is_running_minimum_of_aggregate(self) -> None:
        result = run_simulation(_config())
        complexities = [r.complexity for r in result.records]
        expected = list(
            itertools.accumulate(complexities, min, initial=result.initial_complexity)
        )[1:]
        assert result.best_trace == expected

    @pytest.mark.parametrize("policy", list(PolicyKind))
    def test_active_count_is_preserved(self, policy: PolicyKind) -> None:
        config = UniverseConfig(
            size=9,
            n_active=9,
            seed=3,
            search=SearchConfig(policy=policy, radius=2, steps=6, attempt_budget=8),
        )
        result = run_simulation(config, estimator=RunLengthEstimator())
        assert int(np.count_nonzero(result.initial_grid)) == 9
        assert all(record.active_cells == 9 for record in result.records)
        assert result.final_grid.count_active() == 9

    def test_outcome_counts_cover_every_step(self) -> None:
        result = run_simulation(_config(estimator=EstimatorKind.RUN_LENGTH))
        counts = result.outcome_counts()
        assert set(counts) == {outcome.value for outcome in StepOutcome}
        assert sum(counts.values()) == 50


class TestRunUniverse:
    def test_writes_trace_payload_and_animation(self, tmp_path: Path) -> None:
        config = UniverseConfig(
            size=9,
            n_active=9,
            seed=1,
            search=SearchConfig(estimator=EstimatorKind.RUN_LENGTH, steps=5, attempt_budget=16),
            scale=4,
        )
        summary = run_universe(config, tmp_path)
        assert summary.run_id == "pairwise_n9_s1"

        table = pq.read_table(tmp_path / "logs" / "pairwise_n9_s1_trace.parquet")
        assert table.schema.names == STEP_TRACE_SCHEMA.names
        assert table.num_rows == 5
        assert table.column("step").to_pylist() == [0, 1, 2, 3, 4]

        payload = json.loads((tmp_path / "runs" / "pairwise_n9_s1.json").read_text())
        assert payload["run_id"] == "pairwise_n9_s1"
        assert payload["metadata"]["schema_version"] == RUN_PAYLOAD_SCHEMA_VERSION
        assert payload["metadata"]["estimator"] == "run_length"
        assert payload["best_complexity"] == summary.best_complexity
        assert np.count_nonzero(np.array(payload["final_grid"])) == 9

        assert summary.animation == tmp_path / "pairwise_n9_s1.gif"
        assert summary.animation.read_bytes()[:6] in (b"GIF87a", b"GIF89a")

    def test_render_disabled_skips_animation(self, tmp_path: Path) -> None:
        config = UniverseConfig(
            size=5,
            n_active=4,
            seed=2,
            search=SearchConfig(
                policy=PolicyKind.DRIFT,
                estimator=EstimatorKind.RUN_LENGTH,
                radius=1,
                steps=3,
                attempt_budget=4,
            ),
        )
        summary = run_universe(config, tmp_path, render=False)
        assert summary.animation is None
        assert not list(tmp_path.glob("*.gif"))
        assert (tmp_path / "logs" / "drift_n5_s2_trace.parquet").exists()

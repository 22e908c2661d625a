"""Experiment driver: seeded policy runs and their exported artifacts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from random import Random

import numpy as np

from complexity_drift.config.types import StepOutcome, UniverseConfig
from complexity_drift.domain.complexity import ComplexityEstimator, make_estimator
from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import build_template
from complexity_drift.io.paths import animation_path, run_payload_path, step_trace_path
from complexity_drift.io.schemas import RUN_PAYLOAD_SCHEMA_VERSION
from complexity_drift.search import Element, SearchPolicy, SearchState, StepResult, make_policy
from complexity_drift.simulation.persistence import write_json, write_step_trace
from complexity_drift.viz.render import render_animation
from complexity_drift.viz.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepRecord:
    """Per-step bookkeeping row."""

    step: int
    outcome: StepOutcome
    attempts: int
    complexity: int
    best_complexity: int
    active_cells: int


@dataclass
class RunResult:
    """Everything a single run produces."""

    initial_grid: np.ndarray
    final_grid: Grid
    initial_complexity: int
    best_complexity: int
    records: list[StepRecord] = field(default_factory=list)
    snapshots: list[np.ndarray] = field(default_factory=list)
    elements: tuple[Element, ...] = ()

    @property
    def best_trace(self) -> list[int]:
        return [record.best_complexity for record in self.records]

    def outcome_counts(self) -> dict[str, int]:
        counts = {outcome.value: 0 for outcome in StepOutcome}
        for record in self.records:
            counts[record.outcome.value] += 1
        return counts


def run_policy(
    grid: Grid,
    policy: SearchPolicy,
    steps: int,
    rng: Random,
    elements: tuple[Element, ...] = (),
    on_step: Callable[[StepRecord, StepResult], None] | None = None,
    keep_snapshots: bool = True,
) -> RunResult:
    """Run *policy* for *steps* steps starting from *grid*.

    *grid* itself is never mutated. One snapshot is kept per step (after the
    step is committed) unless *keep_snapshots* is false.
    """
    if steps < 1:
        raise ValueError("steps must be >= 1")
    grid, elements = policy.prepare(grid.copy(), rng, elements)
    state = SearchState(
        grid=grid, complexity=policy.score(grid, elements), rng=rng, elements=elements
    )
    result = RunResult(
        initial_grid=grid.snapshot(),
        final_grid=grid,
        initial_complexity=state.complexity,
        best_complexity=state.best_complexity,
    )
    for _ in range(steps):
        step_result = policy.step(state)
        state.commit(step_result)
        record = StepRecord(
            step=state.step - 1,
            outcome=step_result.outcome,
            attempts=step_result.attempts,
            complexity=state.complexity,
            best_complexity=state.best_complexity,
            active_cells=state.grid.count_active(),
        )
        result.records.append(record)
        if keep_snapshots:
            result.snapshots.append(state.grid.snapshot())
        if on_step is not None:
            on_step(record, step_result)
        logger.debug(
            "%s step=%d outcome=%s attempts=%d complexity=%d best=%d",
            policy.name,
            record.step,
            record.outcome.value,
            record.attempts,
            record.complexity,
            record.best_complexity,
        )

    result.final_grid = state.grid
    result.best_complexity = state.best_complexity
    result.elements = state.elements
    return result


def run_simulation(
    config: UniverseConfig, estimator: ComplexityEstimator | None = None
) -> RunResult:
    """Seed, scatter and run the configured policy on a square torus."""
    rng = Random(config.seed)
    grid = Grid.scatter(config.size, config.n_active, rng)
    template = build_template(config.search.radius)
    oracle = estimator if estimator is not None else make_estimator(config.search.estimator)
    policy = make_policy(config.search, template, oracle)
    logger.info(
        "running %s on %dx%d (seed=%d, active=%d, steps=%d)",
        policy.name,
        config.size,
        config.size,
        config.seed,
        config.n_active,
        config.search.steps,
    )
    return run_policy(grid, policy, config.search.steps, rng)


@dataclass(frozen=True)
class UniverseSummary:
    run_id: str
    initial_complexity: int
    final_complexity: int
    best_complexity: int
    outcomes: dict[str, int]
    animation: Path | None


def run_universe(
    config: UniverseConfig,
    out_dir: Path,
    estimator: ComplexityEstimator | None = None,
    render: bool = True,
    theme: Theme = DEFAULT_THEME,
) -> UniverseSummary:
    """Run one universe and persist its trace, payload and (optionally) animation.

    Any write failure propagates; a run has no partial product.
    """
    out_dir = Path(out_dir)
    result = run_simulation(config, estimator=estimator)
    run_id = config.run_id

    write_step_trace(run_id, result.records, step_trace_path(out_dir, run_id))
    outcomes = result.outcome_counts()
    final_complexity = result.records[-1].complexity
    write_json(
        {
            "run_id": run_id,
            "initial_grid": result.initial_grid.tolist(),
            "final_grid": result.final_grid.cells.tolist(),
            "initial_complexity": result.initial_complexity,
            "final_complexity": final_complexity,
            "best_complexity": result.best_complexity,
            "outcomes": outcomes,
            "metadata": {
                "seed": config.seed,
                "size": config.size,
                "n_active": config.n_active,
                "steps": config.search.steps,
                "radius": config.search.radius,
                "policy": config.search.policy.value,
                "estimator": config.search.estimator.value,
                "attempt_budget": config.search.resolved_attempt_budget,
                "aggregate_scope": config.search.aggregate_scope.value,
                "schema_version": RUN_PAYLOAD_SCHEMA_VERSION,
            },
        },
        run_payload_path(out_dir, run_id),
    )

    gif_path: Path | None = None
    if render:
        gif_path = animation_path(out_dir, run_id)
        render_animation(
            result.snapshots,
            gif_path,
            delay_cs=config.frame_delay_cs,
            scale=config.scale,
            theme=theme,
        )
    logger.info(
        "%s finished: complexity %d -> %d (best %d)",
        run_id,
        result.initial_complexity,
        final_complexity,
        result.best_complexity,
    )
    return UniverseSummary(
        run_id=run_id,
        initial_complexity=result.initial_complexity,
        final_complexity=final_complexity,
        best_complexity=result.best_complexity,
        outcomes=outcomes,
        animation=gif_path,
    )

"""Configuration dataclasses and enums for rearrangement experiments.

All frozen dataclasses that parameterise universe and embedding runs live
here. Validation happens in ``__post_init__`` so an invalid config can never
reach a running experiment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from complexity_drift.config.constants import (
    ATTEMPT_BUDGET,
    EMBEDDING_GRID_SIZE,
    EMBEDDING_STEPS,
    EMBEDDING_TILES,
    FRAME_DELAY_CS,
    FRAME_SCALE,
    GAUSSIAN_STDDEV,
    GRID_SIZE,
    MAX_WORK_UNITS,
    NEIGHBORHOOD_RADIUS,
    NOISE_CELLS,
    NUM_ACTIVE,
    NUM_STEPS,
    PAIRWISE_ATTEMPT_BUDGET,
)

__all__ = [
    "AggregateScope",
    "EmbeddingConfig",
    "EstimatorKind",
    "PolicyKind",
    "SearchConfig",
    "StepOutcome",
    "UniverseConfig",
]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PolicyKind(Enum):
    """Mutation/acceptance strategy applied once per step."""

    PAIRWISE = "pairwise"
    GLOBAL_SUM = "global_sum"
    DRIFT = "drift"
    GAUSSIAN = "gaussian"


class EstimatorKind(Enum):
    """Compressor used as the complexity oracle."""

    ZLIB = "zlib"
    BZ2 = "bz2"
    RUN_LENGTH = "run_length"


class AggregateScope(Enum):
    """Which cells contribute to an aggregate complexity sum."""

    ACTIVE = "active"
    ALL = "all"


class StepOutcome(Enum):
    """Result of one policy step.

    ``IMPROVED`` is a strict decrease of the policy's acceptance measure: for
    pairwise swaps both participants improved locally, so the aggregate may
    still rise; for the other policies the aggregate or fitness dropped.
    ``ACCEPTED`` is a tie on that measure, and ``EXHAUSTED`` means the attempt
    budget ran out and the grid is unchanged.
    """

    IMPROVED = "improved"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


def _default_attempt_budget(policy: PolicyKind) -> int:
    return PAIRWISE_ATTEMPT_BUDGET if policy is PolicyKind.PAIRWISE else ATTEMPT_BUDGET


@dataclass(frozen=True)
class SearchConfig:
    """Policy knobs shared by universe and embedding runs.

    ``attempt_budget=None`` resolves to the per-policy default.
    """

    policy: PolicyKind = PolicyKind.PAIRWISE
    estimator: EstimatorKind = EstimatorKind.ZLIB
    radius: int = NEIGHBORHOOD_RADIUS
    steps: int = NUM_STEPS
    attempt_budget: int | None = None
    aggregate_scope: AggregateScope = AggregateScope.ACTIVE
    stddev: float = GAUSSIAN_STDDEV
    noise_cells: int = NOISE_CELLS

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError("radius must be >= 0")
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if self.attempt_budget is not None and self.attempt_budget < 1:
            raise ValueError("attempt_budget must be >= 1")
        if self.stddev < 0.0:
            raise ValueError("stddev must be >= 0.0")
        if self.noise_cells < 0:
            raise ValueError("noise_cells must be >= 0")

    @property
    def resolved_attempt_budget(self) -> int:
        """Attempt budget with the per-policy default applied."""
        if self.attempt_budget is not None:
            return self.attempt_budget
        return _default_attempt_budget(self.policy)


@dataclass(frozen=True)
class UniverseConfig:
    """A single seeded run on a small square torus."""

    size: int = GRID_SIZE
    n_active: int = NUM_ACTIVE
    seed: int = 1
    search: SearchConfig = SearchConfig()
    scale: int = FRAME_SCALE
    frame_delay_cs: int = FRAME_DELAY_CS

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("size must be >= 1")
        if not 0 <= self.n_active <= self.size * self.size:
            raise ValueError("n_active must be in [0, size * size]")
        if self.n_active + self.search.noise_cells > self.size * self.size:
            raise ValueError("n_active + noise_cells must fit in the grid")
        if self.scale < 1:
            raise ValueError("scale must be >= 1")
        if self.frame_delay_cs < 1:
            raise ValueError("frame_delay_cs must be >= 1")
        work = self.search.steps * self.search.resolved_attempt_budget
        if work > MAX_WORK_UNITS:
            raise ValueError("workload exceeds safety threshold; reduce steps/attempt_budget")

    @property
    def run_id(self) -> str:
        """Reproducible identifier stable across runs for identical settings."""
        return f"{self.search.policy.value}_n{self.size}_s{self.seed}"


@dataclass(frozen=True)
class EmbeddingConfig:
    """Random-projection experiment over a labeled dataset."""

    dataset_path: Path
    out_dir: Path = Path("data")
    grid_size: int = EMBEDDING_GRID_SIZE
    tiles: int = EMBEDDING_TILES
    columns: int = 2
    workers: int = 1
    seed: int = 1
    search: SearchConfig = SearchConfig(steps=EMBEDDING_STEPS)

    def __post_init__(self) -> None:
        if self.grid_size < 2:
            raise ValueError("grid_size must be >= 2")
        if self.tiles < 1:
            raise ValueError("tiles must be >= 1")
        if self.columns < 1:
            raise ValueError("columns must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        work = self.tiles * self.search.steps * self.search.resolved_attempt_budget
        if work > MAX_WORK_UNITS:
            raise ValueError("workload exceeds safety threshold; reduce tiles/steps/attempt_budget")

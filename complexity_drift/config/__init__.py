"""Configuration layer: constants and typed config dataclasses."""

from complexity_drift.config.constants import (
    ACTIVE_VALUE,
    ATTEMPT_BUDGET,
    FRAME_DELAY_CS,
    FRAME_SCALE,
    GRID_SIZE,
    NEIGHBORHOOD_RADIUS,
    NOISE_VALUE,
    NUM_ACTIVE,
    NUM_STEPS,
    PAIRWISE_ATTEMPT_BUDGET,
)
from complexity_drift.config.types import (
    AggregateScope,
    EmbeddingConfig,
    EstimatorKind,
    PolicyKind,
    SearchConfig,
    StepOutcome,
    UniverseConfig,
)

__all__ = [
    "ACTIVE_VALUE",
    "ATTEMPT_BUDGET",
    "AggregateScope",
    "EmbeddingConfig",
    "EstimatorKind",
    "FRAME_DELAY_CS",
    "FRAME_SCALE",
    "GRID_SIZE",
    "NEIGHBORHOOD_RADIUS",
    "NOISE_VALUE",
    "NUM_ACTIVE",
    "NUM_STEPS",
    "PAIRWISE_ATTEMPT_BUDGET",
    "PolicyKind",
    "SearchConfig",
    "StepOutcome",
    "UniverseConfig",
]

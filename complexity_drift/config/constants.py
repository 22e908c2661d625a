"""Centralized domain constants for rearrangement experiments.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

GRID_SIZE = 9
"""Default edge length of the toroidal universe in cells."""

NEIGHBORHOOD_RADIUS = 4
"""Default Euclidean radius of the sampled neighborhood trace."""

NUM_ACTIVE = 9
"""Default number of initially active cells."""

NUM_STEPS = 256
"""Default number of policy steps per run."""

ACTIVE_VALUE = 255
"""Cell byte written for an unlabeled active cell."""

NOISE_VALUE = 1
"""Cell byte written for noise-overlay cells (active but never scored)."""

PAIRWISE_ATTEMPT_BUDGET = 4_096
"""Swap attempts per pairwise step before the step is reported exhausted."""

ATTEMPT_BUDGET = 256
"""Candidate attempts per step for the global-sum, drift and gaussian policies."""

DRIFT_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)
"""The 8 king-move unit steps, in the fixed order the drift policy draws from."""

GAUSSIAN_STDDEV = 1.0
"""Default per-axis standard deviation of the gaussian perturbation."""

NOISE_CELLS = 0
"""Default number of noise-overlay cells scattered for the gaussian policy."""

FRAME_SCALE = 25
"""Pixels per cell edge in rendered frames."""

FRAME_DELAY_CS = 20
"""Per-frame display duration in hundredths of a second."""

PROGRESS_BAR_HEIGHT = 10
"""Height in pixels of the progress bar drawn along the bottom of a frame."""

EMBEDDING_GRID_SIZE = 256
"""Edge length of the grid that projected dataset points are placed on."""

EMBEDDING_STEPS = 1_024
"""Default number of policy steps per embedding tile."""

EMBEDDING_TILES = 4
"""Default number of independent random projections (rendered as a 2x2 sheet)."""

EMBEDDING_DIMENSIONS = 2
"""Output dimensionality of the random projection."""

SEED_MULTIPLIER = 10_000
"""Multiplier deriving per-tile seeds from the run seed to prevent collisions."""

MAX_WORK_UNITS = 50_000_000
"""Safety cap on steps * attempt_budget * tiles for a single invocation."""

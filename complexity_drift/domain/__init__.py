"""Domain layer: toroidal grid, neighborhood templates, and complexity oracles."""

from complexity_drift.domain.complexity import (
    Bz2Estimator,
    ComplexityEstimator,
    RunLengthEstimator,
    ZlibEstimator,
    make_estimator,
)
from complexity_drift.domain.grid import Coord, Grid, wrap
from complexity_drift.domain.neighborhood import NeighborhoodTemplate, Offset, build_template

__all__ = [
    "Bz2Estimator",
    "ComplexityEstimator",
    "Coord",
    "Grid",
    "NeighborhoodTemplate",
    "Offset",
    "RunLengthEstimator",
    "ZlibEstimator",
    "build_template",
    "make_estimator",
    "wrap",
]

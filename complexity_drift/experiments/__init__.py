"""Experiments layer: multi-tile embedding runs."""

from complexity_drift.experiments.embedding import (
    TileResult,
    TileTask,
    place_points,
    project_points,
    run_embedding,
    run_tile,
    tile_seed,
)

__all__ = [
    "TileResult",
    "TileTask",
    "place_points",
    "project_points",
    "run_embedding",
    "run_tile",
    "tile_seed",
]

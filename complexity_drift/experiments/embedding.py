"""Random-projection embedding experiment over a labeled dataset.

Each tile projects the dataset through its own random 2-D projection, places
the labeled points on a torus and rearranges them with the configured policy.
Tiles are fully independent (own seed, RNG, grid and template) and may run
in parallel worker processes; results are joined before export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from multiprocessing import Pool
from pathlib import Path
from random import Random

import numpy as np

from complexity_drift.config.constants import EMBEDDING_DIMENSIONS, SEED_MULTIPLIER
from complexity_drift.config.types import EmbeddingConfig, SearchConfig
from complexity_drift.domain.complexity import make_estimator
from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import NeighborhoodTemplate, build_template
from complexity_drift.io.dataset import LabeledPoint, label_values, load_labeled_points
from complexity_drift.io.paths import embedding_image_path, embedding_runs_path
from complexity_drift.io.schemas import EMBEDDING_RUNS_SCHEMA, EMBEDDING_SCHEMA_VERSION
from complexity_drift.search import Element, make_policy
from complexity_drift.simulation.engine import run_policy
from complexity_drift.simulation.persistence import write_rows
from complexity_drift.viz.render import render_tiles
from complexity_drift.viz.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileTask:
    """Picklable work unit for one projection."""

    tile: int
    seed: int
    measures: np.ndarray
    values: tuple[int, ...]
    grid_size: int
    search: SearchConfig


@dataclass(frozen=True)
class TileResult:
    tile: int
    seed: int
    n_points: int
    start: np.ndarray
    stop: np.ndarray
    initial_complexity: int
    final_complexity: int
    best_complexity: int
    outcomes: dict[str, int]


def tile_seed(seed: int, tile: int) -> int:
    """Derive a collision-free per-tile seed from the run seed."""
    return seed * SEED_MULTIPLIER + tile


def project_points(measures: np.ndarray, grid_size: int, rng: np.random.Generator) -> np.ndarray:
    """Project ``(n, d)`` measurements to continuous ``(n, 2)`` grid coordinates.

    Projection rows are drawn uniformly from ``[0, 1)`` and normalized to unit
    length; each output axis is then min-max scaled onto ``[0, grid_size - 1]``.
    """
    if measures.ndim != 2 or measures.shape[0] == 0:
        raise ValueError("measures must be a non-empty (n, d) array")
    projection = rng.random((EMBEDDING_DIMENSIONS, measures.shape[1]))
    projection /= np.linalg.norm(projection, axis=1, keepdims=True)
    projected = measures @ projection.T
    low = projected.min(axis=0)
    span = projected.max(axis=0) - low
    span[span == 0] = 1.0
    return (grid_size - 1) * (projected - low) / span


def place_points(
    coords: np.ndarray,
    values: tuple[int, ...],
    grid_size: int,
    template: NeighborhoodTemplate,
    stddev: float = 1.0,
) -> tuple[Grid, tuple[Element, ...]]:
    """Write each labeled point into its cell, moving collisions to the nearest free cell.

    Raises :exc:`ValueError` when no free cell exists within the template.
    """
    grid = Grid.empty(grid_size)
    elements: list[Element] = []
    for (fx, fy), value in zip(coords.tolist(), values, strict=True):
        cell = (int(fx) % grid_size, int(fy) % grid_size)
        if grid.get(cell) != 0:
            free = template.nearest_free(grid, cell)
            if free is None:
                raise ValueError(f"no free cell within radius {template.radius} of {cell}")
            cell = free
        grid.set(cell, value)
        elements.append(Element(position=cell, target=(float(fx), float(fy)), stddev=stddev))
    return grid, tuple(elements)


def run_tile(task: TileTask) -> TileResult:
    """Run one projection tile; top-level so worker processes can pickle it."""
    rng = Random(task.seed)
    coords = project_points(task.measures, task.grid_size, np.random.default_rng(task.seed))
    template = build_template(task.search.radius)
    grid, elements = place_points(
        coords, task.values, task.grid_size, template, stddev=task.search.stddev
    )
    policy = make_policy(task.search, template, make_estimator(task.search.estimator))
    result = run_policy(
        grid, policy, task.search.steps, rng, elements=elements, keep_snapshots=False
    )
    logger.info(
        "tile %d (seed=%d): complexity %d -> %d",
        task.tile,
        task.seed,
        result.initial_complexity,
        result.records[-1].complexity,
    )
    return TileResult(
        tile=task.tile,
        seed=task.seed,
        n_points=len(elements),
        start=result.initial_grid,
        stop=result.final_grid.snapshot(),
        initial_complexity=result.initial_complexity,
        final_complexity=result.records[-1].complexity,
        best_complexity=result.best_complexity,
        outcomes=result.outcome_counts(),
    )


def run_embedding(
    config: EmbeddingConfig,
    points: list[LabeledPoint] | None = None,
    theme: Theme = DEFAULT_THEME,
) -> list[TileResult]:
    """Run every tile, then write the per-tile summary and the start/stop sheets."""
    if points is None:
        points = load_labeled_points(config.dataset_path)
    values = label_values(points)
    measures = np.array([point.measures for point in points], dtype=float)
    point_values = tuple(values[point.label] for point in points)
    tasks = [
        TileTask(
            tile=tile,
            seed=tile_seed(config.seed, tile),
            measures=measures,
            values=point_values,
            grid_size=config.grid_size,
            search=config.search,
        )
        for tile in range(config.tiles)
    ]
    logger.info(
        "embedding %d points from %s into %d tiles (workers=%d)",
        len(points),
        config.dataset_path,
        config.tiles,
        config.workers,
    )

    if config.workers == 1:
        results = [run_tile(task) for task in tasks]
    else:
        with Pool(processes=min(config.workers, len(tasks))) as pool:
            results = pool.map(run_tile, tasks)

    out_dir = Path(config.out_dir)
    write_rows(
        [
            {
                "schema_version": EMBEDDING_SCHEMA_VERSION,
                "tile": r.tile,
                "seed": r.seed,
                "policy": config.search.policy.value,
                "n_points": r.n_points,
                "initial_complexity": r.initial_complexity,
                "final_complexity": r.final_complexity,
                "best_complexity": r.best_complexity,
                "improved_steps": r.outcomes["improved"],
                "exhausted_steps": r.outcomes["exhausted"],
            }
            for r in results
        ],
        EMBEDDING_RUNS_SCHEMA,
        embedding_runs_path(out_dir),
    )
    stem = Path(config.dataset_path).stem
    render_tiles(
        [r.start for r in results],
        embedding_image_path(out_dir, stem, "start"),
        columns=config.columns,
        theme=theme,
    )
    render_tiles(
        [r.stop for r in results],
        embedding_image_path(out_dir, stem, "stop"),
        columns=config.columns,
        theme=theme,
    )
    return results

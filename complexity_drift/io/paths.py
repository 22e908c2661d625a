"""Path construction helpers for run output directories.

Centralises the directory/file naming conventions used by the simulation
engine and the embedding experiment.
"""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def runs_dir(out_dir: Path) -> Path:
    """Return path to the run-payload subdirectory within an output directory."""
    return out_dir / "runs"


def step_trace_path(out_dir: Path, run_id: str) -> Path:
    """Return path to the per-step trace Parquet file of *run_id*."""
    return logs_dir(out_dir) / f"{run_id}_trace.parquet"


def run_payload_path(out_dir: Path, run_id: str) -> Path:
    """Return path to the JSON run payload of *run_id*."""
    return runs_dir(out_dir) / f"{run_id}.json"


def animation_path(out_dir: Path, run_id: str) -> Path:
    """Return path to the animated GIF of *run_id*."""
    return out_dir / f"{run_id}.gif"


def embedding_runs_path(out_dir: Path) -> Path:
    """Return path to the embedding per-tile summary Parquet file."""
    return logs_dir(out_dir) / "embedding_runs.parquet"


def embedding_image_path(out_dir: Path, stem: str, which: str) -> Path:
    """Return path to a stitched embedding sheet, e.g. ``iris_start.png``."""
    return out_dir / f"{stem}_{which}.png"

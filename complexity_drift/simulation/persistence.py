"""Parquet and JSON persistence helpers for run artifacts."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pyarrow as pa
import pyarrow.parquet as pq

from complexity_drift.io.schemas import STEP_TRACE_SCHEMA

if TYPE_CHECKING:
    from complexity_drift.simulation.engine import StepRecord


def write_step_trace(run_id: str, records: Sequence[StepRecord], path: Path) -> None:
    """Write one row per step to *path*; an empty run still yields a valid file."""
    columns: dict[str, list[int | str]] = {name: [] for name in STEP_TRACE_SCHEMA.names}
    for record in records:
        columns["run_id"].append(run_id)
        columns["step"].append(record.step)
        columns["outcome"].append(record.outcome.value)
        columns["attempts"].append(record.attempts)
        columns["complexity"].append(record.complexity)
        columns["best_complexity"].append(record.best_complexity)
        columns["active_cells"].append(record.active_cells)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.Table.from_pydict(columns, schema=STEP_TRACE_SCHEMA), path)


def write_rows(rows: list[dict[str, Any]], schema: pa.Schema, path: Path) -> None:
    """Write row dicts to *path* under *schema*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.Table.from_pylist(rows, schema=schema), path)


def write_json(payload: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))

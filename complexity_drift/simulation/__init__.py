"""Simulation engine: seeded policy runs and artifact persistence."""

from complexity_drift.simulation.engine import (
    RunResult,
    StepRecord,
    UniverseSummary,
    run_policy,
    run_simulation,
    run_universe,
)
from complexity_drift.simulation.persistence import write_json, write_rows, write_step_trace

__all__ = [
    "RunResult",
    "StepRecord",
    "UniverseSummary",
    "run_policy",
    "run_simulation",
    "run_universe",
    "write_json",
    "write_rows",
    "write_step_trace",
]

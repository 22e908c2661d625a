"""Parquet schema definitions for rearrangement artifacts.

All Arrow schemas used for persisting step traces and embedding summaries are
centralised here so that every module works against the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

RUN_PAYLOAD_SCHEMA_VERSION = 1
EMBEDDING_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Step trace
# ---------------------------------------------------------------------------

STEP_TRACE_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("step", pa.int64()),
        ("outcome", pa.string()),
        ("attempts", pa.int64()),
        ("complexity", pa.int64()),
        ("best_complexity", pa.int64()),
        ("active_cells", pa.int64()),
    ]
)

# ---------------------------------------------------------------------------
# Embedding experiment
# ---------------------------------------------------------------------------

EMBEDDING_RUNS_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("tile", pa.int64()),
        ("seed", pa.int64()),
        ("policy", pa.string()),
        ("n_points", pa.int64()),
        ("initial_complexity", pa.int64()),
        ("final_complexity", pa.int64()),
        ("best_complexity", pa.int64()),
        ("improved_steps", pa.int64()),
        ("exhausted_steps", pa.int64()),
    ]
)

"""Loader for labeled fixed-dimension measurement vectors.

The expected layout is the UCI iris file: one sample per CSV row, numeric
measurements first and the class label in the last column.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LabeledPoint:
    measures: tuple[float, ...]
    label: str


def load_labeled_points(path: Path) -> list[LabeledPoint]:
    """Parse *path* into labeled points, skipping blank lines.

    Raises :exc:`ValueError` on non-numeric measurements, missing labels, or
    rows whose dimensionality differs from the first row.
    """
    points: list[LabeledPoint] = []
    dimensions: int | None = None
    with Path(path).open(newline="") as handle:
        for line_number, row in enumerate(csv.reader(handle), start=1):
            fields = [field.strip() for field in row]
            if not any(fields):
                continue
            if len(fields) < 2 or not fields[-1]:
                raise ValueError(f"{path}:{line_number}: expected measurements and a label")
            try:
                measures = tuple(float(value) for value in fields[:-1])
            except ValueError as exc:
                raise ValueError(f"{path}:{line_number}: non-numeric measurement") from exc
            if dimensions is None:
                dimensions = len(measures)
            elif len(measures) != dimensions:
                raise ValueError(
                    f"{path}:{line_number}: expected {dimensions} measurements, "
                    f"got {len(measures)}"
                )
            points.append(LabeledPoint(measures=measures, label=fields[-1]))
    if not points:
        raise ValueError(f"{path}: no labeled points found")
    return points


def label_values(points: list[LabeledPoint]) -> dict[str, int]:
    """Map labels, in first-appearance order, to cell bytes ``255, 254, ...``."""
    values: dict[str, int] = {}
    for point in points:
        if point.label not in values:
            values[point.label] = 255 - len(values)
    if len(values) > 254:
        raise ValueError("at most 254 distinct labels fit in a byte grid")
    return values

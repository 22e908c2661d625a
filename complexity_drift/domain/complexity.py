"""Compression-length proxies for the Kolmogorov complexity of a byte trace.

Every estimator is pure and deterministic: identical input always yields the
identical integer. The estimate is order-sensitive and is not a metric, which
is why trace templates must keep a fixed ordering across comparisons.
Compressor errors are never caught here; they abort the run.
"""

from __future__ import annotations

import bz2
import zlib
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from complexity_drift.config.types import EstimatorKind


@runtime_checkable
class ComplexityEstimator(Protocol):
    """Single-method oracle mapping an ordered byte sequence to a length."""

    def estimate(self, sequence: bytes) -> int: ...


@dataclass(frozen=True)
class ZlibEstimator:
    """Deflate-compressed length, the default oracle."""

    level: int = 9

    def estimate(self, sequence: bytes) -> int:
        return len(zlib.compress(sequence, self.level))


@dataclass(frozen=True)
class Bz2Estimator:
    """Burrows-Wheeler + move-to-front compressed length."""

    level: int = 9

    def estimate(self, sequence: bytes) -> int:
        return len(bz2.compress(sequence, self.level))


@dataclass(frozen=True)
class RunLengthEstimator:
    """Length of a ``(value, count)`` run-length encoding with runs capped at 255.

    Cheap and fully predictable; intended for tests that need known outputs.
    """

    def estimate(self, sequence: bytes) -> int:
        if not sequence:
            return 0
        runs = 1
        run_length = 1
        previous = sequence[0]
        for byte in sequence[1:]:
            if byte == previous and run_length < 255:
                run_length += 1
            else:
                runs += 1
                run_length = 1
                previous = byte
        return 2 * runs


def make_estimator(kind: EstimatorKind) -> ComplexityEstimator:
    """Build the estimator selected by *kind*."""
    if kind is EstimatorKind.ZLIB:
        return ZlibEstimator()
    if kind is EstimatorKind.BZ2:
        return Bz2Estimator()
    if kind is EstimatorKind.RUN_LENGTH:
        return RunLengthEstimator()
    raise ValueError(f"unknown estimator kind: {kind!r}")

"""Search layer: complexity-guided mutation and acceptance policies."""

from __future__ import annotations

from complexity_drift.config.types import PolicyKind, SearchConfig
from complexity_drift.domain.complexity import ComplexityEstimator
from complexity_drift.domain.neighborhood import NeighborhoodTemplate
from complexity_drift.search.base import (
    Element,
    PairMeasurement,
    SearchPolicy,
    SearchState,
    StepResult,
    apply_moves,
)
from complexity_drift.search.drift import DirectionalDriftPolicy
from complexity_drift.search.gaussian import GaussianPerturbationPolicy
from complexity_drift.search.global_sum import GlobalSumPolicy
from complexity_drift.search.pairwise import PairwiseSwapPolicy

__all__ = [
    "DirectionalDriftPolicy",
    "Element",
    "GaussianPerturbationPolicy",
    "GlobalSumPolicy",
    "PairMeasurement",
    "PairwiseSwapPolicy",
    "SearchPolicy",
    "SearchState",
    "StepResult",
    "apply_moves",
    "make_policy",
]


def make_policy(
    config: SearchConfig,
    template: NeighborhoodTemplate,
    estimator: ComplexityEstimator,
) -> SearchPolicy:
    """Build the policy selected by ``config.policy``."""
    budget = config.resolved_attempt_budget
    scope = config.aggregate_scope
    if config.policy is PolicyKind.PAIRWISE:
        return PairwiseSwapPolicy(template, estimator, budget, scope)
    if config.policy is PolicyKind.GLOBAL_SUM:
        return GlobalSumPolicy(template, estimator, budget, scope)
    if config.policy is PolicyKind.DRIFT:
        return DirectionalDriftPolicy(template, estimator, budget, scope)
    if config.policy is PolicyKind.GAUSSIAN:
        return GaussianPerturbationPolicy(
            template,
            estimator,
            budget,
            scope,
            stddev=config.stddev,
            noise_cells=config.noise_cells,
        )
    raise ValueError(f"unknown policy: {config.policy!r}")

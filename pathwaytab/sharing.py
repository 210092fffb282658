"""
Parameter-sharing groups for the EM maximization step.

An EM step is a list of sharing keys. A key ``(species, edges)`` collects
every factor whose child has that species and whose incoming edge labels,
taken as a set, are exactly ``edges``. Factors with a repeated edge label are
never shared: the per-label variable reordering would be ambiguous.

For each match the grouper stores a variable orientation: the child first,
then one parent per label in sorted label order. All members of a group
therefore line up parameter-for-parameter.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .factors import Factor, Variable

logger = logging.getLogger(__name__)


class SharingKey(NamedTuple):
    species: str
    edges: frozenset[str]


EMStepSpec = tuple[SharingKey, ...]


@dataclass(frozen=True)
class EstimatorSpec:
    """Conditional probability estimator configuration for one shared group."""

    total_dim: int
    target_dim: int
    name: str = "ConditionalProbEstimation"

    def properties(self) -> dict[str, int]:
        return {"total_dim": self.total_dim, "target_dim": self.target_dim}


@dataclass
class SharedParameters:
    """Factors tied to one parameter set, keyed by factor index."""

    key: SharingKey
    orientations: dict[int, tuple[Variable, ...]]
    estimator: EstimatorSpec
    share: bool = True


@dataclass
class MaximizationStep:
    shared: list[SharedParameters] = field(default_factory=list)


def orient(factor: Factor, key: SharingKey) -> tuple[Variable, ...] | None:
    """Variable orientation of ``factor`` under ``key``, or None if it does not match."""
    labels = factor.edge_labels
    if len(set(labels)) != len(labels) or frozenset(labels) != key.edges:
        return None
    by_label = dict(zip(labels, factor.parents))
    return (factor.child,) + tuple(by_label[lbl] for lbl in sorted(key.edges))


class SharedParameterGrouper:
    """Accumulates matching factors for every key of every EM step."""

    def __init__(self, em_steps: Sequence[EMStepSpec], target_dim: int) -> None:
        self.em_steps = [tuple(step) for step in em_steps]
        self.target_dim = target_dim
        self._orientations: list[list[dict[int, tuple[Variable, ...]]]] = [
            [{} for _ in step] for step in self.em_steps
        ]
        self._total_dim: list[list[int]] = [[0 for _ in step] for step in self.em_steps]

    def offer(self, factor_index: int, factor: Factor, species: str) -> None:
        """Test ``factor`` (whose child has ``species``) against every key."""
        for i, step in enumerate(self.em_steps):
            for j, key in enumerate(step):
                if key.species != species:
                    continue
                order = orient(factor, key)
                if order is None:
                    continue
                self._orientations[i][j][factor_index] = order
                self._total_dim[i][j] = factor.total_dimension

    def group_sizes(self) -> list[list[int]]:
        """Number of matched factors per key, per step."""
        return [[len(g) for g in groups] for groups in self._orientations]

    def build_steps(self) -> list[MaximizationStep]:
        """Package populated groups; empty keys and empty steps are dropped."""
        steps: list[MaximizationStep] = []
        for i, step in enumerate(self.em_steps):
            shared: list[SharedParameters] = []
            for j, key in enumerate(step):
                orientations = self._orientations[i][j]
                if not orientations:
                    logger.warning(
                        "No variables of sub-type '%s' with incoming edges matching: %s",
                        key.species, ", ".join(sorted(key.edges)),
                    )
                    continue
                estimator = EstimatorSpec(
                    total_dim=self._total_dim[i][j], target_dim=self.target_dim,
                )
                shared.append(SharedParameters(key, orientations, estimator))
            if shared:
                steps.append(MaximizationStep(shared))
            else:
                logger.warning("em_step number %d had no matching nodes in the pathway", i)
        return steps

"""
PathwaySummary — what a construction pass produced.

Not a separate analysis step. It just collects counts the graph and the
factor emission already know about, for logging and the CLI ``--summary``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .factors import Factor
from .sharing import MaximizationStep

if TYPE_CHECKING:
    from .graph import PathwayGraph


@dataclass
class SharedGroupSummary:
    """One parameter-sharing group of one EM step."""

    step: int
    species: str
    edges: list[str]
    num_factors: int
    total_dim: int


@dataclass
class PathwaySummary:
    """Counts describing one built pathway.

    Fields
    ------
    entities_by_type : dict[str, int]
        Registered entities per entity type.
    nodes_by_species : dict[str, int]
        Nodes per species label.
    edges_by_label : dict[str, int]
        Edges per label (polarity or observation symbol).
    num_factors : int
        Factors emitted (nodes with at least one parent).
    max_parents : int
        Largest parent count over all factors.
    shared_groups : list[SharedGroupSummary]
        Populated sharing groups across all maximization steps.
    """

    entities_by_type: dict[str, int] = field(default_factory=dict)
    nodes_by_species: dict[str, int] = field(default_factory=dict)
    edges_by_label: dict[str, int] = field(default_factory=dict)
    num_factors: int = 0
    max_parents: int = 0
    num_maximization_steps: int = 0
    shared_groups: list[SharedGroupSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable summary."""
        return {
            "entities_by_type": dict(self.entities_by_type),
            "nodes_by_species": dict(self.nodes_by_species),
            "edges_by_label": dict(self.edges_by_label),
            "num_factors": self.num_factors,
            "max_parents": self.max_parents,
            "num_maximization_steps": self.num_maximization_steps,
            "shared_groups": [
                {
                    "step": g.step,
                    "species": g.species,
                    "edges": g.edges,
                    "num_factors": g.num_factors,
                    "total_dim": g.total_dim,
                }
                for g in self.shared_groups
            ],
        }


def build_summary(
    graph: PathwayGraph,
    factors: Sequence[Factor] = (),
    steps: Sequence[MaximizationStep] = (),
) -> PathwaySummary:
    summary = PathwaySummary(
        entities_by_type=dict(sorted(Counter(graph.entities.values()).items())),
        nodes_by_species=dict(sorted(Counter(n.species for n in graph.nodes).items())),
        edges_by_label=dict(sorted(Counter(lbl for _, _, lbl in graph.edges()).items())),
        num_factors=len(factors),
        max_parents=max((len(f.parents) for f in factors), default=0),
        num_maximization_steps=len(steps),
    )
    for i, step in enumerate(steps):
        for shared in step.shared:
            summary.shared_groups.append(SharedGroupSummary(
                step=i,
                species=shared.key.species,
                edges=sorted(shared.key.edges),
                num_factors=len(shared.orientations),
                total_dim=shared.estimator.total_dim,
            ))
    return summary

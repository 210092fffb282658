"""
Factor tables — conditional probability tables for pathway nodes.

# Table Layout

A factor over a child with N parents holds ``3 * 3**N`` values. Entry
``child_state + 3 * a`` is P(child = child_state | parents = assignment a),
where the assignment index decomposes in radix 3 with the first parent's
digit varying fastest::

    a = d_0 + 3 * d_1 + 9 * d_2 + ...

# Vote Rule

Each parent casts one vote for a child state: its own state for a positive
edge, the mirrored state (``2 - d``) for a negative edge. With ``down`` and
``up`` the vote counts for the low and high state:

| Condition                 | Expected child state |
|---------------------------|----------------------|
| up > 0 and up > down      | 2 (high)             |
| down > 0 and down >= up   | 0 (low)              |
| otherwise                 | 1 (mid)              |

The last row covers both the no-parent case and ``down == up == 0``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import torch

from .config import NEGATIVE, VARIABLE_DIMENSION


@dataclass(frozen=True)
class Variable:
    """A discrete random variable identified by its node id."""

    label: int
    states: int = VARIABLE_DIMENSION


@dataclass(eq=False)
class Factor:
    """Child variable, ordered parent variables and a flat probability table."""

    variables: tuple[Variable, ...]
    table: torch.Tensor
    # Incoming edge label per parent, aligned with variables[1:]
    edge_labels: tuple[str, ...] = field(default_factory=tuple)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Factor):
            return NotImplemented
        return (
            self.variables == other.variables
            and self.edge_labels == other.edge_labels
            and torch.equal(self.table, other.table)
        )

    @property
    def child(self) -> Variable:
        return self.variables[0]

    @property
    def parents(self) -> tuple[Variable, ...]:
        return self.variables[1:]

    @property
    def cardinalities(self) -> tuple[int, ...]:
        return tuple(v.states for v in self.variables)

    @property
    def total_dimension(self) -> int:
        total = 1
        for v in self.variables:
            total *= v.states
        return total


class FactorGenerator(Protocol):
    """Produces a flat conditional probability table from edge labels."""

    def generate(self, edge_labels: Sequence[str]) -> torch.Tensor: ...


def _parent_assignments(num_parents: int, dim: int = VARIABLE_DIMENSION) -> torch.Tensor:
    """All joint parent states, shape ``(dim**num_parents, num_parents)``."""
    index = torch.arange(dim ** num_parents, dtype=torch.long)
    radix = dim ** torch.arange(num_parents, dtype=torch.long)
    return (index.unsqueeze(1) // radix) % dim


class VoteFactorGenerator:
    """Default generator: majority vote over parent states, ties to low.

    The expected child state gets ``1 - epsilon``; the other two states get
    ``epsilon / 2`` each.
    """

    def __init__(self, epsilon: float = 0.1) -> None:
        self.epsilon = epsilon

    def expected_states(self, edge_labels: Sequence[str]) -> torch.Tensor:
        """Expected child state for every parent assignment, in table order."""
        dim = VARIABLE_DIMENSION
        digits = _parent_assignments(len(edge_labels), dim)
        negative = torch.tensor([lbl == NEGATIVE for lbl in edge_labels], dtype=torch.bool)
        votes = torch.where(negative, dim - 1 - digits, digits)

        # tally[a, s] = number of parents voting for state s under assignment a
        tally = (votes.unsqueeze(-1) == torch.arange(dim)).sum(dim=1)
        down = tally[:, 0]
        up = tally[:, dim - 1]

        expected = torch.ones(digits.shape[0], dtype=torch.long)
        expected[(down > 0) & (down >= up)] = 0
        expected[(up > 0) & (up > down)] = dim - 1
        return expected

    def generate(self, edge_labels: Sequence[str]) -> torch.Tensor:
        expected = self.expected_states(edge_labels)
        major = 1.0 - self.epsilon
        minor = self.epsilon / 2

        table = torch.full(
            (expected.shape[0], VARIABLE_DIMENSION), minor, dtype=torch.float64
        )
        table.scatter_(1, expected.unsqueeze(1), major)
        return table.reshape(-1)

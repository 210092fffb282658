"""
Configuration dataclasses and built-in tables for pathway factor generation.

All fixed constants live here. Nothing is hard-coded in graph or factor code.

# Overview

A pathway is expanded into a factor graph in three layers:
- **Interaction map**: symbol → (source species, target species, polarity)
- **Central dogma**: genome → mRNA → protein → active cascade, instantiated
  once for every protein-type entity
- **Factors**: one conditional-probability table per node with parents,
  generated from the polarities of its incoming edges

## Constants

| Name                    | Value      | Role                                      |
|-------------------------|------------|-------------------------------------------|
| VARIABLE_DIMENSION      | 3          | States per variable (down, neutral, up)   |
| ACTIVE_SPECIES          | "active"   | Only node of a non-protein entity         |
| PROTEIN_TYPE            | "protein"  | Entity type expanded through the dogma    |
| OBSERVATION_INTERACTION | "-obs>"    | Edge label for hidden → observed links    |

## Factor Parameters

| Parameter | Default | Role                                           |
|-----------|---------|------------------------------------------------|
| epsilon   | 0.1     | Mass spread over the two unexpected states     |
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .sharing import EMStepSpec, SharingKey


# ═══════════════════════════════════════════════════════════════════════════
# Fixed Model Constants
# ═══════════════════════════════════════════════════════════════════════════
#
# Every variable has exactly three states. For expression-like variables these
# read as {down, neutral, up}; for activity they read as {low, normal, active}.
# Other cardinalities are not supported.

VARIABLE_DIMENSION = 3

ACTIVE_SPECIES = "active"
PROTEIN_TYPE = "protein"

POSITIVE = "positive"
NEGATIVE = "negative"

OBSERVATION_INTERACTION = "-obs>"


# ═══════════════════════════════════════════════════════════════════════════
# Built-in Tables
# ═══════════════════════════════════════════════════════════════════════════
#
# Used whenever no interaction map or central dogma file is supplied.
#
# Interaction map columns: symbol, from-species, to-species, polarity
#   - Cascade steps (-dt>, -dr>, -dp>) wire the dogma of a single gene
#   - Transcriptional regulation (-t>, -t|) targets the mRNA of the target
#   - Everything else acts active → active
#
# Central dogma columns: from-species, to-species, symbol

DEFAULT_INTERACTION_MAP = (
    "-dt>\tgenome\tmRNA\tpositive\n"
    "-dr>\tmRNA\tprotein\tpositive\n"
    "-dp>\tprotein\tactive\tpositive\n"
    "-t>\tactive\tmRNA\tpositive\n"
    "-t|\tactive\tmRNA\tnegative\n"
    "-a>\tactive\tactive\tpositive\n"
    "-a|\tactive\tactive\tnegative\n"
    "-ap>\tactive\tactive\tpositive\n"
    "-ap|\tactive\tactive\tnegative\n"
    "->\tactive\tactive\tpositive\n"
    "-|\tactive\tactive\tnegative\n"
    "<->\tactive\tactive\tpositive\n"
    "component>\tactive\tactive\tpositive\n"
    "-obs>\tactive\tactive\tpositive\n"
)

CENTRAL_DOGMA = (
    "genome\tmRNA\t-dt>\n"
    "mRNA\tprotein\t-dr>\n"
    "protein\tactive\t-dp>\n"
)


# ═══════════════════════════════════════════════════════════════════════════
# Factor Configuration
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FactorConfig:
    """Parameters for default factor generation.

    # Smoothing

    The vote generator never emits a hard 0/1 table. The expected child
    state receives ``1 - epsilon`` and each of the other two states receives
    ``epsilon / 2``, so every entry stays strictly positive and parameter
    estimation downstream never sees a zero likelihood.

    # Undeclared Entities

    Interactions may name entities that were never declared with a type
    line. Such entities are registered with ``default_entity_type``.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # epsilon must lie strictly inside (0, 1): 0 gives a deterministic table,
    # 1 leaves no mass on the expected state.
    # ─────────────────────────────────────────────────────────────────────────
    epsilon: float = 0.1

    default_entity_type: str = PROTEIN_TYPE

    def __post_init__(self) -> None:
        if not 0.0 < self.epsilon < 1.0:
            raise ValueError(f"epsilon must be in (0, 1), got {self.epsilon}")


# ═══════════════════════════════════════════════════════════════════════════
# Input Configuration
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DataConfig:
    """Paths to the text inputs.

    ``None`` for the interaction map or the central dogma selects the
    built-in table. ``None`` for the EM steps means no parameter sharing.
    """

    pathway_path: Path
    interaction_map_path: Path | None = None
    dogma_path: Path | None = None
    em_steps_path: Path | None = None


def parse_em_steps(raw: list[list[dict[str, Any]]]) -> list[EMStepSpec]:
    """Convert a JSON-like EM step description into ``EMStepSpec`` tuples.

    Expected shape::

        [
            [{"species": "mRNA", "edges": ["positive"]},
             {"species": "active", "edges": ["positive", "negative"]}],
            ...
        ]
    """
    steps: list[EMStepSpec] = []
    for step_no, step in enumerate(raw):
        keys = []
        for entry in step:
            try:
                species = entry["species"]
                edges = entry["edges"]
            except (KeyError, TypeError) as exc:
                raise ValueError(
                    f"em step {step_no}: entries need 'species' and 'edges'"
                ) from exc
            keys.append(SharingKey(species, frozenset(edges)))
        steps.append(tuple(keys))
    return steps


def load_em_steps(path: Path) -> list[EMStepSpec]:
    """Read EM step specifications from a JSON file."""
    with open(path) as f:
        return parse_em_steps(json.load(f))

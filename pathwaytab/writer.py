"""
Text output for the inference engine.

# Node Map

One line per node in id order::

    <prefix><id>\\t<entity>\\t<species>

# Factor Section

::

    <number of factors>
    <blank line>
    <number of variables>
    <child id> <parent id> ...
    3 3 ...
    <table length>
    <i>\\t<value with 6 decimals>
    ...

The block from the blank line onward repeats once per factor.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from typing import TYPE_CHECKING, TextIO

from .factors import Factor
from .tables import InteractionMap

if TYPE_CHECKING:
    from .graph import PathwayGraph


def write_node_map(graph: PathwayGraph, stream: TextIO, prefix: str = "") -> None:
    for i, node in enumerate(graph.nodes):
        stream.write(f"{prefix}{i}\t{node.entity}\t{node.species}\n")


def write_factor_section(factors: Sequence[Factor], stream: TextIO) -> None:
    stream.write(f"{len(factors)}\n")
    for factor in factors:
        stream.write("\n")
        stream.write(f"{len(factor.variables)}\n")
        stream.write(" ".join(str(v.label) for v in factor.variables) + "\n")
        stream.write(" ".join(str(c) for c in factor.cardinalities) + "\n")
        values = factor.table.tolist()
        stream.write(f"{len(values)}\n")
        for i, value in enumerate(values):
            stream.write(f"{i}\t{value:.6f}\n")


def render_factor_graph(factors: Sequence[Factor]) -> str:
    buf = io.StringIO()
    write_factor_section(factors, buf)
    return buf.getvalue()


def write_interaction_map(imap: InteractionMap, stream: TextIO) -> None:
    """Dump ``imap`` in its own input format, sorted by symbol."""
    for symbol, entry in imap.entries():
        stream.write(f"{symbol}\t{entry.from_species}\t{entry.to_species}\t{entry.polarity}\n")

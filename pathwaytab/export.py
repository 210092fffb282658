"""
DGL export — the pathway as a homogeneous DGL graph.

Node ids are preserved, so node ``i`` of the DGL graph is node ``i`` of the
pathway and of the node map.

| Field              | Shape     | Meaning                                   |
|--------------------|-----------|-------------------------------------------|
| ndata["species"]   | (N,)      | index into the returned species vocabulary |
| edata["sign"]      | (E,)      | +1 positive, -1 negative, 0 anything else |
"""

from __future__ import annotations

import logging

import dgl
import torch

from .config import NEGATIVE, POSITIVE
from .graph import PathwayGraph

logger = logging.getLogger(__name__)

_SIGN = {POSITIVE: 1, NEGATIVE: -1}


def to_dgl(graph: PathwayGraph) -> tuple[dgl.DGLGraph, list[str]]:
    """Build a DGL graph with parent → child edges.

    Returns
    -------
    tuple[dgl.DGLGraph, list[str]]
        The graph and the sorted species vocabulary used by ``ndata["species"]``.
    """
    vocab = sorted({n.species for n in graph.nodes})
    species_idx = {s: i for i, s in enumerate(vocab)}

    srcs, dsts, signs = [], [], []
    for parent, child, label in graph.edges():
        srcs.append(graph.node_id(parent))
        dsts.append(graph.node_id(child))
        signs.append(_SIGN.get(label, 0))

    g = dgl.graph(
        (torch.tensor(srcs, dtype=torch.int64), torch.tensor(dsts, dtype=torch.int64)),
        num_nodes=len(graph),
    )
    g.ndata["species"] = torch.tensor(
        [species_idx[n.species] for n in graph.nodes], dtype=torch.int64
    )
    g.edata["sign"] = torch.tensor(signs, dtype=torch.int64)

    logger.info("DGL graph: %d nodes, %d edges", g.num_nodes(), g.num_edges())
    return g, vocab

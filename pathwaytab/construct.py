"""
construct — dict in → dict out entry point for pathway factor generation.

This is the single public API surface for callers that do not want to deal
with graph objects. Text inputs in; node map, factor section and EM sharing
groups out.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .audit import build_summary
from .config import DataConfig, FactorConfig, load_em_steps, parse_em_steps
from .graph import PathwayGraph
from .tables import CentralDogmaTemplate, InteractionMap
from .writer import render_factor_graph

logger = logging.getLogger(__name__)


def build_pathway(cfg: DataConfig, factor_cfg: FactorConfig | None = None) -> PathwayGraph:
    """Load a pathway graph from the files named in ``cfg``."""
    logger.info("Building pathway from %s", cfg.pathway_path)
    return PathwayGraph.from_paths(cfg, config=factor_cfg)


def construct(request: dict[str, Any]) -> dict[str, Any]:
    """Build the pathway factor graph for one request.

    Parameters
    ----------
    request : dict
        Expected keys:
            pathway          : str   — pathway text (or pathway_path)
            pathway_path     : str   — path to a pathway file
            interaction_map  : str   — interaction map text (optional)
            central_dogma    : str   — central dogma text (optional)
            epsilon          : float — vote smoothing (optional, default 0.1)
            em_steps         : list  — EM step spec, see config.parse_em_steps
                                       (optional)
            em_steps_path    : str   — JSON file with the same (optional)

    Returns
    -------
    dict with keys:
        nodes              : list[dict] — {id, entity, species} in id order
        output_nodes       : dict       — id → entity for active nodes
        factor_graph       : str        — factor section text
        maximization_steps : list[list[dict]] — per step, per shared group:
            {species, edges, factors, total_dim, target_dim}
        summary            : dict       — PathwaySummary.to_dict()
    """
    factor_cfg = FactorConfig(epsilon=request.get("epsilon", FactorConfig.epsilon))
    imap = (
        InteractionMap.parse(request["interaction_map"])
        if "interaction_map" in request else None
    )
    dogma = (
        CentralDogmaTemplate.parse(request["central_dogma"])
        if "central_dogma" in request else None
    )

    if "pathway" in request:
        graph = PathwayGraph.from_text(request["pathway"], imap=imap, dogma=dogma, config=factor_cfg)
    elif "pathway_path" in request:
        with open(Path(request["pathway_path"])) as f:
            graph = PathwayGraph.from_lines(
                f, imap=imap, dogma=dogma, config=factor_cfg,
                source=str(request["pathway_path"]),
            )
    else:
        raise ValueError("request needs 'pathway' or 'pathway_path'")

    if "em_steps" in request:
        em_steps = parse_em_steps(request["em_steps"])
    elif "em_steps_path" in request:
        em_steps = load_em_steps(Path(request["em_steps_path"]))
    else:
        em_steps = []

    factors, steps = graph.emit_factors(em_steps)

    return {
        "nodes": [
            {"id": i, "entity": n.entity, "species": n.species}
            for i, n in enumerate(graph.nodes)
        ],
        "output_nodes": graph.output_node_map(),
        "factor_graph": render_factor_graph(factors),
        "maximization_steps": [
            [
                {
                    "species": sp.key.species,
                    "edges": sorted(sp.key.edges),
                    "factors": {
                        idx: [v.label for v in order]
                        for idx, order in sorted(sp.orientations.items())
                    },
                    "total_dim": sp.estimator.total_dim,
                    "target_dim": sp.estimator.target_dim,
                }
                for sp in step.shared
            ]
            for step in steps
        ],
        "summary": build_summary(graph, factors, steps).to_dict(),
    }

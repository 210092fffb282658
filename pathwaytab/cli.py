"""Command line entry point: pathway files in, factor graph and node map out."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .audit import build_summary
from .config import DataConfig, FactorConfig, load_em_steps
from .construct import build_pathway
from .errors import FactorTableError, PathwayError
from .writer import write_factor_section, write_node_map

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pathwaytab",
        description="Expand a pathway description into a factor graph.",
    )
    parser.add_argument("pathway", type=Path, help="Pathway file (entity and interaction lines)")
    parser.add_argument("-i", "--interaction-map", type=Path, default=None,
                        help="Interaction map file (default: built-in table)")
    parser.add_argument("-d", "--dogma", type=Path, default=None,
                        help="Central dogma file (default: built-in cascade)")
    parser.add_argument("-e", "--epsilon", type=float, default=FactorConfig.epsilon,
                        help="Probability mass spread over unexpected states")
    parser.add_argument("--em-steps", type=Path, default=None,
                        help="JSON file with EM parameter-sharing steps")
    parser.add_argument("-o", "--factor-out", type=Path, default=None,
                        help="Write the factor section here (default: stdout)")
    parser.add_argument("-n", "--nodemap-out", type=Path, default=None,
                        help="Write the node map here")
    parser.add_argument("--summary", action="store_true",
                        help="Print a JSON summary to stderr")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = DataConfig(
        pathway_path=args.pathway,
        interaction_map_path=args.interaction_map,
        dogma_path=args.dogma,
        em_steps_path=args.em_steps,
    )
    try:
        factor_cfg = FactorConfig(epsilon=args.epsilon)
        graph = build_pathway(cfg, factor_cfg)
        em_steps = load_em_steps(cfg.em_steps_path) if cfg.em_steps_path else []
        factors, steps = graph.emit_factors(em_steps)
    except FactorTableError:
        raise
    except (PathwayError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    if args.factor_out is not None:
        with open(args.factor_out, "w") as f:
            write_factor_section(factors, f)
        logger.info("Wrote %d factors to %s", len(factors), args.factor_out)
    else:
        write_factor_section(factors, sys.stdout)

    if args.nodemap_out is not None:
        with open(args.nodemap_out, "w") as f:
            write_node_map(graph, f)
        logger.info("Wrote %d nodes to %s", len(graph), args.nodemap_out)

    if args.summary:
        json.dump(build_summary(graph, factors, steps).to_dict(), sys.stderr, indent=2)
        sys.stderr.write("\n")
    return 0

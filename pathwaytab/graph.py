"""
Graph construction — expand a pathway description into a factor graph.

# Overview

This module turns a pathway (entities plus interactions between them) into a
directed graph of random variables, then emits one conditional probability
table per variable with parents. The graph encodes:

- **Nodes**: ``(entity, species)`` pairs, one random variable each
- **Edges**: parent → child, labelled with the interaction polarity
- **Factors**: child + sorted parents + table from a ``FactorGenerator``

# Entity Expansion

| Entity type | Nodes created                                  |
|-------------|------------------------------------------------|
| protein     | one per central-dogma species (genome, mRNA, protein, active) plus the cascade edges |
| anything else | a single ``active`` node                     |

# Interaction Resolution

An interaction ``A B symbol`` is looked up in the interaction map to get
``(from_species, to_species, polarity)``. A protein entity resolves to the
node of the named species; any other entity always resolves to its single
``active`` node. An interaction whose two ends resolve to the same node is
dropped. Registering the same (parent, child) pair twice keeps the last label.

# Pathway Format

| Fields | Meaning                                  |
|--------|------------------------------------------|
| 2      | ``<type> <entity>`` entity declaration   |
| 3      | ``<from> <to> <symbol>`` interaction     |

All entity declarations are applied before any interaction, regardless of
line order.

# Node Ids

Ids are dense, zero-based, assigned on first insertion and never reused.
Factor emission walks children and parents in sorted ``Node`` order, so two
runs over identical inputs produce identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import NamedTuple

from .config import (
    ACTIVE_SPECIES,
    OBSERVATION_INTERACTION,
    PROTEIN_TYPE,
    VARIABLE_DIMENSION,
    DataConfig,
    FactorConfig,
)
from .errors import FactorTableError, FormatError
from .factors import Factor, FactorGenerator, Variable, VoteFactorGenerator
from .sharing import EMStepSpec, MaximizationStep, SharedParameterGrouper
from .tables import CentralDogmaTemplate, InteractionMap, tokenize

logger = logging.getLogger(__name__)


class Node(NamedTuple):
    """A concrete random variable: one species of one entity."""

    entity: str
    species: str


class PathwayGraph:
    """Entity registry, node arena and child-keyed edge adjacency.

    Parameters
    ----------
    imap : InteractionMap, optional
        Interaction symbol table; the built-in table when omitted.
    dogma : CentralDogmaTemplate, optional
        Cascade applied to protein entities; the built-in cascade when omitted.
    config : FactorConfig, optional
        Smoothing epsilon and the type given to undeclared entities.
    overrides : mapping, optional
        ``(entity_type, species) → FactorGenerator`` replacing the default
        vote generator for matching nodes.
    """

    def __init__(
        self,
        imap: InteractionMap | None = None,
        dogma: CentralDogmaTemplate | None = None,
        config: FactorConfig | None = None,
        overrides: Mapping[tuple[str, str], FactorGenerator] | None = None,
    ) -> None:
        self.imap = imap if imap is not None else InteractionMap.default()
        self.dogma = dogma if dogma is not None else CentralDogmaTemplate.default()
        self.config = config or FactorConfig()

        self._entities: dict[str, str] = {}
        self._nodes: list[Node] = []
        self._ids: dict[Node, int] = {}
        # child id → {parent id: edge label}
        self._parents: dict[int, dict[int, str]] = {}

        self._overrides: dict[tuple[str, str], FactorGenerator] = dict(overrides or {})
        self._default_generator: FactorGenerator = VoteFactorGenerator(self.config.epsilon)

    # ---- Construction from text --------------------------------------------

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        imap: InteractionMap | None = None,
        dogma: CentralDogmaTemplate | None = None,
        config: FactorConfig | None = None,
        overrides: Mapping[tuple[str, str], FactorGenerator] | None = None,
        source: str = "pathway",
    ) -> PathwayGraph:
        """Build a graph from pathway lines.

        Every line is validated before anything is registered, and errors
        propagate before the graph is returned.
        """
        entity_lines: list[list[str]] = []
        interaction_lines: list[list[str]] = []
        for line_number, fields in tokenize(lines):
            if len(fields) == 2:
                entity_lines.append(fields)
            elif len(fields) == 3:
                interaction_lines.append(fields)
            else:
                raise FormatError(source, line_number, "2 or 3", len(fields))

        graph = cls(imap=imap, dogma=dogma, config=config, overrides=overrides)
        for entity_type, entity in entity_lines:
            graph.register_entity(entity, entity_type)
        for from_entity, to_entity, symbol in interaction_lines:
            graph.add_interaction(from_entity, to_entity, symbol)

        logger.info(
            "Pathway: %d entities, %d nodes, %d edges",
            len(graph._entities), len(graph._nodes), graph.num_edges,
        )
        return graph

    @classmethod
    def from_text(cls, text: str, **kwargs) -> PathwayGraph:
        return cls.from_lines(text.splitlines(), **kwargs)

    @classmethod
    def from_paths(
        cls,
        cfg: DataConfig,
        config: FactorConfig | None = None,
        overrides: Mapping[tuple[str, str], FactorGenerator] | None = None,
    ) -> PathwayGraph:
        """Load the pathway and any non-default tables named in ``cfg``."""
        imap = (
            InteractionMap.from_path(cfg.interaction_map_path)
            if cfg.interaction_map_path else None
        )
        dogma = CentralDogmaTemplate.from_path(cfg.dogma_path) if cfg.dogma_path else None
        with open(cfg.pathway_path) as f:
            return cls.from_lines(
                f, imap=imap, dogma=dogma, config=config,
                overrides=overrides, source=str(cfg.pathway_path),
            )

    # ---- Nodes and entities ------------------------------------------------

    def add_node(self, node: Node) -> int:
        """Insert ``node`` if new; return its id either way."""
        node_id = self._ids.get(node)
        if node_id is None:
            node_id = len(self._nodes)
            self._ids[node] = node_id
            self._nodes.append(node)
            self._parents[node_id] = {}
        return node_id

    def node_id(self, node: Node) -> int:
        return self._ids[node]

    @property
    def nodes(self) -> tuple[Node, ...]:
        """All nodes in id order."""
        return tuple(self._nodes)

    @property
    def entities(self) -> dict[str, str]:
        """Entity → type, in registration order."""
        return dict(self._entities)

    def entity_type(self, entity: str) -> str:
        return self._entities[entity]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._ids

    def register_entity(self, entity: str, entity_type: str | None = None) -> None:
        """Register ``entity`` once; later calls are no-ops."""
        if entity in self._entities:
            return
        entity_type = entity_type or self.config.default_entity_type
        self._entities[entity] = entity_type
        if entity_type == PROTEIN_TYPE:
            for name, species in self.dogma.nodes_for(entity):
                self.add_node(Node(name, species))
            for from_entity, to_entity, symbol in self.dogma.self_interactions(entity):
                self.add_interaction(from_entity, to_entity, symbol)
        else:
            self.add_node(Node(entity, ACTIVE_SPECIES))

    def resolve_node(self, entity: str, species: str) -> Node:
        """The node of ``entity`` an interaction on ``species`` attaches to."""
        if self._entities.get(entity) == PROTEIN_TYPE:
            return Node(entity, species)
        return Node(entity, ACTIVE_SPECIES)

    # ---- Edges -------------------------------------------------------------

    def _add_edge(self, parent: Node, child: Node, label: str) -> None:
        parent_id = self.add_node(parent)
        child_id = self.add_node(child)
        incoming = self._parents[child_id]
        previous = incoming.get(parent_id)
        if previous is not None and previous != label:
            logger.debug("Edge %s -> %s relabelled %s -> %s", parent, child, previous, label)
        incoming[parent_id] = label

    def add_interaction(self, from_entity: str, to_entity: str, symbol: str) -> None:
        """Expand one interaction into an edge between resolved nodes."""
        entry = self.imap[symbol]
        self.register_entity(from_entity)
        self.register_entity(to_entity)
        parent = self.resolve_node(from_entity, entry.from_species)
        child = self.resolve_node(to_entity, entry.to_species)
        if parent == child:
            logger.debug("Dropping self-loop %s %s %s", from_entity, symbol, to_entity)
            return
        self._add_edge(parent, child, entry.polarity)

    def add_observation_node(self, entity: str, on_species: str, obs_species: str) -> Variable:
        """Attach an observed child ``(entity, obs_species)`` to a hidden node.

        The hidden node's own factor is unchanged; the observation node gets a
        factor with the hidden node as its only parent.
        """
        self.register_entity(entity)
        hidden = self.resolve_node(entity, on_species)
        observed = Node(entity, obs_species)
        if hidden == observed:
            raise ValueError(
                f"observation species {obs_species!r} resolves to the hidden node {hidden}"
            )
        obs_id = self.add_node(observed)
        self._add_edge(hidden, observed, OBSERVATION_INTERACTION)
        return Variable(obs_id, VARIABLE_DIMENSION)

    def parents(self, node: Node) -> dict[Node, str]:
        """Parent node → edge label for ``node``, sorted by parent."""
        incoming = self._parents[self._ids[node]]
        return dict(sorted((self._nodes[p], lbl) for p, lbl in incoming.items()))

    def edges(self) -> Iterator[tuple[Node, Node, str]]:
        """``(parent, child, label)`` in sorted child then parent order."""
        for child in sorted(self._nodes):
            for parent, label in self.parents(child).items():
                yield parent, child, label

    @property
    def num_edges(self) -> int:
        return sum(len(p) for p in self._parents.values())

    def output_node_map(self) -> dict[int, str]:
        """Node id → entity for every ``active`` node."""
        return {
            i: node.entity for i, node in enumerate(self._nodes)
            if node.species == ACTIVE_SPECIES
        }

    # ---- Factors -----------------------------------------------------------

    def register_factor_override(
        self, entity_type: str, species: str, generator: FactorGenerator,
    ) -> None:
        """Use ``generator`` for every node of ``(entity_type, species)``."""
        self._overrides[(entity_type, species)] = generator

    def generator_for(self, node: Node) -> FactorGenerator:
        key = (self._entities.get(node.entity, ""), node.species)
        return self._overrides.get(key, self._default_generator)

    def emit_factors(
        self, em_steps: Sequence[EMStepSpec] = (),
    ) -> tuple[list[Factor], list[MaximizationStep]]:
        """Build one factor per node with parents, plus the EM sharing steps.

        Returns
        -------
        tuple[list[Factor], list[MaximizationStep]]
            Factors in sorted child order. Maximization steps only for EM
            steps with at least one populated sharing group.
        """
        grouper = SharedParameterGrouper(em_steps, target_dim=VARIABLE_DIMENSION)
        factors: list[Factor] = []

        for child in sorted(self._nodes):
            incoming = self.parents(child)
            if not incoming:
                continue

            variables = (Variable(self._ids[child]),) + tuple(
                Variable(self._ids[p]) for p in incoming
            )
            edge_labels = tuple(incoming.values())
            table = self.generator_for(child).generate(edge_labels)
            factor = Factor(variables, table, edge_labels)

            if table.numel() != factor.total_dimension:
                raise FactorTableError(
                    f"factor for {child}: table has {table.numel()} entries, "
                    f"expected {factor.total_dimension}"
                )

            factors.append(factor)
            grouper.offer(len(factors) - 1, factor, child.species)

        steps = grouper.build_steps()
        logger.info("Emitted %d factors, %d maximization steps", len(factors), len(steps))
        return factors, steps

"""Tests for EM parameter-sharing groups."""

import logging

import pytest

from pathwaytab.config import load_em_steps, parse_em_steps
from pathwaytab.factors import Factor, Variable, VoteFactorGenerator
from pathwaytab.graph import Node, PathwayGraph
from pathwaytab.sharing import SharedParameterGrouper, SharingKey, orient


def _key(species, *edges):
    return SharingKey(species, frozenset(edges))


def test_orient_lines_parents_up_by_label():
    factor = Factor(
        (Variable(0), Variable(5), Variable(2)),
        VoteFactorGenerator().generate(["positive", "negative"]),
        ("positive", "negative"),
    )

    # sorted labels: negative, positive
    assert orient(factor, _key("active", "positive", "negative")) == (
        Variable(0), Variable(2), Variable(5),
    )


def test_orient_rejects_duplicates_and_mismatch():
    factor = Factor(
        (Variable(0), Variable(1), Variable(2)),
        VoteFactorGenerator().generate(["positive", "positive"]),
        ("positive", "positive"),
    )

    assert orient(factor, _key("active", "positive")) is None
    assert orient(factor, _key("active", "positive", "negative")) is None


def test_protein_group_collects_every_cascade_step(small_graph):
    factors, steps = small_graph.emit_factors([(_key("protein", "positive"),)])

    assert len(steps) == 1
    (shared,) = steps[0].shared
    assert shared.estimator.properties() == {"total_dim": 9, "target_dim": 3}
    assert shared.estimator.name == "ConditionalProbEstimation"
    members = {small_graph.nodes[order[0].label] for order in shared.orientations.values()}
    assert members == {Node("MDM2", "protein"), Node("TP53", "protein")}
    for idx, order in shared.orientations.items():
        assert order == factors[idx].variables


def test_group_count_matches_nodes(small_graph):
    steps_spec = [(
        _key("active", "positive"),
        _key("mRNA", "positive"),
        _key("mRNA", "positive", "negative"),
    )]
    factors, steps = small_graph.emit_factors(steps_spec)

    sizes = {sp.key: len(sp.orientations) for sp in steps[0].shared}
    # MDM2 active has one protein parent; p53_mdm2 has a duplicate label.
    assert sizes[_key("active", "positive")] == 1
    # MDM2 mRNA has two positive parents; only TP53 mRNA matches.
    assert sizes[_key("mRNA", "positive")] == 1
    assert _key("mRNA", "positive", "negative") not in sizes


def test_group_completeness_against_graph(small_graph):
    key = _key("protein", "positive")
    _, steps = small_graph.emit_factors([(key,)])

    expected = 0
    for node in small_graph.nodes:
        labels = list(small_graph.parents(node).values())
        if node.species == key.species and len(set(labels)) == len(labels) \
                and frozenset(labels) == key.edges:
            expected += 1
    assert len(steps[0].shared[0].orientations) == expected


def test_empty_step_is_warned_and_dropped(small_graph, caplog):
    spec = [
        (_key("protein", "positive"),),
        (_key("active", "negative"),),
    ]
    with caplog.at_level(logging.WARNING, logger="pathwaytab.sharing"):
        _, steps = small_graph.emit_factors(spec)

    assert len(steps) == 1
    assert "em_step number 1 had no matching nodes" in caplog.text
    assert "sub-type 'active'" in caplog.text


def test_observation_label_groups_separately(small_graph):
    small_graph.add_observation_node("TP53", "mRNA", "obs")
    _, steps = small_graph.emit_factors([(_key("obs", "-obs>"),)])

    assert len(steps[0].shared[0].orientations) == 1


def test_grouper_sizes_without_factors():
    grouper = SharedParameterGrouper([(_key("active", "positive"),)], target_dim=3)

    assert grouper.group_sizes() == [[0]]
    assert grouper.build_steps() == []


def test_parse_em_steps():
    steps = parse_em_steps([
        [{"species": "mRNA", "edges": ["positive"]}],
        [{"species": "active", "edges": ["negative", "positive"]}],
    ])

    assert steps == [
        (_key("mRNA", "positive"),),
        (_key("active", "positive", "negative"),),
    ]


def test_parse_em_steps_rejects_missing_fields():
    with pytest.raises(ValueError):
        parse_em_steps([[{"species": "mRNA"}]])


def test_load_em_steps(tmp_path):
    path = tmp_path / "em.json"
    path.write_text('[[{"species": "protein", "edges": ["positive"]}]]')

    assert load_em_steps(path) == [(_key("protein", "positive"),)]


def test_steps_from_built_graph_are_reproducible(small_pathway_text):
    spec = [(_key("protein", "positive"),)]
    _, a = PathwayGraph.from_text(small_pathway_text).emit_factors(spec)
    _, b = PathwayGraph.from_text(small_pathway_text).emit_factors(spec)

    assert a[0].shared[0].orientations == b[0].shared[0].orientations

"""Tests for the node map and factor section text output."""

import io

from pathwaytab.graph import PathwayGraph
from pathwaytab.writer import render_factor_graph, write_node_map


def test_node_map_layout(small_graph):
    buf = io.StringIO()
    write_node_map(small_graph, buf, prefix="n")
    lines = buf.getvalue().splitlines()

    assert len(lines) == len(small_graph)
    assert lines[0] == "n0\tTP53\tactive"
    assert lines[8] == "n8\tDNA_damage\tactive"


def test_factor_section_layout():
    graph = PathwayGraph.from_text("abstract\ta\nabstract\tb\na\tb\t->\n")
    factors, _ = graph.emit_factors()

    text = render_factor_graph(factors)
    lines = text.split("\n")

    assert lines[:6] == ["1", "", "2", "1 0", "3 3", "9"]
    assert lines[6] == "0\t0.900000"
    assert lines[7] == "1\t0.050000"
    assert lines[14] == "8\t0.900000"
    assert text.endswith("8\t0.900000\n")


def test_factor_section_empty():
    assert render_factor_graph([]) == "0\n"


def test_every_factor_variable_in_node_map(small_graph):
    factors, _ = small_graph.emit_factors()
    buf = io.StringIO()
    write_node_map(small_graph, buf)
    ids = {int(line.split("\t")[0]) for line in buf.getvalue().splitlines()}

    for factor in factors:
        assert {v.label for v in factor.variables} <= ids


def test_output_is_byte_identical_across_runs(small_pathway_text):
    outputs = []
    for _ in range(2):
        graph = PathwayGraph.from_text(small_pathway_text)
        factors, _ = graph.emit_factors()
        buf = io.StringIO()
        write_node_map(graph, buf)
        outputs.append(buf.getvalue() + render_factor_graph(factors))

    assert outputs[0] == outputs[1]

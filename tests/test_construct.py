"""Tests for the dict entry point, the audit summary and the CLI."""

import json

import pytest

from pathwaytab import construct
from pathwaytab.audit import build_summary
from pathwaytab.cli import main
from pathwaytab.errors import FormatError


def test_construct_from_text(small_pathway_text):
    result = construct({
        "pathway": small_pathway_text,
        "em_steps": [[{"species": "protein", "edges": ["positive"]}]],
    })

    assert result["nodes"][0] == {"id": 0, "entity": "TP53", "species": "active"}
    assert result["output_nodes"] == {0: "TP53", 4: "MDM2", 8: "DNA_damage", 9: "p53_mdm2"}
    assert result["factor_graph"].startswith("7\n\n")
    (step,) = result["maximization_steps"]
    (group,) = step
    assert group["species"] == "protein"
    assert group["total_dim"] == 9
    assert len(group["factors"]) == 2
    assert result["summary"]["num_factors"] == 7
    json.dumps(result["summary"])


def test_construct_custom_tables():
    result = construct({
        "pathway": "x\ty\tup\n",
        "interaction_map": "up active active positive\n",
        "central_dogma": "",
        "epsilon": 0.2,
    })

    # An empty dogma leaves protein entities with no nodes of their own.
    assert result["nodes"] == [
        {"id": 0, "entity": "x", "species": "active"},
        {"id": 1, "entity": "y", "species": "active"},
    ]
    assert "0\t0.800000" in result["factor_graph"]


def test_construct_requires_pathway():
    with pytest.raises(ValueError):
        construct({})


def test_construct_propagates_format_error():
    with pytest.raises(FormatError):
        construct({"pathway": "a b c d\n"})


def test_summary_counts(small_graph):
    factors, steps = small_graph.emit_factors()
    summary = build_summary(small_graph, factors, steps)

    assert summary.entities_by_type == {"abstract": 1, "complex": 1, "protein": 2}
    assert summary.nodes_by_species == {"active": 4, "genome": 2, "mRNA": 2, "protein": 2}
    assert summary.edges_by_label == {"negative": 1, "positive": 10}
    assert summary.num_factors == 7
    assert summary.max_parents == 3
    assert summary.to_dict()["shared_groups"] == []


def test_cli_writes_outputs(tmp_path, small_pathway_text):
    pathway = tmp_path / "pathway.tab"
    pathway.write_text(small_pathway_text)
    em = tmp_path / "em.json"
    em.write_text('[[{"species": "protein", "edges": ["positive"]}]]')
    fg = tmp_path / "out.fg"
    nodemap = tmp_path / "out.nodes"

    code = main([str(pathway), "-o", str(fg), "-n", str(nodemap), "--em-steps", str(em)])

    assert code == 0
    assert fg.read_text().startswith("7\n")
    assert nodemap.read_text().splitlines()[0] == "0\tTP53\tactive"


def test_cli_reports_bad_input(tmp_path):
    pathway = tmp_path / "pathway.tab"
    pathway.write_text("a\tb\t-nope>\n")

    assert main([str(pathway)]) == 1


def test_cli_does_not_swallow_factor_table_error(tmp_path, monkeypatch, small_pathway_text):
    from pathwaytab.errors import FactorTableError
    from pathwaytab.graph import PathwayGraph

    def broken(self, em_steps=()):
        raise FactorTableError("table length mismatch")

    monkeypatch.setattr(PathwayGraph, "emit_factors", broken)
    pathway = tmp_path / "pathway.tab"
    pathway.write_text(small_pathway_text)

    with pytest.raises(FactorTableError):
        main([str(pathway)])

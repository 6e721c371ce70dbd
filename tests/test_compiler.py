import json
import logging
import math

import numpy as np
import pytest

from fmeca_graph import (
    UNDEFINED_WEIGHT,
    ColorState,
    CyclicHierarchyError,
    FmecaGraphCompiler,
    GraphConfig,
    InvalidOverlayType,
    InvalidTerminalAnnotation,
    SchemaMismatch,
    compile_graph,
)


def test_two_node_chain(simple_db):
    g = compile_graph(simple_db)
    assert g.ids == ["A", "B"]
    assert [(e.source, e.target, e.weight) for e in g.edges] == [("A", "B", 1.0)]
    assert g.adjacency().toarray()[0, 1] == 1.0
    assert not g.show_weights
    assert [n.render_label for n in g.nodes] == ["A", "B"]


def test_terminal_annotation_adds_a_virtual_sink(simple_db):
    g = compile_graph(simple_db, terminal_nodes={"B": "Leak"})
    assert g.ids == ["A", "B", "VirtualNode1"]
    assert ("B", "VirtualNode1", 1.0) in [(e.source, e.target, e.weight) for e in g.edges]
    vn = g.node("VirtualNode1")
    assert vn.render_label == vn.copy_label == "Leak"
    assert vn.kind == "terminal"
    assert vn.shape == "ellipse"
    assert vn.position == 3


def test_auto_weights_with_zero_root_step(simple_db):
    g = compile_graph(simple_db, {"A": 0, "B": 5}, weights="auto")
    assert g.node("A").weight is UNDEFINED_WEIGHT
    assert g.node("B").weight == 5.0
    assert math.isnan(g.adjacency().toarray()[0, 1])
    assert g.show_weights
    assert g.to_dict()["edges"][0]["weight"] is None


def test_invalid_terminal_annotation_aborts(simple_db):
    with pytest.raises(InvalidTerminalAnnotation) as exc:
        compile_graph(simple_db, terminal_nodes={"A": "x"})
    assert exc.value.ids == ["A"]


def test_colors_at_and_beyond_range_bounds(simple_db, blue_red):
    g = compile_graph(simple_db, {"A": 0, "B": 10}, min=0, max=10, colormap=blue_red)
    assert g.node("A").color.rgb == pytest.approx((0.0, 0.0, 1.0))
    assert g.node("B").color.rgb == pytest.approx((1.0, 0.0, 0.0))
    assert not g.node("A").bad and not g.node("B").bad

    g = compile_graph(simple_db, {"A": 0, "B": 15}, min=0, max=10, colormap=blue_red)
    assert g.node("B").bad
    assert g.node("B").color.rgb == (0.0, 0.0, 0.0)


def test_node_count_and_order(tree_db):
    g = compile_graph(tree_db, terminal_nodes={"L3": "c", "L1": "a"})
    assert g.ids == tree_db.ids + ["VirtualNode1", "VirtualNode2"]
    assert [n.position for n in g.nodes] == list(range(1, 9))
    assert g.successors("L1") == ["VirtualNode1"]
    assert g.successors("L3") == ["VirtualNode2"]


def test_explicit_weights_default_to_one(tree_db):
    g = compile_graph(tree_db, weights={"S1": 3})
    assert {n.id: n.weight for n in g.primary} == {
        "R": 1.0, "S1": 3.0, "L1": 1.0, "L2": 1.0, "S2": 1.0, "L3": 1.0,
    }
    assert all(e.weight == 3.0 for e in g.edges if e.source == "S1")
    assert g.show_weights


def test_auto_weights_telescope(tree_db, tree_values):
    g = compile_graph(tree_db, tree_values, weights="auto", root_value=0.5)
    w = {n.id: n.weight for n in g.primary}
    for leaf, path in (("L1", "R S1 L1"), ("L2", "R S1 L2"), ("L3", "R S2 L3")):
        assert sum(w[n] for n in path.split()) == pytest.approx(tree_values[leaf] - 0.5)


def test_virtual_nodes_carry_source_weight(tree_db, tree_values):
    g = compile_graph(tree_db, tree_values, weights="auto", terminal_nodes={"L2": "Burst"})
    assert g.node("VirtualNode1").weight == g.node("L2").weight == 7.0


def test_schema_mismatch_reports_every_unknown_key(tree_db):
    with pytest.raises(SchemaMismatch) as exc:
        compile_graph(tree_db, {"R": 1, "X": 2, "Y": 3})
    assert exc.value.ids == ["X", "Y"]
    assert exc.value.overlay == "values"

    with pytest.raises(SchemaMismatch):
        compile_graph(tree_db, names={"Z": "zed"})


def test_non_mapping_overlay(tree_db):
    with pytest.raises(InvalidOverlayType):
        compile_graph(tree_db, names=["R"])
    with pytest.raises(InvalidOverlayType):
        compile_graph(tree_db, weights="heavy")


def test_missing_values_are_undefined(tree_db):
    g = compile_graph(tree_db, {"R": 1, "L2": 4})
    assert g.node("S1").value is None
    assert g.node("S1").color.state is ColorState.UNDEFINED
    assert g.value_range.min == 1.0 and g.value_range.max == 4.0


def test_multi_sample_values_are_reduced_with_warning(simple_db, caplog):
    with caplog.at_level(logging.WARNING, logger="fmeca_graph"):
        g = compile_graph(simple_db, {"A": [1, 7, 3], "B": 2})
    assert g.node("A").value == 7.0
    assert "several values" in caplog.text

    g = compile_graph(simple_db, {"A": [1, 7, 3], "B": 2}, operation="mean")
    assert g.node("A").value == pytest.approx(11 / 3)


def test_inherit_field_selects_the_topology():
    db = {
        "A": {},
        "B": {"parent": "A"},
        "C": {"parent": "B", "inherit": "A", "isterminal": True},
    }
    by_parent = compile_graph(db)
    by_inherit = compile_graph(db, parent="inherit")
    assert by_parent.successors("A") == ["B"]
    assert by_inherit.successors("A") == ["C"]
    assert by_inherit.successors("B") == []


def test_cycle_is_rejected():
    with pytest.raises(CyclicHierarchyError) as exc:
        compile_graph({"A": {"parent": "B"}, "B": {"parent": "A"}})
    assert set(exc.value.ids) >= {"A", "B"}


def test_placeholders_and_copy_labels(tree_db):
    g = compile_graph(tree_db, names={"L2": "Seal leak"}, placeholders={"L2": "xxxxxxxx"})
    node = g.node("L2")
    assert node.encoded
    assert node.render_label == "004xxxxx"
    assert node.copy_label == "Seal leak"
    assert g.copy_labels[4] == "Seal leak"


def test_styling_comes_from_config(simple_db):
    compiler = FmecaGraphCompiler(GraphConfig(shape_nodes="diamond", size_nodes=(40, 20)))
    g = compiler.compile(simple_db)
    assert g.node("A").shape == "diamond"
    assert g.node("A").size == (40.0, 20.0)
    assert g.styling["shape_nodes"] == "diamond"


def test_serialization_is_json_ready(tree_db, tree_values, tmp_path):
    g = compile_graph(tree_db, tree_values, weights="auto", terminal_nodes={"L1": "Leak"})
    path = tmp_path / "graph.json"
    g.to_json(str(path))
    data = json.loads(path.read_text())
    assert [n["id"] for n in data["nodes"]] == g.ids
    assert data["nodes"][0]["color_state"] == "ok"
    assert data["range"] == {"min": 1.0, "max": 10.0}
    assert len(data["edges"]) == len(g.edges) == 6


def test_compiled_adjacency_shape(tree_db):
    adj = compile_graph(tree_db, terminal_nodes={"L1": "a"}).adjacency()
    assert adj.shape == (7, 7)
    assert adj.nnz == 6
    assert np.all(adj.toarray()[:, 0] == 0)


def test_bad_nodes_carry_their_resolved_outline(simple_db):
    g = compile_graph(simple_db, {"A": 0, "B": 15}, min=0, max=10, default_magnify=1.5)
    ok, bad = g.node("A"), g.node("B")
    assert (ok.line_color, ok.line_width, ok.magnify) == (None, None, 1.0)
    assert (bad.line_color, bad.line_width, bad.magnify) == ((1.0, 0.0, 0.0), 2.0, 1.5)
    data = g.to_dict()["nodes"][1]
    assert data["line_color"] == [1.0, 0.0, 0.0]
    assert data["magnify"] == 1.5

import json
import math

import numpy as np
import pytest
from pydantic import ValidationError

from fmeca_graph import GraphConfig
from fmeca_graph.config import DEFAULTS


def test_defaults_table():
    cfg = GraphConfig()
    assert cfg.parent == "parent"
    assert cfg.min == -math.inf and cfg.max == math.inf
    assert len(cfg.colormap) == 64
    assert cfg.colormap[0] == pytest.approx((0.0, 0.0, 0.5625))
    assert cfg.default_face_color == (0.0, 0.0, 0.0)
    assert cfg.default_edge_color == (1.0, 0.0, 0.0)
    assert cfg.default_line_width == 2.0
    assert cfg.default_magnify == 1.2
    assert cfg.operation == "max"
    assert cfg.root_value == 0.0
    for key in ("layout_type", "layout_scale", "scale", "shape_nodes", "shape_terminal_nodes", "font_size"):
        assert getattr(cfg, key) == DEFAULTS[key]


def test_config_is_immutable():
    cfg = GraphConfig()
    with pytest.raises(ValidationError):
        cfg.min = 3


def test_with_updates_revalidates_and_keeps_original():
    cfg = GraphConfig()
    new = cfg.with_updates(min=0, max=10, colormap="viridis:8")
    assert (new.min, new.max) == (0.0, 10.0)
    assert len(new.colormap) == 8
    assert cfg.min == -math.inf
    with pytest.raises(ValidationError):
        cfg.with_updates(min=5, max=1)


def test_unset_bounds():
    cfg = GraphConfig(min=None, max=None)
    assert cfg.min == -math.inf and cfg.max == math.inf


@pytest.mark.parametrize(
    "field, value",
    [
        ("operation", "mode"),
        ("shape_nodes", "star"),
        ("default_face_color", (2.0, 0.0, 0.0)),
        ("parent", "ancestor"),
        ("layout_type", "circo"),
        ("font_size", 0),
        ("colormap", [[0.0, 1.0]]),
        ("unknown_option", 1),
    ],
)
def test_invalid_options_are_rejected(field, value):
    with pytest.raises(ValidationError):
        GraphConfig(**{field: value})


def test_shapes_are_case_insensitive():
    assert GraphConfig(shape_nodes="Diamond").shape_nodes == "diamond"


def test_resize_scalar_becomes_pair():
    assert GraphConfig(resize=2).resize == (2.0, 2.0)
    assert GraphConfig(resize=[1.5, 0.5]).resize == (1.5, 0.5)


def test_named_reducers_ignore_nan():
    assert GraphConfig(operation="max").reducer(np.array([1.0, np.nan, 3.0])) == 3.0
    assert GraphConfig(operation="mean").reducer(np.array([1.0, np.nan, 3.0])) == 2.0
    assert math.isnan(GraphConfig().reducer(np.array([np.nan])))


def test_callable_operation_gets_raw_samples():
    cfg = GraphConfig(operation=lambda x: float(np.size(x)))
    assert cfg.reducer(np.array([1.0, np.nan])) == 2.0


def test_styling_forwards_renderer_knobs():
    styling = GraphConfig(shape_nodes="ellipse", scale=2).styling()
    assert styling["shape_nodes"] == "ellipse"
    assert styling["scale"] == 2.0
    assert styling["paper_properties"] == {"units": "centimeters", "type": "A0", "orientation": "landscape"}


def test_from_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"min": 0, "operation": "mean", "paper_properties": {"type": "A4"}}))
    cfg = GraphConfig().from_file(path)
    assert cfg.min == 0.0
    assert cfg.operation == "mean"
    assert cfg.paper_properties.type == "A4"


def test_from_file_needs_an_object(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text("[1, 2]")
    with pytest.raises(TypeError):
        GraphConfig().from_file(path)


def test_from_environment(monkeypatch):
    monkeypatch.setenv("FMECA_GRAPH_MAX", "10")
    monkeypatch.setenv("FMECA_GRAPH_COLORMAP", "jet:8")
    monkeypatch.setenv("FMECA_GRAPH_PARENT", "inherit")
    cfg = GraphConfig().from_environment()
    assert cfg.max == 10.0
    assert len(cfg.colormap) == 8
    assert cfg.parent == "inherit"

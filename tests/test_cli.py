import json

import pytest

from fmeca_graph.cli import build_parser, main


@pytest.fixture
def inputs(tmp_path, tree_source, tree_values):
    paths = {}
    for name, data in (("db", tree_source), ("values", tree_values), ("terminals", {"L3": "Burst"})):
        p = tmp_path / f"{name}.json"
        p.write_text(json.dumps(data))
        paths[name] = str(p)
    return paths


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_compile_to_stdout(inputs, capsys):
    rc = main(["compile", inputs["db"], "--values", inputs["values"], "--terminal-nodes", inputs["terminals"]])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert [n["id"] for n in data["nodes"]][-1] == "VirtualNode1"
    assert data["range"] == {"min": 1.0, "max": 10.0}


def test_compile_with_config_and_outputs(inputs, tmp_path, capsys):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"min": 0, "max": 5, "root_value": 1}))
    out = tmp_path / "graph.json"
    html = tmp_path / "graph.html"
    rc = main([
        "compile", inputs["db"],
        "--values", inputs["values"],
        "--weights", "auto",
        "--config", str(cfg),
        "--output", str(out),
        "--html", str(html),
    ])
    assert rc == 0
    assert capsys.readouterr().out == ""
    data = json.loads(out.read_text())
    assert data["range"] == {"min": 0.0, "max": 5.0}
    assert data["show_weights"] is True
    assert html.exists()


def test_environment_overrides(inputs, monkeypatch, capsys):
    monkeypatch.setenv("FMECA_GRAPH_MAX", "20")
    assert main(["compile", inputs["db"], "--values", inputs["values"]]) == 0
    assert json.loads(capsys.readouterr().out)["range"]["max"] == 20.0


def test_compilation_errors_exit_with_status_2(inputs, tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"R": "x"}))
    assert main(["compile", inputs["db"], "--terminal-nodes", str(bad)]) == 2
    err = capsys.readouterr().err
    assert err.startswith("error:")
    assert "'R' is not terminal" in err


def test_unreadable_input(tmp_path, capsys):
    assert main(["compile", str(tmp_path / "missing.json")]) == 2
    assert "cannot read input" in capsys.readouterr().err


def test_config_file_must_hold_an_object(inputs, tmp_path, capsys):
    cfg = tmp_path / "config.json"
    cfg.write_text("[1, 2]")
    assert main(["compile", inputs["db"], "--config", str(cfg)]) == 2
    assert "must hold a JSON object" in capsys.readouterr().err

import json

import pytest

from fmeca_graph import FmecaDatabase, FmecaGraphError, NodeRecord, SchemaMismatch


def test_from_mapping_keeps_declaration_order(tree_db):
    assert tree_db.ids == ["R", "S1", "L1", "L2", "S2", "L3"]
    assert len(tree_db) == 6
    assert "L2" in tree_db


def test_terminal_ids(tree_db):
    assert tree_db.terminal_ids == ["L1", "L2", "L3"]


def test_both_terminal_spellings_are_accepted():
    db = FmecaDatabase.from_source({"A": {}, "B": {"parent": "A", "is_terminal": True}})
    assert db["B"].is_terminal


def test_parent_refs_are_tuples(simple_db):
    assert simple_db.parent_refs() == {"A": (), "B": ("A",)}
    assert simple_db["B"].parent == ("A",)


def test_empty_parent_string_is_root():
    db = FmecaDatabase.from_source({"A": {"parent": "  "}})
    assert db["A"].parent == ()


def test_inherit_field_is_selectable():
    db = FmecaDatabase.from_source({"A": {}, "B": {"parent": "A"}, "C": {"parent": "A", "inherit": "B"}})
    assert db.parent_refs("inherit") == {"A": (), "B": (), "C": ("B",)}
    with pytest.raises(ValueError):
        db.parent_refs("grandparent")


def test_from_list_of_records():
    db = FmecaDatabase.from_source([{"id": "A"}, {"id": "B", "parent": "A"}])
    assert db.ids == ["A", "B"]


def test_from_json_file(tmp_path, simple_source):
    path = tmp_path / "db.json"
    path.write_text(json.dumps(simple_source))
    db = FmecaDatabase.from_source(str(path))
    assert db.ids == ["A", "B"]


def test_unknown_parent_is_rejected():
    with pytest.raises(SchemaMismatch) as exc:
        FmecaDatabase.from_source({"A": {"parent": "ghost"}})
    assert exc.value.ids == ["ghost"]


def test_duplicated_ids_are_rejected():
    with pytest.raises(FmecaGraphError):
        FmecaDatabase([NodeRecord("A"), NodeRecord("A")])


def test_empty_database_is_rejected():
    with pytest.raises(FmecaGraphError):
        FmecaDatabase([])


def test_extra_fields_are_kept():
    db = FmecaDatabase.from_source({"A": {"Fo": 1e-3, "description": "inlet"}})
    assert db["A"].extra == {"Fo": 1e-3}
    assert db["A"].description == "inlet"


def test_missing_node_raises_keyerror(simple_db):
    with pytest.raises(KeyError):
        simple_db["Z"]


@pytest.mark.parametrize(
    "flag, expected",
    [(True, True), (False, False), ("false", False), ("False", False), ("0", False), ("yes", True), (1, True), (None, False)],
)
def test_terminal_flag_forms(flag, expected):
    db = FmecaDatabase.from_source({"A": {"isterminal": flag}})
    assert db["A"].is_terminal is expected


def test_unreadable_terminal_flag_is_rejected():
    with pytest.raises(TypeError):
        FmecaDatabase.from_source({"A": {"isterminal": "maybe"}})

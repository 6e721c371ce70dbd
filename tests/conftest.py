from __future__ import annotations

import pytest

from fmeca_graph import FmecaDatabase


SIMPLE = {
    "A": {"parent": None, "isterminal": False},
    "B": {"parent": "A", "isterminal": True},
}

# R -> S1 -> (L1, L2)
#   -> S2 -> L3
TREE = {
    "R": {},
    "S1": {"parent": "R"},
    "L1": {"parent": "S1", "isterminal": True},
    "L2": {"parent": "S1", "isterminal": True},
    "S2": {"parent": "R"},
    "L3": {"parent": "S2", "isterminal": True},
}

TREE_VALUES = {"R": 1.0, "S1": 3.0, "L1": 4.0, "L2": 10.0, "S2": 2.0, "L3": 7.0}


@pytest.fixture
def simple_source():
    return {k: dict(v) for k, v in SIMPLE.items()}


@pytest.fixture
def simple_db(simple_source):
    return FmecaDatabase.from_source(simple_source)


@pytest.fixture
def tree_db():
    return FmecaDatabase.from_source(TREE)


@pytest.fixture
def tree_values():
    return dict(TREE_VALUES)


@pytest.fixture
def blue_red():
    return [[0.0, 0.0, 1.0], [1.0, 0.0, 0.0]]


@pytest.fixture
def tree_source():
    return {k: dict(v) for k, v in TREE.items()}

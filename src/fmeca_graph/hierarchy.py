# -*- coding: utf-8 -*-
"""
fmeca_graph.hierarchy
~~~~~~~~~~~~~~~~~~~~~

Turn a flat parent-pointer list into an index map, ordered children lists
and the list of every root-to-leaf path.

>>> h = build_hierarchy(["A", "B", "C"], {"A": (), "B": ("A",), "C": ("A",)})
>>> h.children_of["A"]
['B', 'C']
>>> h.paths
[['A', 'B'], ['A', 'C']]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

from .errors import CyclicHierarchyError, SchemaMismatch

logger = logging.getLogger(__name__)

_WHITE, _GREY, _BLACK = 0, 1, 2


@dataclass(frozen=True)
class Hierarchy:
    """Topology derived from parent references."""

    index_of: Dict[str, int]
    children_of: Dict[str, List[str]]
    paths: List[List[str]]

    @property
    def roots(self) -> List[str]:
        return list(dict.fromkeys(p[0] for p in self.paths))


def _check_acyclic(ids: Sequence[str], children_of: Mapping[str, List[str]]) -> None:
    state = {i: _WHITE for i in ids}
    for start in ids:
        if state[start] != _WHITE:
            continue
        stack = [(start, iter(children_of[start]))]
        trail = [start]
        state[start] = _GREY
        while stack:
            node, it = stack[-1]
            child = next(it, None)
            if child is None:
                state[node] = _BLACK
                stack.pop()
                trail.pop()
                continue
            if state[child] == _GREY:
                loop = trail[trail.index(child):] + [child]
                raise CyclicHierarchyError(loop)
            if state[child] == _WHITE:
                state[child] = _GREY
                trail.append(child)
                stack.append((child, iter(children_of[child])))


def build_hierarchy(
    ids: Sequence[str],
    parent_refs: Mapping[str, Sequence[str]],
) -> Hierarchy:
    """
    Build the topology of a FMECA database.

    Parameters
    ----------
    ids : Sequence[str]
        Node ids in canonical order.
    parent_refs : Mapping[str, Sequence[str]]
        Parents of each node; an empty sequence (or a missing key) marks a root.

    Returns
    -------
    Hierarchy
        ``index_of`` (0-based position), ``children_of`` (children listed in
        canonical order) and ``paths`` (every root-to-leaf path, depth first,
        roots and children visited in canonical order).

    Raises
    ------
    SchemaMismatch
        When a parent is not one of ``ids``.
    CyclicHierarchyError
        When the parent references contain a cycle.
    """
    index_of = {node_id: i for i, node_id in enumerate(ids)}
    children_of: Dict[str, List[str]] = {node_id: [] for node_id in ids}

    unknown = []
    for node_id in ids:
        for parent in parent_refs.get(node_id) or ():
            if parent not in index_of:
                unknown.append(parent)
            elif node_id not in children_of[parent]:
                children_of[parent].append(node_id)
    if unknown:
        raise SchemaMismatch("parent references", dict.fromkeys(unknown))

    for children in children_of.values():
        children.sort(key=index_of.__getitem__)

    _check_acyclic(ids, children_of)

    roots = [i for i in ids if not parent_refs.get(i)]
    paths: List[List[str]] = []
    stack = [[r] for r in reversed(roots)]
    while stack:
        path = stack.pop()
        children = children_of[path[-1]]
        if not children:
            paths.append(path)
            continue
        for child in reversed(children):
            stack.append(path + [child])

    logger.debug("hierarchy: %d nodes, %d roots, %d paths", len(ids), len(roots), len(paths))
    return Hierarchy(index_of=index_of, children_of=children_of, paths=paths)

# -*- coding: utf-8 -*-
"""
fmeca_graph.graph
~~~~~~~~~~~~~~~~~

The compiled graph handed to a rendering collaborator, and its assembly from
the outputs of the earlier pipeline stages.

Nodes are ordered: every database node in declaration order, then the
virtual nodes ``VirtualNode1 .. VirtualNodek``. Assembly validates nothing;
every invariant has been enforced upstream.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse

from .colors import NodeColor
from .hierarchy import Hierarchy
from .labels import LabelSet
from .terminals import VirtualNode
from .utils import json_safe
from .values import ValueRange
from .weights import Weight, is_undefined

PRIMARY = "primary"
TERMINAL = "terminal"


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    weight: Weight


@dataclass(frozen=True)
class GraphNode:
    """A node with everything a renderer needs to draw it.

    Out-of-range nodes carry their resolved outline (``line_color``,
    ``line_width``) and size factor (``magnify``); other nodes leave the
    outline to the renderer.
    """

    id: str
    position: int
    kind: str
    render_label: str
    copy_label: str
    weight: Weight
    value: Optional[float] = None
    color: Optional[NodeColor] = None
    shape: str = "box"
    size: Optional[Tuple[float, float]] = None
    encoded: bool = False
    line_color: Optional[Tuple[float, float, float]] = None
    line_width: Optional[float] = None
    magnify: float = 1.0

    @property
    def bad(self) -> bool:
        return self.color is not None and self.color.bad

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position,
            "kind": self.kind,
            "render_label": self.render_label,
            "copy_label": self.copy_label,
            "weight": self.weight,
            "value": self.value,
            "color": None if self.color is None else self.color.rgb,
            "color_state": None if self.color is None else self.color.state,
            "text_color": None if self.color is None else self.color.text_color,
            "bad": self.bad,
            "shape": self.shape,
            "size": self.size,
            "encoded": self.encoded,
            "line_color": self.line_color,
            "line_width": self.line_width,
            "magnify": self.magnify,
        }


@dataclass
class CompiledGraph:
    """Topology plus styling, ready for an external renderer."""

    nodes: List[GraphNode]
    edges: List[Edge]
    value_range: ValueRange
    styling: Dict[str, Any] = field(default_factory=dict)

    @property
    def ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    @property
    def primary(self) -> List[GraphNode]:
        return [n for n in self.nodes if n.kind == PRIMARY]

    @property
    def virtual(self) -> List[GraphNode]:
        return [n for n in self.nodes if n.kind == TERMINAL]

    @property
    def copy_labels(self) -> Dict[int, str]:
        """Side table ``1-based position -> copy label``."""
        return {n.position: n.copy_label for n in self.nodes}

    @property
    def show_weights(self) -> bool:
        """Weights are worth displaying unless every primary weight is 1."""
        return not all((not is_undefined(n.weight)) and n.weight == 1 for n in self.primary)

    def node(self, node_id: str) -> GraphNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(f"Node '{node_id}' not found")

    def successors(self, node_id: str) -> List[str]:
        return [e.target for e in self.edges if e.source == node_id]

    def adjacency(self) -> sparse.csr_matrix:
        """Weighted adjacency; undefined weights are stored as NaN."""
        index = {node_id: i for i, node_id in enumerate(self.ids)}
        n = len(index)
        rows = [index[e.source] for e in self.edges]
        cols = [index[e.target] for e in self.edges]
        data = [float(e.weight) for e in self.edges]
        return sparse.csr_matrix((data, (rows, cols)), shape=(n, n), dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return json_safe(
            {
                "nodes": [n.to_dict() for n in self.nodes],
                "edges": [{"source": e.source, "target": e.target, "weight": e.weight} for e in self.edges],
                "range": {"min": self.value_range.min, "max": self.value_range.max},
                "show_weights": self.show_weights,
                "styling": self.styling,
            }
        )

    def to_json(self, filename: Optional[str] = None, indent: int = 2) -> str:
        """Convert to JSON format."""
        json_str = json.dumps(self.to_dict(), indent=indent)

        if filename:
            with open(filename, "w", encoding="utf-8") as f:
                f.write(json_str)

        return json_str


def assemble_graph(
    ids: Sequence[str],
    hierarchy: Hierarchy,
    reduced: np.ndarray,
    weights: Dict[str, Weight],
    colors: Sequence[NodeColor],
    labels: LabelSet,
    virtual_nodes: Sequence[VirtualNode],
    value_range: ValueRange,
    styling: Dict[str, Any],
) -> CompiledGraph:
    """Structural composition of the pipeline outputs."""
    shape_primary = styling.get("shape_nodes", "box")
    shape_terminal = styling.get("shape_terminal_nodes", "ellipse")
    size_primary = styling.get("size_nodes")
    size_terminal = styling.get("size_terminal_nodes")
    bad_line_color = tuple(styling.get("default_edge_color", (1.0, 0.0, 0.0)))
    bad_line_width = float(styling.get("default_line_width", 2.0))
    bad_magnify = float(styling.get("default_magnify", 1.0))

    nodes: List[GraphNode] = []
    edges: List[Edge] = []
    for i, node_id in enumerate(ids):
        value = float(reduced[i])
        bad = colors[i].bad
        nodes.append(
            GraphNode(
                id=node_id,
                position=i + 1,
                kind=PRIMARY,
                render_label=labels.render[i],
                copy_label=labels.copy[i],
                weight=weights[node_id],
                value=None if np.isnan(value) else value,
                color=colors[i],
                shape=shape_primary,
                size=size_primary,
                encoded=labels.encoded[i],
                line_color=bad_line_color if bad else None,
                line_width=bad_line_width if bad else None,
                magnify=bad_magnify if bad else 1.0,
            )
        )
        edges.extend(Edge(node_id, child, weights[node_id]) for child in hierarchy.children_of[node_id])

    offset = len(ids)
    for k, vn in enumerate(virtual_nodes):
        nodes.append(
            GraphNode(
                id=vn.id,
                position=offset + k + 1,
                kind=TERMINAL,
                render_label=labels.render[offset + k],
                copy_label=labels.copy[offset + k],
                weight=vn.weight,
                shape=shape_terminal,
                size=size_terminal,
            )
        )
        edges.append(Edge(vn.source, vn.id, vn.weight))

    return CompiledGraph(nodes=nodes, edges=edges, value_range=value_range, styling=dict(styling))

# -*- coding: utf-8 -*-
"""
fmeca_graph.render
~~~~~~~~~~~~~~~~~~

Draw a :class:`~fmeca_graph.graph.CompiledGraph` with Plotly.

The renderer only consumes the compiled graph: positions come from a simple
layered layout (``hierarchical``), its polar version (``radial``) or a
deterministic spring relaxation (``equilibrium``).

Quickstart
----------
>>> from fmeca_graph import compile_graph
>>> from fmeca_graph.render import PlotlyRenderer
>>> g = compile_graph({"A": {}, "B": {"parent": "A", "isterminal": True}})
>>> renderer = PlotlyRenderer()
>>> fig = renderer.render(g)
>>> copy = renderer.relabel_copy(fig, g)
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
from plotly.colors import convert_to_RGB_255, label_rgb

from .graph import PRIMARY, TERMINAL, CompiledGraph, GraphNode
from .labels import PlaceholderCodec
from .weights import is_undefined

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #
DEFAULT_NODE_COLOR = (1.0, 1.0, 0.7)
DEFAULT_LINE_COLOR = (0.2, 0.2, 0.2)
DEFAULT_LINE_WIDTH = 1.0
DEFAULT_SIZES = {PRIMARY: 34.0, TERMINAL: 26.0}
BASE_FIGURE_SIZE = (900, 600)
DPI = 96

SYMBOLS = {
    "box": "square",
    "rectangle": "square",
    "ellipse": "circle",
    "circle": "circle",
    "diamond": "diamond",
    "trapezium": "triangle-up",
    "invtrapezium": "triangle-down",
    "house": "pentagon",
    "inverse": "triangle-down",
    "parallelogram": "hexagon",
}

TEXT_POSITIONS = {
    "": "middle center",
    "center": "middle center",
    "left": "middle right",
    "right": "middle left",
}

PAPER_SIZES_CM = {
    "A0": (84.1, 118.9),
    "A1": (59.4, 84.1),
    "A2": (42.0, 59.4),
    "A3": (29.7, 42.0),
    "A4": (21.0, 29.7),
    "letter": (21.59, 27.94),
}


def _rgb(c: Sequence[float]) -> str:
    return label_rgb(convert_to_RGB_255(tuple(c)))


# --------------------------------------------------------------------------- #
# Layouts
# --------------------------------------------------------------------------- #
def _depths_and_order(graph: CompiledGraph) -> Tuple[Dict[str, int], List[str]]:
    """Depth of every node (longest path from a root) and a depth-first order."""
    children: Dict[str, List[str]] = {n: [] for n in graph.ids}
    has_parent = set()
    for e in graph.edges:
        children[e.source].append(e.target)
        has_parent.add(e.target)

    depth: Dict[str, int] = {}
    order: List[str] = []
    stack = [(r, 0) for r in reversed([n for n in graph.ids if n not in has_parent])]
    while stack:
        node, d = stack.pop()
        if node not in depth:
            order.append(node)
        if d < depth.get(node, -1):
            continue
        depth[node] = d
        stack.extend((c, d + 1) for c in reversed(children[node]))
    return depth, order


def hierarchical_layout(graph: CompiledGraph) -> Dict[str, Tuple[float, float]]:
    """Layers by depth, top to bottom; leaves spread left to right."""
    depth, order = _depths_and_order(graph)
    children: Dict[str, List[str]] = {n: [] for n in graph.ids}
    for e in graph.edges:
        children[e.source].append(e.target)
    roots = [n for n in order if depth[n] == 0]

    # post-order: parents are placed after all their children, shared ones included
    x: Dict[str, float] = {}
    next_leaf = 0.0
    stack = [(r, False) for r in reversed(roots)]
    while stack:
        node, expanded = stack.pop()
        if node in x:
            continue
        kids = children[node]
        if not kids:
            x[node] = next_leaf
            next_leaf += 1.0
        elif expanded:
            x[node] = float(np.mean([x[c] for c in kids]))
        else:
            stack.append((node, True))
            stack.extend((c, False) for c in reversed(kids) if c not in x)
    return {n: (x[n], -float(depth[n])) for n in order}


def radial_layout(graph: CompiledGraph) -> Dict[str, Tuple[float, float]]:
    """Roots at the center, one ring per depth."""
    pos = hierarchical_layout(graph)
    width = max((p[0] for p in pos.values()), default=0.0) + 1.0
    out = {}
    for n, (x, y) in pos.items():
        theta = 2 * math.pi * x / width
        r = -y
        out[n] = (r * math.cos(theta), r * math.sin(theta))
    return out


def equilibrium_layout(
    graph: CompiledGraph, iterations: int = 200, k: float = 1.0
) -> Dict[str, Tuple[float, float]]:
    """Spring relaxation seeded with the hierarchical layout."""
    seed = hierarchical_layout(graph)
    ids = list(seed)
    if len(ids) < 2:
        return seed
    index = {n: i for i, n in enumerate(ids)}
    p = np.array([seed[n] for n in ids], dtype=float)
    edges = np.array([(index[e.source], index[e.target]) for e in graph.edges], dtype=int).reshape(-1, 2)
    temperature = 0.1 * len(ids)
    for _ in range(iterations):
        delta = p[:, None, :] - p[None, :, :]
        dist = np.linalg.norm(delta, axis=-1)
        np.fill_diagonal(dist, 1.0)
        dist = np.maximum(dist, 1e-3)
        disp = ((k * k / dist**2)[:, :, None] * delta).sum(axis=1)
        if edges.size:
            d = p[edges[:, 0]] - p[edges[:, 1]]
            length = np.maximum(np.linalg.norm(d, axis=1), 1e-3)
            pull = (length / k)[:, None] * d
            np.add.at(disp, edges[:, 0], -pull)
            np.add.at(disp, edges[:, 1], pull)
        norm = np.maximum(np.linalg.norm(disp, axis=1), 1e-9)
        p += disp / norm[:, None] * np.minimum(norm, temperature)[:, None]
        temperature *= 0.97
    return {n: (float(p[i, 0]), float(p[i, 1])) for n, i in index.items()}


LAYOUTS = {
    "hierarchical": hierarchical_layout,
    "radial": radial_layout,
    "equilibrium": equilibrium_layout,
}


# --------------------------------------------------------------------------- #
# Renderer
# --------------------------------------------------------------------------- #
class PlotlyRenderer:
    """Turn a compiled graph into an interactive Plotly figure."""

    def __init__(self, title: Optional[str] = None):
        self.title = title

    def layout(self, graph: CompiledGraph) -> Dict[str, Tuple[float, float]]:
        layout_type = graph.styling.get("layout_type", "hierarchical")
        try:
            fn = LAYOUTS[layout_type]
        except KeyError:
            raise ValueError(f"unknown layout type '{layout_type}'") from None
        scale = float(graph.styling.get("layout_scale", 1.0))
        return {n: (x * scale, y * scale) for n, (x, y) in fn(graph).items()}

    def node_size(self, node: GraphNode, styling: Dict[str, Any]) -> float:
        size = DEFAULT_SIZES[node.kind] if node.size is None else float(max(node.size))
        return size * node.magnify * float(styling.get("scale", 1.0))

    def _node_trace(self, nodes: List[GraphNode], pos, styling: Dict[str, Any], name: str) -> go.Scatter:
        fills, text_colors, line_colors, line_widths, sizes = [], [], [], [], []
        for n in nodes:
            face = n.color.rgb if n.color is not None and n.color.rgb is not None else DEFAULT_NODE_COLOR
            fills.append(_rgb(face))
            text_colors.append(_rgb(n.color.text_color) if n.color is not None and n.color.rgb else _rgb((0.0, 0.0, 0.0)))
            line_colors.append(_rgb(n.line_color or DEFAULT_LINE_COLOR))
            line_widths.append(DEFAULT_LINE_WIDTH if n.line_width is None else n.line_width)
            sizes.append(self.node_size(n, styling))

        return go.Scatter(
            x=[pos[n.id][0] for n in nodes],
            y=[pos[n.id][1] for n in nodes],
            mode="markers+text",
            name=name,
            text=[n.render_label for n in nodes],
            textposition=TEXT_POSITIONS.get(styling.get("alignment", ""), "middle center"),
            textfont=dict(size=float(styling.get("font_size", 10)), color=text_colors),
            customdata=[n.position for n in nodes],
            hovertext=[n.id for n in nodes],
            hoverinfo="text",
            marker=dict(
                symbol=SYMBOLS.get(nodes[0].shape, "square"),
                size=sizes,
                color=fills,
                line=dict(color=line_colors, width=line_widths),
            ),
        )

    def render(self, graph: CompiledGraph, path: Optional[str] = None) -> go.Figure:
        """
        Draw ``graph``.

        Parameters
        ----------
        graph : CompiledGraph
            Output of the compiler.
        path : str, optional
            Path to save an HTML file.

        Returns
        -------
        go.Figure
            Edge trace first, then one node trace per node kind.
        """
        styling = graph.styling
        pos = self.layout(graph)

        ex: List[Optional[float]] = []
        ey: List[Optional[float]] = []
        annotations = []
        show_weights = graph.show_weights
        for e in graph.edges:
            (x0, y0), (x1, y1) = pos[e.source], pos[e.target]
            ex += [x0, x1, None]
            ey += [y0, y1, None]
            if show_weights:
                w = 0.0 if is_undefined(e.weight) else e.weight
                annotations.append(
                    dict(x=(x0 + x1) / 2, y=(y0 + y1) / 2, text=f"{w:g}", showarrow=False, font=dict(size=9))
                )

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(x=ex, y=ey, mode="lines", name="edges", hoverinfo="skip",
                       line=dict(color=_rgb(DEFAULT_LINE_COLOR), width=1))
        )
        for kind in (PRIMARY, TERMINAL):
            nodes = [n for n in graph.nodes if n.kind == kind]
            if nodes:
                fig.add_trace(self._node_trace(nodes, pos, styling, kind))

        width, height = BASE_FIGURE_SIZE
        resize = styling.get("resize")
        if resize:
            width, height = int(width * resize[0]), int(height * resize[1])
        fig.update_layout(
            title=self.title,
            width=width,
            height=height,
            showlegend=False,
            annotations=annotations,
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            plot_bgcolor="white",
        )

        if path is not None:
            fig.write_html(path)

        return fig

    def relabel_copy(self, fig: go.Figure, graph: CompiledGraph) -> go.Figure:
        """
        Duplicate ``fig`` and replace every node text by its copy label.

        Each point's ``customdata`` holds the node position, looked up in
        ``graph.copy_labels``. Texts without a position fall back to the
        position encoded in placeholder labels, kept only when the text is
        the placeholder label of the node it decodes to.
        """
        copy = go.Figure(fig)
        table = graph.copy_labels
        codec = PlaceholderCodec.for_size(len(graph.nodes))
        font_size = float(graph.styling.get("font_size", 10))
        for trace in copy.data:
            if trace.name not in (PRIMARY, TERMINAL) or trace.text is None:
                continue
            positions = list(trace.customdata) if trace.customdata is not None else [None] * len(trace.text)
            labels = []
            for text, pos in zip(trace.text, positions):
                if pos is None:
                    pos = self._encoded_position(text, graph, codec)
                labels.append(table.get(int(pos), text) if pos is not None else text)
            trace.text = labels
            trace.textfont.size = font_size
        return copy

    @staticmethod
    def _encoded_position(text: str, graph: CompiledGraph, codec: PlaceholderCodec) -> Optional[int]:
        pos = codec.decode(text)
        if pos is None or not 1 <= pos <= len(graph.nodes):
            return None
        node = graph.nodes[pos - 1]
        return pos if node.encoded and node.render_label == text else None

    def write_image(self, fig: go.Figure, graph: CompiledGraph, path: str) -> None:
        """Static export sized after the paper properties (needs kaleido)."""
        paper = graph.styling.get("paper_properties") or {}
        short, long = PAPER_SIZES_CM.get(paper.get("type", "A4"), PAPER_SIZES_CM["A4"])
        if paper.get("orientation", "landscape") == "landscape":
            short, long = long, short
        width, height = (int(v / 2.54 * DPI) for v in (short, long))
        fig.write_image(path, width=width, height=height)

# -*- coding: utf-8 -*-
"""
fmeca_graph.compiler
~~~~~~~~~~~~~~~~~~~~

Compile an FMECA database and its overlays into a :class:`CompiledGraph`.

The pipeline is single pass and stateless: normalize overlays, reduce values
and resolve the color range, build the topology, resolve edge weights,
synthesize virtual sinks for terminal annotations, map colors, encode labels,
assemble. Any failing stage aborts the compilation; no partial graph is
ever returned.

Quickstart
----------
>>> from fmeca_graph import compile_graph
>>> db = {"A": {"parent": None}, "B": {"parent": "A", "isterminal": True}}
>>> g = compile_graph(db, {"A": 0, "B": 5}, terminal_nodes={"B": "Leak"})
>>> g.ids
['A', 'B', 'VirtualNode1']
>>> g.node("VirtualNode1").render_label
'Leak'
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .colors import map_colors
from .config import GraphConfig
from .database import FmecaDatabase, JsonLike
from .graph import CompiledGraph, assemble_graph
from .hierarchy import build_hierarchy
from .labels import encode_labels
from .normalize import normalize_inputs
from .terminals import synthesize_virtual_nodes
from .values import reduce_values, resolve_range
from .weights import resolve_weights

logger = logging.getLogger(__name__)

Overlay = Optional[Mapping[str, Any]]


class FmecaGraphCompiler:
    """
    Compile FMECA databases with a fixed configuration.

    Parameters
    ----------
    config : GraphConfig, optional
        Defaults to ``GraphConfig()``.
    """

    def __init__(self, config: Optional[GraphConfig] = None):
        self.config = config or GraphConfig()

    def compile(
        self,
        database: Union[FmecaDatabase, JsonLike],
        values: Overlay = None,
        *,
        weights: Union[None, str, Mapping[str, Any]] = None,
        names: Overlay = None,
        placeholders: Overlay = None,
        terminal_nodes: Overlay = None,
    ) -> CompiledGraph:
        """
        Run the whole pipeline.

        Parameters
        ----------
        database : FmecaDatabase | mapping | list | path
            The FMECA database, or anything :meth:`FmecaDatabase.from_source` reads.
        values : mapping, optional
            ``{id: number or list of numbers}``; all nodes are worth 0 when omitted.
        weights : mapping or ``"auto"``, optional
            Explicit weight of the edges leaving each node (default 1), or
            automatic weights computed from values along each path.
        names, placeholders : mapping, optional
            Alternate display names, and placeholder texts encoding the node
            position for a later copy pass.
        terminal_nodes : mapping, optional
            ``{terminal id: annotation}``; one virtual sink per entry.

        Raises
        ------
        SchemaMismatch, InvalidOverlayType, InvalidTerminalAnnotation, CyclicHierarchyError
        """
        cfg = self.config
        db = database if isinstance(database, FmecaDatabase) else FmecaDatabase.from_source(database)
        ids = db.ids

        inputs = normalize_inputs(
            ids,
            values=values,
            weights=weights,
            names=names,
            placeholders=placeholders,
            terminal_nodes=terminal_nodes,
        )

        reduced = reduce_values(ids, inputs.values, cfg.reducer)
        value_range = resolve_range(reduced, cfg.min, cfg.max)

        hierarchy = build_hierarchy(ids, db.parent_refs(cfg.parent))

        resolved = resolve_weights(
            ids,
            inputs.weights,
            inputs.auto_weights,
            paths=hierarchy.paths,
            reduced=reduced,
            root_value=cfg.root_value,
        )

        virtual_nodes = synthesize_virtual_nodes(
            inputs.terminal_nodes, db.terminal_ids, resolved, reserved=ids
        )

        colors = map_colors(reduced, value_range, cfg.colormap_array, cfg.default_face_color)
        labels = encode_labels(
            ids, inputs.names, inputs.placeholders, [vn.label for vn in virtual_nodes]
        )

        graph = assemble_graph(
            ids,
            hierarchy,
            reduced,
            resolved,
            colors,
            labels,
            virtual_nodes,
            value_range,
            cfg.styling(),
        )
        logger.debug(
            "compiled %d primary + %d virtual nodes, %d edges",
            len(ids),
            len(virtual_nodes),
            len(graph.edges),
        )
        return graph


def compile_graph(
    database: Union[FmecaDatabase, JsonLike],
    values: Overlay = None,
    *,
    config: Optional[GraphConfig] = None,
    weights: Union[None, str, Mapping[str, Any]] = None,
    names: Overlay = None,
    placeholders: Overlay = None,
    terminal_nodes: Overlay = None,
    **options: Any,
) -> CompiledGraph:
    """
    One-shot compilation.

    Extra keyword ``options`` are :class:`GraphConfig` fields overriding
    ``config`` (e.g. ``min=0, max=10, root_value=1``).
    """
    cfg = config or GraphConfig()
    if options:
        cfg = cfg.with_updates(**options)
    return FmecaGraphCompiler(cfg).compile(
        database,
        values,
        weights=weights,
        names=names,
        placeholders=placeholders,
        terminal_nodes=terminal_nodes,
    )

"""
fmeca_graph
~~~~~~~~~~~

Compile FMECA (Failure Mode, Effects and Criticality Analysis) databases into
weighted directed graphs annotated with colors, shapes, sizes and labels,
ready to be handed to a graph renderer.

The compiler is a single-pass, stateless pipeline; :mod:`fmeca_graph.render`
ships a Plotly renderer consuming its output.
"""

from ._version import __version__

# Public API
from .errors import (
    FmecaGraphError,
    SchemaMismatch,
    InvalidTerminalAnnotation,
    InvalidOverlayType,
    CyclicHierarchyError,
)
from .database import NodeRecord, FmecaDatabase
from .hierarchy import Hierarchy, build_hierarchy
from .config import GraphConfig, PaperProperties
from .colormaps import jet, resolve_colormap
from .weights import UNDEFINED_WEIGHT, UndefinedWeight
from .colors import ColorState, NodeColor
from .labels import PlaceholderCodec
from .graph import CompiledGraph, Edge, GraphNode
from .compiler import FmecaGraphCompiler, compile_graph


__all__ = [
    "FmecaGraphError",
    "SchemaMismatch",
    "InvalidTerminalAnnotation",
    "InvalidOverlayType",
    "CyclicHierarchyError",
    "NodeRecord",
    "FmecaDatabase",
    "Hierarchy",
    "build_hierarchy",
    "GraphConfig",
    "PaperProperties",
    "jet",
    "resolve_colormap",
    "UNDEFINED_WEIGHT",
    "UndefinedWeight",
    "ColorState",
    "NodeColor",
    "PlaceholderCodec",
    "CompiledGraph",
    "Edge",
    "GraphNode",
    "FmecaGraphCompiler",
    "compile_graph",
]

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from fmeca_graph import FmecaGraphError, GraphConfig, compile_graph
from fmeca_graph.graph import CompiledGraph
from fmeca_graph.render import PlotlyRenderer

from ..schemas import GraphCompileIn, GraphCompileOut


router = APIRouter(prefix="/graphs", tags=["graphs"])


def _compile(payload: GraphCompileIn) -> CompiledGraph:
    database = {k: rec.model_dump() for k, rec in payload.database.items()}
    try:
        config = GraphConfig(**payload.config)
        return compile_graph(
            database,
            payload.values,
            config=config,
            weights=payload.weights,
            names=payload.names,
            placeholders=payload.placeholders,
            terminal_nodes=payload.terminal_nodes,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"invalid config: {e}")
    except FmecaGraphError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": type(e).__name__, "message": str(e), "ids": e.ids},
        )


@router.post("/compile", response_model=GraphCompileOut)
def compile_fmeca_graph(payload: GraphCompileIn) -> Dict[str, Any]:
    """Compile a database and its overlays into nodes, edges and styling."""
    return _compile(payload).to_dict()


@router.post("/figure")
def render_fmeca_graph(payload: GraphCompileIn) -> Dict[str, Any]:
    """Compile, then return the Plotly figure as JSON."""
    graph = _compile(payload)
    fig = PlotlyRenderer().render(graph)
    return json.loads(fig.to_json())

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class NodeRecordIn(BaseModel):
    parent: Optional[Union[str, List[str]]] = None
    inherit: Optional[Union[str, List[str]]] = None
    isterminal: bool = False
    description: str = ""


class GraphCompileIn(BaseModel):
    database: Dict[str, NodeRecordIn] = Field(
        ...,
        description="FMECA database keyed by node id, in declaration order",
    )
    values: Optional[Dict[str, Union[float, List[float], None]]] = None
    weights: Optional[Union[Literal["auto"], Dict[str, float]]] = None
    names: Optional[Dict[str, str]] = None
    placeholders: Optional[Dict[str, str]] = None
    terminal_nodes: Optional[Dict[str, str]] = None
    config: Dict[str, Any] = Field(
        default_factory=dict,
        description="GraphConfig overrides, e.g. {'min': 0, 'max': 10, 'colormap': 'viridis'}",
    )

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: Dict[str, NodeRecordIn]) -> Dict[str, NodeRecordIn]:
        if not v:
            raise ValueError("database must contain at least one node")
        return v

    @field_validator("config")
    @classmethod
    def validate_config(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if "operation" in v and not isinstance(v["operation"], str):
            raise ValueError("operation must be the name of a reduction")
        return v


class GraphNodeOut(BaseModel):
    id: str
    position: int
    kind: Literal["primary", "terminal"]
    render_label: str
    copy_label: str
    weight: Optional[float] = None
    value: Optional[float] = None
    color: Optional[List[float]] = None
    color_state: Optional[str] = None
    text_color: Optional[List[float]] = None
    bad: bool = False
    shape: str
    size: Optional[List[float]] = None
    encoded: bool = False
    line_color: Optional[List[float]] = None
    line_width: Optional[float] = None
    magnify: float = 1.0


class GraphEdgeOut(BaseModel):
    source: str
    target: str
    weight: Optional[float] = None


class GraphCompileOut(BaseModel):
    nodes: List[GraphNodeOut]
    edges: List[GraphEdgeOut]
    range: Dict[str, Optional[float]]
    show_weights: bool
    styling: Dict[str, Any]

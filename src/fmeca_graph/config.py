# -*- coding: utf-8 -*-
"""
fmeca_graph.config
~~~~~~~~~~~~~~~~~~

Immutable configuration of the graph compiler and of the default renderer.

All defaults live in :data:`DEFAULTS`; a :class:`GraphConfig` is validated
once, before the pipeline runs, and never mutated afterwards. Use
:meth:`GraphConfig.with_updates` to derive a new one.
"""

from __future__ import annotations

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .colormaps import resolve_colormap
from .values import nan_safe

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

SHAPES = (
    "box",
    "ellipse",
    "circle",
    "rectangle",
    "diamond",
    "trapezium",
    "invtrapezium",
    "house",
    "inverse",
    "parallelogram",
)

REDUCTIONS: Dict[str, Callable[[np.ndarray], float]] = {
    "max": np.max,
    "min": np.min,
    "mean": np.mean,
    "median": np.median,
    "sum": np.sum,
    "first": lambda x: x[0],
    "last": lambda x: x[-1],
}

# Enumerated defaults table; GraphConfig() reproduces it exactly.
DEFAULTS: Dict[str, Any] = {
    "parent": "parent",
    "min": -math.inf,
    "max": math.inf,
    "colormap": "jet:64",
    "default_face_color": (0.0, 0.0, 0.0),
    "default_edge_color": (1.0, 0.0, 0.0),
    "default_line_width": 2.0,
    "default_magnify": 1.2,
    "operation": "max",
    "layout_type": "hierarchical",
    "layout_scale": 1.0,
    "scale": 1.0,
    "shape_nodes": "box",
    "size_nodes": None,
    "shape_terminal_nodes": "ellipse",
    "size_terminal_nodes": None,
    "root_value": 0.0,
    "font_size": 10.0,
    "alignment": "",
    "resize": None,
}

ENV_PREFIX = "FMECA_GRAPH_"


class PaperProperties(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    units: Literal["centimeters", "inches"] = "centimeters"
    type: Literal["A0", "A1", "A2", "A3", "A4", "letter"] = "A0"
    orientation: Literal["landscape", "portrait"] = "landscape"


class GraphConfig(BaseModel):
    """Compilation options and styling knobs handed to the renderer."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    parent: Literal["parent", "inherit"] = DEFAULTS["parent"]
    min: float = DEFAULTS["min"]
    max: float = DEFAULTS["max"]
    colormap: Tuple[RGB, ...] = Field(default_factory=lambda: _colormap_tuple(DEFAULTS["colormap"]))
    default_face_color: RGB = DEFAULTS["default_face_color"]
    default_edge_color: RGB = DEFAULTS["default_edge_color"]
    default_line_width: float = Field(DEFAULTS["default_line_width"], ge=0)
    default_magnify: float = Field(DEFAULTS["default_magnify"], gt=0)
    operation: Union[str, Callable[..., Any]] = DEFAULTS["operation"]
    layout_type: Literal["hierarchical", "equilibrium", "radial"] = DEFAULTS["layout_type"]
    layout_scale: float = Field(DEFAULTS["layout_scale"], gt=0)
    scale: float = Field(DEFAULTS["scale"], gt=0)
    shape_nodes: str = DEFAULTS["shape_nodes"]
    size_nodes: Optional[Tuple[float, float]] = DEFAULTS["size_nodes"]
    shape_terminal_nodes: str = DEFAULTS["shape_terminal_nodes"]
    size_terminal_nodes: Optional[Tuple[float, float]] = DEFAULTS["size_terminal_nodes"]
    root_value: float = DEFAULTS["root_value"]
    font_size: float = Field(DEFAULTS["font_size"], gt=0)
    alignment: Literal["", "left", "center", "right"] = DEFAULTS["alignment"]
    resize: Optional[Tuple[float, float]] = DEFAULTS["resize"]
    paper_properties: PaperProperties = PaperProperties()

    # ------------------------------------------------------------------ #
    # Field validators
    # ------------------------------------------------------------------ #
    @field_validator("min", "max", mode="before")
    @classmethod
    def _unset_bounds(cls, v: Any, info) -> Any:
        if v is None:
            return -math.inf if info.field_name == "min" else math.inf
        return v

    @field_validator("colormap", mode="before")
    @classmethod
    def _resolve_colormap(cls, v: Any) -> Tuple[RGB, ...]:
        return _colormap_tuple(v)

    @field_validator("default_face_color", "default_edge_color")
    @classmethod
    def _unit_rgb(cls, v: RGB) -> RGB:
        if any(not 0.0 <= c <= 1.0 for c in v):
            raise ValueError(f"RGB channels must lie in [0, 1], got {v}")
        return v

    @field_validator("operation")
    @classmethod
    def _known_operation(cls, v: Any) -> Any:
        if isinstance(v, str) and v not in REDUCTIONS:
            raise ValueError(f"operation must be one of {sorted(REDUCTIONS)} or a callable")
        return v

    @field_validator("shape_nodes", "shape_terminal_nodes")
    @classmethod
    def _known_shape(cls, v: str) -> str:
        v = v.lower()
        if v not in SHAPES:
            raise ValueError(f"shape must be one of {SHAPES}, got {v!r}")
        return v

    @field_validator("resize", mode="before")
    @classmethod
    def _resize_pair(cls, v: Any) -> Any:
        if v is None or isinstance(v, (int, float)):
            return None if v is None else (v, v)
        v = tuple(v)
        if len(v) == 1:
            return (v[0], v[0])
        return v[:2]

    @model_validator(mode="after")
    def _check_range(self) -> "GraphConfig":
        if self.min > self.max:
            raise ValueError(f"min must not exceed max, got min={self.min} max={self.max}")
        return self

    # ------------------------------------------------------------------ #
    # Derived values
    # ------------------------------------------------------------------ #
    @property
    def reducer(self) -> Callable[[np.ndarray], float]:
        if callable(self.operation):
            return self.operation
        return nan_safe(REDUCTIONS[self.operation])

    @property
    def colormap_array(self) -> np.ndarray:
        return np.asarray(self.colormap, dtype=float)

    def styling(self) -> Dict[str, Any]:
        """Global styling knobs forwarded to the rendering collaborator."""
        return {
            "layout_type": self.layout_type,
            "layout_scale": self.layout_scale,
            "scale": self.scale,
            "shape_nodes": self.shape_nodes,
            "size_nodes": self.size_nodes,
            "shape_terminal_nodes": self.shape_terminal_nodes,
            "size_terminal_nodes": self.size_terminal_nodes,
            "font_size": self.font_size,
            "alignment": self.alignment,
            "resize": self.resize,
            "default_edge_color": self.default_edge_color,
            "default_line_width": self.default_line_width,
            "default_magnify": self.default_magnify,
            "paper_properties": self.paper_properties.model_dump(),
        }

    # ------------------------------------------------------------------ #
    # Alternate constructors
    # ------------------------------------------------------------------ #
    def with_updates(self, **kwargs: Any) -> GraphConfig:
        """Create a new, re-validated config with updated values."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(kwargs)
        return type(self)(**data)

    def from_file(self, config_path: Union[str, Path]) -> GraphConfig:
        """Load overrides from a JSON file."""
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)
        if not isinstance(config_data, dict):
            raise TypeError(f"{config_path} must hold a JSON object, got {type(config_data).__name__}")
        return self.with_updates(**config_data)

    def from_environment(self) -> GraphConfig:
        """Load overrides from ``FMECA_GRAPH_*`` environment variables."""
        env_mapping = {
            "LAYOUT_TYPE": "layout_type",
            "COLORMAP": "colormap",
            "MIN": "min",
            "MAX": "max",
            "ROOT_VALUE": "root_value",
            "FONT_SIZE": "font_size",
            "OPERATION": "operation",
            "PARENT": "parent",
        }
        updates = {}
        for suffix, key in env_mapping.items():
            value = os.getenv(ENV_PREFIX + suffix)
            if value is not None:
                updates[key] = value
        if updates:
            logger.debug("config overrides from environment: %s", sorted(updates))
        return self.with_updates(**updates)


def _colormap_tuple(spec: Any) -> Tuple[RGB, ...]:
    if isinstance(spec, tuple) and spec and all(isinstance(c, tuple) for c in spec):
        spec = list(spec)
    return tuple(tuple(float(c) for c in row) for row in resolve_colormap(spec))

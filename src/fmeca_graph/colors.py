# -*- coding: utf-8 -*-
"""
fmeca_graph.colors
~~~~~~~~~~~~~~~~~~

Map reduced node values to colors.

Values inside ``[min, max]`` are normalized to ``[0, 1]`` and interpolated
against the colormap anchors (evenly spaced) with a shape-preserving
piecewise cubic. Values outside the range are *bad*: they take the default
face color instead, with no blending. Undefined (NaN) values get no color.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.interpolate import PchipInterpolator

from .values import ValueRange

RGB = Tuple[float, float, float]

WHITE: RGB = (1.0, 1.0, 1.0)
BLACK: RGB = (0.0, 0.0, 0.0)
DARK_THRESHOLD = 0.4


class ColorState(str, enum.Enum):
    OK = "ok"
    BAD = "bad"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class NodeColor:
    """Face color of a primary node and the text color readable on it."""

    rgb: Optional[RGB]
    state: ColorState
    text_color: RGB = BLACK

    @property
    def bad(self) -> bool:
        return self.state is ColorState.BAD


def text_color_for(rgb: RGB) -> RGB:
    """White text on dark faces, black otherwise."""
    return WHITE if sum(rgb) / 3 < DARK_THRESHOLD else BLACK


def _interpolator(colormap: np.ndarray):
    if colormap.shape[0] == 1:
        return lambda t: np.repeat(colormap, np.size(t), axis=0)
    anchors = np.linspace(0.0, 1.0, colormap.shape[0])
    return PchipInterpolator(anchors, colormap, axis=0, extrapolate=False)


def map_colors(
    reduced: np.ndarray,
    value_range: ValueRange,
    colormap: np.ndarray,
    default_face_color: Sequence[float] = BLACK,
) -> List[NodeColor]:
    """
    Color every primary node.

    Parameters
    ----------
    reduced : np.ndarray
        One reduced value per primary node.
    value_range : ValueRange
        Normalization domain.
    colormap : np.ndarray
        ``(n, 3)`` RGB anchors in ``[0, 1]``.
    default_face_color : sequence of 3 floats
        Face color of out-of-range nodes.

    Returns
    -------
    List[NodeColor]
        Aligned with ``reduced``.
    """
    reduced = np.asarray(reduced, dtype=float)
    defined = ~np.isnan(reduced)
    bad = defined & ((reduced < value_range.min) | (reduced > value_range.max))
    good = defined & ~bad

    span = value_range.span
    t = np.zeros_like(reduced)
    if span > 0:
        t[good] = (reduced[good] - value_range.min) / span
    rgb = np.full((reduced.size, 3), np.nan)
    if good.any():
        rgb[good] = np.clip(_interpolator(np.asarray(colormap, dtype=float))(np.clip(t[good], 0.0, 1.0)), 0.0, 1.0)

    face = tuple(float(c) for c in default_face_color)
    out: List[NodeColor] = []
    for i in range(reduced.size):
        if bad[i]:
            out.append(NodeColor(rgb=face, state=ColorState.BAD, text_color=text_color_for(face)))
        elif good[i]:
            c = tuple(float(x) for x in rgb[i])
            out.append(NodeColor(rgb=c, state=ColorState.OK, text_color=text_color_for(c)))
        else:
            out.append(NodeColor(rgb=None, state=ColorState.UNDEFINED))
    return out

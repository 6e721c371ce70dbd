# -*- coding: utf-8 -*-
"""
fmeca_graph.values
~~~~~~~~~~~~~~~~~~

Collapse multi-sample node values to one scalar and resolve the color range.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValueRange:
    """Normalization domain of the color scale."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def contains(self, v: float) -> bool:
        return self.min <= v <= self.max


def nan_safe(reducer: Callable[[np.ndarray], float]) -> Callable[[np.ndarray], float]:
    """Wrap a reduction so NaN samples are ignored (all-NaN gives NaN)."""

    def _reduce(x: np.ndarray) -> float:
        finite = x[~np.isnan(x)]
        if finite.size == 0:
            return math.nan
        return reducer(finite)

    _reduce.__name__ = getattr(reducer, "__name__", "reduce")
    return _reduce


def reduce_values(
    ids: Sequence[str],
    values: Dict[str, np.ndarray],
    reducer: Callable[[np.ndarray], float],
) -> np.ndarray:
    """
    Reduce every node's samples to one scalar.

    Parameters
    ----------
    ids : Sequence[str]
        Canonical node order.
    values : Dict[str, np.ndarray]
        Normalized samples per node (see :func:`fmeca_graph.normalize.normalize_values`).
    reducer : Callable
        Applied to each node's 1-D sample array.

    Returns
    -------
    np.ndarray
        Reduced values, aligned with ``ids``.
    """
    multi = [i for i in ids if values[i].size > 1]
    if multi:
        logger.warning(
            "several values were found for %d node(s) (%s); reduced with %s",
            len(multi),
            ", ".join(multi[:5]) + (", ..." if len(multi) > 5 else ""),
            getattr(reducer, "__name__", "operation"),
        )
    return np.array([float(reducer(values[i])) for i in ids], dtype=float)


def resolve_range(reduced: np.ndarray, vmin: float = -math.inf, vmax: float = math.inf) -> ValueRange:
    """
    Fill unset (infinite) bounds with the data-driven min/max.

    Undefined (NaN) values are ignored. With no finite value at all the
    unset bounds fall back to ``0`` and ``1``.
    """
    finite = reduced[np.isfinite(reduced)]
    if math.isinf(vmin):
        vmin = float(finite.min()) if finite.size else 0.0
    if math.isinf(vmax):
        vmax = float(finite.max()) if finite.size else 1.0
    logger.debug("color range resolved to [%g, %g]", vmin, vmax)
    return ValueRange(min=float(vmin), max=float(vmax))

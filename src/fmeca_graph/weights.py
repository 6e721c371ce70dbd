# -*- coding: utf-8 -*-
"""
fmeca_graph.weights
~~~~~~~~~~~~~~~~~~~

Resolve the weight carried by every edge leaving a node.

Two modes:

* explicit -- the normalized weight overlay, 1 where absent;
* automatic -- along every root-to-leaf path ``[n1 .. nm]`` each node gets
  ``value(n_t) - value(n_{t-1})`` with ``value(n_0) = root_value``, so the
  weights of any path prefix sum to ``value(n_t) - root_value``.

In automatic mode a weight of exactly 0 (or an undefined difference) becomes
:data:`UNDEFINED_WEIGHT`: "no change" is not the same as "no edge".
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)


class UndefinedWeight:
    """Marker for an edge whose weight carries no information."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED_WEIGHT"

    def __bool__(self) -> bool:
        return False

    def __float__(self) -> float:
        return math.nan

    def __reduce__(self):
        return (UndefinedWeight, ())


UNDEFINED_WEIGHT = UndefinedWeight()

Weight = Union[float, UndefinedWeight]


def is_undefined(w: Weight) -> bool:
    return w is UNDEFINED_WEIGHT


def auto_weights(
    ids: Sequence[str],
    paths: Sequence[Sequence[str]],
    reduced: np.ndarray,
    root_value: float = 0.0,
) -> Dict[str, Weight]:
    """
    Telescoping weights along every root-to-leaf path.

    A node crossed by several paths (several parents) is re-assigned once per
    path: the last path wins.
    """
    index_of = {node_id: i for i, node_id in enumerate(ids)}
    w = np.ones(len(ids))
    for path in paths:
        steps = [index_of[n] for n in path]
        w[steps] = np.diff(np.concatenate(([root_value], reduced[steps])))

    out: Dict[str, Weight] = {}
    undefined: List[str] = []
    for node_id, value in zip(ids, w):
        if value == 0 or math.isnan(value):
            out[node_id] = UNDEFINED_WEIGHT
            undefined.append(node_id)
        else:
            out[node_id] = float(value)
    if undefined:
        logger.debug("auto weights: %d undefined weight(s)", len(undefined))
    return out


def resolve_weights(
    ids: Sequence[str],
    explicit: Dict[str, float],
    auto: bool,
    paths: Sequence[Sequence[str]] = (),
    reduced: np.ndarray = None,
    root_value: float = 0.0,
) -> Dict[str, Weight]:
    """Pick the explicit or the automatic mode."""
    if auto:
        if reduced is None:
            raise ValueError("automatic weights need the reduced values")
        return auto_weights(ids, paths, reduced, root_value)
    return {i: float(explicit[i]) for i in ids}

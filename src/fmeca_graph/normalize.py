# -*- coding: utf-8 -*-
"""
fmeca_graph.normalize
~~~~~~~~~~~~~~~~~~~~~

Align caller-supplied overlays with the database id set.

Every overlay leaves this module keyed in the database's canonical order, so
downstream stages never depend on the iteration order of the caller's maps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Number
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from .errors import InvalidOverlayType, SchemaMismatch

logger = logging.getLogger(__name__)

AUTO = "auto"
DEFAULT_WEIGHT = 1.0

Overlay = Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class NormalizedInputs:
    """Overlays keyed in canonical database order."""

    ids: List[str]
    values: Dict[str, np.ndarray]
    weights: Dict[str, float]
    auto_weights: bool
    names: Dict[str, str]
    placeholders: Dict[str, str]
    terminal_nodes: Dict[str, str]


def _as_mapping(overlay: Any, name: str, expected: str) -> Mapping[str, Any]:
    if overlay is None:
        return {}
    if not isinstance(overlay, Mapping):
        raise InvalidOverlayType(name, expected)
    return overlay


def _extra_keys(ids: Sequence[str], overlay: Mapping[str, Any]) -> List[str]:
    known = set(ids)
    return [k for k in overlay if k not in known]


def _samples(raw: Any) -> np.ndarray:
    if raw is None:
        return np.array([np.nan])
    arr = np.atleast_1d(np.asarray(raw, dtype=float)).ravel()
    if arr.size == 0:
        return np.array([np.nan])
    return arr


# --------------------------------------------------------------------------- #
# Individual overlays
# --------------------------------------------------------------------------- #
def normalize_values(ids: Sequence[str], values: Overlay) -> Dict[str, np.ndarray]:
    """
    Align the value overlay.

    No overlay at all means every node is worth 0. Otherwise ids absent from
    the overlay are backfilled with NaN and keys unknown to the database
    raise :class:`SchemaMismatch`.
    """
    values = _as_mapping(values, "values", "values['step'] = 3.5 or [3.5, 4.0]")
    if not values:
        return {i: np.zeros(1) for i in ids}

    extra = _extra_keys(ids, values)
    if extra:
        raise SchemaMismatch("values", extra, expected="equal to")

    missing = [i for i in ids if i not in values]
    if missing:
        logger.debug("values: %d node(s) without value set to NaN", len(missing))
    try:
        return {i: _samples(values.get(i)) for i in ids}
    except (TypeError, ValueError) as e:
        raise InvalidOverlayType("values", "values['step'] = number or list of numbers") from e


def normalize_weights(ids: Sequence[str], weights: Union[None, str, Mapping[str, Any]]):
    """
    Align the weight overlay.

    Returns ``(weights, auto)``. ``"auto"`` selects automatic weights; every
    node without an explicit weight gets :data:`DEFAULT_WEIGHT`. When a
    weight is given as a sequence its first element is used.
    """
    if isinstance(weights, str):
        if weights.strip().lower() != AUTO:
            raise InvalidOverlayType("weights", "weights['step'] = value, or 'auto'")
        return {i: DEFAULT_WEIGHT for i in ids}, True

    weights = _as_mapping(weights, "weights", "weights['step'] = value, or 'auto'")
    extra = _extra_keys(ids, weights)
    if extra:
        raise SchemaMismatch("weights", extra)

    out: Dict[str, float] = {}
    for i in ids:
        w = weights.get(i)
        if w is None:
            out[i] = DEFAULT_WEIGHT
            continue
        try:
            if not isinstance(w, Number):
                w = np.atleast_1d(np.asarray(w, dtype=float)).ravel()
                w = w[0] if w.size else DEFAULT_WEIGHT
            out[i] = float(w)
        except (TypeError, ValueError) as e:
            raise InvalidOverlayType("weights", "weights['step'] = value, or 'auto'") from e
    return out, False


def normalize_labels(ids: Sequence[str], overlay: Overlay, name: str) -> Dict[str, str]:
    """Align a name-like overlay (alternate names or placeholders)."""
    overlay = _as_mapping(overlay, name, f"{name}['step'] = 'some text'")
    extra = _extra_keys(ids, overlay)
    if extra:
        raise SchemaMismatch(name, extra)
    return {i: str(overlay[i]) for i in ids if i in overlay}


def normalize_terminal_nodes(ids: Sequence[str], overlay: Overlay) -> Dict[str, str]:
    """
    Type-check and reorder terminal annotations.

    Known ids come first in canonical order; unknown keys are kept, in caller
    order, for the terminal validator to report.
    """
    overlay = _as_mapping(overlay, "terminal_nodes", "terminal_nodes['step'] = 'some text'")
    ordered = {i: str(overlay[i]) for i in ids if i in overlay}
    for k in _extra_keys(ids, overlay):
        ordered[str(k)] = str(overlay[k])
    return ordered


# --------------------------------------------------------------------------- #
# Entry point
# --------------------------------------------------------------------------- #
def normalize_inputs(
    ids: Sequence[str],
    values: Overlay = None,
    weights: Union[None, str, Mapping[str, Any]] = None,
    names: Overlay = None,
    placeholders: Overlay = None,
    terminal_nodes: Overlay = None,
) -> NormalizedInputs:
    """Run every overlay through its normalizer; fails on the first bad overlay."""
    ids = list(ids)
    w, auto = normalize_weights(ids, weights)
    return NormalizedInputs(
        ids=ids,
        values=normalize_values(ids, values),
        weights=w,
        auto_weights=auto,
        names=normalize_labels(ids, names, "names"),
        placeholders=normalize_labels(ids, placeholders, "placeholders"),
        terminal_nodes=normalize_terminal_nodes(ids, terminal_nodes),
    )

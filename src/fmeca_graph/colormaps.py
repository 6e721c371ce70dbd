# -*- coding: utf-8 -*-
"""
fmeca_graph.colormaps
~~~~~~~~~~~~~~~~~~~~~

Colormaps as ``(n, 3)`` arrays of RGB triples in ``[0, 1]``.

>>> jet(4).shape
(4, 3)
>>> resolve_colormap("viridis:8").shape
(8, 3)
"""

from __future__ import annotations

from typing import Any

import numpy as np
from plotly.colors import sample_colorscale
from plotly.exceptions import PlotlyError

DEFAULT_SIZE = 64


def jet(n: int = DEFAULT_SIZE) -> np.ndarray:
    """Classic blue-cyan-yellow-red ramp with ``n`` anchors."""
    if n < 1:
        raise ValueError("jet() needs at least one color")
    q = int(np.ceil(n / 4))
    u = np.concatenate([np.arange(1, q + 1) / q, np.ones(q - 1), np.arange(q, 0, -1) / q])
    g = int(np.ceil(q / 2)) - (1 if n % 4 == 1 else 0) + np.arange(1, len(u) + 1)
    out = np.zeros((n, 3))
    for col, idx in enumerate((g + q, g, g - q)):
        keep = (idx >= 1) & (idx <= n)
        out[idx[keep] - 1, col] = u[keep]
    return out


def _split_name(spec: str):
    name, _, size = spec.partition(":")
    n = int(size) if size else DEFAULT_SIZE
    if n < 2:
        raise ValueError(f"colormap '{spec}' needs at least 2 colors")
    return name.strip(), n


def resolve_colormap(spec: Any) -> np.ndarray:
    """
    Resolve a colormap specification.

    Parameters
    ----------
    spec : str | array-like
        ``"jet"`` or ``"jet:<n>"``, a plotly named colorscale (optionally
        suffixed ``:<n>``, ``_r`` reverses it), or an explicit sequence of RGB
        triples. Triples with any channel above 1 are read as 0-255 values.

    Returns
    -------
    np.ndarray
        ``(n, 3)`` float array.
    """
    if isinstance(spec, str):
        name, n = _split_name(spec)
        if name.lower() == "jet":
            return jet(n)
        try:
            sampled = sample_colorscale(name, n, colortype="tuple")
        except PlotlyError as e:
            raise ValueError(f"unknown colormap '{name}'") from e
        return np.clip(np.asarray(sampled, dtype=float), 0.0, 1.0)

    cmap = np.asarray(spec, dtype=float)
    if cmap.ndim != 2 or cmap.shape[1] != 3 or cmap.shape[0] < 1:
        raise ValueError(f"colormap must be an (n, 3) array of RGB triples, got shape {cmap.shape}")
    if not np.all(np.isfinite(cmap)) or np.any(cmap < 0):
        raise ValueError("colormap entries must be finite and non-negative")
    if np.any(cmap > 1):
        cmap = cmap / 255.0
    return cmap

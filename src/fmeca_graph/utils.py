# -*- coding: utf-8 -*-
"""
fmeca_graph.utils
~~~~~~~~~~~~~~~~~

Utilities shared across the package.
"""

from __future__ import annotations

import enum
import math
from typing import Any, Mapping

import numpy as np

from .weights import UndefinedWeight


def json_safe(obj: Any, *, max_depth: int = 20) -> Any:
    """Recursively convert objects to JSON-serializable forms.

    - NaN/inf floats and :data:`~fmeca_graph.weights.UNDEFINED_WEIGHT` become ``None``.
    - NumPy scalars/arrays become Python numbers/lists.
    - Enums become their value.
    - Non-serializable fall back to str(...) after max_depth.
    """
    if max_depth < 0:
        return str(obj)

    # primitives
    if isinstance(obj, enum.Enum):
        return json_safe(obj.value, max_depth=max_depth - 1)
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, int):
        return obj
    if isinstance(obj, float):
        return None if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, UndefinedWeight):
        return None

    # numpy numbers/arrays
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        f = float(obj)
        return None if (math.isnan(f) or math.isinf(f)) else f
    if isinstance(obj, np.ndarray):
        return json_safe(obj.tolist(), max_depth=max_depth - 1)

    # mappings / sequences
    if isinstance(obj, Mapping):
        return {str(k): json_safe(v, max_depth=max_depth - 1) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [json_safe(v, max_depth=max_depth - 1) for v in obj]

    # last resort
    return str(obj)

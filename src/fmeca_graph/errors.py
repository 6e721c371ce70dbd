# -*- coding: utf-8 -*-
"""
fmeca_graph.errors
~~~~~~~~~~~~~~~~~~

Exception hierarchy raised by the graph compiler.

Every validation error carries the full list of offending ids in ``.ids`` so
callers can report all problems at once.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class FmecaGraphError(ValueError):
    """Base class for all compilation errors."""

    def __init__(self, message: str, ids: Optional[Iterable[str]] = None):
        self.ids: List[str] = list(ids or [])
        super().__init__(message)


class SchemaMismatch(FmecaGraphError):
    """An overlay's key set does not fit the database id set."""

    def __init__(self, overlay: str, ids: Iterable[str], expected: str = "a subset of"):
        ids = list(ids)
        self.overlay = overlay
        listed = ", ".join(repr(i) for i in ids)
        super().__init__(
            f"{overlay} keys must be {expected} the database ids; offending: {listed}",
            ids,
        )


class InvalidTerminalAnnotation(FmecaGraphError):
    """Terminal annotations reference nodes that are not terminal."""

    def __init__(self, ids: Iterable[str]):
        ids = list(ids)
        lines = "\n".join(f"\t'{i}' is not terminal" for i in ids)
        super().__init__(
            f"{len(ids)} prescribed terminal nodes are not terminal:\n{lines}",
            ids,
        )


class InvalidOverlayType(FmecaGraphError, TypeError):
    """An overlay argument is not map-shaped."""

    def __init__(self, overlay: str, expected: str):
        self.overlay = overlay
        super().__init__(f"{overlay} must be a mapping such as {expected}")


class CyclicHierarchyError(FmecaGraphError):
    """Parent references form a cycle."""

    def __init__(self, ids: Iterable[str]):
        ids = list(ids)
        super().__init__(
            "parent references form a cycle through: " + " -> ".join(ids), ids
        )

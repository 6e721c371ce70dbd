# -*- coding: utf-8 -*-
"""
fmeca_graph.database
~~~~~~~~~~~~~~~~~~~~

Defines :class:`~fmeca_graph.database.FmecaDatabase`, the read-only, ordered
collection of FMECA steps the graph compiler works from.

A **NodeRecord** holds

* its identity ``id`` (unique; declaration order is the canonical order),
* a ``parent`` reference and an alternative ``inherit`` reference (each empty
  for a root, a single id, or a list of ids),
* the ``is_terminal`` flag telling whether the step closes a failure chain.

Example
-------
>>> from fmeca_graph.database import FmecaDatabase
>>> db = FmecaDatabase.from_source({
...     "A": {"parent": None},
...     "B": {"parent": "A", "isterminal": True},
... })
>>> db.ids
['A', 'B']
>>> db.terminal_ids
['B']
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import FmecaGraphError, SchemaMismatch


ParentRef = Union[None, str, Sequence[str]]
JsonLike = Union[str, Path, Mapping[str, Any], Sequence[Mapping[str, Any]]]

PARENT_FIELDS = ("parent", "inherit")


def _as_refs(value: ParentRef) -> Tuple[str, ...]:
    """Normalize a parent reference to a tuple of ids (empty for a root)."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.strip()
        return (value,) if value else ()
    return tuple(str(v) for v in value if v not in (None, ""))


_TRUE = {"true", "yes", "y", "t", "1"}
_FALSE = {"false", "no", "n", "f", "0", ""}


def _as_flag(value: Any, node_id: str) -> bool:
    """Read a terminal flag; strings such as ``"false"`` or ``"0"`` are parsed."""
    if value is None:
        return False
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE or token in _FALSE:
            return token in _TRUE
    elif isinstance(value, (int, float, np.integer, np.floating)) and value in (0, 1):
        return bool(value)
    raise TypeError(f"record '{node_id}' has an invalid terminal flag: {value!r}")


# --------------------------------------------------------------------------- #
# Records
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class NodeRecord:
    """One FMECA step as stored in the database."""

    id: str
    parent: Tuple[str, ...] = ()
    inherit: Tuple[str, ...] = ()
    is_terminal: bool = False
    description: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, node_id: str, data: Mapping[str, Any]) -> NodeRecord:
        """Build a record from a loosely-typed mapping.

        Both ``isterminal`` (FMECA engine exports) and ``is_terminal`` keys are
        accepted.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"record '{node_id}' must be a mapping, got {type(data).__name__}")
        known = {"id", "parent", "inherit", "isterminal", "is_terminal", "description"}
        terminal = data.get("is_terminal", data.get("isterminal", False))
        return cls(
            id=str(node_id),
            parent=_as_refs(data.get("parent")),
            inherit=_as_refs(data.get("inherit")),
            is_terminal=_as_flag(terminal, node_id),
            description=str(data.get("description") or ""),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def parent_ref(self, field_name: str = "parent") -> Tuple[str, ...]:
        if field_name not in PARENT_FIELDS:
            raise ValueError(f"parent field must be one of {PARENT_FIELDS}, got {field_name!r}")
        return getattr(self, field_name)


# --------------------------------------------------------------------------- #
# Public class
# --------------------------------------------------------------------------- #
class FmecaDatabase:
    """
    Ordered, read-only collection of :class:`NodeRecord`.

    Parameters
    ----------
    records : Sequence[NodeRecord]
        Records in declaration order. Ids must be unique.

    Notes
    -----
    * ``ids`` keeps declaration order; every indexed operation of the compiler
      relies on it.
    * Parent references must point at ids of the same database. They are
      checked against both the ``parent`` and the ``inherit`` field.
    """

    def __init__(self, records: Sequence[NodeRecord]) -> None:
        if not records:
            raise FmecaGraphError("an FMECA database must contain at least one record")
        if not all(isinstance(r, NodeRecord) for r in records):
            raise TypeError("All records must be NodeRecord instances")

        self._records: Dict[str, NodeRecord] = {}
        duplicates = []
        for rec in records:
            if rec.id in self._records:
                duplicates.append(rec.id)
            self._records[rec.id] = rec
        if duplicates:
            raise FmecaGraphError(f"duplicated node ids: {duplicates}", duplicates)

        self.ids: List[str] = [r.id for r in records]

        unknown = [
            ref
            for rec in records
            for name in PARENT_FIELDS
            for ref in rec.parent_ref(name)
            if ref not in self._records
        ]
        if unknown:
            raise SchemaMismatch("parent references", dict.fromkeys(unknown))

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #
    @classmethod
    def from_source(cls, source: JsonLike) -> FmecaDatabase:
        """
        Build a database from a JSON file path, a mapping ``{id: record}`` or
        a list of records each carrying an ``id`` key.
        """
        if isinstance(source, (str, Path)):
            with open(source, "r", encoding="utf-8") as f:
                source = json.load(f)
        if isinstance(source, Mapping):
            items = list(source.items())
        elif isinstance(source, Sequence):
            items = []
            for i, rec in enumerate(source):
                if not isinstance(rec, Mapping) or not rec.get("id"):
                    raise TypeError(f"record #{i + 1} must be a mapping with an 'id'")
                items.append((rec["id"], rec))
        else:
            raise TypeError("source must be a file path, a mapping or a list of records")
        return cls([NodeRecord.from_dict(k, v) for k, v in items])

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    @property
    def terminal_ids(self) -> List[str]:
        return [i for i in self.ids if self._records[i].is_terminal]

    def parent_refs(self, field_name: str = "parent") -> Dict[str, Tuple[str, ...]]:
        """Map every id to the parents found in ``field_name``."""
        return {i: self._records[i].parent_ref(field_name) for i in self.ids}

    def get(self, node_id: str) -> Optional[NodeRecord]:
        return self._records.get(node_id)

    def __getitem__(self, node_id: str) -> NodeRecord:
        try:
            return self._records[node_id]
        except KeyError:
            raise KeyError(f"Node '{node_id}' not found") from None

    def __iter__(self) -> Iterator[NodeRecord]:
        return (self._records[i] for i in self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._records

    def __repr__(self) -> str:
        return f"FmecaDatabase(n_nodes={len(self)}, n_terminal={len(self.terminal_ids)})"

# -*- coding: utf-8 -*-
"""
fmeca_graph.labels
~~~~~~~~~~~~~~~~~~

Two parallel label sets per node.

* ``render`` labels go on the live figure. A placeholder label reserves room
  for the final text and carries the node's 1-based position, encoded as a
  zero-padded number over the head of the placeholder (``"001#"``).
* ``copy`` labels are what a copied figure should finally display: the
  alternate name when there is one, else the database id.

The positional side table ``copy_labels[position]`` makes the encoded
position sufficient to re-label a copy.

>>> codec = PlaceholderCodec(width=3)
>>> codec.encode("Leak", 7)
'007k'
>>> codec.encode("A", 12)
'012#'
>>> codec.decode('012#')
12
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

MIN_PLACEHOLDER_LENGTH = 4
FILLER = "#"


@dataclass(frozen=True)
class PlaceholderCodec:
    """Encode a node position at the head of a placeholder text."""

    width: int = MIN_PLACEHOLDER_LENGTH - 1
    filler: str = FILLER

    @classmethod
    def for_size(cls, n_nodes: int) -> PlaceholderCodec:
        """Codec wide enough for positions up to ``n_nodes``."""
        return cls(width=max(MIN_PLACEHOLDER_LENGTH - 1, len(str(n_nodes))))

    @property
    def min_length(self) -> int:
        return self.width + 1

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(r"^(\d{%d})" % self.width)

    def encode(self, text: str, position: int) -> str:
        if position < 1 or len(str(position)) > self.width:
            raise ValueError(f"position {position} does not fit in {self.width} digits")
        label = text.ljust(self.min_length, self.filler)
        return f"{position:0{self.width}d}" + label[self.width:]

    def decode(self, label: str) -> Optional[int]:
        """Position encoded in ``label``, or ``None`` if it carries none."""
        m = self.pattern.match(label.strip())
        return int(m.group(1)) if m else None


@dataclass(frozen=True)
class LabelSet:
    render: List[str]
    copy: List[str]
    encoded: List[bool]
    codec: PlaceholderCodec

    @property
    def copy_labels(self) -> Dict[int, str]:
        """Side table ``1-based position -> copy label``."""
        return {pos: label for pos, label in enumerate(self.copy, start=1)}


def encode_labels(
    ids: Sequence[str],
    names: Mapping[str, str],
    placeholders: Mapping[str, str],
    virtual_labels: Sequence[str] = (),
) -> LabelSet:
    """
    Build render and copy labels for primary nodes followed by virtual nodes.

    Virtual nodes use their annotation text verbatim for both labels.
    """
    codec = PlaceholderCodec.for_size(len(ids) + len(virtual_labels))
    render: List[str] = []
    copy: List[str] = []
    encoded: List[bool] = []
    for position, node_id in enumerate(ids, start=1):
        name = names.get(node_id, node_id)
        if node_id in placeholders:
            render.append(codec.encode(placeholders[node_id], position))
            encoded.append(True)
        else:
            render.append(name)
            encoded.append(False)
        copy.append(name)
    for text in virtual_labels:
        render.append(text)
        copy.append(text)
        encoded.append(False)
    return LabelSet(render=render, copy=copy, encoded=encoded, codec=codec)

# -*- coding: utf-8 -*-
"""
fmeca_graph.terminals
~~~~~~~~~~~~~~~~~~~~~

Validate terminal annotations and synthesize one virtual sink per annotation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Dict, List, Mapping

from .errors import FmecaGraphError, InvalidTerminalAnnotation
from .weights import Weight

logger = logging.getLogger(__name__)

VIRTUAL_PREFIX = "VirtualNode"


@dataclass(frozen=True)
class VirtualNode:
    """A sink node standing for the annotation attached to a terminal step."""

    id: str
    source: str
    label: str
    weight: Weight


def validate_terminal_nodes(annotations: Mapping[str, str], terminal_ids: Collection[str]) -> None:
    """
    Check that every annotated id is a terminal node.

    All offending ids are collected and reported by a single
    :class:`InvalidTerminalAnnotation`.
    """
    terminal = set(terminal_ids)
    bad = [node_id for node_id in annotations if node_id not in terminal]
    if bad:
        raise InvalidTerminalAnnotation(bad)


def synthesize_virtual_nodes(
    annotations: Mapping[str, str],
    terminal_ids: Collection[str],
    weights: Dict[str, Weight],
    reserved: Collection[str] = (),
) -> List[VirtualNode]:
    """
    Build ``VirtualNode1 .. VirtualNodek`` in annotation order.

    Each virtual node hangs off its source with the source's resolved weight.
    Nothing is built unless every annotation is valid. ``reserved`` lists ids
    already taken by database nodes.
    """
    validate_terminal_nodes(annotations, terminal_ids)
    ids = [f"{VIRTUAL_PREFIX}{k}" for k in range(1, len(annotations) + 1)]
    clash = [i for i in ids if i in set(reserved)]
    if clash:
        raise FmecaGraphError(f"virtual node ids already used by the database: {clash}", clash)
    logger.debug("synthesizing %d virtual node(s)", len(ids))
    return [
        VirtualNode(
            id=node_id,
            source=source,
            label=text,
            weight=weights[source],
        )
        for node_id, (source, text) in zip(ids, annotations.items())
    ]

# src/core/graph.py - v1
"""Dependency graph of build records, for inspecting bundle composition.

Nodes are absolute filenames carrying ``logical_path``, ``kind`` and
``digest`` attributes. An edge from a processed file to a path it declared
directly carries ``requires=True``; an edge from a bundle to one of its
members carries the member's ``position`` in the bundle. An edge can carry
both.
"""

from __future__ import annotations

import logging
from typing import Iterable

import networkx as nx

from assetpipe.core.models import (
    BuildRecord,
    BundledRecord,
    ProcessedRecord,
    StaticRecord,
)

logger = logging.getLogger(__name__)


def dependency_graph(records: Iterable[BuildRecord]) -> nx.DiGraph:
    """Build a directed graph from records.

    Args:
        records: Any mix of static, processed and bundled records.

    Returns:
        networkx DiGraph keyed by filename.
    """
    graph = nx.DiGraph()

    for record in records:
        graph.add_node(
            record.filename,
            logical_path=record.logical_path,
            kind=record.kind,
            digest=record.digest,
        )
        if isinstance(record, BundledRecord):
            for position, member in enumerate(record.required_paths):
                if member != record.filename:
                    graph.add_edge(
                        record.filename, member, position=position
                    )
        elif isinstance(record, ProcessedRecord):
            for member in record.required_paths:
                if member != record.filename:
                    graph.add_edge(record.filename, member, requires=True)
        elif isinstance(record, StaticRecord):
            continue
        else:
            raise TypeError(f"Unknown build record type: {type(record).__name__}")

    logger.debug(
        "Dependency graph: %d nodes, %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def require_order(graph: nx.DiGraph) -> list[str]:
    """Files ordered so that every file comes after the files it requires.

    Only ``requires`` edges are considered. Ties are broken by filename so
    the order is deterministic.

    Raises:
        networkx.NetworkXUnfeasible: If the requires edges form a cycle.
    """
    requires = nx.DiGraph()
    requires.add_nodes_from(graph.nodes)
    requires.add_edges_from(
        (u, v) for u, v, direct in graph.edges(data="requires") if direct
    )
    return list(nx.lexicographical_topological_sort(requires.reverse(copy=False)))

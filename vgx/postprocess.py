"""Format-specific passes over the final graph."""

from __future__ import annotations

from typing import Dict, List

from .models import Graph, NodeRelationship


def apply_dot_settings(graph: Graph, settings) -> Graph:
    if settings.show_weights() and settings.weight_threshold:
        threshold = settings.min_weight()
        graph.relationships = [rel for rel in graph.relationships if rel.weight >= threshold]
    if settings.use_subgraphs():
        cluster_subgraphs(graph)
    return graph


def cluster_subgraphs(graph: Graph) -> None:
    for node in graph.nodes:
        node.subgraph = node.type.value


def cap_edges_per_node(relationships: List[NodeRelationship], max_per_node: int) -> List[NodeRelationship]:
    """Keep at most ``max_per_node`` outgoing edges per source, heaviest first."""
    kept: List[NodeRelationship] = []
    counts: Dict[str, int] = {}
    for rel in sorted(relationships, key=lambda r: -r.weight):
        n = counts.get(rel.source, 0)
        if n < max_per_node:
            kept.append(rel)
            counts[rel.source] = n + 1
    return kept


def apply_mmd_settings(graph: Graph, settings) -> Graph:
    cap = settings.edge_cap_per_node()
    if cap:
        graph.relationships = cap_edges_per_node(graph.relationships, cap)
    return graph

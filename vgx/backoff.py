"""Graph reduction for tag graphs that are too large to render as mermaid.

The reducer keeps the highest-scoring tags and, for each of them, the
best-connected member notes, then rebuilds a unique edge set within the caps.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple

from .graph_nx import to_multidigraph
from .metrics import tag_clusters
from .models import GraphNode, NodeRelationship, NodeType

logger = logging.getLogger("vgx.backoff")


def tag_importance(cluster_size: int) -> float:
    # capped so one huge tag does not outrank several mid-sized ones
    return min(cluster_size, 10) * math.log(cluster_size + 1)


def rank_tags(clusters: Dict[str, List[str]], max_tags: int) -> List[str]:
    ranked = sorted(clusters, key=lambda tag: -tag_importance(len(clusters[tag])))
    return ranked[:max(0, max_tags)]


def select_notes(clusters: Dict[str, List[str]], tags: List[str], out_degree: Dict[str, int],
                 budget: int) -> List[str]:
    """Pick up to ``budget`` notes, split evenly over ``tags`` in rank order."""
    selected: List[str] = []
    if budget <= 0 or not tags:
        return selected
    quota = math.ceil(budget / len(tags))
    seen = set()
    for tag in tags:
        members = list(dict.fromkeys(clusters.get(tag, [])))
        members.sort(key=lambda note: -out_degree.get(note, 0))
        for note in members[:quota]:
            if note in seen:
                continue
            if len(selected) >= budget:
                return selected
            seen.add(note)
            selected.append(note)
    return selected


def _is_tag_edge(nodes: Dict[str, GraphNode], rel: NodeRelationship) -> bool:
    source, target = nodes.get(rel.source), nodes.get(rel.target)
    if source is None or target is None:
        return False
    return source.type is not NodeType.TAG and target.type is NodeType.TAG


def rebuild_relationships(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship],
                          max_relationships: int) -> List[NodeRelationship]:
    ordered = sorted(relationships, key=lambda rel: -rel.weight)
    kept: List[NodeRelationship] = []
    seen = set()

    def _take(rel: NodeRelationship) -> None:
        if len(kept) >= max_relationships or rel.key() in seen:
            return
        if rel.source not in nodes or rel.target not in nodes:
            return
        seen.add(rel.key())
        kept.append(rel)

    # note -> tag edges first, then anything else that survived
    for rel in ordered:
        if _is_tag_edge(nodes, rel):
            _take(rel)
    for rel in ordered:
        _take(rel)
    return kept


def backoff_singularity(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship],
                        caps: Tuple[int, int, int]) -> None:
    """Reduce ``nodes``/``relationships`` in place to fit ``caps``.

    ``caps`` is ``(max_nodes, max_relationships, max_tags)``. With no tags to
    keep the result is the first ``max_nodes`` notes and no edges.
    """
    max_nodes, max_relationships, max_tags = caps
    clusters = tag_clusters(nodes, relationships)
    tags = rank_tags(clusters, min(max_tags, max_nodes))

    if tags:
        graph = to_multidigraph(nodes, relationships)
        out_degree = dict(graph.out_degree())
        notes = select_notes(clusters, tags, out_degree, max_nodes - len(tags))
    else:
        notes = [key for key, node in nodes.items() if node.type is NodeType.NOTE][:max_nodes]

    reduced: Dict[str, GraphNode] = {}
    for key in tags + notes:
        reduced[key] = nodes[key]
    kept = rebuild_relationships(reduced, relationships, max_relationships) if tags else []

    logger.info(
        "Backoff reduced graph from %d nodes, %d relationships to %d nodes, %d relationships",
        len(nodes), len(relationships), len(reduced), len(kept),
    )
    nodes.clear()
    nodes.update(reduced)
    relationships[:] = kept

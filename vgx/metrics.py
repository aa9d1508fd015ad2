"""Size metrics over a note/tag working graph and the oversize predicate.

All functions take the node map and relationship list explicitly so each
metric can be evaluated on any intermediate graph.
"""

from __future__ import annotations

import math
from typing import Dict, List

from .models import GraphNode, NodeRelationship, NodeType

# mermaid readability limits
MAX_VERTICES = 100
MAX_IMPLIED_EDGES = 75
MAX_ELEMENTS = 150
MAX_TAGS_VISIBLE = 50
DEFAULT_E_MAX = 150


def note_count(nodes: Dict[str, GraphNode]) -> int:
    return sum(1 for n in nodes.values() if n.type is NodeType.NOTE)


def tag_count(nodes: Dict[str, GraphNode]) -> int:
    return sum(1 for n in nodes.values() if n.type is NodeType.TAG)


def tag_clusters(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship]) -> Dict[str, List[str]]:
    """Map each tag to the notes pointing at it, in relationship order."""
    clusters: Dict[str, List[str]] = {}
    for rel in relationships:
        source, target = nodes.get(rel.source), nodes.get(rel.target)
        if source is None or target is None:
            continue
        if source.type is NodeType.NOTE and target.type is NodeType.TAG:
            clusters.setdefault(rel.target, []).append(rel.source)
    return clusters


def avg_tags_per_note(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship]) -> float:
    """Average tag edges per note, over notes with at least one tag."""
    per_note: Dict[str, int] = {}
    for notes in tag_clusters(nodes, relationships).values():
        for note in notes:
            per_note[note] = per_note.get(note, 0) + 1
    return sum(per_note.values()) / max(1, len(per_note))


def implied_note_edges(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship]) -> int:
    """Upper bound of note-note pairs sharing a tag, summed per tag."""
    total = 0
    for notes in tag_clusters(nodes, relationships).values():
        size = len(notes)
        if size > 1:
            total += size * (size - 1) // 2
    return total


def optimal_note_count(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship],
                       e_max: int = DEFAULT_E_MAX) -> int:
    t = tag_count(nodes)
    k = avg_tags_per_note(nodes, relationships)
    return int(math.floor(math.sqrt((2 * e_max * t) / max(1.0, k))))


def is_oversized(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship], settings,
                 e_max: int = DEFAULT_E_MAX) -> bool:
    """True when the graph is past what a mermaid renderer handles well.

    Always False for single-root views and when automatic reduction is off.
    """
    if settings.is_single_view():
        return False
    if not settings.auto_reduce():
        return False

    n = note_count(nodes)
    t = tag_count(nodes)
    should_e = implied_note_edges(nodes, relationships)
    max_e = min(e_max, MAX_IMPLIED_EDGES)
    return n > MAX_VERTICES or should_e > max_e or n + should_e > MAX_ELEMENTS or t > MAX_TAGS_VISIBLE

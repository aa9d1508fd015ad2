"""Text serializers for mermaid (.mmd) and graphviz (.dot)."""

from __future__ import annotations

from typing import Dict, List

from .models import Graph, GraphNode, NodeType
from .sanitize import clean_id, safe_escape

FILL_COLORS = {
    NodeType.NOTE: "#e3f2fd",
    NodeType.ATTACHMENT: "#ffcc80",
    NodeType.TAG: "#c8e6c9",
    NodeType.FOLDER: "#fff9c4",
}


def render_mermaid(graph: Graph, direction: str = "TD") -> str:
    lines = [f"graph {direction}"]
    for node in graph.nodes:
        lines.append(f'    {clean_id(node.id)}["{safe_escape(node.name)}"]')
    for rel in graph.relationships:
        lines.append(f"    {clean_id(rel.source)} --> {clean_id(rel.target)}")
    return "\n".join(lines) + "\n"


def _dot_node(node: GraphNode, indent: str) -> str:
    fill = FILL_COLORS[node.type]
    return f'{indent}"{clean_id(node.id)}" [label="{safe_escape(node.name)}", fillcolor="{fill}", style="filled,rounded"];'


def render_dot(graph: Graph, vault_name: str, subgraphs: bool = False, include_weights: bool = False) -> str:
    lines = [
        f'digraph "{safe_escape(vault_name)}" {{',
        "    rankdir=LR;",
        "    node [shape=box, style=rounded];",
    ]
    if subgraphs:
        clusters: Dict[str, List[GraphNode]] = {}
        for node in graph.nodes:
            clusters.setdefault(node.subgraph or node.type.value, []).append(node)
        for cluster, members in clusters.items():
            lines.append(f"    subgraph cluster_{clean_id(cluster)} {{")
            lines.append(f'        label="{safe_escape(cluster)}";')
            lines.append("        style=rounded;")
            lines.append('        color="#cccccc";')
            lines.extend(_dot_node(node, "        ") for node in members)
            lines.append("    }")
    else:
        lines.extend(_dot_node(node, "    ") for node in graph.nodes)
    for rel in graph.relationships:
        weight = f" [weight={rel.weight}]" if include_weights and rel.weight > 1 else ""
        lines.append(f'    "{clean_id(rel.source)}" -> "{clean_id(rel.target)}"{weight};')
    lines.append("}")
    return "\n".join(lines) + "\n"

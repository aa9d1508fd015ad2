from vgx.models import GraphNode, NodeRelationship, NodeType


def tagged_graph(note_count, tag_count, tags_per_note=1, stride=1):
    """Notes ``n{i}.md`` each pointing at ``tags_per_note`` of the tags ``t{j}``."""
    nodes = {}
    relationships = []
    for i in range(note_count):
        key = f"n{i:03d}.md"
        nodes[key] = GraphNode(id=key, name=f"n{i:03d}", type=NodeType.NOTE)
    for j in range(tag_count):
        nodes[f"t{j}"] = GraphNode(id=f"t{j}", name=f"t{j}", type=NodeType.TAG)
    if tag_count:
        for i in range(note_count):
            for k in range(tags_per_note):
                tag = f"t{(i + k * stride) % tag_count}"
                relationships.append(NodeRelationship(source=f"n{i:03d}.md", target=tag, weight=1))
    return nodes, relationships

from vgx.config import ExportSettings
from vgx.models import Graph, GraphNode, NodeRelationship, NodeType
from vgx.postprocess import apply_dot_settings, apply_mmd_settings, cap_edges_per_node


def _graph(weights):
    nodes = [GraphNode(id=k, name=k, type=NodeType.NOTE) for k in ("a", "b", "c", "d")]
    targets = ["b", "c", "d"]
    rels = [NodeRelationship("a", targets[i % 3], w) for i, w in enumerate(weights)]
    return Graph(nodes=nodes, relationships=rels)


def test_dot_weight_threshold():
    g = apply_dot_settings(_graph([1, 1, 3]), ExportSettings(export_format="dot", include_weights=True, weight_threshold=2))
    assert [(r.target, r.weight) for r in g.relationships] == [("d", 3)]


def test_dot_threshold_ignored_without_weights():
    g = apply_dot_settings(_graph([1, 1, 3]), ExportSettings(export_format="dot", weight_threshold=2))
    assert len(g.relationships) == 3


def test_dot_threshold_falls_back_on_junk():
    s = ExportSettings(export_format="dot", include_weights=True, weight_threshold="lots")
    assert len(apply_dot_settings(_graph([1, 1, 3]), s).relationships) == 3


def test_dot_subgraphs_cluster_by_type():
    g = _graph([1])
    g.nodes.append(GraphNode(id="t", name="t", type=NodeType.TAG))
    apply_dot_settings(g, ExportSettings(export_format="dot", subgraphs=True))
    assert [n.subgraph for n in g.nodes] == ["note", "note", "note", "note", "tag"]


def test_cap_edges_per_node_keeps_heaviest():
    rels = [
        NodeRelationship("a", "b", 1),
        NodeRelationship("a", "c", 5),
        NodeRelationship("a", "d", 2),
        NodeRelationship("b", "c", 1),
    ]
    kept = cap_edges_per_node(rels, 2)
    assert [(r.source, r.target) for r in kept] == [("a", "c"), ("a", "d"), ("b", "c")]


def test_cap_exempts_nodes_under_the_limit():
    rels = [NodeRelationship("a", t, 1) for t in "bcd"] + [NodeRelationship("b", "c", 1)]
    assert cap_edges_per_node(rels, 3) == rels


def test_mmd_settings_cap_and_disable():
    rels = [NodeRelationship("a", str(i), 1) for i in range(15)]
    g = apply_mmd_settings(Graph(relationships=list(rels)), ExportSettings())
    assert len(g.relationships) == 10
    g = apply_mmd_settings(Graph(relationships=list(rels)), ExportSettings(max_e_per_v=0))
    assert len(g.relationships) == 15
    g = apply_mmd_settings(Graph(relationships=list(rels)), ExportSettings(max_e_per_v=None))
    assert len(g.relationships) == 10

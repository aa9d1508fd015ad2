import pathlib, logging, networkx as nx
from .models import Graph

logger = logging.getLogger("vgx.graph_nx")

def to_multidigraph(nodes, relationships):
    """Build a MultiDiGraph from a node map and an edge list; parallel edges are kept."""
    G = nx.MultiDiGraph()
    for key, node in nodes.items():
        G.add_node(key, name=node.name, type=node.type.value)
    for rel in relationships:
        if rel.source in G and rel.target in G:
            G.add_edge(rel.source, rel.target, weight=rel.weight)
    return G

def graph_to_nx(graph: Graph):
    G = nx.MultiDiGraph()
    for n in graph.nodes:
        attrs = {"label": n.name, "type": n.type.value}
        if n.subgraph is not None:
            attrs["subgraph"] = n.subgraph
        G.add_node(n.id, **attrs)
    for r in graph.relationships:
        G.add_edge(r.source, r.target, weight=r.weight)
    return G

def vault_stats(index):
    """Markdown file count and the number of notes touched by a resolved link."""
    G = nx.DiGraph()
    for source, dests in index.resolved_links().items():
        for target, count in dests.items():
            G.add_edge(source, target, weight=count)
    connected = [n for n in G.nodes if G.degree(n) > 0]
    return {"markdown_files": len(index.markdown_files()), "connected_notes": len(connected),
            "components": nx.number_weakly_connected_components(G) if len(G) else 0}

def write_network_files(graph: Graph, out_dir: pathlib.Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    G = graph_to_nx(graph)
    gexf, graphml = out_dir / 'graph.gexf', out_dir / 'graph.graphml'
    nx.write_gexf(G, str(gexf))
    nx.write_graphml(G, str(graphml))
    logger.info("Wrote %s and %s", gexf, graphml)
    return gexf, graphml

import argparse, os, pathlib
from vgx.config import load_settings
from vgx.errors import ExportError
from vgx.exporter import build_graph
from vgx.graph_nx import write_network_files
from vgx.vault_index import VaultIndex

def main(argv=None):
    ap = argparse.ArgumentParser(description="Write the exported graph as GEXF and GraphML")
    ap.add_argument("--vault", default=os.getenv("VAULT_PATH"), required=os.getenv("VAULT_PATH") is None)
    ap.add_argument("--out", default=".vgx/exports/graph")
    args = ap.parse_args(argv)
    settings = load_settings()
    try:
        graph = build_graph(VaultIndex.open(args.vault), settings)
    except ExportError as exc:
        print(f"[graph] {exc}")
        return 1
    gexf, graphml = write_network_files(graph, pathlib.Path(args.out))
    print(f"[graph] wrote {gexf} and {graphml}")
    return 0

if __name__ == '__main__':
    raise SystemExit(main())

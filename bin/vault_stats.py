import argparse, os
from vgx.graph_nx import vault_stats
from vgx.vault_index import VaultIndex

def main(argv=None):
    ap = argparse.ArgumentParser(description="Count markdown files and linked notes in a vault")
    ap.add_argument("--vault", default=os.getenv("VAULT_PATH"), required=os.getenv("VAULT_PATH") is None)
    args = ap.parse_args(argv)
    stats = vault_stats(VaultIndex.open(args.vault))
    print(f"[stats] your vault has {stats['markdown_files']} markdown files")
    print(f"[stats] {stats['connected_notes']} notes have connections ({stats['components']} linked groups)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

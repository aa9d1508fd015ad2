import argparse, logging, os, pathlib, sys

from vgx.config import DIRECTIONS, EXPORT_FORMATS, STRATEGIES, load_settings, save_settings
from vgx.exporter import export_graph
from vgx.vault_index import VaultIndex


def main(argv=None):
    ap = argparse.ArgumentParser(description="Export the vault graph as a .mmd or .dot file at the vault root")
    ap.add_argument("--vault", default=os.getenv("VAULT_PATH"), help="Vault directory (default: $VAULT_PATH)")
    ap.add_argument("--name", default=None, help="Output file name without extension")
    ap.add_argument("--format", choices=EXPORT_FORMATS, default=None)
    ap.add_argument("--strategy", choices=STRATEGIES, default=None)
    ap.add_argument("--root-tag", default=None)
    ap.add_argument("--root-note", default=None)
    ap.add_argument("--direction", choices=DIRECTIONS, default=None)
    ap.add_argument("--include-orphans", action="store_true")
    ap.add_argument("--include-attachments", action="store_true")
    ap.add_argument("--include-weights", action="store_true")
    ap.add_argument("--subgraphs", action="store_true")
    ap.add_argument("--settings", default=None, help="Settings file (default: $VGX_ROOT/config/export.yml)")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if not args.vault:
        ap.error("--vault is required when VAULT_PATH is not set")

    settings_file = pathlib.Path(args.settings) if args.settings else None
    settings = load_settings(settings_file)
    overrides = {
        "export_format": args.format,
        "relationship_strategy": args.strategy,
        "root_tag": args.root_tag,
        "root_note": args.root_note,
        "direction": args.direction,
    }
    for flag in ("include_orphans", "include_attachments", "include_weights", "subgraphs"):
        if getattr(args, flag):
            overrides[flag] = True
    settings = settings.replace(**{k: v for k, v in overrides.items() if v is not None})

    index = VaultIndex.open(args.vault)
    written = export_graph(
        index,
        settings,
        args.name if args.name is not None else settings.last_exported,
        notify=lambda msg: print(f"[export] {msg}"),
        persist=lambda s: save_settings(s, settings_file),
    )
    return 0 if written else 1


if __name__ == "__main__":
    sys.exit(main())

"""Export a vault's note/tag/folder graph as mermaid or graphviz text."""

from .config import ExportSettings, load_settings, save_settings
from .errors import ExportError, ExportWriteError, RootNotFoundError
from .exporter import build_graph, export_graph, render_graph
from .vault_index import VaultIndex

__all__ = [
    "ExportSettings",
    "load_settings",
    "save_settings",
    "ExportError",
    "ExportWriteError",
    "RootNotFoundError",
    "build_graph",
    "export_graph",
    "render_graph",
    "VaultIndex",
]

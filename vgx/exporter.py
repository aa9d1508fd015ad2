"""Graph export pipeline: harvest -> strategy -> format pass -> printer -> file."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import ExportSettings, save_settings
from .errors import ExportError, ExportWriteError
from .harvest import harvest_vault
from .models import Graph, VaultEnv
from .postprocess import apply_dot_settings, apply_mmd_settings
from .printers import render_dot, render_mermaid
from .strategies import load_strategy
from .trace import GraphTrace
from .utils.io import normalize_path

logger = logging.getLogger("vgx.exporter")

EXTENSIONS = {"mmd": "mmd", "dot": "dot"}


def build_graph(index, settings: ExportSettings, trace: Optional[GraphTrace] = None) -> Graph:
    """Build the final graph for ``settings``; raises RootNotFoundError for a missing root."""
    env = harvest_vault(VaultEnv(index=index, settings=settings))
    if trace is not None:
        trace.record("harvest", (0, 0), (len(env.nodes), len(env.relationships)))

    load_strategy(settings.strategy(), trace=trace).project(env)
    graph = env.to_graph()

    before = (len(graph.nodes), len(graph.relationships))
    if settings.output_format() == "dot":
        apply_dot_settings(graph, settings)
    else:
        apply_mmd_settings(graph, settings)
    if trace is not None:
        trace.record("postprocess", before, (len(graph.nodes), len(graph.relationships)),
                     format=settings.output_format())
    return graph


def render_graph(graph: Graph, settings: ExportSettings, vault_name: str) -> str:
    if settings.output_format() == "dot":
        return render_dot(graph, vault_name, subgraphs=settings.use_subgraphs(),
                          include_weights=settings.show_weights())
    logger.debug("Nodes count: %d, Relationships count: %d", len(graph.nodes), len(graph.relationships))
    return render_mermaid(graph, settings.graph_direction())


def export_basename(index, provided: str = "") -> str:
    if provided and provided.strip():
        return normalize_path(provided.strip())
    return normalize_path(f"{index.get_name()}-graph-data")


def _log_notice(message: str) -> None:
    logger.info(message)


def export_graph(index, settings: ExportSettings, provided_filename: str = "",
                 notify: Callable[[str], None] = _log_notice,
                 persist: Optional[Callable[[ExportSettings], object]] = save_settings,
                 trace: Optional[GraphTrace] = None) -> Optional[str]:
    """Build, render and write the graph; return the written path or None.

    Every failure is reported through ``notify`` and nothing is written.
    """
    try:
        graph = build_graph(index, settings, trace=trace)
        text = render_graph(graph, settings, index.get_name())
        basename = export_basename(index, provided_filename)
        filename = normalize_path(f"{basename}.{EXTENSIONS[settings.output_format()]}")
        try:
            index.create(filename, text)
        except OSError as exc:
            raise ExportWriteError(str(exc)) from exc
    except ExportWriteError as exc:
        logger.error("Export failed: %s", exc)
        notify(f"There was a problem exporting graph data: {exc}")
        return None
    except ExportError as exc:
        logger.warning("Export aborted: %s", exc)
        notify(str(exc))
        return None

    if persist is not None:
        try:
            persist(settings.replace(last_exported=basename))
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
    notify(f"Graph data exported to {index.get_name()}/{filename}")
    return filename

"""Relationship strategies: project the harvested superset graph onto one view."""

from __future__ import annotations

import abc
import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from .backoff import backoff_singularity
from .errors import RootNotFoundError
from .metrics import is_oversized
from .models import GraphNode, NodeRelationship, NodeType, VaultEnv

logger = logging.getLogger("vgx.strategies")

# past this many elements mermaid output is usually unreadable
MERMAID_ELEMENT_WARNING = 200


def prune_orphans(nodes: Dict[str, GraphNode], relationships: List[NodeRelationship]) -> None:
    """Drop every node that is not an endpoint of some relationship, in place."""
    connected = set()
    for rel in relationships:
        connected.add(rel.source)
        connected.add(rel.target)
    kept = {key: node for key, node in nodes.items() if key in connected}
    nodes.clear()
    nodes.update(kept)


class Strategy(abc.ABC):
    """A projection of the harvested graph onto one organizing principle."""

    name: str = ""
    prunes_orphans = True

    def __init__(self, trace=None):
        self.trace = trace

    @abc.abstractmethod
    def select(self, env: VaultEnv) -> Tuple[Dict[str, GraphNode], List[NodeRelationship]]:
        """Return the nodes and relationships this view keeps."""

    def refine(self, env: VaultEnv, nodes: Dict[str, GraphNode], relationships: List[NodeRelationship]) -> None:
        """Hook for post-selection reduction; no-op by default."""

    def project(self, env: VaultEnv) -> VaultEnv:
        before = (len(env.nodes), len(env.relationships))
        nodes, relationships = self.select(env)
        self._record("strategy", before, (len(nodes), len(relationships)), strategy=self.name)
        self.refine(env, nodes, relationships)
        if self.prunes_orphans and not env.settings.keep_orphans():
            before = (len(nodes), len(relationships))
            prune_orphans(nodes, relationships)
            self._record("prune", before, (len(nodes), len(relationships)))
        env.nodes = nodes
        env.relationships = relationships
        return env

    def _record(self, stage, before, after, **detail):
        if self.trace is not None:
            self.trace.record(stage, before, after, **detail)


class TypedStrategy(Strategy):
    """Keeps nodes of ``node_types`` and edges whose endpoint types match ``edge``."""

    node_types: FrozenSet[NodeType] = frozenset()
    edge: Tuple[NodeType, NodeType] = (NodeType.NOTE, NodeType.NOTE)

    def select(self, env: VaultEnv):
        nodes = {key: node for key, node in env.nodes.items() if node.type in self.node_types}
        source_type, target_type = self.edge
        relationships = [
            rel for rel in env.relationships
            if env.node_type(rel.source) is source_type and env.node_type(rel.target) is target_type
        ]
        return nodes, relationships


class TagStrategy(TypedStrategy):
    name = "tags"
    node_types = frozenset({NodeType.NOTE, NodeType.TAG})
    edge = (NodeType.NOTE, NodeType.TAG)

    def refine(self, env, nodes, relationships):
        # backoff only guards the mermaid renderer
        if env.settings.output_format() != "mmd":
            return
        if not is_oversized(nodes, relationships, env.settings):
            logger.debug("Graph size within acceptable limits")
            return
        before = (len(nodes), len(relationships))
        caps = env.settings.backoff_caps()
        backoff_singularity(nodes, relationships, caps)
        self._record("backoff", before, (len(nodes), len(relationships)), caps=caps)
        if len(nodes) + len(relationships) > MERMAID_ELEMENT_WARNING:
            logger.warning("Graph may still be too large for optimal Mermaid rendering")


class LinkStrategy(TypedStrategy):
    name = "internalLinks"
    node_types = frozenset({NodeType.NOTE})
    edge = (NodeType.NOTE, NodeType.NOTE)


class FolderStrategy(TypedStrategy):
    name = "folders"
    node_types = frozenset({NodeType.NOTE, NodeType.FOLDER})
    edge = (NodeType.NOTE, NodeType.FOLDER)


class SingleTagStrategy(Strategy):
    name = "singleTag"
    prunes_orphans = False

    def select(self, env: VaultEnv):
        root = env.settings.root_tag or ""
        root_node = env.nodes.get(root)
        if not root or root_node is None or root_node.type is not NodeType.TAG:
            raise RootNotFoundError("tag", root)
        nodes = {root: root_node}
        relationships = []
        for rel in env.relationships:
            if rel.target == root and env.node_type(rel.source) is NodeType.NOTE:
                nodes[rel.source] = env.nodes[rel.source]
            elif rel.source == root and env.node_type(rel.target) is NodeType.NOTE:
                nodes[rel.target] = env.nodes[rel.target]
            else:
                continue
            relationships.append(rel)
        return nodes, relationships


class SingleNoteStrategy(Strategy):
    name = "singleNote"
    prunes_orphans = False

    def find_root(self, env: VaultEnv) -> Optional[str]:
        title = env.settings.root_note or ""
        if not title:
            return None
        notes = [(key, node) for key, node in env.nodes.items() if node.type is NodeType.NOTE]
        for key, node in notes:
            if node.name == title:
                return key
        # a vault path works too
        for key, node in notes:
            if key == title or key == title + ".md":
                return key
        return None

    def select(self, env: VaultEnv):
        root = self.find_root(env)
        if root is None:
            raise RootNotFoundError("note", env.settings.root_note or "")
        nodes = {root: env.nodes[root]}
        relationships = []
        for rel in env.relationships:
            if rel.source == root:
                other = rel.target
            elif rel.target == root:
                other = rel.source
            else:
                continue
            if other not in env.nodes:
                continue
            nodes[other] = env.nodes[other]
            relationships.append(rel)
        return nodes, relationships


STRATEGIES = {
    cls.name: cls
    for cls in (TagStrategy, LinkStrategy, FolderStrategy, SingleTagStrategy, SingleNoteStrategy)
}


def load_strategy(name: str, trace=None) -> Strategy:
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"unknown relationship strategy: {name}") from None
    logger.debug("Using relationship strategy %s", name)
    return cls(trace=trace)

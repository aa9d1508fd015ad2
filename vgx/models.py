"""Data models for the note/relationship graph."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, List, Optional


class NodeType(str, enum.Enum):
    NOTE = "note"
    ATTACHMENT = "attachment"
    TAG = "tag"
    FOLDER = "folder"


@dataclasses.dataclass(slots=True)
class GraphNode:
    """A vertex of the exported graph, keyed by ``id``."""

    id: str
    name: str
    type: NodeType
    subgraph: Optional[str] = None


@dataclasses.dataclass(slots=True)
class NodeRelationship:
    """A directed edge between two node ids."""

    source: str
    target: str
    weight: int = 1

    def key(self):
        return (self.source, self.target)


@dataclasses.dataclass(slots=True)
class Graph:
    nodes: List[GraphNode] = dataclasses.field(default_factory=list)
    relationships: List[NodeRelationship] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(slots=True)
class VaultEnv:
    """Working state shared by the harvest and strategy stages.

    ``nodes`` maps the insertion key (the vault path for files, the literal for
    tags, the name for folders) to its node; insertion order is export order.
    """

    index: Any
    settings: Any
    nodes: Dict[str, GraphNode] = dataclasses.field(default_factory=dict)
    relationships: List[NodeRelationship] = dataclasses.field(default_factory=list)

    def node_type(self, key: str) -> Optional[NodeType]:
        node = self.nodes.get(key)
        return node.type if node else None

    def to_graph(self) -> Graph:
        return Graph(nodes=list(self.nodes.values()), relationships=list(self.relationships))

"""Attribution graph data model - nodes, edges, roles and graphs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IngestionError(ValueError):
    """Raised when a raw graph document cannot be ingested."""


class NodeType(Enum):
    """Resolved node type in a normalized graph."""

    ACTOR = "actor"
    SPONSOR = "sponsor"
    VICTIM = "victim"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """Parse a raw type value, falling back to ACTOR."""
        if isinstance(value, NodeType):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.ACTOR


class Role(Enum):
    """Role of a node at one edge endpoint. Derived from the edge type, never stored."""

    SPONSOR = "sponsor"
    ACTOR = "actor"
    VICTIM = "victim"


@dataclass(frozen=True)
class Node:
    """A node in the attribution graph."""

    id: str
    type: NodeType = NodeType.ACTOR
    degree: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "type": self.type.value, "degree": self.degree}


@dataclass(frozen=True)
class Edge:
    """A directed, weighted edge between two node ids."""

    source: str
    target: str
    weight: float = 1
    type: str = ""

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "type": self.type,
        }


@dataclass(frozen=True)
class Graph:
    """Immutable snapshot of nodes and links."""

    nodes: tuple[Node, ...] = ()
    links: tuple[Edge, ...] = ()

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def node_index(self) -> dict[str, Node]:
        """Map node id to node."""
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def neighbors(self, node_id: str) -> list[str]:
        """Ids adjacent to node_id in either direction, in edge order."""
        found: dict[str, None] = {}
        for edge in self.links:
            if edge.source == node_id:
                found[edge.target] = None
            if edge.target == node_id:
                found[edge.source] = None
        found.pop(node_id, None)
        return list(found)

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [edge.to_dict() for edge in self.links],
        }

"""Role Classifier - Infer per-endpoint roles from edge types and aggregate them per node."""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from .models import Edge, Node, NodeType, Role

logger = structlog.get_logger()

SPONSOR_SOURCE_TOKEN = "sponsor_to"
VICTIM_TARGET_TOKEN = "to_victim"


@dataclass(frozen=True)
class EdgeRoles:
    """An edge together with the role each of its endpoints plays in it."""

    edge: Edge
    source_role: Role
    target_role: Role


def classify_edge(edge: Edge) -> EdgeRoles:
    """Derive endpoint roles from the edge type.

    - source is a sponsor when the type contains ``sponsor_to``
    - target is a victim when the type contains ``to_victim``
    - anything else is a plain actor
    """
    edge_type = edge.type.lower()
    return EdgeRoles(
        edge=edge,
        source_role=Role.SPONSOR if SPONSOR_SOURCE_TOKEN in edge_type else Role.ACTOR,
        target_role=Role.VICTIM if VICTIM_TARGET_TOKEN in edge_type else Role.ACTOR,
    )


def classify_edges(edges: Iterable[Edge]) -> tuple[EdgeRoles, ...]:
    return tuple(classify_edge(edge) for edge in edges)


def aggregate_roles(edge_roles: Iterable[EdgeRoles]) -> dict[str, frozenset[Role]]:
    """Collect, per node id, every role it plays as a source or target."""
    accumulator: dict[str, set[Role]] = {}
    for item in edge_roles:
        accumulator.setdefault(item.edge.source, set()).add(item.source_role)
        accumulator.setdefault(item.edge.target, set()).add(item.target_role)
    return {node_id: frozenset(roles) for node_id, roles in accumulator.items()}


def index_nodes(nodes: Iterable[Node], edges: Iterable[Edge]) -> tuple[dict[str, Node], list[str]]:
    """Index nodes by id, synthesizing any id that edges reference but nodes lack.

    A repeated node id keeps the position of its first occurrence, the later
    record replaces it. Synthesized nodes are plain actors with degree 0 and
    are appended in order of first reference.

    Returns:
        (nodes_by_id, synthesized_ids)
    """
    nodes_by_id: dict[str, Node] = {}
    for node in nodes:
        if node.id in nodes_by_id:
            logger.warning("duplicate_node_id", node_id=node.id)
        nodes_by_id[node.id] = node

    synthesized: list[str] = []
    for edge in edges:
        for node_id in (edge.source, edge.target):
            if node_id not in nodes_by_id:
                logger.warning("node_synthesized_for_link", node_id=node_id)
                nodes_by_id[node_id] = Node(id=node_id, type=NodeType.ACTOR, degree=0)
                synthesized.append(node_id)

    return nodes_by_id, synthesized

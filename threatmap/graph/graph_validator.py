"""Graph Validator - Drop edges whose endpoints are not in the final node set."""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from .models import Edge, Node

logger = structlog.get_logger()


@dataclass(frozen=True)
class ValidationResult:
    """Edges that survived validation and how many were dropped."""

    edges: tuple[Edge, ...]
    dropped: int


def validate_edges(nodes: Iterable[Node], edges: Iterable[Edge]) -> ValidationResult:
    """Keep only edges whose source and target both resolve to a node.

    Dangling edges are not an error, they are counted and logged.
    """
    node_ids = {node.id for node in nodes}
    valid: list[Edge] = []
    dropped: list[Edge] = []

    for edge in edges:
        if edge.source in node_ids and edge.target in node_ids:
            valid.append(edge)
        else:
            dropped.append(edge)

    if dropped:
        first = dropped[0]
        logger.warning(
            "dangling_edges_dropped",
            dropped=len(dropped),
            remaining=len(valid),
            first_source=first.source,
            first_target=first.target,
            first_type=first.type,
        )

    return ValidationResult(edges=tuple(valid), dropped=len(dropped))

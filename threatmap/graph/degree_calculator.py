"""Degree Calculator - Recompute node degrees from the final edge set."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import replace

from .models import Edge, Node


def endpoint_counts(edges: Iterable[Edge]) -> Counter[str]:
    """Count endpoint occurrences per node id. A self-loop counts twice."""
    counts: Counter[str] = Counter()
    for edge in edges:
        counts[edge.source] += 1
        counts[edge.target] += 1
    return counts


def compute_degrees(nodes: Iterable[Node], edges: Iterable[Edge]) -> tuple[Node, ...]:
    counts = endpoint_counts(edges)
    return tuple(replace(node, degree=counts.get(node.id, 0)) for node in nodes)

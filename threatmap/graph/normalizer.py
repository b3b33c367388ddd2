"""Graph Normalizer - Run the full normalization pipeline over a raw graph document.

raw document
  -> canonicalize endpoints, weights and types
  -> synthesize missing nodes, classify endpoint roles
  -> split sponsor/victim nodes, reroute edges
  -> drop dangling edges
  -> recompute degrees
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from .degree_calculator import compute_degrees
from .edge_canonicalizer import canonicalize_document
from .graph_validator import validate_edges
from .models import Graph
from .node_splitter import DEFAULT_POLICY, NormalizationPolicy, rewrite_edges, split_nodes
from .role_classifier import aggregate_roles, classify_edges, index_nodes

logger = structlog.get_logger()


@dataclass(frozen=True)
class NormalizationResult:
    """A normalized graph plus diagnostics about how it was produced."""

    graph: Graph
    dropped_edges: int = 0
    synthesized_nodes: tuple[str, ...] = ()
    split_nodes: tuple[str, ...] = ()
    ambiguous_routes: int = 0
    policy: NormalizationPolicy = field(default=DEFAULT_POLICY, compare=False)

    def diagnostics(self) -> dict:
        return {
            "nodes": len(self.graph.nodes),
            "links": len(self.graph.links),
            "dropped_edges": self.dropped_edges,
            "synthesized_nodes": list(self.synthesized_nodes),
            "split_nodes": list(self.split_nodes),
            "ambiguous_routes": self.ambiguous_routes,
        }


def normalize(raw: Any, policy: NormalizationPolicy = DEFAULT_POLICY) -> NormalizationResult:
    """Normalize a raw graph document.

    Args:
        raw: Mapping with ``nodes`` and ``links`` collections (or a Graph)
        policy: Split and routing rules

    Returns:
        NormalizationResult whose graph has every edge endpoint resolving to a
        node, a resolved type on every node and freshly computed degrees.

    Raises:
        IngestionError: if the document is missing a collection or malformed.
    """
    nodes, edges = canonicalize_document(raw)

    nodes_by_id, synthesized = index_nodes(nodes, edges)
    edge_roles = classify_edges(edges)
    node_roles = aggregate_roles(edge_roles)

    plan = split_nodes(nodes_by_id, node_roles, policy)
    rewritten = rewrite_edges(edge_roles, plan, policy)

    validation = validate_edges(plan.nodes, rewritten.edges)
    final_nodes = compute_degrees(plan.nodes, validation.edges)

    result = NormalizationResult(
        graph=Graph(nodes=final_nodes, links=validation.edges),
        dropped_edges=validation.dropped,
        synthesized_nodes=tuple(synthesized),
        split_nodes=tuple(node_id for node_id in nodes_by_id if node_id in plan.split_ids),
        ambiguous_routes=rewritten.ambiguous_routes,
        policy=policy,
    )

    logger.info(
        "normalization_complete",
        nodes=len(final_nodes),
        links=len(validation.edges),
        dropped=validation.dropped,
        synthesized=len(synthesized),
        split=len(result.split_nodes),
    )
    return result


def normalize_graph(raw: Any, policy: NormalizationPolicy = DEFAULT_POLICY) -> Graph:
    """Normalize and return only the graph."""
    return normalize(raw, policy).graph

"""Graph module - attribution graph model and normalization pipeline."""

from .degree_calculator import compute_degrees, endpoint_counts
from .edge_canonicalizer import (
    canonical_id,
    canonicalize_document,
    canonicalize_edges,
    canonicalize_nodes,
    coerce_graph,
)
from .graph_validator import ValidationResult, validate_edges
from .models import Edge, Graph, IngestionError, Node, NodeType, Role
from .node_splitter import (
    DEFAULT_POLICY,
    AmbiguousRoute,
    NormalizationPolicy,
    RewriteResult,
    SplitPlan,
    needs_split,
    resolve_type,
    rewrite_edges,
    split_nodes,
)
from .normalizer import NormalizationResult, normalize, normalize_graph
from .role_classifier import EdgeRoles, aggregate_roles, classify_edge, classify_edges, index_nodes

__all__ = [
    "DEFAULT_POLICY",
    "AmbiguousRoute",
    "Edge",
    "EdgeRoles",
    "Graph",
    "IngestionError",
    "Node",
    "NodeType",
    "NormalizationPolicy",
    "NormalizationResult",
    "RewriteResult",
    "Role",
    "SplitPlan",
    "ValidationResult",
    "aggregate_roles",
    "canonical_id",
    "canonicalize_document",
    "canonicalize_edges",
    "canonicalize_nodes",
    "classify_edge",
    "classify_edges",
    "coerce_graph",
    "compute_degrees",
    "endpoint_counts",
    "index_nodes",
    "needs_split",
    "normalize",
    "normalize_graph",
    "resolve_type",
    "rewrite_edges",
    "split_nodes",
    "validate_edges",
]

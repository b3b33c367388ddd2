"""Edge Canonicalizer - Reduce raw graph documents to plain-id nodes and edges.

Edge endpoints arrive either as a plain id or as a record carrying an ``id``
field (a dict, or an already-materialized node object). Everything downstream
works on plain string ids, so this module is the only place that branches on
the endpoint representation.
"""

from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any

import structlog

from .models import Edge, Graph, IngestionError, Node, NodeType

logger = structlog.get_logger()

DEFAULT_WEIGHT = 1


def _as_id(value: Any, what: str) -> str:
    if value is None or isinstance(value, bool):
        raise IngestionError(f"{what} has no usable id: {value!r}")
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    raise IngestionError(f"{what} id must be a string or number, got {type(value).__name__}")


def canonical_id(endpoint: Any) -> str:
    """Return the plain string id of an edge endpoint."""
    if isinstance(endpoint, Mapping):
        if "id" not in endpoint:
            raise IngestionError(f"Edge endpoint record lacks an 'id' field: {dict(endpoint)!r}")
        return _as_id(endpoint["id"], "Edge endpoint")
    if isinstance(endpoint, (str, int, float)) and not isinstance(endpoint, bool):
        return _as_id(endpoint, "Edge endpoint")
    return _as_id(getattr(endpoint, "id", None), "Edge endpoint")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def canonical_weight(value: Any) -> float:
    if value is None:
        return DEFAULT_WEIGHT
    if isinstance(value, bool) or not isinstance(value, Real):
        raise IngestionError(f"Edge weight must be numeric, got {value!r}")
    return value


def canonicalize_edge(raw_link: Any) -> Edge:
    """Canonicalize one raw link."""
    if isinstance(raw_link, Edge):
        return raw_link
    if not isinstance(raw_link, Mapping) and not hasattr(raw_link, "source"):
        raise IngestionError(f"Link must be a record, got {type(raw_link).__name__}")

    edge_type = _field(raw_link, "type")
    return Edge(
        source=canonical_id(_field(raw_link, "source")),
        target=canonical_id(_field(raw_link, "target")),
        weight=canonical_weight(_field(raw_link, "weight")),
        type="" if edge_type is None else str(edge_type),
    )


def canonicalize_edges(raw_links: Sequence[Any]) -> tuple[Edge, ...]:
    """Canonicalize a raw link collection, preserving order."""
    return tuple(canonicalize_edge(link) for link in raw_links)


def canonicalize_node(raw_node: Any) -> Node:
    """Canonicalize one raw node record. Unknown types resolve to actor."""
    if isinstance(raw_node, Node):
        return raw_node
    if not isinstance(raw_node, Mapping) and not hasattr(raw_node, "id"):
        raise IngestionError(f"Node must be a record, got {type(raw_node).__name__}")

    node_id = _as_id(_field(raw_node, "id"), "Node")
    degree = _field(raw_node, "degree")
    return Node(
        id=node_id,
        type=NodeType.parse(_field(raw_node, "type")),
        degree=degree if isinstance(degree, int) and not isinstance(degree, bool) and degree >= 0 else 0,
    )


def canonicalize_nodes(raw_nodes: Sequence[Any]) -> list[Node]:
    return [canonicalize_node(node) for node in raw_nodes]


def _collection(raw: Mapping, key: str, required: bool = True) -> Sequence[Any]:
    value = raw.get(key)
    if value is None and not required:
        return []
    if value is None:
        raise IngestionError(f"Graph document is missing its '{key}' collection")
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise IngestionError(f"Graph document '{key}' must be a list, got {type(value).__name__}")
    return value


def canonicalize_document(raw: Any) -> tuple[list[Node], tuple[Edge, ...]]:
    """Validate a raw document's top-level shape and canonicalize its contents.

    Raises:
        IngestionError: if the document is not a mapping, lacks its ``nodes``
            or ``links`` collection, or holds malformed records.
    """
    if isinstance(raw, Graph):
        return list(raw.nodes), raw.links
    if not isinstance(raw, Mapping):
        raise IngestionError(f"Graph document must be a mapping, got {type(raw).__name__}")

    raw_nodes = _collection(raw, "nodes")
    raw_links = _collection(raw, "links")

    nodes = canonicalize_nodes(raw_nodes)
    edges = canonicalize_edges(raw_links)

    logger.debug("document_canonicalized", nodes=len(nodes), links=len(edges))
    return nodes, edges


def coerce_graph(raw: Any) -> Graph:
    """Shape-coerce a document into a Graph without role normalization.

    Missing collections are treated as empty. Types default to actor, degrees
    to 0, endpoints are reduced to plain ids.
    """
    if isinstance(raw, Graph):
        return raw
    if not isinstance(raw, Mapping):
        raise IngestionError(f"Graph document must be a mapping, got {type(raw).__name__}")
    return Graph(
        nodes=tuple(canonicalize_nodes(_collection(raw, "nodes", required=False))),
        links=canonicalize_edges(_collection(raw, "links", required=False)),
    )

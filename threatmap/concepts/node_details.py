"""Node Details Index - Per-entity breakdowns keyed by node id.

The details document is keyed by the original entity name. Split nodes carry
a " [S]" / " [T]" suffix in the graph, so lookups strip that suffix first.
"""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from ..config import DETAILS_TOP_N
from ..graph.models import Node, NodeType

logger = structlog.get_logger()

SPLIT_SUFFIX_PATTERN = re.compile(r"\s*\[(S|T)\]$", re.IGNORECASE)


def strip_split_suffix(node_id: str) -> str:
    return SPLIT_SUFFIX_PATTERN.sub("", node_id)


@dataclass
class Breakdown:
    """One ranked breakdown of a node's counterparties."""

    label: str
    entries: list[tuple[str, float]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "entries": [{"name": name, "count": count} for name, count in self.entries],
        }


@dataclass
class NodeDetails:
    """Details of one node plus its two ranked breakdowns."""

    node_id: str
    key: str
    total_incidents: Any
    primary: Breakdown
    secondary: Breakdown

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "key": self.key,
            "total_incidents": self.total_incidents,
            "primary": self.primary.to_dict(),
            "secondary": self.secondary.to_dict(),
        }


# node type -> ((field, label), (field, label))
BREAKDOWN_FIELDS: dict[NodeType, tuple[tuple[str, str], tuple[str, str]]] = {
    NodeType.SPONSOR: (("targets", "THREAT ACTORS SPONSORED"), ("sources", "ALSO BACKED BY")),
    NodeType.ACTOR: (("targets", "TOP TARGETS ATTACKED"), ("sources", "SPONSORED BY")),
    NodeType.VICTIM: (("sources", "ATTACKED BY"), ("actors", "THREAT ACTORS USED")),
}


def ranked(counts: Mapping[str, Any] | None, limit: int) -> list[tuple[str, float]]:
    """Sort a name -> count mapping by count descending and keep the top entries."""
    if not counts:
        return []
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


class NodeDetailsIndex:
    """Read-only lookup over the node details document."""

    def __init__(self, details: Mapping[str, Any] | None = None) -> None:
        self._details: dict[str, Any] = dict(details or {})

    def __len__(self) -> int:
        return len(self._details)

    def __contains__(self, node_id: str) -> bool:
        return self.lookup(node_id) is not None

    def resolve_key(self, node_id: str) -> str | None:
        """Return the details key a node id maps to, or None."""
        key = strip_split_suffix(str(node_id))
        if key in self._details:
            return key
        if node_id in self._details:
            return node_id
        return None

    def lookup(self, node_id: str) -> dict | None:
        key = self.resolve_key(node_id)
        if key is None:
            logger.warning("node_details_not_found", node_id=node_id, key=strip_split_suffix(str(node_id)))
            return None
        return self._details[key]

    def describe(self, node: Node, limit: int = DETAILS_TOP_N) -> NodeDetails | None:
        """Build the ranked breakdowns shown for a node, or None if it has no details."""
        key = self.resolve_key(node.id)
        if key is None:
            logger.warning("node_details_not_found", node_id=node.id)
            return None

        details = self._details[key]
        (first_field, first_label), (second_field, second_label) = BREAKDOWN_FIELDS[node.type]
        return NodeDetails(
            node_id=node.id,
            key=key,
            total_incidents=details.get("total_incidents"),
            primary=Breakdown(first_label, ranked(details.get(first_field), limit)),
            secondary=Breakdown(second_label, ranked(details.get(second_field), limit)),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "NodeDetailsIndex":
        path = Path(path)
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            logger.warning("node_details_not_a_mapping", path=str(path))
            data = {}
        return cls(data)

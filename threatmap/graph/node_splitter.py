"""Node Splitter - Decompose sponsor/victim nodes and reroute edges to the split variants."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

import structlog

from ..config import AMBIGUOUS_SPLIT_ROUTE, SPLIT_SPONSOR_SUFFIX, SPLIT_VICTIM_SUFFIX
from .models import Edge, Node, NodeType, Role
from .role_classifier import EdgeRoles

logger = structlog.get_logger()


class AmbiguousRoute(Enum):
    """Where an edge goes when it meets a split node in a plain actor role."""

    SPONSOR = "sponsor"
    VICTIM = "victim"
    BOTH = "both"

    @classmethod
    def parse(cls, value: "str | AmbiguousRoute") -> "AmbiguousRoute":
        if isinstance(value, AmbiguousRoute):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning("unknown_ambiguous_route", value=value, fallback=cls.SPONSOR.value)
            return cls.SPONSOR


@dataclass(frozen=True)
class NormalizationPolicy:
    """Tunable rules for node splitting and edge routing."""

    ambiguous_route: AmbiguousRoute = AmbiguousRoute.SPONSOR
    split_conflicting_roles: bool = True
    sponsor_suffix: str = " [S]"
    victim_suffix: str = " [T]"

    def sponsor_id(self, node_id: str) -> str:
        return f"{node_id}{self.sponsor_suffix}"

    def victim_id(self, node_id: str) -> str:
        return f"{node_id}{self.victim_suffix}"


DEFAULT_POLICY = NormalizationPolicy(
    ambiguous_route=AmbiguousRoute.parse(AMBIGUOUS_SPLIT_ROUTE),
    sponsor_suffix=SPLIT_SPONSOR_SUFFIX,
    victim_suffix=SPLIT_VICTIM_SUFFIX,
)


@dataclass(frozen=True)
class SplitPlan:
    """Final node set plus the (sponsor, victim) variant ids of each split node."""

    nodes: tuple[Node, ...]
    variants: Mapping[str, tuple[str, str]]

    @property
    def split_ids(self) -> frozenset[str]:
        return frozenset(self.variants)


@dataclass(frozen=True)
class RewriteResult:
    """Edges rerouted to split-aware ids."""

    edges: tuple[Edge, ...]
    ambiguous_routes: int


def needs_split(roles: frozenset[Role]) -> bool:
    return Role.SPONSOR in roles and Role.VICTIM in roles


def resolve_type(node: Node, roles: frozenset[Role] | None) -> NodeType:
    """Resolve a node's type by precedence sponsor > victim > actor.

    Nodes that appear in no edge keep their own type.
    """
    if not roles:
        return node.type
    if Role.SPONSOR in roles:
        return NodeType.SPONSOR
    if Role.VICTIM in roles:
        return NodeType.VICTIM
    return NodeType.ACTOR


def _free_id(candidate: str, taken: set[str], node_id: str) -> str:
    """Reserve candidate, or candidate with a counter when it is already taken."""
    variant_id = candidate
    counter = 2
    while variant_id in taken:
        variant_id = f"{candidate} ({counter})"
        counter += 1
    if variant_id != candidate:
        logger.warning("split_variant_id_collision", node_id=node_id, wanted=candidate, used=variant_id)
    taken.add(variant_id)
    return variant_id


def split_nodes(
    nodes_by_id: Mapping[str, Node],
    node_roles: Mapping[str, frozenset[Role]],
    policy: NormalizationPolicy = DEFAULT_POLICY,
) -> SplitPlan:
    """Materialize the final node set from the id index.

    Split nodes are replaced in place by their sponsor and victim variants,
    every other node gets its resolved type. Degrees are reset to 0.
    Variant ids never reuse an id already present in the output.
    """
    split_ids = {
        node_id for node_id in nodes_by_id
        if policy.split_conflicting_roles and needs_split(node_roles.get(node_id) or frozenset())
    }
    taken = set(nodes_by_id) - split_ids
    variants: dict[str, tuple[str, str]] = {}
    nodes: list[Node] = []

    for node_id, node in nodes_by_id.items():
        roles = node_roles.get(node_id)
        if node_id in split_ids:
            logger.info("node_split", node_id=node_id, roles=sorted(r.value for r in roles))
            sponsor_id = _free_id(policy.sponsor_id(node_id), taken, node_id)
            victim_id = _free_id(policy.victim_id(node_id), taken, node_id)
            variants[node_id] = (sponsor_id, victim_id)
            nodes.append(Node(id=sponsor_id, type=NodeType.SPONSOR))
            nodes.append(Node(id=victim_id, type=NodeType.VICTIM))
        else:
            nodes.append(Node(id=node_id, type=resolve_type(node, roles)))

    return SplitPlan(nodes=tuple(nodes), variants=variants)


def _route(node_id: str, role: Role, plan: SplitPlan, policy: NormalizationPolicy) -> list[str]:
    if node_id not in plan.variants:
        return [node_id]
    sponsor_id, victim_id = plan.variants[node_id]
    if role is Role.SPONSOR:
        return [sponsor_id]
    if role is Role.VICTIM:
        return [victim_id]

    logger.warning(
        "ambiguous_split_route",
        node_id=node_id,
        route=policy.ambiguous_route.value,
    )
    if policy.ambiguous_route is AmbiguousRoute.VICTIM:
        return [victim_id]
    if policy.ambiguous_route is AmbiguousRoute.BOTH:
        return [sponsor_id, victim_id]
    return [sponsor_id]


def rewrite_edges(
    edge_roles: tuple[EdgeRoles, ...],
    plan: SplitPlan,
    policy: NormalizationPolicy = DEFAULT_POLICY,
) -> RewriteResult:
    """Replace every endpoint with its split-aware id.

    Routing uses the role the endpoint plays in that particular edge, not the
    node's aggregated role set.
    """
    edges: list[Edge] = []
    ambiguous = 0

    for item in edge_roles:
        edge = item.edge
        sources = _route(edge.source, item.source_role, plan, policy)
        targets = _route(edge.target, item.target_role, plan, policy)
        if edge.source in plan.split_ids and item.source_role is Role.ACTOR:
            ambiguous += 1
        if edge.target in plan.split_ids and item.target_role is Role.ACTOR:
            ambiguous += 1

        for source in sources:
            for target in targets:
                edges.append(Edge(source=source, target=target, weight=edge.weight, type=edge.type))

    return RewriteResult(edges=tuple(edges), ambiguous_routes=ambiguous)

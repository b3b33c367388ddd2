"""Tests for node splitting, type resolution and split-aware edge routing."""

from threatmap.graph.models import Edge, Node, NodeType, Role
from threatmap.graph.node_splitter import (
    AmbiguousRoute,
    NormalizationPolicy,
    needs_split,
    resolve_type,
    rewrite_edges,
    split_nodes,
)
from threatmap.graph.role_classifier import aggregate_roles, classify_edges, index_nodes

POLICY = NormalizationPolicy()


def plan_for(edges, nodes=(), policy=POLICY):
    by_id, _ = index_nodes(nodes, edges)
    edge_roles = classify_edges(edges)
    plan = split_nodes(by_id, aggregate_roles(edge_roles), policy)
    return plan, edge_roles


class TestNeedsSplit:
    def test_sponsor_and_victim(self):
        assert needs_split(frozenset({Role.SPONSOR, Role.VICTIM}))

    def test_single_roles_never_split(self):
        assert not needs_split(frozenset({Role.SPONSOR}))
        assert not needs_split(frozenset({Role.VICTIM}))
        assert not needs_split(frozenset({Role.ACTOR}))
        assert not needs_split(frozenset({Role.SPONSOR, Role.ACTOR}))


class TestResolveType:
    def test_precedence(self):
        node = Node("X", NodeType.ACTOR)
        assert resolve_type(node, frozenset({Role.SPONSOR, Role.ACTOR})) is NodeType.SPONSOR
        assert resolve_type(node, frozenset({Role.VICTIM, Role.ACTOR})) is NodeType.VICTIM
        assert resolve_type(node, frozenset({Role.ACTOR})) is NodeType.ACTOR

    def test_isolated_node_keeps_type(self):
        assert resolve_type(Node("X", NodeType.VICTIM), None) is NodeType.VICTIM


class TestSplitNodes:
    def test_split_variants_replace_original_in_place(self):
        edges = [
            Edge("China", "APT1", type="sponsor_to_actor"),
            Edge("APT28", "China", type="actor_to_victim"),
        ]
        nodes = [Node("China", NodeType.SPONSOR), Node("APT1"), Node("APT28")]

        plan, _ = plan_for(edges, nodes)

        assert [n.id for n in plan.nodes] == ["China [S]", "China [T]", "APT1", "APT28"]
        assert plan.nodes[0].type is NodeType.SPONSOR
        assert plan.nodes[1].type is NodeType.VICTIM
        assert plan.split_ids == {"China"}

    def test_custom_suffixes(self):
        edges = [
            Edge("China", "APT1", type="sponsor_to_actor"),
            Edge("APT1", "China", type="actor_to_victim"),
        ]
        policy = NormalizationPolicy(sponsor_suffix="::sponsor", victim_suffix="::victim")

        plan, _ = plan_for(edges, policy=policy)

        assert {n.id for n in plan.nodes} == {"China::sponsor", "China::victim", "APT1"}

    def test_splitting_disabled(self):
        edges = [
            Edge("China", "APT1", type="sponsor_to_actor"),
            Edge("APT1", "China", type="actor_to_victim"),
        ]
        policy = NormalizationPolicy(split_conflicting_roles=False)

        plan, _ = plan_for(edges, policy=policy)

        assert [n.id for n in plan.nodes] == ["China", "APT1"]
        assert plan.nodes[0].type is NodeType.SPONSOR
        assert plan.split_ids == frozenset()

    def test_variant_id_already_taken(self):
        edges = [
            Edge("China", "A", type="sponsor_to_actor"),
            Edge("A", "China", type="actor_to_victim"),
        ]
        nodes = [Node("China"), Node("China [S]")]

        plan, edge_roles = plan_for(edges, nodes)
        ids = [n.id for n in plan.nodes]

        assert ids == ["China [S] (2)", "China [T]", "China [S]", "A"]
        assert len(ids) == len(set(ids))
        assert plan.variants == {"China": ("China [S] (2)", "China [T]")}

        result = rewrite_edges(edge_roles, plan)
        assert result.edges[0].source == "China [S] (2)"
        assert result.edges[1].target == "China [T]"


class TestRewriteEdges:
    EDGES = [
        Edge("China", "APT1", weight=3, type="sponsor_to_actor"),
        Edge("APT1", "China", weight=2, type="actor_to_victim"),
        Edge("China", "APT2", weight=1, type="collaborates_with"),
    ]

    def test_routes_by_per_edge_role(self):
        plan, edge_roles = plan_for(self.EDGES)

        result = rewrite_edges(edge_roles, plan)

        assert result.edges[0] == Edge("China [S]", "APT1", 3, "sponsor_to_actor")
        assert result.edges[1] == Edge("APT1", "China [T]", 2, "actor_to_victim")

    def test_ambiguous_defaults_to_sponsor_variant(self):
        plan, edge_roles = plan_for(self.EDGES)

        result = rewrite_edges(edge_roles, plan)

        assert result.edges[2] == Edge("China [S]", "APT2", 1, "collaborates_with")
        assert result.ambiguous_routes == 1

    def test_ambiguous_route_victim(self):
        policy = NormalizationPolicy(ambiguous_route=AmbiguousRoute.VICTIM)
        plan, edge_roles = plan_for(self.EDGES, policy=policy)

        result = rewrite_edges(edge_roles, plan, policy)

        assert result.edges[2].source == "China [T]"

    def test_ambiguous_route_both_duplicates_edge(self):
        policy = NormalizationPolicy(ambiguous_route=AmbiguousRoute.BOTH)
        plan, edge_roles = plan_for(self.EDGES, policy=policy)

        result = rewrite_edges(edge_roles, plan, policy)

        assert len(result.edges) == 4
        assert [e.source for e in result.edges[2:]] == ["China [S]", "China [T]"]
        assert result.ambiguous_routes == 1

    def test_non_split_nodes_unchanged(self):
        edges = [Edge("A", "B", type="sponsor_to_actor"), Edge("B", "C", type="actor_to_victim")]
        plan, edge_roles = plan_for(edges)

        assert rewrite_edges(edge_roles, plan).edges == tuple(edges)


class TestAmbiguousRouteParse:
    def test_known_values(self):
        assert AmbiguousRoute.parse("Both") is AmbiguousRoute.BOTH
        assert AmbiguousRoute.parse(AmbiguousRoute.VICTIM) is AmbiguousRoute.VICTIM

    def test_unknown_falls_back_to_sponsor(self):
        assert AmbiguousRoute.parse("nowhere") is AmbiguousRoute.SPONSOR

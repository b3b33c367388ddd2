"""Query Evaluator - Answer analytic questions with ranked aggregates over a graph.

Evaluation is read-only and stateless: the same question against the same
graph always yields the same result, and nothing is cached between calls.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

import structlog

from ..concepts.sponsor_aliases import SponsorAliasTable
from ..config import COUNTRY_TARGETS_LIMIT, MOST_ACTIVE_LIMIT, MOST_TARGETED_LIMIT
from ..graph.edge_canonicalizer import coerce_graph
from ..graph.models import Edge, Graph, IngestionError, NodeType
from ..graph.normalizer import NormalizationResult
from .intent_classifier import IntentClassifier, IntentMatch, QueryIntent

logger = structlog.get_logger()

SPONSOR_TO_ACTOR_TOKEN = "sponsor_to_actor"
TARGETED_TYPE_TOKENS = ("victim", "target")

UNKNOWN_QUERY_MESSAGE = (
    'Query not recognized. Try: "which actors have multiple sponsors?", '
    '"what does China target most?", "most targeted countries", or "most active sponsors"'
)


@dataclass(frozen=True)
class RankedEntry:
    """A name with its summed edge weight."""

    name: str
    count: float

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class SponsoredActor:
    """An actor backed by more than one sponsor."""

    actor: str
    sponsor_count: int
    sponsors: list[str]
    degree: int

    def to_dict(self) -> dict:
        return {
            "actor": self.actor,
            "sponsorCount": self.sponsor_count,
            "sponsors": list(self.sponsors),
            "degree": self.degree,
        }


@dataclass(frozen=True)
class MultipleSponsorsResult:
    intent: ClassVar[QueryIntent] = QueryIntent.MULTIPLE_SPONSORS

    results: list[SponsoredActor] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict:
        return {
            "type": self.intent.value,
            "count": self.count,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True)
class CountryTargetsResult:
    intent: ClassVar[QueryIntent] = QueryIntent.COUNTRY_TARGETS

    sponsor: str
    results: list[RankedEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.intent.value,
            "sponsor": self.sponsor,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True)
class MostTargetedResult:
    intent: ClassVar[QueryIntent] = QueryIntent.MOST_TARGETED

    results: list[RankedEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.intent.value,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True)
class MostActiveResult:
    intent: ClassVar[QueryIntent] = QueryIntent.MOST_ACTIVE

    category: str
    results: list[RankedEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.intent.value,
            "category": self.category,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True)
class UnknownResult:
    intent: ClassVar[QueryIntent] = QueryIntent.UNKNOWN

    message: str = UNKNOWN_QUERY_MESSAGE

    def to_dict(self) -> dict:
        return {"type": self.intent.value, "message": self.message}


QueryResult = Union[
    MultipleSponsorsResult,
    CountryTargetsResult,
    MostTargetedResult,
    MostActiveResult,
    UnknownResult,
]


def top_ranked(totals: dict[str, float], limit: int) -> list[RankedEntry]:
    """Sort totals descending; equal totals keep first-seen order."""
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [RankedEntry(name=name, count=count) for name, count in ordered[:limit]]


def sum_weights(edges: Iterable[Edge], key: str) -> dict[str, float]:
    """Sum edge weights grouped by edge.source or edge.target."""
    totals: dict[str, float] = {}
    for edge in edges:
        group = getattr(edge, key)
        totals[group] = totals.get(group, 0) + edge.weight
    return totals


class QueryEvaluator:
    """Classify a question and compute the matching aggregate."""

    DEFAULT_LIMITS: ClassVar[dict[QueryIntent, int]] = {
        QueryIntent.COUNTRY_TARGETS: COUNTRY_TARGETS_LIMIT,
        QueryIntent.MOST_TARGETED: MOST_TARGETED_LIMIT,
        QueryIntent.MOST_ACTIVE: MOST_ACTIVE_LIMIT,
    }

    def __init__(
        self,
        aliases: SponsorAliasTable | None = None,
        classifier: IntentClassifier | None = None,
        limits: dict[QueryIntent, int] | None = None,
    ) -> None:
        self.aliases = aliases or SponsorAliasTable()
        self.classifier = classifier or IntentClassifier()
        self.limits = {**self.DEFAULT_LIMITS, **(limits or {})}

    def evaluate(self, graph: Any, question: str | None) -> QueryResult:
        """Answer a question against a graph.

        Args:
            graph: Graph, NormalizationResult, or a raw {nodes, links} mapping
            question: Free-text question

        Returns:
            One of the five tagged result types. Unrecognized questions
            yield UnknownResult; a raw mapping that cannot be coerced is
            answered as an empty graph.
        """
        graph = self._as_graph(graph)
        match = self.classifier.classify(question)

        if match.intent is QueryIntent.MULTIPLE_SPONSORS:
            result = self.multiple_sponsors(graph)
        elif match.intent is QueryIntent.COUNTRY_TARGETS:
            result = self.country_targets(graph, match)
        elif match.intent is QueryIntent.MOST_TARGETED:
            result = self.most_targeted(graph)
        elif match.intent is QueryIntent.MOST_ACTIVE:
            result = self.most_active(graph, match.category or "actor")
        else:
            result = UnknownResult()

        logger.info(
            "query_evaluated",
            question=match.question[:50],
            intent=match.intent.value,
            results=len(getattr(result, "results", [])),
        )
        return result

    def _as_graph(self, graph: Any) -> Graph:
        if isinstance(graph, NormalizationResult):
            return graph.graph
        try:
            return coerce_graph(graph)
        except IngestionError as e:
            logger.warning("query_graph_rejected", error=str(e))
            return Graph(nodes=(), links=())

    def multiple_sponsors(self, graph: Graph) -> MultipleSponsorsResult:
        """Actors with two or more distinct sponsors, most-sponsored first."""
        sponsors_by_target: dict[str, dict[str, None]] = {}
        for edge in graph.links:
            if SPONSOR_TO_ACTOR_TOKEN in edge.type.lower():
                sponsors_by_target.setdefault(edge.target, {})[edge.source] = None

        rows = []
        for node in graph.nodes:
            if node.type is not NodeType.ACTOR:
                continue
            sponsors = list(sponsors_by_target.get(node.id, {}))
            if len(sponsors) > 1:
                rows.append(
                    SponsoredActor(
                        actor=node.id,
                        sponsor_count=len(sponsors),
                        sponsors=sponsors,
                        degree=node.degree,
                    )
                )

        rows.sort(key=lambda row: row.sponsor_count, reverse=True)
        return MultipleSponsorsResult(results=rows)

    def country_targets(self, graph: Graph, match: IntentMatch) -> CountryTargetsResult:
        """Targets of one sponsor country ranked by summed edge weight."""
        token = (match.subject or "").strip()
        sponsor_name = self.aliases.display_name(token)
        token_lower = token.lower()

        edges = [
            edge for edge in graph.links
            if edge.source == sponsor_name or token_lower in edge.source.lower()
        ]
        totals = sum_weights(edges, "target")
        return CountryTargetsResult(
            sponsor=sponsor_name,
            results=top_ranked(totals, self.limits[QueryIntent.COUNTRY_TARGETS]),
        )

    def most_targeted(self, graph: Graph) -> MostTargetedResult:
        """Targets ranked by summed weight of victim/target-typed edges."""
        edges = [
            edge for edge in graph.links
            if any(token in edge.type.lower() for token in TARGETED_TYPE_TOKENS)
        ]
        totals = sum_weights(edges, "target")
        return MostTargetedResult(results=top_ranked(totals, self.limits[QueryIntent.MOST_TARGETED]))

    def most_active(self, graph: Graph, category: str) -> MostActiveResult:
        """Sources of the given node type ranked by summed outgoing weight."""
        node_type = NodeType.parse(category)
        index = graph.node_index()
        edges = [
            edge for edge in graph.links
            if edge.source in index and index[edge.source].type is node_type
        ]
        totals = sum_weights(edges, "source")
        return MostActiveResult(
            category=node_type.value,
            results=top_ranked(totals, self.limits[QueryIntent.MOST_ACTIVE]),
        )


def evaluate(graph: Any, question: str | None, aliases: SponsorAliasTable | None = None) -> QueryResult:
    """Evaluate a question against a graph with a fresh evaluator."""
    return QueryEvaluator(aliases=aliases).evaluate(graph, question)

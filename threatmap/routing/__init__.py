"""Routing module for question intent classification and evaluation."""

from .intent_classifier import IntentClassifier, IntentMatch, QueryIntent
from .query_evaluator import (
    UNKNOWN_QUERY_MESSAGE,
    CountryTargetsResult,
    MostActiveResult,
    MostTargetedResult,
    MultipleSponsorsResult,
    QueryEvaluator,
    QueryResult,
    RankedEntry,
    SponsoredActor,
    UnknownResult,
    evaluate,
)

__all__ = [
    "UNKNOWN_QUERY_MESSAGE",
    "CountryTargetsResult",
    "IntentClassifier",
    "IntentMatch",
    "MostActiveResult",
    "MostTargetedResult",
    "MultipleSponsorsResult",
    "QueryEvaluator",
    "QueryIntent",
    "QueryResult",
    "RankedEntry",
    "SponsoredActor",
    "UnknownResult",
    "evaluate",
]

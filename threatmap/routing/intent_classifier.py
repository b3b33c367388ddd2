"""Intent Classifier - Map a free-text question to an analytic intent."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

import structlog

logger = structlog.get_logger()


class QueryIntent(Enum):
    """Analytic intents the evaluator can answer."""

    MULTIPLE_SPONSORS = "multiple_sponsors"
    COUNTRY_TARGETS = "country_targets"
    MOST_TARGETED = "most_targeted"
    MOST_ACTIVE = "most_active"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class IntentMatch:
    """Result from intent classification."""

    question: str
    intent: QueryIntent
    subject: str | None = None  # country token for COUNTRY_TARGETS
    category: str | None = None  # "sponsor" or "actor" for MOST_ACTIVE


class IntentClassifier:
    """Rule-based intent classification.

    Rules are tried in order and the first match wins:
    - multiple_sponsors: "which actors have multiple state sponsors?"
    - country_targets:   "what does China target most?"
    - most_targeted:     "most targeted countries"
    - most_active:       "most active sponsors"
    """

    WHAT_DOES_PATTERN: ClassVar[re.Pattern] = re.compile(r"what does ([\w\s]+) target", re.IGNORECASE)
    COUNTRY_PATTERN: ClassVar[re.Pattern] = re.compile(r"(china|russia|iran|korea)", re.IGNORECASE)

    SPONSOR_WORDS: ClassVar[tuple[str, ...]] = ("sponsor", "backed")

    def classify(self, question: str | None) -> IntentMatch:
        text = question or ""
        q = text.lower()

        subject = self._country_subject(q) if "target" in q else None

        if "multiple" in q and any(word in q for word in self.SPONSOR_WORDS):
            match = IntentMatch(question=text, intent=QueryIntent.MULTIPLE_SPONSORS)

        elif subject:
            match = IntentMatch(question=text, intent=QueryIntent.COUNTRY_TARGETS, subject=subject)

        elif "most targeted" in q:
            match = IntentMatch(question=text, intent=QueryIntent.MOST_TARGETED)

        elif "most active" in q and ("sponsor" in q or "actor" in q):
            category = "sponsor" if "sponsor" in q else "actor"
            match = IntentMatch(question=text, intent=QueryIntent.MOST_ACTIVE, category=category)

        else:
            match = IntentMatch(question=text, intent=QueryIntent.UNKNOWN)

        logger.debug(
            "query_intent_classified",
            question=text[:50],
            intent=match.intent.value,
            subject=match.subject,
            category=match.category,
        )
        return match

    def _country_subject(self, q: str) -> str | None:
        """Extract the country token from a lower-cased question."""
        phrased = self.WHAT_DOES_PATTERN.search(q)
        if phrased and phrased.group(1).strip():
            return phrased.group(1).strip()

        country = self.COUNTRY_PATTERN.search(q)
        if country:
            return country.group(1)
        return None

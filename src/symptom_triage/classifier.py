"""SymptomClassifier — first-match-wins keyword rules over free text.

Matching is plain case-insensitive substring containment: no stemming and
no word boundaries, so "heartbreak" matches a "heart" keyword.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from symptom_triage.constants import CLARIFICATION_MESSAGE
from symptom_triage.models.classifier import ClassifierRule
from symptom_triage.models.session import Recommendation

logger = logging.getLogger(__name__)


class SymptomClassifier:
    """Maps free text to a :class:`Recommendation` using ordered keyword rules."""

    def __init__(
        self,
        rules: Iterable[ClassifierRule],
        *,
        fallback_message: str = CLARIFICATION_MESSAGE,
    ) -> None:
        self._rules: tuple[ClassifierRule, ...] = tuple(rules)
        self._fallback = Recommendation(specialization=None, message=fallback_message)

    @property
    def rules(self) -> tuple[ClassifierRule, ...]:
        return self._rules

    def classify(self, text: str) -> Recommendation:
        """Return the first matching rule's recommendation, or the clarification fallback."""
        lowered = (text or "").lower()
        for rule in self._rules:
            if rule.matches(lowered):
                return Recommendation(specialization=rule.specialization, message=rule.message)
        return self._fallback


def shadowed_rules(rules: Sequence[ClassifierRule]) -> list[int]:
    """Indices of rules that can never fire.

    Rule *j* is shadowed when each of its keywords contains a keyword of some
    earlier rule: any text that matches *j* has already matched that earlier
    rule.
    """
    shadowed = []
    for j, rule in enumerate(rules):
        earlier = [k for r in rules[:j] for k in r.keywords]
        if earlier and all(any(e in kw for e in earlier) for kw in rule.keywords):
            shadowed.append(j)
    return shadowed
